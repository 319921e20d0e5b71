"""Per-run counters."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Union

from ..models import RunSummary


class SummaryAggregator:
    """Accumulates file outcomes for one traversal.

    One instance per run, passed to whoever records outcomes. Calls are
    strictly sequential so no locking is needed.
    """

    def __init__(self) -> None:
        self._summary = RunSummary()

    def record_attempt(self) -> None:
        self._summary.attempted += 1

    def record_success(self, used_fallback: bool, model: str) -> None:
        self._summary.succeeded += 1
        if used_fallback:
            self._summary.failed_initially += 1
        successes = self._summary.model_successes
        successes[model] = successes.get(model, 0) + 1

    def record_failure(self, file_path: Union[str, Path]) -> None:
        self._summary.failed += 1
        self._summary.failed_files.append(str(file_path))

    def snapshot(self) -> RunSummary:
        """Independent copy of the current counters."""
        return copy.deepcopy(self._summary)
