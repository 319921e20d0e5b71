"""Single-file processing stage."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from ..errors import RefactorFailed
from ..models import FileResult, RefactorRequest
from ..utils.file_ops import FileManager
from ..utils.logger import get_logger
from .classify import classify
from .reporting import RunReport
from .summary import SummaryAggregator

logger = get_logger(__name__)


@dataclass
class FileProcessor:
    """Migrates one file: read, classify, refactor, write, delete, record.

    Failures are recorded on the aggregator and returned as a failed
    ``FileResult``; nothing raised while handling a file escapes ``process``
    except programming errors.
    """

    refactorer: Any
    aggregator: SummaryAggregator
    file_manager: FileManager
    post_write_delay: float = 1.0
    dry_run: bool = False
    report: Optional[RunReport] = None
    on_result: Optional[Callable[[FileResult], None]] = None
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep, repr=False)

    async def process(self, path: Path) -> FileResult:
        """Process ``path`` and return what happened to it."""
        if self.dry_run:
            return self._plan(path)

        self.aggregator.record_attempt()

        source = self.file_manager.read_file(path)
        if source is None:
            return self._fail(path, "Could not read source file")

        request = RefactorRequest(
            file_path=path,
            source_text=source,
            is_component=classify(source).is_component,
        )
        target = request.target_path
        if target != path and target.exists():
            # a.js and a.jsx both map to a.ts; never clobber a sibling's output
            return self._fail(path, f"Target already exists: {target.name}")

        logger.info(f"Refactoring {path} as {'component' if request.is_component else 'script'}")

        try:
            outcome = await self.refactorer.refactor(request)
        except RefactorFailed as e:
            return self._fail(path, str(e.last_error))

        if not self.file_manager.replace_file(path, target, outcome.text):
            return self._fail(path, f"Could not write {target.name} or remove the original")

        logger.info(f"Refactored file written to: {target}")
        self.aggregator.record_success(outcome.used_fallback, outcome.model)

        result = FileResult(
            file_path=path,
            success=True,
            target_path=target,
            model=outcome.model,
            used_fallback=outcome.used_fallback,
        )
        self._emit(result)

        if self.post_write_delay > 0:
            await self.sleep(self.post_write_delay)

        return result

    def _plan(self, path: Path) -> FileResult:
        source = self.file_manager.read_file(path)
        if source is None:
            return FileResult(file_path=path, success=False, error="Could not read source file")

        is_component = classify(source).is_component
        target = RefactorRequest(file_path=path, source_text=source, is_component=is_component).target_path
        logger.info(f"[dry-run] {path} -> {target.name}")
        result = FileResult(file_path=path, success=True, target_path=target)
        if self.on_result:
            self.on_result(result)
        return result

    def _fail(self, path: Path, error: str) -> FileResult:
        logger.error(f"Error processing {path}: {error}")
        self.aggregator.record_failure(path)

        result = FileResult(file_path=path, success=False, error=error)
        self._emit(result)
        return result

    def _emit(self, result: FileResult) -> None:
        if self.report is not None:
            self.report.on_file(result)
        if self.on_result:
            self.on_result(result)
