"""Shared data models for the TS refactor agent.

Kept in one module so that the llm and pipeline packages can both import
them without circular imports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

COMPONENT_EXTENSION = ".tsx"
SCRIPT_EXTENSION = ".ts"


@dataclass(frozen=True)
class RefactorRequest:
    """One discovered source file, ready to be sent to the model."""

    file_path: Path
    source_text: str
    is_component: bool

    @property
    def target_extension(self) -> str:
        return COMPONENT_EXTENSION if self.is_component else SCRIPT_EXTENSION

    @property
    def target_path(self) -> Path:
        """Same directory and stem as the source, TypeScript extension."""
        return self.file_path.with_suffix(self.target_extension)


@dataclass(frozen=True)
class CompletionOutcome:
    """Result of a successful refactor call."""

    text: str
    model: str
    used_fallback: bool = False


@dataclass
class RunSummary:
    """Counters for one traversal."""

    attempted: int = 0
    succeeded: int = 0
    failed_initially: int = 0
    failed: int = 0
    failed_files: list[str] = field(default_factory=list)
    model_successes: dict[str, int] = field(default_factory=dict)

    @property
    def fallback_used(self) -> int:
        """Files that only succeeded on the fallback model."""
        return self.failed_initially

    @property
    def success(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed_initially": self.failed_initially,
            "failed": self.failed,
            "failed_files": list(self.failed_files),
            "model_successes": dict(self.model_successes),
        }


@dataclass(frozen=True)
class FileResult:
    """Outcome of processing a single file, handed to progress callbacks."""

    file_path: Path
    success: bool
    target_path: Optional[Path] = None
    model: Optional[str] = None
    used_fallback: bool = False
    error: Optional[str] = None
