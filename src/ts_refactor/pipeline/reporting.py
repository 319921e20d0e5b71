"""Run reporting: the console summary table and the markdown run report.

The markdown report lives at ``.refactor/reports/migration.md`` inside the
migrated project. Each run appends a session section, one entry per file,
and a closing block with the summary counts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..models import FileResult, RunSummary


def render_summary(console: Console, summary: RunSummary) -> None:
    """Print the refactoring summary table and the failed file list."""
    table = Table(title="Refactoring Summary", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="dim")
    table.add_column("Value", justify="right")

    table.add_row("Files attempted", str(summary.attempted))
    table.add_row("Files succeeded", str(summary.succeeded))
    for model, count in sorted(summary.model_successes.items()):
        table.add_row(f"  refactored with {model}", str(count))
    table.add_row("Failed initially but succeeded", str(summary.failed_initially))
    table.add_row("Files failed", str(summary.failed))

    console.print(table)

    if summary.failed_files:
        console.print()
        console.print("[bold red]Failed files:[/bold red]")
        for path in summary.failed_files:
            console.print(f"  [red]•[/red] {path}")


@dataclass
class RunReport:
    """Appends per-file outcomes to the project's markdown run report."""

    project_path: Path
    _initialized: bool = field(default=False, init=False)
    _entry_count: int = field(default=0, init=False)
    _session_id: str = field(default="", init=False)

    def __post_init__(self) -> None:
        self.project_path = Path(self.project_path).resolve()
        self._session_id = datetime.now().strftime("%Y%m%d_%H%M%S")

    @property
    def reports_dir(self) -> Path:
        return self.project_path / ".refactor" / "reports"

    @property
    def report_file(self) -> Path:
        return self.reports_dir / "migration.md"

    def _ensure_initialized(self) -> None:
        """Create the report file, or add a session separator to an existing one."""
        if self._initialized:
            return

        self.reports_dir.mkdir(parents=True, exist_ok=True)
        started = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        if not self.report_file.exists():
            header = (
                "# TypeScript Migration Report\n\n"
                f"**Project**: {self.project_path.name}\n"
                f"**Created**: {started}\n\n"
                "---\n\n"
                f"## Session: {self._session_id}\n\n"
                f"Started: {started}\n\n"
            )
            self.report_file.write_text(header, encoding="utf-8")
        else:
            with open(self.report_file, "a", encoding="utf-8") as f:
                f.write(f"\n\n---\n\n## Session: {self._session_id}\n\n")
                f.write(f"Started: {started}\n\n")

        self._initialized = True

    def on_file(self, result: FileResult) -> None:
        """Append one file outcome."""
        self._ensure_initialized()
        self._entry_count += 1

        timestamp = datetime.now().strftime("%H:%M:%S")
        status_icon = "✅" if result.success else "❌"

        entry = f"### {self._entry_count}. {status_icon} [{timestamp}] `{self._relative(result.file_path)}`\n\n"
        if result.target_path is not None:
            entry += f"- **Target**: `{self._relative(result.target_path)}`\n"
        if result.model:
            fallback_note = " (fallback)" if result.used_fallback else ""
            entry += f"- **Model**: `{result.model}`{fallback_note}\n"
        if result.error:
            entry += f"- **Error**: {result.error}\n"
        entry += "\n"

        with open(self.report_file, "a", encoding="utf-8") as f:
            f.write(entry)

    def finalize(self, summary: RunSummary) -> Path:
        """Append the closing counts and return the report path."""
        self._ensure_initialized()

        closing = (
            "---\n\n"
            "### Session Complete\n\n"
            f"- **Ended**: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n"
            f"- **Attempted**: {summary.attempted}\n"
            f"- **Succeeded**: {summary.succeeded}\n"
            f"- **Failed initially but succeeded**: {summary.failed_initially}\n"
            f"- **Failed**: {summary.failed}\n\n"
        )

        with open(self.report_file, "a", encoding="utf-8") as f:
            f.write(closing)

        return self.report_file

    @property
    def entry_count(self) -> int:
        return self._entry_count

    def _relative(self, path: Path) -> str:
        try:
            return str(Path(path).resolve().relative_to(self.project_path))
        except ValueError:
            return str(path)
