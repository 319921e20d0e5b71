"""Main orchestrator for a migration run.

Wires the pipeline together for one project:
1. Directory walk (lazy, depth-first)
2. Classification and refactoring of each file, one at a time
3. Write of the TypeScript file and removal of the original
4. Summary aggregation and the markdown run report
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from .config import Settings
from .errors import ConfigError
from .llm import CompletionClient, FallbackRefactorer
from .models import FileResult, RunSummary
from .pipeline import DirectoryWalker, FileProcessor, RunReport, SummaryAggregator
from .prompts import PromptLoader
from .utils.file_ops import FileManager
from .utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class MigrationOrchestrator:
    """Runs the JavaScript to TypeScript migration over a project tree.

    Args:
        project_path: Root directory of the legacy project
        settings: Validated at construction; a missing API key fails here
        openai_client: Pre-built SDK client (default: built from settings)
        dry_run: Classify and list targets without calling the model
        backup: Copy originals into ``.refactor/backups`` before removal
        report: Append outcomes to ``.refactor/reports/migration.md``
        on_progress: Called with ``(path, index)`` before each file
        on_result: Called with each file's ``FileResult``
    """

    project_path: Path
    settings: Settings
    openai_client: Optional[Any] = None
    dry_run: bool = False
    backup: bool = False
    report: bool = True
    on_progress: Optional[Callable[[Path, int], None]] = None
    on_result: Optional[Callable[[FileResult], None]] = None
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep, repr=False)

    def __post_init__(self) -> None:
        """Validate settings and build the pipeline components."""
        self.project_path = Path(self.project_path).resolve()
        if not self.project_path.is_dir():
            raise ConfigError(f"Project path is not a directory: {self.project_path}")

        self.settings.validate(require_api_key=not self.dry_run)

        self.aggregator = SummaryAggregator()
        self.file_manager = FileManager(project_path=self.project_path, backup_enabled=self.backup)
        self.walker = DirectoryWalker()
        self.run_report = RunReport(self.project_path) if self.report and not self.dry_run else None

        self.refactorer: Optional[FallbackRefactorer] = None
        if not self.dry_run:
            completion_client = CompletionClient.from_settings(self.settings, client=self.openai_client)
            completion_client.sleep = self.sleep
            self.refactorer = FallbackRefactorer(
                client=completion_client,
                primary_model=self.settings.primary_model,
                fallback_model=self.settings.fallback_model,
                prompts=PromptLoader(self.settings.prompts_dir).load(),
                temperature=self.settings.temperature,
            )

        self.processor = FileProcessor(
            refactorer=self.refactorer,
            aggregator=self.aggregator,
            file_manager=self.file_manager,
            post_write_delay=self.settings.post_write_delay,
            dry_run=self.dry_run,
            report=self.run_report,
            sleep=self.sleep,
        )

    async def run_async(self) -> RunSummary:
        """Process every eligible file under the project root.

        Returns:
            Snapshot of the run's counters
        """
        mode = " (dry run)" if self.dry_run else ""
        logger.info(f"Processing legacy project at: {self.project_path}{mode}")
        if not self.dry_run:
            logger.info(
                f"Models: {self.settings.primary_model} -> {self.settings.fallback_model}, "
                f"max attempts {self.settings.max_attempts}, base delay {self.settings.base_delay_ms} ms"
            )

        self.processor.on_result = self.on_result

        for index, path in enumerate(self.walker.walk(self.project_path), start=1):
            if self.on_progress:
                self.on_progress(path, index)
            await self.processor.process(path)

        summary = self.aggregator.snapshot()

        if self.run_report is not None and self.run_report.entry_count:
            report_path = self.run_report.finalize(summary)
            logger.info(f"Run report written to {report_path}")

        logger.info(
            f"Processing complete: {summary.attempted} attempted, "
            f"{summary.succeeded} succeeded, {summary.failed} failed"
        )
        return summary

    def run(self) -> RunSummary:
        """Run the migration synchronously."""
        return asyncio.run(self.run_async())
