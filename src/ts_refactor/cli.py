"""Command-line interface for the TS Refactor Agent.

Typer command with Rich console output:
- Single positional argument: the legacy project directory
- Model, retry and delay settings from the environment or options
- Live status while files are processed and a summary table at the end
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.theme import Theme

from . import __version__
from .config import Settings
from .errors import ConfigError
from .models import FileResult
from .pipeline import render_summary
from .utils.logger import setup_logging

custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "red bold",
    "success": "green bold",
    "muted": "dim",
})

console = Console(theme=custom_theme)
app = typer.Typer(
    name="ts-refactor",
    help="Migrate legacy JavaScript and React class components to TypeScript with an LLM",
    rich_markup_mode="rich",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[info]TS Refactor Agent[/info] v{__version__}")
        raise typer.Exit()


@app.command()
def run(
    project: Optional[str] = typer.Argument(
        None,
        help="Path to the legacy project root directory",
        show_default=False,
    ),
    model: Optional[str] = typer.Option(
        None,
        "--model", "-m",
        help="Primary model (env: TS_REFACTOR_PRIMARY_MODEL)",
    ),
    fallback_model: Optional[str] = typer.Option(
        None,
        "--fallback-model", "-f",
        help="Model used when the primary one fails (env: TS_REFACTOR_FALLBACK_MODEL)",
    ),
    max_attempts: Optional[int] = typer.Option(
        None,
        "--max-attempts",
        help="Attempts per model on rate-limit errors (env: TS_REFACTOR_MAX_ATTEMPTS)",
    ),
    base_delay_ms: Optional[int] = typer.Option(
        None,
        "--base-delay-ms",
        help="Backoff base delay in milliseconds (env: TS_REFACTOR_BASE_DELAY_MS)",
    ),
    post_write_delay: Optional[float] = typer.Option(
        None,
        "--post-write-delay",
        help="Seconds to wait after each written file (env: TS_REFACTOR_POST_WRITE_DELAY)",
    ),
    prompts_dir: Optional[str] = typer.Option(
        None,
        "--prompts-dir",
        help="Directory with component.md / script.md prompt overrides",
    ),
    backup: bool = typer.Option(
        False,
        "--backup",
        help="Keep a copy of each original under .refactor/backups",
    ),
    no_report: bool = typer.Option(
        False,
        "--no-report",
        help="Do not write .refactor/reports/migration.md",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run", "-n",
        help="List planned targets without calling the model or touching files",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Suppress banner and informational log output",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Minimum log level",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version", "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Refactor every eligible .js/.jsx file under PROJECT into .ts/.tsx.

    React class components become .tsx, everything else .ts. Test files
    (*.test.js, *.spec.js, __tests__/) are skipped. Originals are removed
    only after the TypeScript file has been written.

    Examples:
        ts-refactor ./legacy-app
        ts-refactor ./legacy-app --dry-run
        ts-refactor ./legacy-app -m gpt-4o-mini -f gpt-4o --backup
    """
    from .orchestrator import MigrationOrchestrator

    load_dotenv()

    if project is None:
        console.print("[error]Please provide the path to the legacy project directory.[/error]")
        raise typer.Exit(1)

    project_path = Path(project)
    if not project_path.is_dir():
        console.print(f"[error]Project path does not exist or is not a directory:[/error] {project_path}")
        raise typer.Exit(1)

    setup_logging(
        project_path.resolve() / ".refactor" / "logs",
        level="WARNING" if quiet else log_level,
        file=not dry_run,
    )

    try:
        settings = Settings.from_env().with_overrides(
            primary_model=model,
            fallback_model=fallback_model,
            max_attempts=max_attempts,
            base_delay_ms=base_delay_ms,
            post_write_delay=post_write_delay,
            prompts_dir=Path(prompts_dir) if prompts_dir else None,
        )
        orchestrator = MigrationOrchestrator(
            project_path=project_path,
            settings=settings,
            dry_run=dry_run,
            backup=backup,
            report=not no_report,
        )
    except ConfigError as e:
        console.print(f"[error]Configuration error:[/error] {e}")
        raise typer.Exit(1)

    if not quiet:
        _show_banner()
        console.print(f"[info]Processing legacy project at:[/info] {orchestrator.project_path}")
        console.print()

    with console.status("Scanning...") as status:

        def on_progress(path: Path, index: int) -> None:
            status.update(f"[{index}] Refactoring {_relative(path, orchestrator.project_path)}")

        def on_result(result: FileResult) -> None:
            if quiet:
                return
            name = _relative(result.file_path, orchestrator.project_path)
            if result.success:
                target = result.target_path.name if result.target_path else "?"
                via = f" [muted]({result.model})[/muted]" if result.model else ""
                console.print(f"  [success]✓[/success] {name} → {target}{via}")
            else:
                console.print(f"  [error]✗[/error] {name}: {result.error}")

        orchestrator.on_progress = on_progress
        orchestrator.on_result = on_result

        summary = orchestrator.run()

    console.print()
    render_summary(console, summary)

    if orchestrator.run_report is not None and orchestrator.run_report.report_file.exists():
        console.print()
        console.print(f"[info]Full report:[/info] {orchestrator.run_report.report_file}")

    raise typer.Exit(0 if summary.success else 1)


def _relative(path: Path, root: Path) -> str:
    try:
        return str(Path(path).resolve().relative_to(root))
    except ValueError:
        return str(path)


def _show_banner() -> None:
    """Display the application banner."""
    banner = f"""
TS Refactor Agent v{__version__}
Legacy JavaScript → TypeScript migration
    """
    console.print(Panel(banner.strip(), border_style="cyan"))


def main() -> None:
    """Entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[warning]Interrupted by user[/warning]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[error]Unexpected error:[/error] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
