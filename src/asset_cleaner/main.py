"""Flutter Asset Cleaner CLI - find, report and remove unreferenced assets."""
from pathlib import Path
from typing import Dict, Optional

import typer
from rich.markup import escape
from rich.progress import (
    Progress,
    TextColumn,
    BarColumn,
    TaskProgressColumn,
    MofNCompleteColumn,
)
from rich.table import Table

from .analyzer.engine import ScanResult, analyze_project
from .config import PACKAGE_NAME, __version__, get_config
from .reaper.delete_script import DEFAULT_SCRIPT_NAME, generate_delete_script, write_delete_script
from .reaper.safe_delete import SafeDeleter
from .reporter.markdown import DEFAULT_REPORT_PATH, ReportGenerator
from .utils.formatting import format_bytes
from .utils.safe_console import SafeConsole

DEFAULT_BAR_WIDTH = 50
MIN_BAR_WIDTH = 10
MAX_BAR_WIDTH = 200

app = typer.Typer(
    name="asset-cleaner",
    help="Find assets that your Flutter code never references",
    add_completion=False
)


def make_console(no_color: bool = False, quiet: bool = False) -> SafeConsole:
    """Console honouring --no-color (rich also reads NO_COLOR itself)."""
    return SafeConsole(no_color=no_color, quiet=quiet, highlight=False)


def normalize_bar_width(width: Optional[str | int]) -> int:
    """Malformed or out-of-range widths fall back to the default instead of failing."""
    try:
        width = int(width)
    except (TypeError, ValueError):
        return DEFAULT_BAR_WIDTH
    if not MIN_BAR_WIDTH <= width <= MAX_BAR_WIDTH:
        return DEFAULT_BAR_WIDTH
    return width


class RichProgressReporter:
    """Adapts the engine's progress hooks to a rich Progress display."""

    def __init__(self, progress: Progress):
        self.progress = progress
        self.tasks: Dict[str, int] = {}

    def phase(self, label: str, total: int, unit: str) -> None:
        self.tasks[label] = self.progress.add_task(label, total=max(total, 1), unit=unit)
        if total == 0:
            self.progress.update(self.tasks[label], completed=1)

    def advance(self, label: str, completed: int) -> None:
        task_id = self.tasks.get(label)
        if task_id is not None and completed:
            self.progress.update(task_id, completed=completed)


def run_analysis(project_path: Path, scan_config, console: SafeConsole, bar_width: int) -> ScanResult:
    """Run the engine with progress bars unless the console is quiet."""
    if console.quiet_mode:
        return analyze_project(project_path, scan_config)

    progress = Progress(
        TextColumn("  {task.description:<22}"),
        BarColumn(bar_width=bar_width),
        TaskProgressColumn(),
        TextColumn("[dim]·[/dim]"),
        MofNCompleteColumn(),
        TextColumn("[cyan]{task.fields[unit]}[/cyan]"),
        console=console,
    )
    with progress:
        return analyze_project(project_path, scan_config, RichProgressReporter(progress))


def print_summary(result: ScanResult, console: SafeConsole):
    """Print the summary table; unused and reclaim rows are highlighted."""
    rows = [
        ("Total assets", str(len(result.asset_files))),
        ("Used", str(len(result.used))),
        ("Unused", str(len(result.unused))),
        ("Total size", format_bytes(result.total_bytes)),
        ("Used size", format_bytes(result.used_bytes)),
        ("Potential reclaim", format_bytes(result.reclaimable_bytes)),
        ("Time", f"{result.elapsed:.1f}s"),
    ]

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Metric", style="dim")
    table.add_column("Value")
    for label, value in rows:
        highlight = "Unused" in label or "reclaim" in label
        table.add_row(label, f"[green]{value}[/green]" if highlight else value)

    console.print("\n[bold]Summary[/bold]")
    console.print(table)
    console.print()


def print_diagnostics(result: ScanResult, console: SafeConsole):
    if result.missing:
        console.warning(f"{len(result.missing)} identifiers point to missing files")
        for missing in result.missing:
            console.print(f"    [dim]{escape(missing.identifier)} → {escape(missing.asset_path)}[/dim]")

    if result.dangling_aliases:
        console.warning(f"{len(result.dangling_aliases)} aliases point to unknown identifiers")
        for alias, target in result.dangling_aliases:
            console.print(f"    [dim]{escape(alias)} → {escape(target)}[/dim]")

    if result.skipped_files:
        console.warning(f"{len(result.skipped_files)} files could not be read and were skipped")


@app.command()
def scan(
    project_path: str = typer.Argument(".", help="Flutter project root to analyze"),
    delete: bool = typer.Option(False, "--delete", help="Move unused assets to the trash after the scan"),
    write_script: bool = typer.Option(False, "--write-script", help="Write delete_unused_assets.sh (default when --delete is not given)"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
    quiet: bool = typer.Option(False, "--quiet", help="Hide header and progress bars"),
    bar: str = typer.Option(str(DEFAULT_BAR_WIDTH), "--bar", help=f"Progress bar width ({MIN_BAR_WIDTH}-{MAX_BAR_WIDTH})"),
    report: Optional[str] = typer.Option(None, "--report", help="Report path, relative to the project root (default: build/unused_assets_report.md)"),
    ignore_definitions: bool = typer.Option(False, "--ignore-definitions", help="Do not count occurrences inside the asset class blocks"),
):
    """Scan the project, classify assets as used or unused and write the report."""
    console = make_console(no_color=no_color, quiet=quiet)
    project_root = Path(project_path).resolve()

    if not project_root.is_dir():
        console.error(f"Project path does not exist: {escape(str(project_root))}")
        raise typer.Exit(1)

    try:
        config = get_config(project_root)
        scan_config = config.scan_config(ignore_definitions=ignore_definitions or None)
    except ValueError as e:
        console.error(escape(str(e)))
        raise typer.Exit(1)

    write_script = write_script or not delete

    console.info(f"\n[bold]{PACKAGE_NAME}[/bold] [dim]v{__version__}[/dim]\n")

    result = run_analysis(project_root, scan_config, console, normalize_bar_width(bar))
    console.info()

    report_path = project_root / (report or DEFAULT_REPORT_PATH)
    try:
        report_path = ReportGenerator(scan_config).write(result, report_path)
    except OSError as e:
        console.error(f"Could not write report to {escape(str(report_path))}: {escape(str(e))}")
        raise typer.Exit(1)

    script_path = None
    if write_script:
        script = generate_delete_script(result.unused, result.file_sizes)
        try:
            script_path = write_delete_script(script, project_root / DEFAULT_SCRIPT_NAME)
        except OSError as e:
            console.warning(f"Could not write delete script: {escape(str(e))}")

    if delete and result.unused:
        console.warning(f"Deleting {len(result.unused)} unused files...")
        deleter = SafeDeleter(project_root)
        outcome = deleter.delete_multiple(sorted(result.unused))
        for path, error in outcome.failures:
            console.warning(f"Failed to delete {escape(path)}: {escape(error)}")
        console.success(
            f"Moved {len(outcome.deletion_ids)} files to {escape(str(deleter.trash_dir))} "
            f"(restore with: asset-cleaner restore {outcome.batch_id})"
        )

    print_diagnostics(result, console)
    print_summary(result, console)

    console.success(f"Report saved to {escape(str(report_path))}")
    if script_path is not None:
        console.success(f"Script saved to {escape(str(script_path))}")


@app.command()
def restore(
    batch_id: Optional[str] = typer.Argument(None, help="Batch ID printed by 'scan --delete' (default: latest)"),
    project_path: str = typer.Option(".", "--project", "-p", help="Flutter project root"),
    restore_everything: bool = typer.Option(False, "--all", help="Restore every file still in the trash"),
):
    """Move trashed assets back to their original location."""
    console = make_console()
    project_root = Path(project_path).resolve()

    if not project_root.is_dir():
        console.error(f"Project path does not exist: {escape(str(project_root))}")
        raise typer.Exit(1)

    deleter = SafeDeleter(project_root)

    try:
        if restore_everything:
            ids = [d["id"] for d in deleter.manifest.get_unrestored_deletions()]
            restored = deleter.restore_all(ids)
        else:
            batch_id = batch_id or deleter.manifest.latest_batch_id()
            if batch_id is None:
                console.print("[dim]Nothing to restore.[/dim]")
                return
            if not deleter.manifest.get_batch(batch_id):
                console.error(f"Unknown batch ID: {escape(batch_id)}")
                raise typer.Exit(1)
            restored = deleter.restore_batch(batch_id)
    except IOError as e:
        console.error(escape(str(e)))
        raise typer.Exit(1)

    console.success(f"Restored {restored} files")


def _version_callback(value: bool):
    if value:
        typer.echo(f"{PACKAGE_NAME} {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(False, "--version", callback=_version_callback, is_eager=True,
                                 help="Show the version and exit"),
):
    """Flutter Asset Cleaner - find and remove assets your code never references."""
    pass


if __name__ == "__main__":
    app()
