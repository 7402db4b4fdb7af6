from __future__ import annotations

from collections.abc import Sequence
from typing import override

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dirstream.models.enums import ScanStatus
from dirstream.models.scan import FileRecord, ScanError, ScanFailure, ScanSummary
from dirstream.scan.sink import ResultSink
from dirstream.services.formatting import format_bytes, relative_path, status_line


class ConsoleSink(ResultSink):
    """Prints each discovered path as it arrives."""

    def __init__(self, console: Console, root_prefix: str = "", show_sizes: bool = False, quiet: bool = False) -> None:
        self._console = console
        self._root_prefix = root_prefix
        self._show_sizes = show_sizes
        self._quiet = quiet
        self.count = 0

    @override
    def on_file_discovered(self, record: FileRecord) -> None:
        self.count += 1
        if self._quiet:
            return
        line = Text(relative_path(record.path, self._root_prefix) if self._root_prefix else record.path)
        if self._show_sizes:
            line.append(f"  {format_bytes(record.size)}", style="dim")
        self._console.print(line, highlight=False)

    @override
    def on_error(self, error: ScanError) -> None:
        if not self._quiet:
            self._console.print(Text(f"! {error.path}: {error.message}", style="yellow"), highlight=False)

    @override
    def on_scan_finished(self, files: Sequence[FileRecord], file_count: int, status: ScanStatus) -> None:
        if status is ScanStatus.CANCELLED:
            self._console.print(Text("Scan cancelled", style="bold yellow"))


def _status_style(status: ScanStatus) -> str:
    if status is ScanStatus.COMPLETED:
        return "blue"
    if status is ScanStatus.CANCELLED:
        return "yellow"
    return "red"


def _errors_table(errors: Sequence[ScanError], limit: int) -> Table:
    table = Table(title="Scan Errors", header_style="bold yellow")
    table.add_column("Path")
    table.add_column("Phase", justify="center")
    table.add_column("Message")
    for error in errors[:limit]:
        table.add_row(error.path, error.phase.value, error.message)
    return table


def render_summary(console: Console, summary: ScanSummary, error_limit: int = 20) -> None:
    body = (
        f"Root: [bold]{summary.root_path}[/bold]\n"
        f"Status: [bold]{summary.status.value}[/bold]\n"
        f"{status_line(summary.status, summary.file_count)}\n"
        f"Errors: [bold]{len(summary.errors)}[/bold]"
    )
    if summary.fallback_path is not None:
        body += f"\nFallback: [bold]{summary.fallback_path}[/bold]"
    console.print(Panel(body, title="Scan Summary", border_style=_status_style(summary.status)))
    if summary.errors:
        console.print(_errors_table(summary.errors, error_limit))


def render_failure(console: Console, failure: ScanFailure) -> None:
    console.print(Panel(f"{failure.message}\n[dim]{failure.path}[/dim]", title="Scan Failed", border_style="red"))
