from __future__ import annotations

from collections.abc import Sequence
from typing import override

from result import Err
from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.widgets import DataTable, Static

from dirstream.models.enums import ScanStatus
from dirstream.models.scan import FileRecord, ScanError
from dirstream.scan.session import ScanSession
from dirstream.scan.sink import ResultSink
from dirstream.services.formatting import status_line


class _TableSink(ResultSink):
    """Feeds one scan into the app. Goes dead when the app stops or a newer scan starts."""

    def __init__(self, app: ScanApp, generation: int) -> None:
        self._app = app
        self._generation = generation

    @override
    def is_alive(self) -> bool:
        return self._app.is_running and self._app.generation == self._generation

    @override
    def on_file_discovered(self, record: FileRecord) -> None:
        self._app.add_file(record)

    @override
    def on_scan_finished(self, files: Sequence[FileRecord], file_count: int, status: ScanStatus) -> None:
        self._app.show_final(files, file_count, status)

    @override
    def on_error(self, error: ScanError) -> None:
        self._app.error_count += 1


class ScanApp(App[None]):
    CSS = """
    #app-grid {
        height: 100%;
    }
    #path-row, #status-row, #footer-row {
        height: 1;
        padding: 0 1;
    }
    #status-row {
        text-style: bold;
    }
    #file-table {
        height: 1fr;
    }
    """

    def __init__(
        self,
        session: ScanSession,
        initial_directory: str | None = None,
        auto_scan: bool = True,
    ) -> None:
        super().__init__()
        self.session = session
        self.selected_directory = initial_directory
        self.auto_scan = auto_scan
        self.paths: list[str] = []
        self.scan_status = ScanStatus.IDLE
        self.status_text = "Select a directory"
        self.error_count = 0
        self.generation = 0

    @override
    def compose(self) -> ComposeResult:
        yield Container(
            Static(id="path-row"),
            Static(id="status-row"),
            DataTable(id="file-table"),
            Static(id="footer-row"),
            id="app-grid",
        )

    def on_mount(self) -> None:
        table = self.query_one("#file-table", DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("PATH")
        table.focus()
        self._render_rows()
        if self.selected_directory is not None and self.auto_scan:
            self.start_scan(self.selected_directory)

    def start_scan(self, path: str) -> None:
        self.generation += 1
        self.selected_directory = path
        self.paths = []
        self.error_count = 0
        self.scan_status = ScanStatus.SCANNING
        self.status_text = status_line(ScanStatus.SCANNING, 0)
        self.query_one("#file-table", DataTable).clear()
        self._render_rows()
        self.run_worker(self._scan(path, _TableSink(self, self.generation)), group="scan")

    async def _scan(self, path: str, sink: _TableSink) -> None:
        result = await self.session.start(path, sink)
        if isinstance(result, Err) and sink.is_alive():
            failure = result.unwrap_err()
            self.scan_status = self.session.status
            self.status_text = failure.message
            self._render_rows()

    def add_file(self, record: FileRecord) -> None:
        self.paths.append(record.path)
        self.query_one("#file-table", DataTable).add_row(record.path)
        self.status_text = status_line(ScanStatus.SCANNING, len(self.paths))
        self._render_rows()

    def show_final(self, files: Sequence[FileRecord], file_count: int, status: ScanStatus) -> None:
        self.paths = [record.path for record in files]
        self.scan_status = status
        self.status_text = status_line(status, file_count)
        if status is ScanStatus.CANCELLED:
            self.status_text = f"Cancelled: {self.status_text}"
        table = self.query_one("#file-table", DataTable)
        table.clear()
        for path in self.paths:
            table.add_row(path)
        self._render_rows()

    def _render_rows(self) -> None:
        directory = self.selected_directory or "(none)"
        self.query_one("#path-row", Static).update(Text.assemble(("Directory: ", "#81a2be"), directory))
        self.query_one("#status-row", Static).update(Text(self.status_text))
        footer = f"Total: {len(self.paths):,} files    Errors: {self.error_count}    c cancel | r rescan | q quit"
        self.query_one("#footer-row", Static).update(Text(footer, style="#969896"))

    @override
    def on_key(self, event) -> None:  # type: ignore[override]
        key = event.key
        if key == "q":
            self.exit()
            event.stop()
        elif key == "c":
            self.session.cancel()
            event.stop()
        elif key == "r" and self.selected_directory is not None:
            self.start_scan(self.selected_directory)
            event.stop()
