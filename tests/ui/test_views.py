from __future__ import annotations

from io import StringIO

from rich.console import Console

from dirstream.models.enums import ScanPhase, ScanStatus
from dirstream.models.scan import ScanError, ScanFailure, ScanFailureCode, ScanSummary
from dirstream.ui.views import ConsoleSink, render_failure, render_summary
from tests.factories import make_record


def _console() -> tuple[Console, StringIO]:
    buf = StringIO()
    return Console(file=buf, width=120, color_system=None), buf


class TestConsoleSink:
    def test_prints_relative_paths(self) -> None:
        console, buf = _console()
        sink = ConsoleSink(console, root_prefix="/r")
        sink.on_file_discovered(make_record("/r/sub/a.txt"))
        assert "sub/a.txt" in buf.getvalue()
        assert "/r/sub" not in buf.getvalue()
        assert sink.count == 1

    def test_sibling_with_shared_prefix_keeps_full_path(self) -> None:
        console, buf = _console()
        sink = ConsoleSink(console, root_prefix="/mock/app")
        sink.on_file_discovered(make_record("/mock/application/a.txt"))
        assert "/mock/application/a.txt" in buf.getvalue()

    def test_sizes(self) -> None:
        console, buf = _console()
        sink = ConsoleSink(console, show_sizes=True)
        sink.on_file_discovered(make_record("/r/a.txt", size=2048))
        sink.on_file_discovered(make_record("/r/b.txt", size=None))
        out = buf.getvalue()
        assert "2.0 KB" in out
        assert "?" in out

    def test_quiet_counts_without_printing(self) -> None:
        console, buf = _console()
        sink = ConsoleSink(console, quiet=True)
        sink.on_file_discovered(make_record("/r/a.txt"))
        sink.on_error(ScanError(path="/r/x", phase=ScanPhase.ACCESS, message="Permission denied"))
        assert sink.count == 1
        assert buf.getvalue() == ""

    def test_errors_and_cancel_notice(self) -> None:
        console, buf = _console()
        sink = ConsoleSink(console)
        sink.on_error(ScanError(path="/r/x", phase=ScanPhase.ACCESS, message="Permission denied"))
        sink.on_scan_finished((), 0, ScanStatus.CANCELLED)
        out = buf.getvalue()
        assert "! /r/x: Permission denied" in out
        assert "Scan cancelled" in out


class TestRender:
    def test_summary_panel(self) -> None:
        console, buf = _console()
        summary = ScanSummary(
            root_path="/r",
            files=(make_record("/r/a.txt"), make_record("/r/b.txt")),
            status=ScanStatus.COMPLETED,
            errors=(ScanError(path="/r/locked", phase=ScanPhase.ENUMERATE, message="Permission denied"),),
            fallback_path="/mock/app",
        )
        render_summary(console, summary)
        out = buf.getvalue()
        assert "Scan Summary" in out
        assert "2 files found" in out
        assert "Fallback: /mock/app" in out
        assert "Scan Errors" in out
        assert "/r/locked" in out

    def test_summary_without_errors_has_no_table(self) -> None:
        console, buf = _console()
        render_summary(console, ScanSummary(root_path="/r", files=(), status=ScanStatus.COMPLETED))
        out = buf.getvalue()
        assert "No files found" in out
        assert "Scan Errors" not in out

    def test_failure_panel(self) -> None:
        console, buf = _console()
        render_failure(
            console,
            ScanFailure(code=ScanFailureCode.ROOT_NOT_FOUND, path="/nope", message="Path does not exist"),
        )
        out = buf.getvalue()
        assert "Scan Failed" in out
        assert "/nope" in out
