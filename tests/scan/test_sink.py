from __future__ import annotations

import pytest

from dirstream.models.enums import ScanPhase, ScanStatus
from dirstream.models.events import ErrorLogged, FileDiscovered, ScanFinished
from dirstream.models.scan import ScanError
from dirstream.scan.sink import CollectingSink, GuardedSink, QueueSink
from tests.factories import make_record


class TestGuardedSink:
    def test_forwards_while_alive(self) -> None:
        inner = CollectingSink()
        guard = GuardedSink(inner)
        guard.on_file_discovered(make_record("/r/a"))
        guard.on_error(ScanError(path="/r/b", phase=ScanPhase.ACCESS, message="denied"))
        guard.on_scan_finished((make_record("/r/a"),), 1, ScanStatus.COMPLETED)
        assert len(inner.discovered) == 1
        assert len(inner.errors) == 1
        assert inner.finished[0][1:] == (1, ScanStatus.COMPLETED)
        assert guard.dropped == 0

    def test_drops_silently_after_teardown(self) -> None:
        inner = CollectingSink()
        guard = GuardedSink(inner)
        inner.alive = False
        guard.on_file_discovered(make_record("/r/a"))
        guard.on_scan_finished((), 0, ScanStatus.COMPLETED)
        assert inner.discovered == []
        assert inner.finished == []
        assert guard.dropped == 2
        assert guard.is_alive() is False


class TestQueueSink:
    @pytest.mark.asyncio
    async def test_events_in_order_until_closed(self) -> None:
        sink = QueueSink()
        sink.on_file_discovered(make_record("/r/b"))
        sink.on_file_discovered(make_record("/r/a"))
        sink.on_error(ScanError(path="/r/c", phase=ScanPhase.ACCESS, message="denied"))
        sink.on_scan_finished((make_record("/r/a"), make_record("/r/b")), 2, ScanStatus.COMPLETED)
        sink.close()

        events = [event async for event in sink]
        assert [type(e) for e in events] == [FileDiscovered, FileDiscovered, ErrorLogged, ScanFinished]
        assert [e.count for e in events if isinstance(e, FileDiscovered)] == [1, 2]
        assert sink.is_alive() is False

    def test_close_is_idempotent(self) -> None:
        sink = QueueSink()
        sink.close()
        sink.close()
        assert sink.is_alive() is False
