from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from typing import override

from dirstream.models.enums import ScanStatus
from dirstream.models.events import ErrorLogged, FileDiscovered, ScanEvent, ScanFinished
from dirstream.models.scan import FileRecord, ScanError

logger = logging.getLogger(__name__)


class ResultSink:
    """Receives scan events. Handlers return nothing and must not mutate what they get."""

    def is_alive(self) -> bool:
        return True

    def on_file_discovered(self, record: FileRecord) -> None:
        pass

    def on_scan_finished(self, files: Sequence[FileRecord], file_count: int, status: ScanStatus) -> None:
        pass

    def on_error(self, error: ScanError) -> None:
        pass


class NullSink(ResultSink):
    pass


class GuardedSink(ResultSink):
    """Checks the wrapped sink's liveness before every delivery; dead sinks get nothing."""

    def __init__(self, inner: ResultSink) -> None:
        self._inner = inner
        self.dropped = 0

    @property
    def inner(self) -> ResultSink:
        return self._inner

    @override
    def is_alive(self) -> bool:
        return self._inner.is_alive()

    def _live(self, event: str) -> bool:
        if self._inner.is_alive():
            return True
        self.dropped += 1
        logger.debug("Dropping %s event: sink is no longer alive", event)
        return False

    @override
    def on_file_discovered(self, record: FileRecord) -> None:
        if self._live("file-discovered"):
            self._inner.on_file_discovered(record)

    @override
    def on_scan_finished(self, files: Sequence[FileRecord], file_count: int, status: ScanStatus) -> None:
        if self._live("scan-finished"):
            self._inner.on_scan_finished(files, file_count, status)

    @override
    def on_error(self, error: ScanError) -> None:
        if self._live("error"):
            self._inner.on_error(error)


class CollectingSink(ResultSink):
    def __init__(self) -> None:
        self.discovered: list[FileRecord] = []
        self.errors: list[ScanError] = []
        self.finished: list[tuple[tuple[FileRecord, ...], int, ScanStatus]] = []
        self.alive = True

    @override
    def is_alive(self) -> bool:
        return self.alive

    @override
    def on_file_discovered(self, record: FileRecord) -> None:
        self.discovered.append(record)

    @override
    def on_scan_finished(self, files: Sequence[FileRecord], file_count: int, status: ScanStatus) -> None:
        self.finished.append((tuple(files), file_count, status))

    @override
    def on_error(self, error: ScanError) -> None:
        self.errors.append(error)


class QueueSink(ResultSink):
    """Turns callbacks into an async stream of events that ends when the sink is closed."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[ScanEvent | None] = asyncio.Queue()
        self._count = 0
        self._closed = False

    @override
    def is_alive(self) -> bool:
        return not self._closed

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(None)

    def push(self, event: ScanEvent) -> None:
        self._queue.put_nowait(event)

    @override
    def on_file_discovered(self, record: FileRecord) -> None:
        self._count += 1
        self.push(FileDiscovered(record=record, count=self._count))

    @override
    def on_scan_finished(self, files: Sequence[FileRecord], file_count: int, status: ScanStatus) -> None:
        self.push(ScanFinished(files=tuple(files), file_count=file_count, status=status))

    @override
    def on_error(self, error: ScanError) -> None:
        self.push(ErrorLogged(error=error))

    async def __aiter__(self) -> AsyncIterator[ScanEvent]:
        while True:
            event = await self._queue.get()
            if event is None:
                return
            yield event
