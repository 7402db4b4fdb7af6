"""Scan session: state and lifecycle for one scan invocation at a time.

A session owns the accumulated files, the error log and the cancellation token
of its current scan. ``start`` resets all of them before walking, supersedes a
scan still in flight on the same session, and finalizes exactly once: files
are sorted by path, frozen, and delivered to the sink in a single terminal
event. Sinks only ever see immutable records and snapshots.

Scans on one session never overlap: each start claims a fresh token (which
cancels every older claim) and then waits its turn on the session lock.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Sequence
from typing import Protocol

from result import Err, Ok

from dirstream.models.enums import ScanStatus
from dirstream.models.events import ScanEvent, ScanRejected
from dirstream.models.scan import (
    CancelToken,
    FileRecord,
    PlatformInfo,
    ScanError,
    ScanFailure,
    ScanFailureCode,
    ScanResult,
    ScanSummary,
)
from dirstream.scan.sink import GuardedSink, NullSink, QueueSink, ResultSink
from dirstream.scan.walker import DirectoryWalker
from dirstream.services.permissions import PermissionGate, detect_platform

logger = logging.getLogger(__name__)


class DirectoryPicker(Protocol):
    async def pick(self) -> str | None:
        """Return an absolute directory path, or ``None`` when the user cancelled."""
        ...


class ScanSession:
    def __init__(
        self,
        walker: DirectoryWalker | None = None,
        gate: PermissionGate | None = None,
        sink: ResultSink | None = None,
        *,
        platform: PlatformInfo | None = None,
        on_directory_selected: Callable[[str], None] | None = None,
        on_file_list_updated: Callable[[Sequence[FileRecord]], None] | None = None,
    ) -> None:
        self._walker = walker or DirectoryWalker()
        self._gate = gate or PermissionGate()
        self._sink = sink or NullSink()
        self._platform = platform
        self._on_directory_selected = on_directory_selected
        self._on_file_list_updated = on_file_list_updated

        self._root_path = ""
        self._fallback_path: str | None = None
        self._status = ScanStatus.IDLE
        self._files: list[FileRecord] = []
        self._seen: set[str] = set()
        self._errors: list[ScanError] = []
        self._token = CancelToken()
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[ScanResult] | None = None

    @property
    def walker(self) -> DirectoryWalker:
        return self._walker

    @property
    def root_path(self) -> str:
        return self._root_path

    @property
    def fallback_path(self) -> str | None:
        return self._fallback_path

    @property
    def status(self) -> ScanStatus:
        return self._status

    @property
    def files(self) -> tuple[FileRecord, ...]:
        return tuple(self._files)

    @property
    def error_log(self) -> tuple[ScanError, ...]:
        return tuple(self._errors)

    @property
    def cancel_requested(self) -> bool:
        return self._token.is_cancelled()

    def cancel(self) -> None:
        self._token.cancel()

    # -- accumulator interface used by the walker --------------------------

    def accept(self, record: FileRecord) -> bool:
        if record.path in self._seen:
            return False
        self._seen.add(record.path)
        self._files.append(record)
        return True

    def record_error(self, error: ScanError) -> None:
        self._errors.append(error)

    def use_fallback(self, path: str) -> None:
        self._fallback_path = path

    # -- lifecycle ---------------------------------------------------------

    async def start(self, root_path: str, sink: ResultSink | None = None) -> ScanResult:
        """Run one scan of *root_path*, delivering events to *sink* (or the session's sink).

        Returns the terminal summary, or a ``ScanFailure`` for a denied
        permission or a missing root. Everything else ends up in the error log.
        """
        return await self._start(root_path, sink, self._claim())

    def start_scan(self, root_path: str, sink: ResultSink | None = None) -> asyncio.Task[ScanResult]:
        """Fire-and-forget variant of ``start``. Requires a running event loop.

        The scan claims its place immediately, so back-to-back calls supersede
        each other in call order.
        """
        self._task = asyncio.create_task(self._start(root_path, sink, self._claim()))
        return self._task

    async def select_directory(self, picker: DirectoryPicker, sink: ResultSink | None = None) -> ScanResult | None:
        path = await picker.pick()
        if path is None:
            logger.info("Directory selection cancelled")
            return None
        return await self.start(path, sink)

    async def stream(self, root_path: str) -> AsyncIterator[ScanEvent]:
        """Run one scan and yield its events until the terminal one."""
        sink = QueueSink()
        token = self._claim()
        task = asyncio.create_task(self._start(root_path, sink, token))
        task.add_done_callback(lambda _: sink.close())
        try:
            async for event in sink:
                yield event
        finally:
            if not task.done():
                token.cancel()
            result = await task
        if isinstance(result, Err) and result.unwrap_err().code is ScanFailureCode.PERMISSION_DENIED:
            yield ScanRejected(failure=result.unwrap_err())

    def _claim(self) -> CancelToken:
        # The newest claim owns the session; anything older, running or still
        # queued on the lock, is cancelled.
        previous = self._token
        token = CancelToken()
        self._token = token
        if self._lock.locked() and not previous.is_cancelled():
            logger.debug("Superseding scan of %s", self._root_path)
        previous.cancel()
        return token

    async def _start(self, root_path: str, sink: ResultSink | None, token: CancelToken) -> ScanResult:
        async with self._lock:
            return await self._run(root_path, GuardedSink(sink or self._sink), token)

    def _reset(self, root_path: str, status: ScanStatus) -> None:
        self._root_path = root_path
        self._fallback_path = None
        self._files = []
        self._seen = set()
        self._errors = []
        self._status = status

    async def _run(self, root_path: str, sink: GuardedSink, token: CancelToken) -> ScanResult:
        if token.is_cancelled():
            # Superseded while waiting for the previous scan to finish.
            self._reset(root_path, ScanStatus.SCANNING)
            return Ok(self._finalize(ScanStatus.CANCELLED, sink))

        platform = self._platform or detect_platform()
        decision = await self._gate.check(platform)
        if not decision.granted:
            self._reset(root_path, ScanStatus.IDLE)
            return Err(
                ScanFailure(
                    code=ScanFailureCode.PERMISSION_DENIED,
                    path=root_path,
                    message="Storage permission is required to access files",
                )
            )

        self._reset(root_path, ScanStatus.SCANNING)
        if self._on_directory_selected is not None:
            self._on_directory_selected(root_path)

        status = ScanStatus.FAILED
        try:
            status = await self._walker.walk(root_path, self, sink, token)
        except asyncio.CancelledError:
            status = ScanStatus.CANCELLED
            raise
        finally:
            summary = self._finalize(status, sink)

        if status is ScanStatus.FAILED:
            return Err(
                ScanFailure(
                    code=ScanFailureCode.ROOT_NOT_FOUND,
                    path=root_path,
                    message="Path does not exist or is not a directory",
                )
            )
        return Ok(summary)

    def _finalize(self, status: ScanStatus, sink: ResultSink) -> ScanSummary:
        files = tuple(sorted(self._files, key=lambda record: record.path))
        self._files = list(files)
        self._status = status
        summary = ScanSummary(
            root_path=self._root_path,
            files=files,
            status=status,
            errors=tuple(self._errors),
            fallback_path=self._fallback_path,
        )
        logger.debug("Scan of %s ended %s with %d files", self._root_path, status.value, summary.file_count)
        sink.on_scan_finished(files, summary.file_count, status)
        if self._on_file_list_updated is not None and sink.is_alive():
            self._on_file_list_updated(files)
        return summary
