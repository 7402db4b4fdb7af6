# Incremental recursive walker.
#
# Lifecycle (walk method):
#   1. Root must be an existing directory, otherwise FAILED with one ENUMERATE
#      error and no fallback.
#   2. List the root. If that listing itself fails, log it and hand over to the
#      fallback directory (parent of the temp dir) instead of failing. The
#      fallback pass is unpaced and unmeasured. When the temp dir's parent is
#      a filesystem root there is no fallback: on a desktop with /tmp an
#      unlistable root completes with no files unless options.fallback_path
#      names a directory explicitly.
#   3. Consume a lazy depth-first stream of entries, strictly one at a time:
#      check cancellation, pace, classify, accept regular files into the
#      session and emit them to the sink.
#   4. Listing failures below the root and per-entry metadata failures are
#      logged and skipped; they never end the walk.
#
# The walk is a single coroutine. Blocking filesystem calls go through
# asyncio.to_thread, so every listing, every metadata query and every pacing
# delay is a suspension point, but no two entries are ever processed at once.

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import aclosing
from typing import Protocol

from dirstream.models.enums import EntryKind, ScanPhase, ScanStatus
from dirstream.models.scan import CancelCheck, FileRecord, ScanError, ScanOptions
from dirstream.scan.classifier import EntryClassifier
from dirstream.scan.sink import ResultSink
from dirstream.services.fs import DEFAULT_FS, DirEntry, FileSystem, fallback_path

logger = logging.getLogger(__name__)


class ScanAccumulator(Protocol):
    def accept(self, record: FileRecord) -> bool:
        """Append *record* unless its path was already accepted. Returns whether it was appended."""
        ...

    def record_error(self, error: ScanError) -> None: ...

    def use_fallback(self, path: str) -> None: ...


class DirectoryWalker:
    def __init__(
        self,
        fs: FileSystem = DEFAULT_FS,
        options: ScanOptions | None = None,
        classifier: EntryClassifier | None = None,
    ) -> None:
        self._fs = fs
        self._options = options or ScanOptions()
        self._classifier = classifier or EntryClassifier(fs)

    @property
    def options(self) -> ScanOptions:
        return self._options

    async def walk(
        self,
        root_path: str,
        session: ScanAccumulator,
        sink: ResultSink,
        cancel_check: CancelCheck,
    ) -> ScanStatus:
        if not await asyncio.to_thread(self._fs.is_dir, root_path):
            self._log_error(
                session,
                sink,
                ScanError(path=root_path, phase=ScanPhase.ENUMERATE, message="Path does not exist or is not a directory"),
            )
            return ScanStatus.FAILED

        try:
            top = await self._list(root_path)
        except OSError as exc:
            logger.warning("Cannot list %s: %s", root_path, exc)
            self._log_error(
                session,
                sink,
                ScanError(path=root_path, phase=ScanPhase.ENUMERATE, message=f"Cannot list root: {exc}"),
            )
            return await self._walk_fallback(session, sink, cancel_check)

        return await self._consume(top, session, sink, cancel_check, degraded=False)

    async def _walk_fallback(self, session: ScanAccumulator, sink: ResultSink, cancel_check: CancelCheck) -> ScanStatus:
        if not self._options.fallback_enabled:
            return ScanStatus.COMPLETED

        path = self._options.fallback_path or fallback_path(self._fs)
        if path is None or not await asyncio.to_thread(self._fs.is_dir, path):
            logger.info("No fallback directory available")
            return ScanStatus.COMPLETED

        logger.warning("Falling back to %s", path)
        session.use_fallback(path)
        try:
            top = await self._list(path)
        except OSError as exc:
            self._log_error(
                session,
                sink,
                ScanError(path=path, phase=ScanPhase.ENUMERATE, message=f"Cannot list fallback directory: {exc}"),
            )
            return ScanStatus.COMPLETED

        return await self._consume(top, session, sink, cancel_check, degraded=True)

    async def _consume(
        self,
        top: list[DirEntry],
        session: ScanAccumulator,
        sink: ResultSink,
        cancel_check: CancelCheck,
        *,
        degraded: bool,
    ) -> ScanStatus:
        # Degraded passes skip both pacing and the length query.
        pacing = 0.0 if degraded else self._options.pacing
        async with aclosing(self._iter_entries(top, session, sink)) as entries:
            async for entry in entries:
                if cancel_check():
                    return ScanStatus.CANCELLED

                await asyncio.sleep(pacing)

                result = await self._classifier.classify(entry, measure=not degraded)
                if result.error is not None:
                    self._log_error(session, sink, result.error)
                    continue
                if result.kind is not EntryKind.REGULAR_FILE:
                    continue

                record = FileRecord(path=entry.path, size_known=not degraded, size=result.size)
                if session.accept(record):
                    sink.on_file_discovered(record)
                else:
                    logger.debug("Skipping duplicate %s", entry.path)
        return ScanStatus.COMPLETED

    async def _iter_entries(
        self,
        top: list[DirEntry],
        session: ScanAccumulator,
        sink: ResultSink,
    ) -> AsyncIterator[DirEntry]:
        """Depth-first over *top* and everything below it, listing each directory lazily."""
        stack: list[Iterator[DirEntry]] = [iter(top)]
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue
            yield entry
            if not entry.is_dir or entry.is_symlink or entry.type_error is not None:
                continue
            try:
                listing = await self._list(entry.path)
            except OSError as exc:
                self._log_error(
                    session,
                    sink,
                    ScanError(path=entry.path, phase=ScanPhase.ENUMERATE, message=str(exc)),
                )
                continue
            stack.append(iter(listing))

    async def _list(self, path: str) -> list[DirEntry]:
        return await asyncio.to_thread(self._fs.scandir, path)

    @staticmethod
    def _log_error(session: ScanAccumulator, sink: ResultSink, error: ScanError) -> None:
        logger.debug("%s error at %s: %s", error.phase.value, error.path, error.message)
        session.record_error(error)
        sink.on_error(error)
