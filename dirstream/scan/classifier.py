from __future__ import annotations

import asyncio
from dataclasses import dataclass

from dirstream.models.enums import EntryKind, ScanPhase
from dirstream.models.scan import ScanError
from dirstream.services.fs import DEFAULT_FS, DirEntry, FileSystem


@dataclass(slots=True, frozen=True)
class Classification:
    kind: EntryKind
    size: int | None = None
    error: ScanError | None = None


class EntryClassifier:
    """Sorts listed entries into files, directories, symlinks and inaccessible entries.

    A candidate file counts as a regular file only when it still exists and a
    length query on it succeeds; a zero length is fine. Metadata failures are
    returned as an ``ACCESS`` error alongside an ``INACCESSIBLE`` kind and never
    raised. Symlinks are reported as such and never followed.
    """

    def __init__(self, fs: FileSystem = DEFAULT_FS) -> None:
        self._fs = fs

    async def classify(self, entry: DirEntry, *, measure: bool = True) -> Classification:
        if entry.type_error is not None:
            return Classification(
                kind=EntryKind.INACCESSIBLE,
                error=ScanError(path=entry.path, phase=ScanPhase.CLASSIFY, message=entry.type_error),
            )
        if entry.is_symlink:
            return Classification(kind=EntryKind.SYMLINK)
        if entry.is_dir:
            return Classification(kind=EntryKind.DIRECTORY)
        if not measure:
            return Classification(kind=EntryKind.REGULAR_FILE)

        try:
            exists = await asyncio.to_thread(self._fs.exists, entry.path)
            if not exists:
                return Classification(
                    kind=EntryKind.INACCESSIBLE,
                    error=ScanError(path=entry.path, phase=ScanPhase.ACCESS, message="File vanished during scan"),
                )
            size = await asyncio.to_thread(self._fs.file_size, entry.path)
        except OSError as exc:
            return Classification(
                kind=EntryKind.INACCESSIBLE,
                error=ScanError(path=entry.path, phase=ScanPhase.ACCESS, message=str(exc)),
            )
        return Classification(kind=EntryKind.REGULAR_FILE, size=size)
