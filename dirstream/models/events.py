from __future__ import annotations

from dataclasses import dataclass

from dirstream.models.enums import ScanStatus
from dirstream.models.scan import FileRecord, ScanError, ScanFailure


@dataclass(slots=True, frozen=True)
class FileDiscovered:
    record: FileRecord
    count: int


@dataclass(slots=True, frozen=True)
class ErrorLogged:
    error: ScanError


@dataclass(slots=True, frozen=True)
class ScanFinished:
    files: tuple[FileRecord, ...]
    file_count: int
    status: ScanStatus


@dataclass(slots=True, frozen=True)
class ScanRejected:
    failure: ScanFailure


type ScanEvent = FileDiscovered | ErrorLogged | ScanFinished | ScanRejected
