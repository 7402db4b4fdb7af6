from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from result import Result

from dirstream.models.enums import PermissionCategory, PlatformKind, ScanPhase, ScanStatus

CancelCheck = Callable[[], bool]


@dataclass(slots=True)
class CancelToken:
    """Cooperative cancellation flag, checked once per walked entry."""

    _cancelled: bool = field(default=False, init=False)

    def cancel(self) -> None:
        self._cancelled = True

    def is_cancelled(self) -> bool:
        return self._cancelled

    def __call__(self) -> bool:
        return self._cancelled


@dataclass(slots=True, frozen=True, order=True)
class FileRecord:
    """One accepted regular file. Identity and ordering are the path alone."""

    path: str
    size_known: bool = field(default=True, compare=False)
    size: int | None = field(default=None, compare=False)

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass(slots=True, frozen=True)
class ScanError:
    path: str
    phase: ScanPhase
    message: str


@dataclass(slots=True, frozen=True)
class PermissionDecision:
    granted: bool
    checked_categories: frozenset[PermissionCategory] = frozenset()
    prompted: bool = False


@dataclass(slots=True, frozen=True)
class PlatformInfo:
    kind: PlatformKind
    api_level: int | None = None


@dataclass(slots=True)
class ScanOptions:
    pacing: float = 0.010
    fallback_enabled: bool = True
    fallback_path: str | None = None


@dataclass(slots=True, frozen=True)
class ScanSummary:
    root_path: str
    files: tuple[FileRecord, ...]
    status: ScanStatus
    errors: tuple[ScanError, ...] = ()
    fallback_path: str | None = None

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def paths(self) -> list[str]:
        return [record.path for record in self.files]


class ScanFailureCode(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    ROOT_NOT_FOUND = "root_not_found"


@dataclass(slots=True, frozen=True)
class ScanFailure:
    code: ScanFailureCode
    path: str
    message: str


ScanResult = Result[ScanSummary, ScanFailure]
