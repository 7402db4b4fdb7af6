from __future__ import annotations

from enum import Enum


class EntryKind(str, Enum):
    REGULAR_FILE = "regular_file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    INACCESSIBLE = "inaccessible"


class ScanStatus(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({ScanStatus.COMPLETED, ScanStatus.CANCELLED, ScanStatus.FAILED})


class ScanPhase(str, Enum):
    ENUMERATE = "enumerate"
    CLASSIFY = "classify"
    ACCESS = "access"


class PermissionCategory(str, Enum):
    STORAGE = "storage"
    PHOTOS = "photos"
    VIDEOS = "videos"
    AUDIO = "audio"
    MANAGE_EXTERNAL_STORAGE = "manage_external_storage"


class PermissionStatus(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    RESTRICTED = "restricted"


class PermissionTier(str, Enum):
    MEDIA = "media"
    STORAGE = "storage"
    MANAGE_ALL = "manage_all"


class PlatformKind(str, Enum):
    ANDROID = "android"
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    OTHER = "other"

    @property
    def has_scoped_storage(self) -> bool:
        return self is PlatformKind.ANDROID
