"""Storage permission gate for platforms with scoped storage.

Only Android gates scanning behind runtime permissions. Which categories are
checked depends on the API level tier; a single interactive request covers
every category of the tier, and the scan may proceed if *any* of them ends up
granted.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from collections.abc import Sequence
from typing import Protocol

from dirstream.models.enums import PermissionCategory, PermissionStatus, PermissionTier, PlatformKind
from dirstream.models.scan import PermissionDecision, PlatformInfo

logger = logging.getLogger(__name__)

TIER_CATEGORIES: dict[PermissionTier, tuple[PermissionCategory, ...]] = {
    PermissionTier.MEDIA: (
        PermissionCategory.STORAGE,
        PermissionCategory.PHOTOS,
        PermissionCategory.VIDEOS,
        PermissionCategory.AUDIO,
    ),
    PermissionTier.STORAGE: (PermissionCategory.STORAGE,),
    PermissionTier.MANAGE_ALL: (PermissionCategory.MANAGE_EXTERNAL_STORAGE,),
}

_KIND_BY_SYS_PLATFORM: dict[str, PlatformKind] = {
    "android": PlatformKind.ANDROID,
    "linux": PlatformKind.LINUX,
    "darwin": PlatformKind.MACOS,
    "win32": PlatformKind.WINDOWS,
}


class PermissionBackend(Protocol):
    async def status(self, category: PermissionCategory) -> PermissionStatus: ...

    async def request(
        self, categories: Sequence[PermissionCategory]
    ) -> dict[PermissionCategory, PermissionStatus]: ...


class OsAccessBackend:
    """Answers from readability of the shared storage root. Cannot prompt."""

    def __init__(self, storage_root: str | None = None) -> None:
        self._storage_root = storage_root or os.environ.get("EXTERNAL_STORAGE", "/sdcard")

    async def status(self, category: PermissionCategory) -> PermissionStatus:
        readable = await asyncio.to_thread(os.access, self._storage_root, os.R_OK)
        return PermissionStatus.GRANTED if readable else PermissionStatus.DENIED

    async def request(
        self, categories: Sequence[PermissionCategory]
    ) -> dict[PermissionCategory, PermissionStatus]:
        logger.info("No interactive permission prompt available; re-checking %s", self._storage_root)
        return {category: await self.status(category) for category in categories}


def detect_platform() -> PlatformInfo:
    get_api_level = getattr(sys, "getandroidapilevel", None)
    if get_api_level is not None:
        return PlatformInfo(kind=PlatformKind.ANDROID, api_level=int(get_api_level()))
    return PlatformInfo(kind=_KIND_BY_SYS_PLATFORM.get(sys.platform, PlatformKind.OTHER))


def tier_for(api_level: int | None) -> PermissionTier:
    if api_level is None or api_level >= 33:
        return PermissionTier.MEDIA
    if api_level >= 30:
        return PermissionTier.STORAGE
    return PermissionTier.MANAGE_ALL


class PermissionGate:
    def __init__(self, backend: PermissionBackend | None = None) -> None:
        self._backend = backend

    async def check(self, platform: PlatformInfo) -> PermissionDecision:
        if not platform.kind.has_scoped_storage:
            return PermissionDecision(granted=True)

        backend = self._backend if self._backend is not None else OsAccessBackend()
        categories = TIER_CATEGORIES[tier_for(platform.api_level)]
        checked = frozenset(categories)

        statuses = [await backend.status(category) for category in categories]
        if all(status is PermissionStatus.GRANTED for status in statuses):
            return PermissionDecision(granted=True, checked_categories=checked)

        granted = await backend.request(categories)
        allowed = any(granted.get(category) is PermissionStatus.GRANTED for category in categories)
        if not allowed:
            logger.warning("Storage permission denied for %s", ", ".join(c.value for c in categories))
        return PermissionDecision(granted=allowed, checked_categories=checked, prompted=True)
