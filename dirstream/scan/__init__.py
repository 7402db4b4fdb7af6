from __future__ import annotations

from dirstream.config.schema import AppConfig
from dirstream.models.scan import PlatformInfo, ScanOptions
from dirstream.scan.classifier import Classification, EntryClassifier
from dirstream.scan.session import DirectoryPicker, ScanSession
from dirstream.scan.sink import CollectingSink, GuardedSink, NullSink, QueueSink, ResultSink
from dirstream.scan.walker import DirectoryWalker
from dirstream.services.fs import DEFAULT_FS, FileSystem
from dirstream.services.permissions import PermissionGate


def create_session(
    config: AppConfig | None = None,
    sink: ResultSink | None = None,
    *,
    fs: FileSystem = DEFAULT_FS,
    gate: PermissionGate | None = None,
    platform: PlatformInfo | None = None,
    pacing_ms: int | None = None,
    fallback_enabled: bool | None = None,
) -> ScanSession:
    """Build a session from *config*, with optional per-invocation overrides.

    ``pacing_ms`` and ``fallback_enabled`` take precedence over the config when
    given; ``None`` keeps the configured value.
    """
    options = config.scan_options() if config is not None else ScanOptions()
    if pacing_ms is not None:
        options.pacing = max(0, pacing_ms) / 1000.0
    if fallback_enabled is not None:
        options.fallback_enabled = fallback_enabled
    walker = DirectoryWalker(fs=fs, options=options)
    return ScanSession(walker=walker, gate=gate, sink=sink, platform=platform)


__all__ = [
    "Classification",
    "CollectingSink",
    "DirectoryPicker",
    "DirectoryWalker",
    "EntryClassifier",
    "GuardedSink",
    "NullSink",
    "QueueSink",
    "ResultSink",
    "ScanSession",
    "create_session",
]
