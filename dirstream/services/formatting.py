from __future__ import annotations

from dirstream.models.enums import ScanStatus

_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


def format_bytes(size: int | None) -> str:
    if size is None:
        return "?"
    value = float(size)
    for unit in _UNITS:
        if value < 1024.0 or unit == _UNITS[-1]:
            if unit == "B":
                return f"{int(value)} {unit}"
            return f"{value:.1f} {unit}"
        value /= 1024.0
    return f"{size} B"


def status_line(status: ScanStatus, file_count: int) -> str:
    """One-line scan status: scanning, N files found, or no files found."""
    if status is ScanStatus.SCANNING:
        return "Scanning files..."
    if file_count == 1:
        return "1 file found"
    if file_count > 1:
        return f"{file_count:,} files found"
    return "No files found"


def relative_path(path: str, root_prefix: str) -> str:
    """Path relative to *root_prefix*, or *path* unchanged when it lies outside it."""
    if not root_prefix:
        return path
    root = root_prefix.rstrip("/")
    if path == root or path == root_prefix:
        return "."
    if path.startswith(root + "/"):
        return path[len(root) + 1 :]
    return path
