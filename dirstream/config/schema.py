from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from dirstream.models.scan import ScanOptions

# (json_key, attr_name, minimum), shared by from_dict and CLI override clamping.
_INT_FIELDS: tuple[tuple[str, str, int], ...] = (("pacingMs", "pacing_ms", 0),)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def clamp_field(value: int, field_name: str) -> int:
    """Clamp *value* to the minimum defined for *field_name* in _INT_FIELDS."""
    for _, attr, minimum in _INT_FIELDS:
        if attr == field_name:
            return max(minimum, value)
    return value


def _get_int(data: dict[str, Any], json_key: str, default: int, minimum: int) -> int:
    value = data.get(json_key, default)
    # bool is an int subclass; JSON true/false is never a count.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{json_key} must be an integer, got {value!r}")
    return max(minimum, value)


def _get_bool(data: dict[str, Any], json_key: str, default: bool) -> bool:
    value = data.get(json_key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{json_key} must be true or false, got {value!r}")
    return value


def _get_log_level(data: dict[str, Any], default: str) -> str:
    value = data.get("logLevel", default)
    level = value.upper() if isinstance(value, str) else None
    if level not in _LOG_LEVELS:
        raise ValueError(f"logLevel must be one of {', '.join(_LOG_LEVELS)}, got {value!r}")
    return level


def _get_optional_path(data: dict[str, Any], json_key: str, default: str | None) -> str | None:
    value = data.get(json_key, default)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{json_key} must be a string or null, got {value!r}")
    return value


@dataclass(slots=True)
class AppConfig:
    pacing_ms: int = 10
    fallback_enabled: bool = True
    fallback_path: str | None = None
    log_level: str = "WARNING"

    def to_dict(self) -> dict[str, Any]:
        return {
            "pacingMs": self.pacing_ms,
            "fallbackEnabled": self.fallback_enabled,
            "fallbackPath": self.fallback_path,
            "logLevel": self.log_level,
        }

    def scan_options(self) -> ScanOptions:
        return ScanOptions(
            pacing=self.pacing_ms / 1000.0,
            fallback_enabled=self.fallback_enabled,
            fallback_path=self.fallback_path,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any], defaults: AppConfig) -> AppConfig:
        """Build a config from parsed JSON. Raises ``ValueError`` naming the first bad key."""
        int_kwargs: dict[str, int] = {}
        for json_key, attr, minimum in _INT_FIELDS:
            int_kwargs[attr] = _get_int(data, json_key, getattr(defaults, attr), minimum)

        return cls(
            fallback_enabled=_get_bool(data, "fallbackEnabled", defaults.fallback_enabled),
            fallback_path=_get_optional_path(data, "fallbackPath", defaults.fallback_path),
            log_level=_get_log_level(data, defaults.log_level),
            **int_kwargs,
        )
