from __future__ import annotations

from dirstream.config.schema import AppConfig


def default_config() -> AppConfig:
    return AppConfig(pacing_ms=10, fallback_enabled=True, fallback_path=None, log_level="WARNING")
