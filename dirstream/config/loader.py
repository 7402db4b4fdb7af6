from __future__ import annotations

import json
import logging

from result import Err, Ok, Result

from dirstream.config.defaults import default_config
from dirstream.config.schema import AppConfig
from dirstream.services.fs import DEFAULT_FS, FileSystem

CONFIG_PATH = "~/.config/dirstream/config.json"

logger = logging.getLogger(__name__)


def load_config(path: str | None = None, fs: FileSystem = DEFAULT_FS) -> Result[AppConfig, str]:
    """Load the JSON config at *path* (default ``CONFIG_PATH``).

    A missing file means defaults. An unreadable file, malformed JSON or a
    value of the wrong type is an ``Err`` carrying a message for the user.
    """
    resolved = fs.expanduser(path or CONFIG_PATH)
    if not fs.exists(resolved):
        logger.debug("No config at %s, using defaults", resolved)
        return Ok(default_config())

    try:
        payload = json.loads(fs.read_text(resolved))
    except (OSError, ValueError) as exc:
        return Err(f"Failed reading config at {resolved}: {exc}.")
    if not isinstance(payload, dict):
        return Err(f"Config at {resolved} must be a JSON object.")

    try:
        return Ok(AppConfig.from_dict(payload, default_config()))
    except ValueError as exc:
        return Err(f"Invalid config at {resolved}: {exc}.")


def sample_config_json() -> str:
    return json.dumps(default_config().to_dict(), indent=2)
