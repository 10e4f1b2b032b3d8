"""Environment overrides for recurcal configuration.

Values come from ``RECURCAL_*`` variables. A ``.env`` file in the working
directory can supply defaults for any variable the process environment does
not already define.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# environment variable -> Config field
ENV_KEYS = {
    "RECURCAL_MAX_REPEAT_END_DATE": "max_repeat_end_date",
    "RECURCAL_DEFAULT_CATEGORY": "default_category",
    "RECURCAL_NOTIFICATION_MINUTES": "default_notification_minutes",
    "RECURCAL_STORE_PATH": "store_path",
    "RECURCAL_LOG_LEVEL": "log_level",
}


def parse_env_file(path: Path) -> dict[str, str]:
    """Read ``KEY=VALUE`` pairs from a dotenv-style file.

    Blank lines, ``#`` comments and lines without ``=`` are ignored. An
    optional ``export`` prefix is accepted and surrounding quotes are removed
    from values. A missing or unreadable file yields an empty mapping.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        logger.debug("Could not read env file %s; ignoring it", path, exc_info=True)
        return {}

    pairs: dict[str, str] = {}
    for raw in text.splitlines():
        entry = raw.strip()
        if not entry or entry.startswith("#") or "=" not in entry:
            continue
        if entry.startswith("export "):
            entry = entry[len("export ") :]

        name, _, value = entry.partition("=")
        name = name.strip()
        if name:
            pairs[name] = value.strip().strip("'\"")
    return pairs


class ConfigManager:
    """Collect configuration overrides from the environment and a .env file."""

    def __init__(self, env_file_path: Path | None = None):
        self.env_file_path = env_file_path or Path.cwd() / ".env"

    def load_env_file(self) -> list[str]:
        """Copy .env entries into ``os.environ`` without overwriting existing ones.

        Returns:
            Names of the variables that were set from the file
        """
        entries = parse_env_file(self.env_file_path)
        if not entries:
            logger.debug("No .env entries loaded from %s", self.env_file_path)
            return []

        applied = [name for name in entries if name not in os.environ]
        for name in applied:
            os.environ[name] = entries[name]

        if applied:
            logger.debug("Applied .env defaults: %s", ", ".join(applied))
        return applied

    def build_config_from_env(self) -> dict[str, Any]:
        """Map set ``RECURCAL_*`` variables onto Config field names.

        Values stay as text; ``Config.from_dict`` does the coercion.
        """
        overrides: dict[str, Any] = {}
        for env_name, field_name in ENV_KEYS.items():
            value = os.environ.get(env_name)
            if value:
                overrides[field_name] = value
        if overrides:
            logger.debug("Environment overrides for: %s", ", ".join(sorted(overrides)))
        return overrides

    def load_full_config(self) -> dict[str, Any]:
        """Apply .env defaults, then return the environment overrides."""
        self.load_env_file()
        return self.build_config_from_env()
