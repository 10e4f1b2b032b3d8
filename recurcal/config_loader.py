"""recurcal.config_loader

Config loader for recurcal.

- Reads YAML (PyYAML); JSON files load too since YAML is a superset.
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override and layers RECURCAL_* environment values on top.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from recurcal.calendar.calendar_math import coerce_date, format_date, parse_date

logger = logging.getLogger(__name__)

DEFAULT_MAX_REPEAT_END_DATE = date(2025, 12, 31)
DEFAULT_CATEGORY = "Work"
DEFAULT_NOTIFICATION_MINUTES = 10
NOTIFICATION_CHOICES = (1, 10, 60, 120, 1440)
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """Typed configuration for recurcal.

    Fields:
        max_repeat_end_date: latest allowed recurrence end date (inclusive)
        default_category: category pre-filled in new event forms
        default_notification_minutes: reminder offset pre-filled in new forms
        store_path: optional JSON event store path
        log_level: logging level name
    """

    max_repeat_end_date: date = DEFAULT_MAX_REPEAT_END_DATE
    default_category: str = DEFAULT_CATEGORY
    default_notification_minutes: int = DEFAULT_NOTIFICATION_MINUTES
    store_path: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Values that cannot be coerced are logged and replaced by defaults
        rather than failing the load.
        """
        if data is None:
            data = {}

        raw_ceiling = data.get("max_repeat_end_date", DEFAULT_MAX_REPEAT_END_DATE)
        # YAML loads unquoted dates as date, or datetime when a time is present
        if isinstance(raw_ceiling, date):
            ceiling = coerce_date(raw_ceiling)
        else:
            ceiling = parse_date(str(raw_ceiling))
        if ceiling is None:
            logger.warning(
                "Config max_repeat_end_date=%r is not a YYYY-MM-DD date; using %s",
                raw_ceiling,
                format_date(DEFAULT_MAX_REPEAT_END_DATE),
            )
            ceiling = DEFAULT_MAX_REPEAT_END_DATE

        category = data.get("default_category", DEFAULT_CATEGORY)
        category = str(category) if category else DEFAULT_CATEGORY

        raw_minutes = data.get("default_notification_minutes", DEFAULT_NOTIFICATION_MINUTES)
        try:
            minutes = int(raw_minutes)
        except (TypeError, ValueError):
            logger.warning(
                "Config default_notification_minutes=%r is not an int; using default %d",
                raw_minutes,
                DEFAULT_NOTIFICATION_MINUTES,
            )
            minutes = DEFAULT_NOTIFICATION_MINUTES
        if minutes not in NOTIFICATION_CHOICES:
            logger.warning(
                "default_notification_minutes %d is not one of %s; using default %d",
                minutes,
                NOTIFICATION_CHOICES,
                DEFAULT_NOTIFICATION_MINUTES,
            )
            minutes = DEFAULT_NOTIFICATION_MINUTES

        store_path = data.get("store_path")
        store_path = str(store_path) if store_path else None

        log_level = str(data.get("log_level") or "INFO").upper()
        if log_level not in _LOG_LEVELS:
            logger.warning("Config log_level=%r is unknown; using INFO", log_level)
            log_level = "INFO"

        return cls(
            max_repeat_end_date=ceiling,
            default_category=category,
            default_notification_minutes=minutes,
            store_path=store_path,
            log_level=log_level,
        )


def _load_yaml(path: Path) -> Any:
    """Load a YAML (or JSON) document; empty files load as an empty mapping."""
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Unable to parse config file {path}: {exc}") from exc
    return {} if loaded is None else loaded


def load_config(path: str | None = None, use_env: bool = True) -> Config:
    """Load configuration from a YAML file, then apply environment overrides.

    Args:
        path: Optional path to the config file. Defaults to ./recurcal.yaml.
        use_env: Apply .env / RECURCAL_* overrides (see ConfigManager)

    Returns:
        Config instance with values from file and environment (or defaults).

    Raises:
        ValueError: If the file exists but is not a mapping or not valid YAML
    """
    p = Path(path) if path else Path.cwd() / "recurcal.yaml"
    logger.debug("Attempting to load config from %s", p)

    raw: dict[str, Any] = {}
    if p.exists():
        loaded = _load_yaml(p)
        if not isinstance(loaded, dict):
            logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, loaded)
            raise ValueError("Config file must contain a mapping at top level")  # noqa: TRY004
        raw.update(loaded)
        logger.info("Loaded configuration from %s", p)
    else:
        logger.info("Config file %s not found; using defaults", p)

    if use_env:
        from recurcal.core.config_manager import ConfigManager  # noqa: PLC0415

        raw.update(ConfigManager().load_full_config())

    cfg = Config.from_dict(raw)
    logger.debug("Configuration values: %s", cfg)
    return cfg
