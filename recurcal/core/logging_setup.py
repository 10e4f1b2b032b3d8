"""
Central logging configuration for recurcal.

Console output goes through colorlog; recurcal's own loggers follow the
requested level while third-party noise stays at WARNING.
"""

import logging
import os
import sys
from typing import Optional

from colorlog import ColoredFormatter

LOG_FORMAT = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

# Third-party loggers kept quiet regardless of the requested level
QUIET_LOGGERS = ("yaml", "pydantic", "asyncio")

_TRUTHY = ("1", "true", "yes", "on")


def _resolve_level(level_name: Optional[str], debug_mode: bool) -> int:
    """Pick the effective level from arguments and RECURCAL_* environment variables.

    Environment Variables:
        RECURCAL_DEBUG: Set to '1', 'true', 'yes' or 'on' to force debug logging
        RECURCAL_LOG_LEVEL: Override level (DEBUG, INFO, WARNING, ERROR)
    """
    if debug_mode or os.getenv("RECURCAL_DEBUG", "").strip().lower() in _TRUTHY:
        return logging.DEBUG

    env_level = os.getenv("RECURCAL_LOG_LEVEL", "").strip().upper()
    name = (level_name or env_level or "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level_name: Optional[str] = None, debug_mode: bool = False) -> int:
    """Configure console logging for recurcal.

    Adds a colorized stderr handler when the root logger has none, so calling
    this more than once does not duplicate output.

    Args:
        level_name: Level name such as "INFO"; env vars apply when omitted
        debug_mode: Force DEBUG

    Returns:
        The effective level applied to the recurcal logger
    """
    level = _resolve_level(level_name, debug_mode)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt="%H:%M:%S", log_colors=LOG_COLORS))
        root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("recurcal").setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )
    return level


def get_logging_status() -> dict[str, str]:
    """Map key logger names to their current level names."""
    status = {"root": logging.getLevelName(logging.getLogger().level)}
    for name in ("recurcal", *QUIET_LOGGERS):
        status[name] = logging.getLevelName(logging.getLogger(name).level)
    return status
