"""
Logging setup for FashionHive.

The root logger gets one stdout handler on first import; modules then call
get_logger(__name__). LOG_LEVEL picks the level and APP_ENV=production drops
timestamps (the hosting platform adds its own).
"""

import logging
import os
import sys
from functools import cache

_FORMATS = {
    "production": "%(levelname)s - %(name)s - %(message)s",
    "default": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}

# Chatty at INFO: request lines from httpx, topology events from pymongo
_QUIET_LOGGERS = ("httpx", "httpcore", "pymongo")


def _setup() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    env = "production" if os.environ.get("APP_ENV") == "production" else "default"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMATS[env]))
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_setup()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _escape(value: str) -> str:
    # Newlines in user input would forge extra log records (CWE-117)
    return value.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t").replace("\x00", "")


def sanitize_id_for_logging(id_value: str | None) -> str:
    """Escaped identifier cut to 8 characters; "N/A" when empty."""
    if not id_value:
        return "N/A"
    return _escape(str(id_value))[:8]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Escaped user-supplied text (brand names, search terms), truncated with "..."."""
    if not value:
        return "N/A"
    safe_value = _escape(str(value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."
