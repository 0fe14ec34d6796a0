from __future__ import annotations

import logging
import os
from typing import Any, Dict

APP_LOGGER = "backend.portfolio"


def resolve_level(level: int | str | None = None) -> int:
    """Turn a level name (or APP_LOG_LEVEL when omitted) into a logging level int."""
    if level is None:
        level = os.environ.get("APP_LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else logging.INFO


def get_log_config(level: int | str | None = None) -> Dict[str, Any]:
    """Return a dictConfig for uvicorn and the application loggers.

    Timestamps use HH:MM:SS. httpx request logging is capped at WARNING so
    metadata lookups do not flood the console.
    """
    lvl = resolve_level(level)
    time_format = "%H:%M:%S"
    default_fmt = "%(asctime)s %(levelprefix)s [%(name)s] %(message)s"
    access_fmt = "%(asctime)s %(levelprefix)s %(client_addr)s - \"%(request_line)s\" %(status_code)s"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": default_fmt,
                "datefmt": time_format,
                "use_colors": None,
            },
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": access_fmt,
                "datefmt": time_format,
                "use_colors": None,
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": lvl,
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "level": lvl,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": lvl, "propagate": False},
            "uvicorn.error": {"handlers": ["default"], "level": lvl, "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": lvl, "propagate": False},
            "httpx": {"handlers": ["default"], "level": max(lvl, logging.WARNING), "propagate": False},
            APP_LOGGER: {"handlers": ["default"], "level": lvl, "propagate": False},
        },
        "root": {"handlers": ["default"], "level": lvl},
    }
