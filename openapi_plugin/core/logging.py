"""Logging configuration for the openapi plugin.

Only the ``openapi_plugin`` logger tree is configured, so a host application
keeps control of the root logger and its own handlers.
"""

from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any

from .settings import get_settings

PLUGIN_LOGGER = "openapi_plugin"
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | openapi | %(name)s | %(message)s"


def build_logging_config(level: str) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plugin": {"format": LOG_FORMAT, "datefmt": "%H:%M:%S"},
        },
        "handlers": {
            "plugin_console": {
                "class": "logging.StreamHandler",
                "formatter": "plugin",
                "stream": "ext://sys.stderr",
            }
        },
        "loggers": {
            PLUGIN_LOGGER: {
                "level": level.upper(),
                "handlers": ["plugin_console"],
                "propagate": False,
            }
        },
    }


def configure_logging() -> None:
    """Configure plugin logging based on settings."""

    settings = get_settings()
    dictConfig(build_logging_config(settings.log_level))
    logging.getLogger(__name__).debug(
        "Logging configured for %s in %s mode",
        settings.project_root.name,
        settings.environment.value,
    )
