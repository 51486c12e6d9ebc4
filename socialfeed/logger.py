"""
Logging setup for the command line and for applications embedding the data layer.

Handlers are attached to the root logger. The ``socialfeed`` package and the
CLI module log at the configured level; everything else, SQLAlchemy included,
stays at WARNING unless ``database.echo`` asks for SQL statements.
"""

from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any

from .config import Settings, get_settings

# Loggers that follow ``settings.logging.level``
PROJECT_LOGGERS = ("socialfeed", "__main__")

_configured = False


def _resolve_log_level(level_name: str) -> int:
    """Return a logging level constant from a case-insensitive string."""

    numeric_level = logging.getLevelName(level_name.upper())
    if isinstance(numeric_level, int):
        return numeric_level
    raise ValueError(f"Unsupported log level: {level_name}")


def _build_logging_config(settings: Settings) -> dict[str, Any]:
    log_settings = settings.logging
    log_settings.directory.mkdir(parents=True, exist_ok=True)
    level = _resolve_log_level(log_settings.level)

    project_loggers = {name: {"level": level} for name in PROJECT_LOGGERS}
    engine_level = logging.INFO if settings.database.echo else logging.WARNING

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"standard": {"format": log_settings.format}},
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            },
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "standard",
                "filename": str(log_settings.directory / log_settings.file_name),
                "encoding": "utf-8",
                "maxBytes": log_settings.max_bytes,
                "backupCount": log_settings.backup_count,
            },
        },
        "loggers": {**project_loggers, "sqlalchemy.engine": {"level": engine_level}},
        "root": {"level": logging.WARNING, "handlers": ["stderr", "file"]},
    }


def setup_logging(settings: Settings | None = None) -> None:
    """
    Apply the logging configuration once per process.

    Later calls are no-ops, so library code and the CLI can both call it.
    """

    global _configured

    if _configured:
        return
    dictConfig(_build_logging_config(settings or get_settings()))
    _configured = True


__all__ = ["PROJECT_LOGGERS", "setup_logging"]
