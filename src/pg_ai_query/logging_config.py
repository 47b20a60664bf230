"""Logging configuration for the pg_ai_query package logger."""

from __future__ import annotations

import logging
import sys

from pg_ai_query.config import GeneralSettings

PACKAGE_LOGGER = "pg_ai_query"
LOG_FORMAT = "[%(asctime)s] [pg_ai_query] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(general: GeneralSettings | None = None, debug: bool = False) -> logging.Logger:
    """Configure the package logger from ``[general]`` settings.

    Logging is off unless ``enable_logging`` is set (or ``debug`` is passed);
    records are then written to stderr so command output on stdout stays
    machine-readable. Calling this again replaces the previous handlers.
    """
    general = general or GeneralSettings()
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    if not (general.enable_logging or debug):
        package_logger.addHandler(logging.NullHandler())
        package_logger.propagate = False
        return package_logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if debug else getattr(logging, general.log_level))
    package_logger.propagate = False

    package_logger.debug("Logging configured at %s", logging.getLevelName(package_logger.level))
    return package_logger
