"""Logging setup helpers for the PXF data source."""

import logging
import os
import sys

# Shared package logger.
log = logging.getLogger("pxf_data_source")


def configure_logging(level=None):
    """Configure console logging for the data source.

    Args:
        level: Optional log level (``"DEBUG"`` or ``logging.DEBUG``). When
            omitted, ``LOG_LEVEL`` from the environment is used, falling back
            to ``INFO``.

    Returns:
        The configured package logger.
    """
    resolved_level = _coerce_level(level)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")
        )
        root.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)

    log.setLevel(resolved_level)
    log.debug("Logging configured at level %s", logging.getLevelName(resolved_level))
    return log


def _coerce_level(level):
    """Return a numeric logging level from user input or the environment."""
    candidate = level if level is not None else os.getenv("LOG_LEVEL", "INFO")

    if isinstance(candidate, int):
        return candidate

    if isinstance(candidate, str):
        numeric = logging.getLevelName(candidate.upper())
        if isinstance(numeric, int):
            return numeric

    return logging.INFO
