"""Logging configuration."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any


def configure_logging(config: Mapping[str, Any]) -> None:
    """Configure structured-ish, grep-friendly logs.

    Accepts any mapping with a ``LOG_LEVEL`` key (``app.config`` included).
    """

    level_name = str(config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Reduce noisy loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
