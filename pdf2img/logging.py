"""Logging utilities."""
from __future__ import annotations

import logging
import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging() -> None:
    """Configure the root logger with the service's line format."""

    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # Pillow's PNG plugin logs every chunk at DEBUG.
    logging.getLogger("PIL").setLevel(max(logging.getLogger().level, logging.INFO))


__all__ = ["configure_logging"]
