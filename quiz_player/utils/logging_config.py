"""Logging configuration helpers for the quiz player."""

from __future__ import annotations

import logging
from logging import Logger

_NOISY_LOGGERS = ("urllib3", "uvicorn.access")


def configure_logging(verbose: bool = False) -> Logger:
    """Configure process-wide logging and return the player's package logger."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # HTTP chatter drowns out session events at INFO.
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logging.getLogger("quiz_player")
