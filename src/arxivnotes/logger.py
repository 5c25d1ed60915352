"""Logging configuration shared by the CLI and the API clients."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "[%(levelname)s] %(asctime)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | int = logging.INFO) -> None:
    """Configure the root logger to write to stderr."""

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stderr,
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module logger; handlers are owned by the root logger."""

    return logging.getLogger(name)
