"""Logger setup shared by the engine, the loader and the CLI."""

from __future__ import annotations

import logging
import os

# Logger name shared by every module in the project.
LOGGER_NAME = "sudoku"

# Environment variable holding the initial log level.
LOG_LEVEL_ENV = "SUDOKU_LOG_LEVEL"


def get_logger() -> logging.Logger:
    """
    Return the project logger.

    The first call attaches a console handler and sets the level from the
    SUDOKU_LOG_LEVEL environment variable (WARNING when unset).
    """
    logger = logging.getLogger(LOGGER_NAME)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(os.environ.get(LOG_LEVEL_ENV, "WARNING").upper())

    return logger


def set_level(level: str) -> None:
    """Change the project log level (run.py --log-level)."""
    get_logger().setLevel(level.upper())
