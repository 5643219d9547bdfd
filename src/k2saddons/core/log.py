"""Logging setup: rich console handler plus optional log file."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from .config import Config

LOGGER_NAME = "k2saddons"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def resolve_level(config: Config) -> int:
    if config.verbose:
        return logging.DEBUG
    level = logging.getLevelName(config.log_level.upper())
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(config: Config, console: Console | None = None) -> logging.Logger:
    """Configure the package logger; safe to call more than once."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(resolve_level(config))
    logger.propagate = False

    logger.addHandler(
        RichHandler(
            console=console or Console(stderr=True),
            show_path=config.verbose,
            rich_tracebacks=config.verbose,
            markup=False,
        )
    )

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger
