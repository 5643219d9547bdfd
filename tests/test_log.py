"""Tests for logging setup."""

import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from k2saddons.core.config import Config
from k2saddons.core.log import LOGGER_NAME, resolve_level, setup_logging


@pytest.fixture(autouse=True)
def restore_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


class TestResolveLevel:
    def test_verbose_is_debug(self):
        assert resolve_level(Config(verbose=True, log_level="ERROR")) == logging.DEBUG

    def test_named_level(self):
        assert resolve_level(Config(log_level="info")) == logging.INFO

    def test_unknown_level_falls_back(self):
        assert resolve_level(Config(log_level="chatty")) == logging.WARNING


class TestSetupLogging:
    def test_rich_handler(self):
        logger = setup_logging(Config(), Console(stderr=True))
        assert logger.name == LOGGER_NAME
        assert [type(h) for h in logger.handlers] == [RichHandler]
        assert logger.level == logging.WARNING

    def test_idempotent(self):
        setup_logging(Config())
        logger = setup_logging(Config())
        assert len(logger.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "k2s.log"
        logger = setup_logging(Config(log_file=log_file, log_level="INFO"))
        logging.getLogger("k2saddons.addons.loader").info("Loaded %d addon(s)", 3)
        for handler in logger.handlers:
            handler.flush()
        assert "Loaded 3 addon(s)" in log_file.read_text(encoding="utf-8")
