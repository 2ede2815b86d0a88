"""Tests for logging setup."""
import io
import logging

import pytest

from src.utils.helpers import setup_logging

LOGGER_NAME = "src.test_helpers"


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(LOGGER_NAME)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def console_handlers(logger):
    return [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]


def test_repeated_setup_keeps_one_console_handler(clean_logger):
    first, second = io.StringIO(), io.StringIO()

    setup_logging(LOGGER_NAME, "INFO", stream=first)
    setup_logging(LOGGER_NAME, "INFO", stream=second)
    clean_logger.info("settled")

    assert len(console_handlers(clean_logger)) == 1
    assert first.getvalue() == ""
    assert "settled" in second.getvalue()


def test_file_handlers_survive_setup(clean_logger, tmp_path):
    file_handler = logging.FileHandler(tmp_path / "run.log")
    clean_logger.addHandler(file_handler)
    try:
        setup_logging(LOGGER_NAME, stream=io.StringIO())
        assert file_handler in clean_logger.handlers
    finally:
        file_handler.close()


def test_level_and_format(clean_logger):
    stream = io.StringIO()

    logger = setup_logging(LOGGER_NAME, "warning", stream=stream)
    logger.info("hidden")
    logger.warning("shown")

    output = stream.getvalue()
    assert logger.level == logging.WARNING
    assert "hidden" not in output
    assert f"{LOGGER_NAME} - WARNING - shown" in output
