"""Tests for logging helpers and CLI logging configuration."""

import io
import logging

import pytest

import logging_config
from sequential_arbitrage.utils import get_logger


def test_get_logger_basic():
    """Test basic get_logger functionality."""
    logger = get_logger(__name__)
    assert isinstance(logger, logging.Logger)
    assert logger.name == __name__


def test_get_logger_with_level():
    """Test get_logger with custom level."""
    logger = get_logger(__name__ + ".test1", level=logging.DEBUG)
    assert logger.level == logging.DEBUG


def test_get_logger_with_extra():
    """Test get_logger with extra context."""
    logger = get_logger(__name__ + ".test2", extra={"account": "rTrader"})
    assert isinstance(logger, logging.LoggerAdapter)
    assert logger.extra == {"extra_account": "rTrader"}


def test_get_logger_structured_format():
    """Test that get_logger produces structured log format."""
    logger_name = __name__ + ".test3"
    logger = get_logger(logger_name, level=logging.INFO)

    captured_output = io.StringIO()
    original_stream = logger.handlers[0].stream
    logger.handlers[0].stream = captured_output
    try:
        logger.info("Test message")
    finally:
        logger.handlers[0].stream = original_stream

    log_output = captured_output.getvalue()
    assert "INFO" in log_output
    assert logger_name in log_output
    assert "Test message" in log_output
    assert "|" in log_output


def test_get_logger_minimal_format():
    logger = get_logger(__name__ + ".test4", minimal=True)
    format_str = logger.handlers[0].formatter._fmt
    assert format_str == "%(asctime)s | %(message)s"


def test_get_logger_no_duplicate_handlers():
    """Test that get_logger doesn't add duplicate handlers."""
    logger_name = __name__ + ".test5"
    logger1 = get_logger(logger_name)
    handler_count = len(logger1.handlers)
    logger2 = get_logger(logger_name)

    assert logger1 is logger2
    assert len(logger2.handlers) == handler_count == 1


@pytest.fixture
def isolated_root(monkeypatch):
    """Give logging_config a throwaway root handler list and level."""
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    package_logger = logging.getLogger("sequential_arbitrage")
    monkeypatch.setattr(package_logger, "level", package_logger.level)
    return root


def test_setup_installs_single_console_handler(isolated_root):
    logging_config.setup()
    logging_config.setup()

    assert len(isolated_root.handlers) == 1
    assert isolated_root.level == logging.INFO
    assert "%(levelname)" in isolated_root.handlers[0].formatter._fmt


def test_setup_variants_set_levels(isolated_root):
    logging_config.setup_debug()
    assert isolated_root.level == logging.DEBUG
    assert logging.getLogger("sequential_arbitrage").level == logging.DEBUG

    logging_config.setup_minimal()
    assert isolated_root.level == logging.WARNING
