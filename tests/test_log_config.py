import sys
from io import StringIO

import pytest
from loguru import logger

from redweave.log_config import configure_logging, disable_logging
from redweave.models import DEFAULT_KINDS, ModelRegistry


def test_configure_logging_default_level_and_sink():
    """Test configure_logging with default INFO level and stderr sink."""
    logger.remove()
    configure_logging()

    assert len(logger._core.handlers) == 1
    handler_id = list(logger._core.handlers.keys())[-1]
    handler = logger._core.handlers[handler_id]
    assert handler._levelno == logger.level("INFO").no


@pytest.mark.parametrize("level", ["DEBUG", "warning"])
def test_configure_logging_custom_level(level):
    logger.remove()
    configure_logging(level=level)
    handler_id = list(logger._core.handlers.keys())[-1]
    handler = logger._core.handlers[handler_id]
    assert handler._levelno == logger.level(level.upper()).no


def test_configure_logging_removes_existing_handlers():
    """Test that configure_logging removes pre-existing handlers."""
    logger.remove()
    logger.add(lambda _: None, level="ERROR")
    assert len(logger._core.handlers) == 1

    configure_logging(level="INFO")

    assert len(logger._core.handlers) == 1


def test_configure_logging_enables_library_records():
    """Test that redweave's own records reach the sink once configured."""
    stream = StringIO()
    configure_logging(level="DEBUG", sink=stream)

    ModelRegistry(DEFAULT_KINDS)

    assert "ModelRegistry built with" in stream.getvalue()


def test_disable_logging_silences_library_records():
    stream = StringIO()
    configure_logging(level="DEBUG", sink=stream)
    disable_logging()
    before = stream.getvalue()

    ModelRegistry(DEFAULT_KINDS)

    assert stream.getvalue() == before


def test_configure_logging_serialize():
    stream = StringIO()
    configure_logging(level="INFO", sink=stream, serialize=True)
    assert stream.getvalue().lstrip().startswith("{")


@pytest.fixture(autouse=True)
def reset_logger_after_test():
    """Restore Loguru and keep redweave silent after each test in this module."""
    yield
    logger.remove()
    logger.disable("redweave")
    logger.add(sys.stderr, level="INFO")
