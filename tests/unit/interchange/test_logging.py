"""
Unit tests for logging utilities.
"""

import io
import json
import logging

import pytest

from interchange.core.logging import (
    HumanReadableFormatter,
    StructuredFormatter,
    configure_logging,
)


def _record(message="Saved state", **extra):
    record = logging.LogRecord("interchange.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def package_logger():
    logger = logging.getLogger("interchange")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


class TestFormatters:
    """Tests for the log formatters."""

    def test_structured_includes_context(self):
        line = StructuredFormatter().format(_record(location="gs://b/state.json"))
        entry = json.loads(line)

        assert entry["message"] == "Saved state"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "interchange.test"
        assert entry["location"] == "gs://b/state.json"
        assert "timestamp" in entry

    def test_structured_without_timestamp(self):
        entry = json.loads(StructuredFormatter(include_timestamp=False).format(_record()))

        assert "timestamp" not in entry

    def test_human_readable_context_suffix(self):
        line = HumanReadableFormatter(include_timestamp=False).format(
            _record(stream="users", operation="tap")
        )

        assert line == "[INFO] interchange.test - Saved state [stream=users operation=tap]"

    def test_human_readable_no_context(self):
        line = HumanReadableFormatter(include_timestamp=False).format(_record())

        assert line == "[INFO] interchange.test - Saved state"


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_writes_to_given_stream(self, package_logger):
        stream = io.StringIO()
        configure_logging(level=logging.DEBUG, structured=True, stream=stream)

        logging.getLogger("interchange.storage").debug("hello", extra={"scheme": "gs"})

        entry = json.loads(stream.getvalue())
        assert entry["message"] == "hello"
        assert entry["scheme"] == "gs"

    def test_repeated_calls_do_not_duplicate(self, package_logger):
        stream = io.StringIO()
        configure_logging(stream=stream)
        configure_logging(stream=stream)

        logging.getLogger("interchange.x").info("once")

        assert stream.getvalue().count("once") == 1
        assert len(package_logger.handlers) == 1
