"""Unit tests for structured JSON logging."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from frog_finder.logging import LOGGER_NAME, JSONFormatter, get_logger, setup_logging


def make_record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="frog_finder.ranker",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Ranked %s",
        args=("target",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_core_fields(self) -> None:
        """Output carries timestamp, level, logger and message."""
        data = json.loads(JSONFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "frog_finder.ranker"
        assert data["message"] == "Ranked target"
        assert len(data["timestamp"]) == len("2025-01-15 10:30")
        assert "extra" not in data

    def test_extra_fields(self) -> None:
        """Fields passed through extra= are nested under extra."""
        data = json.loads(JSONFormatter().format(make_record(target="003_a", standards=3)))

        assert data["extra"] == {"target": "003_a", "standards": 3}

    def test_exception_included(self) -> None:
        """Exception tracebacks are rendered."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: boom" in data["exception"]


@pytest.mark.unit
class TestSetupLogging:
    """Tests for setup_logging and get_logger."""

    def test_configures_single_handler(self) -> None:
        """Repeated setup does not duplicate handlers."""
        setup_logging("info")
        logger = setup_logging("DEBUG")

        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.propagate is False

    def test_invalid_level(self) -> None:
        """Unknown levels are rejected."""
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logging("verbose")

    def test_component_logger_is_child(self) -> None:
        """Component loggers nest under the package logger."""
        package_logger = logging.getLogger(LOGGER_NAME)

        assert get_logger("batch").name == f"{LOGGER_NAME}.batch"
        assert get_logger("batch").parent is package_logger

    def test_writes_json_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Component log lines reach stderr as JSON, leaving stdout to the CLI."""
        setup_logging("INFO")

        get_logger("batch").info("Finished batch", extra={"rows": 6})

        captured = capsys.readouterr()
        assert captured.out == ""
        line = captured.err.strip().splitlines()[-1]
        data = json.loads(line)
        assert data["message"] == "Finished batch"
        assert data["extra"] == {"rows": 6}
