"""
Tests for structured logging configuration.
"""

import io
import json
import logging

import pytest
import structlog

from slicecam.core.logging import ROOT_LOGGER, configure_logging, get_logger


@pytest.fixture
def restore_logging():
    """Detach engine handlers and structlog config after each test."""
    engine_logger = logging.getLogger(ROOT_LOGGER)
    handlers = list(engine_logger.handlers)
    level, propagate = engine_logger.level, engine_logger.propagate
    yield
    engine_logger.handlers = handlers
    engine_logger.setLevel(level)
    engine_logger.propagate = propagate
    structlog.reset_defaults()


@pytest.mark.usefixtures("restore_logging")
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_structlog_event(self):
        """Test structlog events render as JSON lines with level and logger."""
        buffer = io.StringIO()
        configure_logging(level="DEBUG", json_output=True, stream=buffer)

        get_logger("slicecam.tests").info("levels_computed", levels=3)

        record = json.loads(buffer.getvalue().strip().splitlines()[-1])
        assert record["event"] == "levels_computed"
        assert record["levels"] == 3
        assert record["level"] == "info"
        assert record["logger"] == "slicecam.tests"
        assert "timestamp" in record

    def test_json_stdlib_record(self):
        """Test %-style stdlib records get the same JSON keys."""
        buffer = io.StringIO()
        configure_logging(level="DEBUG", json_output=True, stream=buffer)

        logging.getLogger("slicecam.tests.stdlib").warning("Skipped %d levels", 2)

        record = json.loads(buffer.getvalue().strip().splitlines()[-1])
        assert record["event"] == "Skipped 2 levels"
        assert record["level"] == "warning"
        assert record["logger"] == "slicecam.tests.stdlib"

    def test_console_output(self):
        buffer = io.StringIO()
        configure_logging(level="INFO", stream=buffer)

        get_logger("slicecam.tests").info("component_unified", merged=2)
        logging.getLogger("slicecam.tests.stdlib").info("Generated %s toolpath", "cube")

        output = buffer.getvalue()
        assert "component_unified" in output
        assert "merged=2" in output
        assert "Generated cube toolpath" in output
        assert "\x1b[" not in output

    def test_level_filters(self):
        """Test records below the configured level are dropped."""
        buffer = io.StringIO()
        configure_logging(level="WARNING", json_output=True, stream=buffer)

        get_logger("slicecam.tests").info("hidden")
        logging.getLogger("slicecam.tests.stdlib").debug("hidden too")

        assert buffer.getvalue() == ""

    def test_reconfigure_replaces_handler(self):
        first, second = io.StringIO(), io.StringIO()
        configure_logging(json_output=True, stream=first)
        configure_logging(json_output=True, stream=second)

        logging.getLogger("slicecam.tests").warning("once")

        assert first.getvalue() == ""
        assert json.loads(second.getvalue())["event"] == "once"
        installed = [h for h in logging.getLogger(ROOT_LOGGER).handlers if getattr(h, "_slicecam", False)]
        assert len(installed) == 1

    def test_engine_logs_rendered(self, settings, cube_data):
        """Test module loggers inside the engine reach the handler."""
        from slicecam import generate_toolpath

        buffer = io.StringIO()
        configure_logging(level="DEBUG", json_output=True, stream=buffer)
        generate_toolpath(cube_data, settings)

        events = [json.loads(line)["event"] for line in buffer.getvalue().splitlines()]
        assert "generating_toolpath" in events
        assert any(e.startswith("Generated cube toolpath") for e in events)
