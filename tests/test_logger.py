"""Tests for loguru configuration."""

import io
import logging

import pytest
from loguru import logger

from neogm.config import LoggerSettings
from neogm.logger import InterceptHandler, configure_logging


@pytest.fixture
def sink():
    stream = io.StringIO()
    yield stream
    logger.remove()
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if isinstance(handler, InterceptHandler):
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)


@pytest.mark.unit
class TestConfigureLogging:
    def test_routes_stdlib_records(self, sink):
        configure_logging(LoggerSettings(log_level="DEBUG", format={"message": "{message}"}), sink=sink)

        logging.getLogger("neogm.test").debug("hello %s", "graph")

        assert "hello graph" in sink.getvalue()

    def test_respects_level(self, sink):
        configure_logging(LoggerSettings(log_level="WARNING", format={"message": "{message}"}), sink=sink)

        logging.getLogger("neogm.test").info("quiet")
        logging.getLogger("neogm.test").warning("loud")

        assert "quiet" not in sink.getvalue()
        assert "loud" in sink.getvalue()

    def test_installs_intercept_handler(self, sink):
        configure_logging(LoggerSettings(), sink=sink)

        assert any(isinstance(h, InterceptHandler) for h in logging.getLogger().handlers)
