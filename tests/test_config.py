"""Tests for configure_logging() and get_default_handler()."""

import logging

import pytest

import cloudlog.config as config
from cloudlog import CloudHandler, CloudLoggingHandler, HandlerOptions, StreamSink, configure_logging, get_default_handler


@pytest.fixture
def scratch_logger():
    logger = logging.getLogger("cloudlog_tests.config")
    logger.propagate = False
    original = logger.handlers[:]
    level = logger.level
    yield logger
    logger.handlers[:] = original
    logger.setLevel(level)


class TestConfigureLogging:
    def test_installs_bridge_and_returns_handler(self, output, scratch_logger):
        scratch_logger.addHandler(logging.NullHandler())

        handler = configure_logging(output.sink, project_id="p", add_source=True, logger=scratch_logger)

        assert isinstance(handler, CloudHandler)
        assert handler.options == HandlerOptions(add_source=True, project_id="p")
        (bridge,) = scratch_logger.handlers
        assert isinstance(bridge, CloudLoggingHandler)
        assert bridge.cloud_handler is handler

    def test_sets_level(self, output, scratch_logger):
        configure_logging(output.sink, level=logging.WARNING, logger=scratch_logger)

        scratch_logger.info("dropped")
        scratch_logger.warning("kept")

        assert scratch_logger.level == logging.WARNING
        assert [e["msg"] for e in output.entries()] == ["kept"]

    def test_defaults_to_stdout(self, scratch_logger, capsys):
        handler = configure_logging(logger=scratch_logger)
        scratch_logger.info("hello")

        assert isinstance(handler.sink, StreamSink)
        assert '"msg": "hello"' in capsys.readouterr().out


class TestGetDefaultHandler:
    def test_singleton(self, monkeypatch):
        monkeypatch.setattr(config, "_default_handler", None)

        first = get_default_handler()
        second = get_default_handler()

        assert first is second
        assert isinstance(first.sink, StreamSink)
        assert first.options == HandlerOptions()
