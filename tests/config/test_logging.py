"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from propbind.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pb = logging.getLogger("propbind")
    pb_level = pb.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pb.setLevel(pb_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("propbind").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("propbind").level == logging.WARNING

    def test_human_mode_output(self) -> None:
        configure_logging(verbose=True, log_json=False)
        log = structlog.get_logger("propbind.test")
        log.warning("hello world", key="val")

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("propbind.test")
        log.warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "propbind.test"
        assert "timestamp" in parsed

    def test_stdlib_module_loggers_are_structured(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("propbind.binding.binder").debug("Bound %s from %r", "port", "app.port")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Bound port from 'app.port'"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "propbind.binding.binder"

    def test_reconfiguring_replaces_handler(self) -> None:
        configure_logging()
        configure_logging(log_json=True)
        assert len(logging.getLogger().handlers) == 1

    def test_json_mode_renders_exceptions(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        try:
            raise KeyError("app.port")
        except KeyError:
            logging.getLogger("propbind.binding.store").exception("lookup failed")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "lookup failed"
        assert "KeyError" in parsed["exception"]
