"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from wargo.config.logging import configure_logging


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("wargo").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_default_is_info(self) -> None:
        configure_logging()
        assert logging.getLogger("wargo").level == logging.INFO

    def test_quiet_is_warning(self) -> None:
        configure_logging(quiet=True)
        assert logging.getLogger("wargo").level == logging.WARNING

    def test_verbose_beats_quiet(self) -> None:
        configure_logging(verbose=True, quiet=True)
        assert logging.getLogger("wargo").level == logging.DEBUG

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        log = structlog.get_logger("wargo.test")
        log.info("step.start", step="compile")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "step.start"
        assert parsed["step"] == "compile"
        assert parsed["level"] == "info"
        assert parsed["logger"] == "wargo.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("wargo.infrastructure.process").debug("Running cargo build")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Running cargo build"
        assert parsed["level"] == "debug"

    def test_debug_hidden_by_default(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        logging.getLogger("wargo.services.build").debug("noise")
        assert capfd.readouterr().err == ""

    def test_third_party_info_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("urllib3").info("connection pool noise")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1
