"""Tests for structured logging configuration."""

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from healthrisk.config import LoggingConfig
from healthrisk.observability import configure_logging


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()


def test_json_logging(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(LoggingConfig(level="INFO", format="json"))
    log = structlog.get_logger("healthrisk.test")

    log.debug("hidden_event")
    log.info("assessment_cached", user_id="u1", score=0.3)

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["event"] == "assessment_cached"
    assert record["user_id"] == "u1"
    assert record["level"] == "info"
    assert record["logger"] == "healthrisk.test"
    assert "timestamp" in record


def test_console_logging(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging(LoggingConfig(level="DEBUG", format="console"))

    structlog.get_logger("healthrisk.test").debug("trend_checked", patterns=2)

    output = capsys.readouterr().out
    assert "trend_checked" in output
    assert "patterns" in output
