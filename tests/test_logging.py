"""Tests for structured logging setup."""

import json
import logging

import pytest
import structlog

from edutrust.utils.logging import get_logger, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_second_setup_call_takes_effect(restore_logging, capsys):
    logger = get_logger("edutrust.tests")

    setup_logging("INFO", json_output=False)
    logger.info("first_event")
    setup_logging("INFO", json_output=True)
    logger.info("second_event", count=2)

    lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
    assert "first_event" in lines[0]
    record = json.loads(lines[-1])
    assert record["event"] == "second_event"
    assert record["count"] == 2
    assert record["level"] == "info"


def test_level_filters_events(restore_logging, capsys):
    logger = get_logger("edutrust.tests")
    setup_logging("WARNING", json_output=True)
    logger.info("quiet_event")
    logger.warning("loud_event")

    err = capsys.readouterr().err
    assert "quiet_event" not in err
    assert "loud_event" in err
