"""Tests for logger setup."""

import json

import pytest
from loguru import logger

from strength_coach.config.settings import settings
from strength_coach.core.logger import setup_logger


@pytest.fixture(autouse=True)
def _restore_sinks():
    yield
    setup_logger(level=settings.log_level, log_file=settings.log_file, json_logs=settings.log_json)


def test_file_sink_receives_structured_records(tmp_path):
    log_file = tmp_path / "logs" / "engine.log"
    setup_logger(level="INFO", log_file=str(log_file))

    logger.info("workout_generated", template_id="abc123")
    logger.debug("hidden detail")
    logger.complete()

    content = log_file.read_text()
    assert "workout_generated" in content
    assert "abc123" in content
    assert "hidden detail" not in content


def test_json_console_sink(capsys):
    setup_logger(level="INFO", json_logs=True)

    logger.warning("INSUFFICIENT_CATALOG: slots left under-filled", shortfalls={"core": 1})

    lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
    record = json.loads(lines[-1])["record"]
    assert record["level"]["name"] == "WARNING"
    assert record["extra"]["shortfalls"] == {"core": 1}
