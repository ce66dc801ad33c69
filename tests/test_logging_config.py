import json
import logging
import os

import pytest
import structlog

from common.config import Settings
from common.logging_config import configure_logging


@pytest.fixture
def root_logger():
    logger = logging.getLogger()
    original_handlers = list(logger.handlers)
    original_level = logger.level
    logger.handlers[:] = []
    yield logger
    logger.handlers[:] = original_handlers
    logger.setLevel(original_level)
    structlog.reset_defaults()


def _settings(mocker, log_format: str, log_level: str = "info") -> Settings:
    mocker.patch.dict(
        os.environ,
        {
            "OPENAI_API_KEY": "test_api_key",
            "LOG_FORMAT": log_format,
            "LOG_LEVEL": log_level,
        },
        clear=True,
    )
    return Settings()


def _json_lines(text: str) -> list[dict]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def test_configure_logging_twice_keeps_a_single_handler(mocker, root_logger):
    settings = _settings(mocker, "console", "debug")

    configure_logging(settings)
    first_handler = root_logger.handlers[0]
    configure_logging(settings)

    assert len(root_logger.handlers) == 1
    assert root_logger.handlers[0] is not first_handler
    assert root_logger.getEffectiveLevel() == logging.DEBUG
    assert logging.getLogger("temporalio").level == logging.WARNING


def test_stdlib_records_render_as_json(mocker, root_logger, capsys):
    configure_logging(_settings(mocker, "json"))

    logging.getLogger("temporalio.worker.sample").warning("worker %s ready", "w-1")

    [entry] = _json_lines(capsys.readouterr().out)
    assert entry["event"] == "worker w-1 ready"
    assert entry["level"] == "warning"
    assert entry["logger"] == "temporalio.worker.sample"
    assert "timestamp" in entry
    assert "_record" not in entry


def test_structlog_events_keep_their_fields_in_json(mocker, root_logger, capsys):
    configure_logging(_settings(mocker, "json"))

    structlog.get_logger("classifier").info("Classification result", verdict="OFFENSIVE")

    [entry] = _json_lines(capsys.readouterr().out)
    assert entry["event"] == "Classification result"
    assert entry["verdict"] == "OFFENSIVE"
    assert entry["level"] == "info"


def test_exceptions_render_as_structured_tracebacks(mocker, root_logger, capsys):
    configure_logging(_settings(mocker, "json"))

    try:
        raise RuntimeError("provider unreachable")
    except RuntimeError:
        logging.getLogger("classifier.service").exception("Classification failed")

    [entry] = _json_lines(capsys.readouterr().out)
    assert entry["event"] == "Classification failed"
    assert entry["level"] == "error"
    [trace] = entry["exception"]
    assert trace["exc_type"] == "RuntimeError"
    assert trace["exc_value"] == "provider unreachable"
