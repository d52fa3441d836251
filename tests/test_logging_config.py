import json
import logging

import pytest

from review_console.utils.logging_config import PACKAGE_LOGGER_NAME, JsonFormatter, setup_logging


@pytest.fixture
def restore_logging(app):
    yield app
    app.config.update(
        {"ENABLE_FILE_LOGGING": False, "ENABLE_CONSOLE_LOGGING": False, "LOG_FORMAT": "text", "LOG_LEVEL": "WARNING"}
    )
    setup_logging(app)


def _record(msg="hello %s", args=("world",)):
    return logging.LogRecord("review_console.tests", logging.INFO, __file__, 1, msg, args, None)


def test_json_formatter_includes_extras():
    record = _record()
    record.import_id = "dump.sql"

    payload = json.loads(JsonFormatter(app_name="CockroachDB Importer", app_version="1.0").format(record))

    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["app"] == "CockroachDB Importer"
    assert payload["import_id"] == "dump.sql"
    assert "request" not in payload


def test_json_formatter_adds_request_context(app):
    with app.test_request_context("/import/dump.sql", method="POST"):
        payload = json.loads(JsonFormatter().format(_record()))

    assert payload["request"] == {"method": "POST", "path": "/import/dump.sql"}


def test_file_logging_writes_json(restore_logging, tmp_path):
    app = restore_logging
    app.config.update(
        {
            "ENABLE_FILE_LOGGING": True,
            "LOG_DIR": str(tmp_path),
            "LOG_FILE_NAME": "console.log",
            "LOG_FORMAT": "json",
            "LOG_LEVEL": "INFO",
        }
    )
    setup_logging(app)

    logging.getLogger(f"{PACKAGE_LOGGER_NAME}.tests").info("draft loaded", extra={"import_id": "dump.sql"})
    for handler in logging.getLogger(PACKAGE_LOGGER_NAME).handlers:
        handler.flush()

    lines = (tmp_path / "console.log").read_text(encoding="utf-8").splitlines()
    entry = json.loads(lines[-1])
    assert entry["message"] == "draft loaded"
    assert entry["import_id"] == "dump.sql"


def test_setup_logging_is_idempotent(restore_logging):
    app = restore_logging
    app.config.update({"ENABLE_CONSOLE_LOGGING": True})

    setup_logging(app)
    setup_logging(app)

    managed = [h for h in app.logger.handlers if getattr(h, "_review_console_handler", False)]
    assert len(managed) == 1
