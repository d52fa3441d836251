# review_console/utils/logging_config.py
"""
Application logging setup.

Handlers are attached to ``app.logger`` and to the ``review_console`` package
logger so module-level loggers share the same destinations.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

from flask import has_request_context, request

PACKAGE_LOGGER_NAME = "review_console"
_HANDLER_MARKER = "_review_console_handler"

# Attributes every LogRecord carries; anything else was passed through ``extra=``
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render log records as one JSON object per line"""

    def __init__(self, app_name="", app_version=""):
        super().__init__()
        self.app_name = app_name
        self.app_version = app_version

    def format(self, record):
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "app": self.app_name,
            "version": self.app_version,
        }
        if has_request_context():
            payload["request"] = {"method": request.method, "path": request.path}
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _build_formatter(app):
    if str(app.config.get("LOG_FORMAT", "text")).lower() == "json":
        return JsonFormatter(
            app_name=app.config.get("APP_NAME", ""),
            app_version=app.config.get("APP_VERSION", ""),
        )
    return logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")


def _remove_managed_handlers(logger):
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()


def setup_logging(app):
    """Configure file and console logging from app config. Safe to call repeatedly."""
    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    formatter = _build_formatter(app)

    handlers = []
    if app.config.get("ENABLE_FILE_LOGGING", False):
        log_dir = app.config.get("LOG_DIR", "logs")
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, app.config.get("LOG_FILE_NAME", "review_console.log")),
            maxBytes=app.config.get("LOG_FILE_MAX_BYTES", 10485760),
            backupCount=app.config.get("LOG_FILE_BACKUP_COUNT", 10),
            encoding="utf-8",
        )
        handlers.append(file_handler)

    if app.config.get("ENABLE_CONSOLE_LOGGING", False):
        handlers.append(logging.StreamHandler())

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for logger in (app.logger, package_logger):
        _remove_managed_handlers(logger)
        logger.setLevel(level)
        for handler in handlers:
            logger.addHandler(handler)
    package_logger.propagate = False

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        setattr(handler, _HANDLER_MARKER, True)

    app.logger.debug(
        "Logging configured",
        extra={"log_level": level_name, "log_handlers": [type(h).__name__ for h in handlers]},
    )
    return app.logger
