from __future__ import annotations

import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path

from flask import Flask, g, has_request_context, request

LOG_FORMAT = "%(asctime)s [%(levelname)s] [req=%(request_id)s] %(name)s: %(message)s"
LOG_FILE_NAME = "ctx_operations.log"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class RequestIdFilter(logging.Filter):
    """Stamp every record with the id of the request that produced it."""

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = getattr(g, "request_id", None) if has_request_context() else None
        record.request_id = request_id or "-"
        return True


def assign_request_id() -> None:
    incoming = (request.headers.get("X-Request-ID") or "").strip()
    g.request_id = incoming[:64] or uuid.uuid4().hex[:12]


def echo_request_id(response):
    request_id = getattr(g, "request_id", None)
    if request_id:
        response.headers.setdefault("X-Request-ID", request_id)
    return response


def _attach(root: logging.Logger, handler: logging.Handler, request_filter: RequestIdFilter) -> None:
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(request_filter)
    root.addHandler(handler)


def _file_handler_present(root: logging.Logger, path: Path) -> bool:
    return any(
        isinstance(handler, RotatingFileHandler) and handler.baseFilename == str(path)
        for handler in root.handlers
    )


def configure_logging(app: Flask) -> Path | None:
    """Send application logs to stdout and, outside tests, to a rotating file.

    Safe to call once per app instance; handlers already installed on the
    root logger by an earlier app (or by the test runner) are reused.
    """

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    request_filter = RequestIdFilter()

    if not any(isinstance(handler, logging.StreamHandler) for handler in root.handlers):
        _attach(root, logging.StreamHandler(sys.stdout), request_filter)

    log_path = None
    if app.config.get("LOG_DIR") and not app.testing:
        log_path = Path(app.config["LOG_DIR"]) / LOG_FILE_NAME
        log_path.parent.mkdir(parents=True, exist_ok=True)
        if not _file_handler_present(root, log_path):
            _attach(
                root,
                RotatingFileHandler(
                    log_path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
                ),
                request_filter,
            )

    for handler in app.logger.handlers:
        handler.addFilter(request_filter)
    app.logger.setLevel(logging.INFO)
    for name in ("werkzeug", "gunicorn.error", "ctxops"):
        logging.getLogger(name).setLevel(logging.INFO)

    app.before_request(assign_request_id)
    app.after_request(echo_request_id)
    return log_path
