import logging
import json
import uuid
from flask import request, has_request_context, g
from datetime import datetime, timezone
import sys

# Extras callers may attach via logger.info(..., extra={...})
_CONTEXT_FIELDS = ("calendar_id", "session_id", "template_id")


class JSONFormatter(logging.Formatter):
    """
    Formatter to output logs in JSON format.
    Includes request_id if available in Flask context, and the edit-session
    identifiers when a record carries them.
    """
    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "lineno": record.lineno,
        }

        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = str(value)

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        if has_request_context():
            log_record["method"] = request.method
            log_record["path"] = request.path
            log_record["remote_ip"] = request.remote_addr
            if hasattr(g, "request_id"):
                log_record["request_id"] = g.request_id

        return json.dumps(log_record)


def configure_logging(level=logging.INFO, stream=None):
    """
    JSON logs (stdout unless `stream` is given) for scripts and embedders running without Flask.
    Idempotent: replaces existing root handlers.
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
    return handler


def setup_logger(app):
    """
    Configures the application logger to use JSON formatting
    and output to stdout (for container logging).
    """
    app.logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    app.logger.addHandler(handler)
    app.logger.setLevel(logging.INFO)

    # Service modules log through their own loggers; route them to the same handler
    logging.getLogger("services").handlers = [handler]
    logging.getLogger("services").setLevel(logging.INFO)
    logging.getLogger('werkzeug').handlers = [handler]

    # Bind to Gunicorn's handlers when running under it
    gunicorn_logger = logging.getLogger('gunicorn.error')
    if gunicorn_logger.handlers:
        app.logger.handlers = gunicorn_logger.handlers
        app.logger.setLevel(gunicorn_logger.level)

    @app.before_request
    def add_request_id():
        g.request_id = request.headers.get("X-Request-Id", str(uuid.uuid4()))

    app.logger.info("Logger setup complete. JSON formatted logs enabled.")
