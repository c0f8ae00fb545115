"""
Structured JSON logging configuration (Monolog-style).

Every log line is one JSON object on stdout with a channel (http, db,
lifecycle, search, audit, auth), the current request ID, the acting
administrator when one is authenticated, and any business context the
caller attaches (student_id, action, ...).
"""

import logging
import json
import os
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

# ──────────────────────────────────────────────────────────────
# Per-request context. The request ID is set by the HTTP middleware,
# the actor by the admin credential dependency.
# ──────────────────────────────────────────────────────────────
request_id_var: ContextVar[str] = ContextVar("request_id", default="")
actor_var: ContextVar[str] = ContextVar("actor", default="")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CHANNELS = ("http", "db", "lifecycle", "search", "audit", "auth")


class StructuredJsonFormatter(logging.Formatter):
    """
    Formats a record as a single JSON line.

    Keys: timestamp (ISO 8601, UTC, millisecond precision), level, message,
    channel, context (request_id, actor, business ids) and extra (metrics
    such as duration_ms or counts).
    """

    def format(self, record: logging.LogRecord) -> str:
        context = {"request_id": request_id_var.get("")}
        actor = actor_var.get("")
        if actor:
            context["actor"] = actor
        context.update(getattr(record, "context", {}) or {})

        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": getattr(record, "channel", record.name.split(".")[-1] if "." in record.name else "app"),
            "context": context,
            "extra": getattr(record, "extra_data", {}) or {}
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging():
    """
    Configure the root logger with the JSON formatter on stdout and set the
    level of every channel logger from LOG_LEVEL.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    level = getattr(logging, LOG_LEVEL, logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for channel in CHANNELS:
        logging.getLogger(f"enrollment.{channel}").setLevel(level)

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    """Return the logger for a channel (http, db, lifecycle, search, audit, auth)."""
    return logging.getLogger(f"enrollment.{channel}")


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None):
    """
    Emit a structured log entry with business context and extra metadata.

    Args:
        logger: The channel logger to use
        level: Log level string (INFO, WARNING, ERROR, DEBUG)
        message: Human-readable log message
        context: Business context dict (student_id, action, ...)
        extra_data: Additional metadata dict (duration_ms, counts, ...)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(
        log_level,
        message,
        extra={"context": context or {}, "extra_data": extra_data or {}, "channel": logger.name.split(".")[-1]}
    )


def generate_request_id() -> str:
    """Generate a new UUID for request tracking."""
    return str(uuid.uuid4())
