"""Structured JSON logging configuration."""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from shared.config import Settings, get_settings

REDACTED = "[REDACTED]"

# Extra attributes copied from log records into the JSON payload
EXTRA_FIELDS = (
    "request_path",
    "method",
    "event_type",
    "payment_intent_id",
    "customer_id",
)


class JSONFormatter(logging.Formatter):
    """
    Custom JSON formatter for structured logging.

    Outputs logs as JSON with consistent fields:
    - timestamp (ISO 8601)
    - level (INFO, ERROR, etc.)
    - logger (module name)
    - message
    - request_path / method (if available in extra)
    - event_type (webhook events, if available in extra)
    - payment_intent_id / customer_id (if available in extra)
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON string.

        Args:
            record: Python log record

        Returns:
            JSON-formatted log string
        """
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def redact(data: dict[str, Any], allowed_fields: frozenset[str] | set[str]) -> dict[str, Any]:
    """
    Return a copy of ``data`` safe to write to shared logs.

    Keys are matched case-insensitively against ``allowed_fields``; every other
    value is replaced by a placeholder so that emails, names, tokens and
    secrets never reach the log stream.
    """
    allowed = {name.lower() for name in allowed_fields}
    return {
        key: value if str(key).lower() in allowed else REDACTED
        for key, value in data.items()
    }


def configure_logging(settings: Settings | None = None) -> None:
    """
    Configure application logging with JSON formatter.

    Reads LOG_LEVEL from settings (default: INFO).
    Outputs to stderr (captured by Docker logs).
    """
    settings = settings or get_settings()

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(console_handler)

    root_logger.info(
        f"Logging configured: level={settings.LOG_LEVEL}, format=JSON"
    )
