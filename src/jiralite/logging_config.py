"""Structured logging configuration for jiralite.

- JSON structured logging with StructuredFormatter
- Logger hierarchy under the jiralite namespace
- Level/format from arguments, falling back to JIRA_LOG_LEVEL / JIRA_LOG_FORMAT

The library never calls configure_logging() itself; applications opt in.
"""

import json
import logging
from datetime import datetime, timezone

from .config import get_config

LOGGER_NAMESPACE = "jiralite"

# Keys redacted from structured output
SENSITIVE_KEYS = {
    "password", "token", "secret", "apikey", "api_key",
    "authorization", "credential", "auth", "bearer",
}

_STANDARD_FIELDS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter.

    Outputs one JSON object per record with:
    - timestamp: UTC ISO 8601 format with 'Z' suffix
    - level: Log level name (INFO, ERROR, etc.)
    - logger: Logger name (jiralite hierarchy)
    - message: Log message
    - context: Extras dict merged from LogRecord attributes

    Sensitive keys (password, token, authorization, ...) are redacted.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = {
            k: ("[REDACTED]" if k.lower() in SENSITIVE_KEYS else v)
            for k, v in record.__dict__.items()
            if k not in _STANDARD_FIELDS and not k.startswith("_")
        }

        if extras:
            log_data["context"] = extras

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for local debugging."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def configure_logging(
    level: str | None = None, log_format: str | None = None
) -> logging.Logger:
    """Configure the jiralite logger hierarchy.

    Args:
        level: Log level override. Defaults to JiraSettings.log_level
               (JIRA_LOG_LEVEL, default INFO).
        log_format: "json" or "text". Defaults to JiraSettings.log_format
                    (JIRA_LOG_FORMAT, default json).

    Returns:
        The configured ``jiralite`` logger.
    """
    if level is None or log_format is None:
        settings = get_config()
        level = level or settings.log_level
        log_format = log_format or settings.log_format

    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = TextFormatter() if log_format.lower() == "text" else StructuredFormatter()

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(log_level)

    # Idempotent: reuse the handler from an earlier call
    if not logger.handlers:
        handler = logging.StreamHandler()
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setFormatter(formatter)

    logger.propagate = False
    return logger
