"""Unit tests for structured logging configuration."""

import json
import logging

from jiralite.logging_config import StructuredFormatter, TextFormatter, configure_logging


def make_record(msg="jira_request", **extra):
    record = logging.LogRecord(
        name="jiralite.client",
        level=logging.INFO,
        pathname="client.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_produces_required_fields(self):
        log_data = json.loads(StructuredFormatter().format(make_record()))

        assert log_data["level"] == "INFO"
        assert log_data["logger"] == "jiralite.client"
        assert log_data["message"] == "jira_request"
        assert log_data["timestamp"].endswith("Z")
        assert "context" not in log_data

    def test_extras_in_context(self):
        record = make_record(method="GET", path="issue/JIRA-1", status_code=200)

        log_data = json.loads(StructuredFormatter().format(record))

        assert log_data["context"] == {
            "method": "GET",
            "path": "issue/JIRA-1",
            "status_code": 200,
        }

    def test_sensitive_keys_redacted(self):
        record = make_record(password="s3cret", authorization="Basic Zm9vOmJhcg==")

        output = StructuredFormatter().format(record)

        assert "s3cret" not in output
        assert "Zm9vOmJhcg==" not in output
        assert json.loads(output)["context"]["password"] == "[REDACTED]"


class TestConfigureLogging:
    def test_explicit_level_and_format(self):
        logger = configure_logging(level="debug", log_format="text")

        assert logger.name == "jiralite"
        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert isinstance(logger.handlers[0].formatter, TextFormatter)

    def test_idempotent(self):
        configure_logging(level="INFO", log_format="json")
        logger = configure_logging(level="WARNING", log_format="json")

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)

    def test_falls_back_to_settings(self, clean_settings, monkeypatch):
        monkeypatch.setenv("JIRA_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("JIRA_LOG_FORMAT", "text")

        logger = configure_logging()

        assert logger.level == logging.ERROR
        assert isinstance(logger.handlers[0].formatter, TextFormatter)

    def test_child_loggers_inherit(self):
        configure_logging(level="ERROR", log_format="json")

        assert not logging.getLogger("jiralite.client").isEnabledFor(logging.INFO)
