"""Tests for structured JSON logging."""

import json
import logging

from utils.logging import REDACTED, JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("auth", logging.INFO, __file__, 1, "User %s", ("registered",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_as_json_with_extra_fields():
    data = json.loads(JSONFormatter().format(_record(userId="u1")))

    assert data["message"] == "User registered"
    assert data["level"] == "INFO"
    assert data["logger"] == "auth"
    assert data["userId"] == "u1"
    assert data["timestamp"].endswith("Z")


def test_sensitive_extra_fields_are_redacted():
    data = json.loads(JSONFormatter().format(_record(password="pw123456", refreshToken="abc")))

    assert data["password"] == REDACTED
    assert data["refreshToken"] == REDACTED


def test_non_serializable_values_fall_back_to_str():
    data = json.loads(JSONFormatter().format(_record(when=object())))

    assert data["when"].startswith("<object")
