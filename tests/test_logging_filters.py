"""Tests for sensitive data filtering and JSON log formatting."""

from __future__ import annotations

import json
import logging
from io import StringIO

from products_api.core.logging import (
    JsonFormatter,
    Redactor,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    set_request_id,
)


def _capture(name: str) -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_redacts_product_payloads():
    logger, stream = _capture("test_payload_redaction")

    logger.info(
        "product_event",
        extra={"fields": {"card": "4111-1111"}, "product_id": 7},
    )

    output = json.loads(stream.getvalue())
    assert output["fields"] == "[REDACTED]"
    assert output["product_id"] == 7
    assert "4111-1111" not in stream.getvalue()


def test_redacts_nested_secrets():
    logger, stream = _capture("test_nested")

    logger.info(
        "nested_event",
        extra={
            "headers": {"authorization": "Bearer abc", "user-agent": "pytest"},
        },
    )

    output = stream.getvalue()
    assert "Bearer abc" not in output
    assert "[REDACTED]" in output
    assert "pytest" in output


def test_allows_safe_fields():
    logger, stream = _capture("test_safe_fields")

    logger.info(
        "safe_event",
        extra={"route": "/products", "status": 200, "duration_ms": 1.5},
    )

    output = json.loads(stream.getvalue())
    assert output["message"] == "safe_event"
    assert output["level"] == "info"
    assert output["route"] == "/products"
    assert "[REDACTED]" not in stream.getvalue()


def test_request_id_from_context():
    logger, stream = _capture("test_request_id")

    set_request_id("req-ctx-42")
    try:
        logger.info("with_context")
    finally:
        clear_request_id()

    assert json.loads(stream.getvalue())["request_id"] == "req-ctx-42"


def test_redactor_is_case_insensitive_and_keeps_sequence_types():
    redact = Redactor({"Token"})

    result = redact({"TOKEN": "t-1", "items": ({"token": "t-2", "n": 1},)})

    assert result == {"TOKEN": "[REDACTED]", "items": ({"token": "[REDACTED]", "n": 1},)}
