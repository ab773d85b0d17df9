"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

from app.core.logging import JsonFormatter, SensitiveDataFilter, hash_identifier


def _capture(name: str) -> tuple[logging.Logger, StringIO]:
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger, stream


def test_redacts_credentials():
    logger, stream = _capture("test_credentials")

    logger.info(
        "users.created",
        extra={
            "password": "hunter22",
            "password_confirm": "hunter22",
            "token": "eyJhbGciOi.payload.sig",
            "x-api-key": "test-api-key-123",
            "user_id": "abc123",
        },
    )

    output = stream.getvalue()
    assert "hunter22" not in output
    assert "eyJhbGciOi" not in output
    assert "test-api-key-123" not in output
    assert json.loads(output)["user_id"] == "abc123"


def test_redacts_nested_request_bodies():
    logger, stream = _capture("test_nested")

    logger.info(
        "request.body",
        extra={
            "body": {"email": "ana@shop.io", "password_old": "old-secret", "password_new": "new-secret"},
            "headers": [{"Authorization": "Bearer abc"}],
        },
    )

    record = json.loads(stream.getvalue())
    assert record["body"]["password_old"] == "[REDACTED]"
    assert record["body"]["password_new"] == "[REDACTED]"
    assert record["headers"][0]["Authorization"] == "[REDACTED]"


def test_safe_fields_pass_through():
    logger, stream = _capture("test_safe")

    logger.info(
        "request.completed",
        extra={"route": "/api/products", "status": 200, "duration_ms": 3.2},
    )

    output = stream.getvalue()
    assert "/api/products" in output
    assert "[REDACTED]" not in output


def test_hash_identifier_is_stable_and_opaque():
    digest = hash_identifier("ana@shop.io")

    assert digest == hash_identifier("ana@shop.io")
    assert digest != hash_identifier("bob@shop.io")
    assert len(digest) == 16
    assert "ana" not in digest
