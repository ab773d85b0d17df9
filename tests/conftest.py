"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
Environment variables are set before any app import so settings resolve
without a .env file.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("APP_API_KEY_REQUIRED", "true")
os.environ.setdefault("APP_API_KEYS", "test-api-key-123,test-api-key-456")
os.environ.setdefault("STORAGE_BACKEND", "memory")

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app.adapters.persistence.factory import UNIQUE_FIELDS
from app.adapters.persistence.in_memory import InMemoryDocumentGateway
from app.adapters.throttle.in_memory import InMemoryLoginThrottle
from app.api.dependencies import get_document_gateway
from app.core.throttle import get_login_throttle
from app.main import app


@pytest.fixture
def gateway() -> InMemoryDocumentGateway:
    """Fresh in-memory document store with production unique indexes."""
    return InMemoryDocumentGateway(unique_fields=UNIQUE_FIELDS)


@pytest.fixture
def clock() -> Mock:
    """Controllable time source (UNIX seconds)."""
    return Mock(return_value=1_000_000.0)


@pytest.fixture
def throttle(clock: Mock) -> InMemoryLoginThrottle:
    return InMemoryLoginThrottle(max_failures=5, lockout_seconds=30 * 60, clock=clock)


@pytest.fixture
def client(gateway: InMemoryDocumentGateway, throttle: InMemoryLoginThrottle):
    """Test client whose gateway and throttle are isolated per test."""
    app.dependency_overrides[get_document_gateway] = lambda: gateway
    app.dependency_overrides[get_login_throttle] = lambda: throttle
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def valid_api_key_headers() -> dict[str, str]:
    """Create valid API key headers for authenticated requests."""
    return {"X-API-Key": "test-api-key-123"}
