"""Tests for global exception handlers.

Every error leaves the API in the same envelope,
``{"error": {code, message, request_id, details?}}``, with the status
code chosen by error class.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from app.core.errors import (
    AppError,
    AuthenticationAppError,
    ConflictAppError,
    LoginThrottledAppError,
    NotFoundAppError,
    PersistenceAppError,
    UnprocessableEntityAppError,
    ValidationAppError,
)
from app.core.exception_handlers import (
    general_exception_handler,
    setup_exception_handlers,
    status_for_error,
)


class _Payload(BaseModel):
    quantity: int


@pytest.fixture
def app_with_handlers() -> FastAPI:
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def handler_client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers, raise_server_exceptions=False)


class TestStatusMapping:
    @pytest.mark.parametrize(
        ("error_type", "expected"),
        [
            (ValidationAppError, 400),
            (AuthenticationAppError, 403),
            (LoginThrottledAppError, 403),
            (ConflictAppError, 409),
            (UnprocessableEntityAppError, 422),
            (NotFoundAppError, 422),
            (PersistenceAppError, 500),
            (AppError, 400),
        ],
    )
    def test_status_for_error(self, error_type, expected) -> None:
        assert status_for_error(error_type(code="x", message="x")) == expected


class TestAppErrorHandler:
    def test_envelope_and_details(self, handler_client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/conflict")
        async def conflict():
            raise ConflictAppError(
                code="email_already_taken",
                message="Email is already registered",
                details={"field": "email"},
            )

        response = handler_client.get("/conflict")

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "email_already_taken"
        assert error["message"] == "Email is already registered"
        assert error["details"] == {"field": "email"}
        assert "request_id" in error

    def test_details_omitted_when_empty(self, handler_client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/not-found")
        async def not_found():
            raise NotFoundAppError(code="product_not_found", message="Unknown product")

        response = handler_client.get("/not-found")

        assert response.status_code == 422
        assert "details" not in response.json()["error"]

    def test_throttled_sets_retry_after(self, handler_client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/throttled")
        async def throttled():
            raise LoginThrottledAppError(
                code="too_many_failed_login_attempts",
                message="Too many failed login attempts.",
                details={"retry_after": 42},
            )

        response = handler_client.get("/throttled")

        assert response.status_code == 403
        assert response.headers["Retry-After"] == "42"

    def test_other_errors_have_no_retry_after(self, handler_client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/auth")
        async def auth():
            raise AuthenticationAppError(code="invalid_credentials", message="Wrong email or password")

        response = handler_client.get("/auth")

        assert response.status_code == 403
        assert "Retry-After" not in response.headers


class TestRequestValidationHandler:
    def test_body_errors_return_400(self, handler_client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.post("/items")
        async def create_item(body: _Payload):
            return body

        response = handler_client.post("/items", json={"quantity": "many"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "validation_error"
        assert error["details"]["errors"][0]["loc"] == ["body", "quantity"]


class TestGeneralExceptionHandler:
    def test_unexpected_error_is_generic_500(self, handler_client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/boom")
        async def boom():
            raise RuntimeError("connection string: mongodb://admin:pw@db")

        response = handler_client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "internal_server_error"
        assert "mongodb" not in response.text

    def test_handler_never_leaks_exception_text(self) -> None:
        request = AsyncMock()
        request.url.path = "/anything"
        request.method = "GET"

        response = asyncio.run(general_exception_handler(request, ValueError("secret detail")))

        body = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert "secret detail" not in body["error"]["message"]
        assert "ValueError" not in bytes(response.body).decode()

    def test_handlers_registered(self, app_with_handlers: FastAPI) -> None:
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers


class TestPersistenceErrors:
    def test_store_errors_render_as_generic_500(self, handler_client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/store")
        async def store():
            raise PersistenceAppError(
                code="duplicate_key",
                message="Duplicate value for unique field 'email'",
                details={"collection": "users", "field": "email"},
            )

        response = handler_client.get("/store")

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "internal_server_error"
        assert "details" not in error
        assert "users" not in response.text
