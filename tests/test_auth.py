"""Unit tests for API key authentication of resource routes."""

from unittest.mock import patch

import pytest
from fastapi import status

from app.core.auth import parse_api_keys, validate_api_key, verify_api_key
from app.core.errors import AuthenticationAppError


class TestParseAPIKeys:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("only-key", {"only-key"}),
            ("k1,k2,k3", {"k1", "k2", "k3"}),
            (" k1 ,  k2 ", {"k1", "k2"}),
            ("k1,k2,k1", {"k1", "k2"}),
            (None, set()),
            ("", set()),
            (" , ,", set()),
        ],
    )
    def test_parse(self, raw, expected) -> None:
        assert parse_api_keys(raw) == expected


class TestValidateAPIKey:
    @patch("app.core.auth.settings")
    def test_disabled_auth_accepts_anything(self, mock_settings) -> None:
        mock_settings.app.api_key_required = False

        validate_api_key("whatever")
        validate_api_key(None)

    @pytest.mark.parametrize("configured", [None, "", " , "])
    @patch("app.core.auth.settings")
    def test_required_without_configured_keys(self, mock_settings, configured) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = configured

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_api_key("some-key")

        assert exc_info.value.code == "api_keys_not_configured"
        assert exc_info.value.details["hint"].startswith("Set APP_API_KEYS")

    @patch("app.core.auth.settings")
    def test_accepts_each_configured_key(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = " key-a , key-b "

        validate_api_key("key-a")
        validate_api_key("key-b")

    @pytest.mark.parametrize("provided", [None, ""])
    @patch("app.core.auth.settings")
    def test_missing_key(self, mock_settings, provided) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "key-a"

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_api_key(provided)

        assert exc_info.value.code == "missing_api_key"

    @pytest.mark.parametrize("provided", ["key-c", " key-a "])
    @patch("app.core.auth.settings")
    def test_unknown_key(self, mock_settings, provided) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "key-a,key-b"

        with pytest.raises(AuthenticationAppError) as exc_info:
            validate_api_key(provided)

        assert exc_info.value.code == "invalid_api_key"


class TestVerifyAPIKeyDependency:
    @pytest.mark.asyncio
    @patch("app.core.auth.settings")
    async def test_valid_key_passes(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "key-a"

        await verify_api_key(x_api_key="key-a")

    @pytest.mark.asyncio
    @patch("app.core.auth.settings")
    async def test_invalid_key_raises_app_error(self, mock_settings) -> None:
        mock_settings.app.api_key_required = True
        mock_settings.app.api_keys = "key-a"

        with pytest.raises(AuthenticationAppError):
            await verify_api_key(x_api_key="key-z")


class TestRouteProtection:
    def test_users_require_key(self, client) -> None:
        response = client.get("/api/users")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"]["code"] == "missing_api_key"

    def test_second_configured_key_works(self, client) -> None:
        response = client.get("/api/users", headers={"X-API-Key": "test-api-key-456"})
        assert response.status_code == status.HTTP_200_OK

    def test_public_routes_need_no_key(self, client) -> None:
        assert client.get("/health").status_code == status.HTTP_200_OK
        login = client.post(
            "/api/authentication/login", json={"email": "ghost@shop.io", "password": "secret123"}
        )
        assert login.json()["error"]["code"] == "invalid_credentials"
