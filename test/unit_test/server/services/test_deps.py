"""Unit tests for server services dependencies."""

from unittest.mock import patch

import pytest

from herit.core.database.entities.users import User
from herit.core.errors import AuthenticationRequiredError
from herit.server.core.config import Settings
from herit.server.services.auth import SessionResult
from herit.server.services.deps import (
    AuthServiceDep,
    CurrentUserDep,
    get_auth_service,
    get_google_client,
    get_token_service,
    require_user,
)
from herit.server.services.google_oauth import GoogleOAuthClient


class TestAnnotatedDeps:
    def test_auth_service_dep_uses_get_auth_service(self):
        assert AuthServiceDep.__metadata__[0].dependency == get_auth_service

    def test_current_user_dep_uses_require_user(self):
        assert CurrentUserDep.__metadata__[0].dependency == require_user


class TestRequireUser:
    async def test_returns_user(self):
        user = User(email="aoife@example.ie")

        assert await require_user(SessionResult(user=user)) is user

    async def test_raises_without_user(self):
        with pytest.raises(AuthenticationRequiredError) as exc_info:
            await require_user(SessionResult(error="token_missing"))

        assert exc_info.value.status_code == 401


def test_get_token_service_uses_settings():
    service = get_token_service()

    token = service.create_access_token("user_1", "a@example.ie")
    assert service.verify_access_token(token).user_id == "user_1"


class TestGetGoogleClient:
    async def test_unconfigured_yields_none(self):
        with patch("herit.server.services.deps.settings", Settings(GOOGLE_CLIENT_ID=None)):
            generator = get_google_client()
            assert await generator.__anext__() is None
            with pytest.raises(StopAsyncIteration):
                await generator.__anext__()

    async def test_configured_client_is_closed(self):
        configured = Settings(
            GOOGLE_CLIENT_ID="client-id",
            GOOGLE_CLIENT_SECRET="client-secret",
            GOOGLE_REDIRECT_URI="http://localhost:8000/api/auth/google/callback",
        )
        with patch("herit.server.services.deps.settings", configured):
            generator = get_google_client()
            client = await generator.__anext__()

            assert isinstance(client, GoogleOAuthClient)
            assert client.client_id == "client-id"

            with pytest.raises(StopAsyncIteration):
                await generator.__anext__()
            assert client._client.is_closed is True
