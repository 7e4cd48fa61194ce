"""Unit tests for the Google OAuth client using httpx.MockTransport."""

import json
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from herit.core.errors import OAuthError
from herit.server.services.google_oauth import GoogleOAuthClient, GoogleUser

TOKEN_URL = "http://mock/token"
USERINFO_URL = "http://mock/userinfo"

PROFILE = {
    "id": "google-123",
    "email": "aoife@example.ie",
    "verified_email": True,
    "name": "Aoife Byrne",
    "given_name": "Aoife",
    "family_name": "Byrne",
    "picture": "https://example.ie/aoife.png",
    "locale": "en-IE",
}


def _client(handler) -> GoogleOAuthClient:
    return GoogleOAuthClient(
        "client-id",
        "client-secret",
        "http://localhost:8000/api/auth/google/callback",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        token_url=TOKEN_URL,
        userinfo_url=USERINFO_URL,
    )


class TestAuthorizationUrl:
    def test_contains_flow_parameters(self):
        client = GoogleOAuthClient("client-id", "client-secret", "http://localhost:8000/callback")

        url = urlparse(client.authorization_url("state-abc"))
        params = {key: values[0] for key, values in parse_qs(url.query).items()}

        assert f"{url.scheme}://{url.netloc}{url.path}" == "https://accounts.google.com/o/oauth2/auth"
        assert params == {
            "client_id": "client-id",
            "redirect_uri": "http://localhost:8000/callback",
            "response_type": "code",
            "scope": "openid email profile",
            "state": "state-abc",
            "prompt": "consent",
            "access_type": "offline",
        }


class TestExchangeCode:
    async def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"access_token": "ya29.token", "expires_in": 3599, "scope": "openid"})

        tokens = await _client(handler).exchange_code("auth-code")

        assert tokens.access_token == "ya29.token"
        assert tokens.token_type == "Bearer"
        assert seen["method"] == "POST"
        assert seen["form"]["code"] == ["auth-code"]
        assert seen["form"]["grant_type"] == ["authorization_code"]
        assert seen["form"]["client_secret"] == ["client-secret"]

    async def test_http_error(self):
        client = _client(lambda request: httpx.Response(400, json={"error": "invalid_grant"}))

        with pytest.raises(OAuthError) as exc_info:
            await client.exchange_code("bad-code")

        assert exc_info.value.code == "token_exchange"
        assert exc_info.value.status_code == 400

    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(OAuthError) as exc_info:
            await _client(handler).exchange_code("auth-code")

        assert exc_info.value.code == "token_exchange"
        assert exc_info.value.status_code == 502

    async def test_malformed_payload(self):
        client = _client(lambda request: httpx.Response(200, json={"token_type": "Bearer"}))

        with pytest.raises(OAuthError) as exc_info:
            await client.exchange_code("auth-code")

        assert exc_info.value.code == "token_exchange"

    async def test_non_json_payload(self):
        client = _client(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

        with pytest.raises(OAuthError):
            await client.exchange_code("auth-code")


class TestFetchUserInfo:
    async def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["authorization"] = request.headers["Authorization"]
            return httpx.Response(200, content=json.dumps(PROFILE).encode())

        user = await _client(handler).fetch_user_info("ya29.token")

        assert isinstance(user, GoogleUser)
        assert user.email == "aoife@example.ie"
        assert user.given_name == "Aoife"
        assert seen["authorization"] == "Bearer ya29.token"

    async def test_unauthorized(self):
        client = _client(lambda request: httpx.Response(401, json={"error": "invalid_token"}))

        with pytest.raises(OAuthError) as exc_info:
            await client.fetch_user_info("expired")

        assert exc_info.value.code == "user_info"
        assert exc_info.value.status_code == 401


class TestLifecycle:
    async def test_shared_client_is_not_closed(self):
        shared = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        client = GoogleOAuthClient("id", "secret", "http://localhost/cb", client=shared)

        await client.aclose()

        assert shared.is_closed is False
        await shared.aclose()

    async def test_owned_client_is_closed(self):
        client = GoogleOAuthClient("id", "secret", "http://localhost/cb")

        await client.aclose()

        assert client._client.is_closed is True
