"""
Google OAuth 2.0 Client.

Thin async HTTP client for the authorization-code flow:
- build the consent-screen URL
- exchange an authorization code for tokens
- fetch the signed-in user's profile

Every HTTP failure surfaces as ``OAuthError`` whose ``code`` is the value
forwarded to the login page (``token_exchange`` or ``user_info``).
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from herit.core.errors import OAuthError
from herit.core.logging_config import get_logger

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
GOOGLE_SCOPES = "openid email profile"

logger = get_logger(__name__)


class GoogleTokens(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None


class GoogleUser(BaseModel):
    """Subset of the Google userinfo v2 payload."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    verified_email: bool = False
    name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    picture: Optional[str] = None


class GoogleOAuthClient:
    """
    Async client for Google's OAuth endpoints.

    Args:
        client_id: OAuth client id.
        client_secret: OAuth client secret.
        redirect_uri: Callback URL registered with Google.
        client: Optional shared ``httpx.AsyncClient``; one is created (and
            owned) when omitted.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        auth_url: str = GOOGLE_AUTH_URL,
        token_url: str = GOOGLE_TOKEN_URL,
        userinfo_url: str = GOOGLE_USERINFO_URL,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.auth_url = auth_url
        self.token_url = token_url
        self.userinfo_url = userinfo_url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": GOOGLE_SCOPES,
            "state": state,
            "prompt": "consent",
            "access_type": "offline",
        }
        return f"{self.auth_url}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> GoogleTokens:
        try:
            logger.debug("GoogleOAuthClient.exchange_code: POST %s", self.token_url)
            r = await self._client.post(
                self.token_url,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "grant_type": "authorization_code",
                    "redirect_uri": self.redirect_uri,
                },
                headers={"Accept": "application/json"},
            )
            r.raise_for_status()
            return GoogleTokens.model_validate(r.json())
        except httpx.HTTPStatusError as e:
            raise OAuthError(
                "token_exchange",
                f"Google token exchange failed: {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            raise OAuthError("token_exchange", f"Google token exchange failed: {e}") from e

    async def fetch_user_info(self, access_token: str) -> GoogleUser:
        try:
            logger.debug("GoogleOAuthClient.fetch_user_info: GET %s", self.userinfo_url)
            r = await self._client.get(self.userinfo_url, headers={"Authorization": f"Bearer {access_token}"})
            r.raise_for_status()
            return GoogleUser.model_validate(r.json())
        except httpx.HTTPStatusError as e:
            raise OAuthError(
                "user_info",
                f"Google userinfo request failed: {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            raise OAuthError("user_info", f"Google userinfo request failed: {e}") from e

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
