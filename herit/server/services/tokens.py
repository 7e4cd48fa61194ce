"""
Token and Password Primitives.

Stateless helpers for the session layer:
- bcrypt password hashing and verification
- HS256 JWT access tokens (24 hours) and refresh tokens (30 days)
- SHA-256 digests used to store refresh tokens and signatures
"""

from __future__ import annotations

import hashlib
import time
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

import bcrypt
import jwt

from herit.core.errors import TokenExpiredError, TokenInvalidError
from herit.core.logging_config import get_logger
from herit.core.models.domain.validators import MAX_PASSWORD_BYTES
from herit.server.core import constant

logger = get_logger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# Compared against when the user does not exist so both paths cost one bcrypt check
_DUMMY_HASH = bcrypt.hashpw(b"herit-dummy-password", bcrypt.gensalt()).decode("utf-8")


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """
    Check a password against a stored bcrypt hash.

    A missing or malformed hash, or a password over bcrypt's 72-byte limit,
    never raises; it simply fails verification after spending the same
    bcrypt work as a real check.
    """
    candidate = password.encode("utf-8")
    if len(candidate) > MAX_PASSWORD_BYTES:
        # Registration rejects such passwords, so no stored hash can match
        bcrypt.checkpw(candidate[:MAX_PASSWORD_BYTES], _DUMMY_HASH.encode("utf-8"))
        return False
    if not password_hash:
        bcrypt.checkpw(candidate, _DUMMY_HASH.encode("utf-8"))
        return False
    try:
        return bcrypt.checkpw(candidate, password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def hash_refresh_token(token: str) -> str:
    """Digest stored in place of the refresh token itself."""
    return sha256_hex(token)


@dataclass(frozen=True)
class AccessClaims:
    user_id: str
    email: str
    session_version: int


@dataclass(frozen=True)
class RefreshClaims:
    user_id: str
    family: str
    jti: str


class TokenService:
    """
    Signs and verifies the two JWTs that make up a session.

    Args:
        session_secret: Secret for access tokens.
        refresh_secret: Secret for refresh tokens.
        access_ttl: Access token lifetime in seconds.
        refresh_ttl: Refresh token lifetime in seconds.
    """

    def __init__(
        self,
        session_secret: str,
        refresh_secret: str,
        access_ttl: int = constant.ACCESS_TOKEN_TTL_SECONDS,
        refresh_ttl: int = constant.REFRESH_TOKEN_TTL_SECONDS,
    ) -> None:
        self._session_secret = session_secret
        self._refresh_secret = refresh_secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    def create_access_token(self, user_id: str, email: str, session_version: int = 1) -> str:
        now = int(time.time())
        payload = {
            "user_id": user_id,
            "email": email,
            "session_version": session_version,
            "type": ACCESS_TOKEN_TYPE,
            "iat": now,
            "exp": now + self.access_ttl,
        }
        return jwt.encode(payload, self._session_secret, algorithm=ALGORITHM)

    def create_refresh_token(self, user_id: str, family: Optional[str] = None) -> tuple[str, RefreshClaims]:
        """
        Mint a refresh token.

        Args:
            user_id: Owner of the token.
            family: Rotation family; a new one is started when omitted.

        Returns:
            The encoded token and its claims.
        """
        now = int(time.time())
        claims = RefreshClaims(user_id=user_id, family=family or str(uuid.uuid4()), jti=str(uuid.uuid4()))
        payload = {
            "user_id": claims.user_id,
            "family": claims.family,
            "jti": claims.jti,
            "type": REFRESH_TOKEN_TYPE,
            "iat": now,
            "exp": now + self.refresh_ttl,
        }
        return jwt.encode(payload, self._refresh_secret, algorithm=ALGORITHM), claims

    def verify_access_token(self, token: str) -> AccessClaims:
        """
        Decode an access token.

        Raises:
            TokenExpiredError: The token is past its ``exp``.
            TokenInvalidError: Bad signature, malformed token or wrong token type.
        """
        payload = self._decode(token, self._session_secret, ACCESS_TOKEN_TYPE)
        return AccessClaims(
            user_id=str(payload["user_id"]),
            email=str(payload["email"]),
            session_version=int(payload.get("session_version", 1)),
        )

    def verify_refresh_token(self, token: str) -> RefreshClaims:
        """
        Decode a refresh token.

        Raises:
            TokenExpiredError: The token is past its ``exp``.
            TokenInvalidError: Bad signature, malformed token or wrong token type.
        """
        payload = self._decode(token, self._refresh_secret, REFRESH_TOKEN_TYPE)
        return RefreshClaims(user_id=str(payload["user_id"]), family=str(payload["family"]), jti=str(payload["jti"]))

    @staticmethod
    def _decode(token: str, secret: str, expected_type: str) -> Dict[str, Any]:
        if token.count(".") != 2:
            raise TokenInvalidError("Token is not a JWT")
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat", "type", "user_id"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(str(e)) from e
        if payload.get("type") != expected_type:
            raise TokenInvalidError(f"Expected a {expected_type} token")
        return payload
