"""
Session Service.

Owns the cookie-based session lifecycle:
- registration and password login
- issuing an access/refresh token pair and storing the refresh token digest
- resolving the access-token cookie into the current user
- refresh token rotation with reuse detection
- revocation on logout
- linking or creating users signed in through Google
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple

from fastapi import Response
from sqlalchemy.ext.asyncio import AsyncSession

from herit.core.database.base import utc_now
from herit.core.database.entities.refresh_tokens import RefreshToken
from herit.core.database.entities.users import User
from herit.core.database.repositories import RefreshTokenRepository, UserRepository
from herit.core.errors import ConflictError, InvalidCredentialsError, TokenError
from herit.core.logging_config import get_logger
from herit.core.models.domain.enums import AuthProvider, OnboardingStatus, OnboardingStep
from herit.core.models.io.auth import RegisterRequest
from herit.core.monitoring import log_auth_event
from herit.server.core import constant

from .google_oauth import GoogleUser
from .tokens import TokenService, hash_password, hash_refresh_token, verify_password

logger = get_logger(__name__)


@dataclass(frozen=True)
class IssuedTokens:
    access_token: str
    refresh_token: str
    family: str


@dataclass(frozen=True)
class SessionResult:
    """Outcome of resolving the access-token cookie."""

    user: Optional[User] = None
    error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


def set_auth_cookies(response: Response, tokens: IssuedTokens, secure: bool) -> None:
    """Attach both session cookies (HTTP-only, SameSite=Lax, path /)."""
    response.set_cookie(
        constant.ACCESS_TOKEN_COOKIE,
        tokens.access_token,
        max_age=constant.ACCESS_TOKEN_TTL_SECONDS,
        httponly=True,
        secure=secure,
        samesite="lax",
        path="/",
    )
    response.set_cookie(
        constant.REFRESH_TOKEN_COOKIE,
        tokens.refresh_token,
        max_age=constant.REFRESH_TOKEN_TTL_SECONDS,
        httponly=True,
        secure=secure,
        samesite="lax",
        path="/",
    )


def clear_auth_cookies(response: Response, secure: bool) -> None:
    for name in (constant.ACCESS_TOKEN_COOKIE, constant.REFRESH_TOKEN_COOKIE):
        response.delete_cookie(name, path="/", httponly=True, secure=secure, samesite="lax")


class AuthService:
    """
    Session and account operations bound to one database session.

    Args:
        session: Request-scoped async database session.
        tokens: JWT signer/verifier.
    """

    def __init__(self, session: AsyncSession, tokens: TokenService) -> None:
        self.users = UserRepository(session)
        self.refresh_tokens = RefreshTokenRepository(session)
        self.tokens = tokens

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def register(self, data: RegisterRequest) -> User:
        """
        Create an email/password account.

        Raises:
            ConflictError: The email is already registered.
        """
        if await self.users.get_by_email(data.email):
            raise ConflictError("An account with this email already exists")

        user = User(
            email=data.email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            auth_provider=AuthProvider.email.value,
            onboarding_status=OnboardingStatus.not_started.value,
            onboarding_current_step=OnboardingStep.personal_info.value,
        )
        user = await self.users.create(user)
        logger.info(f"Registered user {user.id}")
        log_auth_event("register", user_id=user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """
        Verify an email/password pair.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password. The two
                cases are indistinguishable to the caller.
        """
        user = await self.users.get_by_email(email)
        if not verify_password(password, user.password_hash if user else None) or user is None:
            log_auth_event("login", success=False)
            raise InvalidCredentialsError()
        log_auth_event("login", user_id=user.id)
        return user

    async def link_google_user(self, profile: GoogleUser) -> Tuple[User, bool]:
        """
        Find or create the account for a Google profile.

        Existing accounts are switched to the Google provider; profile photo
        and names are only filled in where the account has none.

        Returns:
            The user and whether it was newly created.
        """
        user = await self.users.get_by_email(profile.email)
        if user is not None:
            user.auth_provider = AuthProvider.google.value
            user.auth_provider_id = profile.id
            user.profile_photo_url = user.profile_photo_url or profile.picture
            user.first_name = user.first_name or profile.given_name
            user.last_name = user.last_name or profile.family_name
            user = await self.users.update(user)
            log_auth_event("oauth_login", user_id=user.id, provider="google")
            return user, False

        user = User(
            email=profile.email.lower(),
            first_name=profile.given_name,
            last_name=profile.family_name,
            profile_photo_url=profile.picture,
            auth_provider=AuthProvider.google.value,
            auth_provider_id=profile.id,
            onboarding_status=OnboardingStatus.not_started.value,
            onboarding_current_step=OnboardingStep.personal_info.value,
        )
        user = await self.users.create(user)
        logger.info(f"Created user {user.id} from Google profile")
        log_auth_event("oauth_register", user_id=user.id, provider="google")
        return user, True

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def issue_session(self, user: User, family: Optional[str] = None) -> IssuedTokens:
        """
        Mint an access/refresh pair and persist the refresh token digest.

        Args:
            user: The signed-in user.
            family: Rotation family to continue; a new family is started when omitted.
        """
        access_token = self.tokens.create_access_token(user.id, user.email, user.session_version)
        refresh_token, claims = self.tokens.create_refresh_token(user.id, family)
        await self.refresh_tokens.create(
            RefreshToken(
                user_id=user.id,
                token_hash=hash_refresh_token(refresh_token),
                family=claims.family,
                expires_at=utc_now() + timedelta(seconds=self.tokens.refresh_ttl),
            )
        )
        return IssuedTokens(access_token=access_token, refresh_token=refresh_token, family=claims.family)

    async def resolve_session(self, access_token: Optional[str]) -> SessionResult:
        """
        Resolve an access token into its user.

        Never raises for bad input; the reason is reported in ``error`` as one
        of ``token_missing``, ``token_invalid``, ``token_expired`` or
        ``user_not_found``.
        """
        if not access_token:
            return SessionResult(error="token_missing")
        try:
            claims = self.tokens.verify_access_token(access_token)
        except TokenError as e:
            logger.debug(f"Access token rejected: {e}")
            return SessionResult(error=e.code)

        user = await self.users.get_by_id(claims.user_id)
        if user is None:
            return SessionResult(error="user_not_found")
        if user.session_version != claims.session_version:
            return SessionResult(error="token_invalid")
        return SessionResult(user=user)

    async def rotate_refresh_token(self, refresh_token: Optional[str]) -> Optional[Tuple[User, IssuedTokens]]:
        """
        Exchange a refresh token for a new pair in the same family.

        A token that was already rotated or revoked is treated as stolen: the
        whole family is revoked and None is returned.

        Returns:
            The user and the new tokens, or None if the token cannot be used.
        """
        if not refresh_token:
            return None
        try:
            claims = self.tokens.verify_refresh_token(refresh_token)
        except TokenError as e:
            logger.debug(f"Refresh token rejected: {e}")
            return None

        stored = await self.refresh_tokens.get_by_hash(hash_refresh_token(refresh_token), family=claims.family)
        if stored is None or stored.user_id != claims.user_id:
            return None
        if stored.revoked:
            revoked = await self.refresh_tokens.revoke_family(stored.family)
            logger.warning(f"Refresh token reuse detected for user {stored.user_id}; revoked {revoked} tokens")
            log_auth_event("refresh_reuse", user_id=stored.user_id, success=False)
            return None
        if stored.is_expired():
            return None

        user = await self.users.get_by_id(claims.user_id)
        if user is None:
            return None

        await self.refresh_tokens.revoke(stored)
        tokens = await self.issue_session(user, family=stored.family)
        log_auth_event("refresh", user_id=user.id)
        return user, tokens

    async def revoke_refresh_family(self, refresh_token: Optional[str]) -> int:
        """
        Revoke the rotation family a refresh token belongs to.

        Logout falls back to this when the access token no longer resolves.
        Missing, forged or unknown tokens revoke nothing.

        Returns:
            Number of refresh tokens revoked.
        """
        if not refresh_token:
            return 0
        try:
            claims = self.tokens.verify_refresh_token(refresh_token)
        except TokenError as e:
            logger.debug(f"Refresh token rejected on logout: {e}")
            return 0

        stored = await self.refresh_tokens.get_by_hash(hash_refresh_token(refresh_token), family=claims.family)
        if stored is None or stored.user_id != claims.user_id:
            return 0
        revoked = await self.refresh_tokens.revoke_family(stored.family)
        log_auth_event("logout", user_id=stored.user_id)
        return revoked

    async def revoke_user_sessions(self, user: User) -> int:
        """
        Sign a user out everywhere.

        Revokes every refresh token and bumps ``session_version`` so access
        tokens already handed out stop resolving.

        Returns:
            Number of refresh tokens revoked.
        """
        revoked = await self.refresh_tokens.revoke_all_for_user(user.id)
        user.session_version += 1
        await self.users.update(user)
        log_auth_event("logout", user_id=user.id)
        return revoked
