"""
Service Dependencies.

FastAPI dependency providers and ``Annotated`` aliases used by the API
routers: the database session, the session/token services, the current user
and the per-request domain services.
"""

from typing import Annotated, AsyncGenerator, Optional

from fastapi import Cookie, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from herit.core.database import get_session
from herit.core.database.entities.users import User
from herit.core.errors import AuthenticationRequiredError
from herit.server.core import constant
from herit.server.core.config import settings

from .assets import AssetService
from .audit import AuditLogger
from .auth import AuthService, SessionResult
from .beneficiaries import BeneficiaryService
from .google_oauth import GoogleOAuthClient
from .onboarding import OnboardingService
from .rules import RuleService
from .tokens import TokenService

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_token_service() -> TokenService:
    auth = settings.auth
    return TokenService(auth.session_secret, auth.refresh_signing_secret)


TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]


def get_auth_service(session: SessionDep, tokens: TokenServiceDep) -> AuthService:
    return AuthService(session, tokens)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


async def get_session_result(
    auth: AuthServiceDep,
    access_token: Annotated[Optional[str], Cookie(alias=constant.ACCESS_TOKEN_COOKIE)] = None,
) -> SessionResult:
    """Resolve the access-token cookie without failing the request."""
    return await auth.resolve_session(access_token)


SessionResultDep = Annotated[SessionResult, Depends(get_session_result)]


async def require_user(result: SessionResultDep) -> User:
    """
    Current signed-in user.

    Raises:
        AuthenticationRequiredError: No valid session cookie.
    """
    if result.user is None:
        raise AuthenticationRequiredError()
    return result.user


CurrentUserDep = Annotated[User, Depends(require_user)]


async def get_google_client() -> AsyncGenerator[Optional[GoogleOAuthClient], None]:
    """Google OAuth client, or None when no client id/secret is configured."""
    google = settings.google
    if not google.is_configured:
        yield None
        return
    client = GoogleOAuthClient(google.client_id, google.client_secret, google.redirect_uri)
    try:
        yield client
    finally:
        await client.aclose()


GoogleClientDep = Annotated[Optional[GoogleOAuthClient], Depends(get_google_client)]


def get_onboarding_service(session: SessionDep) -> OnboardingService:
    return OnboardingService(session)


def get_asset_service(session: SessionDep) -> AssetService:
    return AssetService(session)


def get_beneficiary_service(session: SessionDep) -> BeneficiaryService:
    return BeneficiaryService(session)


def get_rule_service(session: SessionDep) -> RuleService:
    return RuleService(session)


def get_audit_logger(session: SessionDep) -> AuditLogger:
    return AuditLogger(session)


OnboardingServiceDep = Annotated[OnboardingService, Depends(get_onboarding_service)]
AssetServiceDep = Annotated[AssetService, Depends(get_asset_service)]
BeneficiaryServiceDep = Annotated[BeneficiaryService, Depends(get_beneficiary_service)]
RuleServiceDep = Annotated[RuleService, Depends(get_rule_service)]
AuditLoggerDep = Annotated[AuditLogger, Depends(get_audit_logger)]
