"""
Authentication Endpoints.

Email/password registration and login, session inspection, refresh token
rotation, logout, and the Google OAuth 2.0 authorization-code flow. Sessions
are carried in two HTTP-only cookies; no token is ever returned in a body.
"""

import secrets
from typing import Annotated, Optional

from fastapi import APIRouter, Cookie, Depends, Request, Response, status
from fastapi.responses import RedirectResponse

from herit.core.errors import AuthenticationRequiredError, OAuthError
from herit.core.logging_config import get_logger
from herit.core.models.io.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    SessionResponse,
    SuccessResponse,
    UserSummary,
)
from herit.server.core import constant
from herit.server.core.config import settings
from herit.server.services.auth import clear_auth_cookies, set_auth_cookies
from herit.server.services.deps import (
    AuditLoggerDep,
    AuthServiceDep,
    GoogleClientDep,
    SessionResultDep,
)
from herit.server.services.rate_limit import login_rate_limit, register_rate_limit

logger = get_logger(__name__)

router = APIRouter()


def _login_redirect(error: str) -> RedirectResponse:
    response = RedirectResponse(f"{settings.app_base_url}/login?error={error}", status_code=status.HTTP_302_FOUND)
    response.delete_cookie(constant.OAUTH_STATE_COOKIE, path="/")
    return response


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an email/password account and sign it in. Limited to 3 attempts per hour per client.",
    response_description="The new user and session cookies.",
    responses={
        201: {"description": "Account created and signed in"},
        400: {"description": "Invalid registration data"},
        409: {"description": "Email already registered"},
        429: {"description": "Too many registration attempts"},
    },
    dependencies=[Depends(register_rate_limit)],
)
async def register(
    data: RegisterRequest,
    request: Request,
    response: Response,
    auth: AuthServiceDep,
    audit: AuditLoggerDep,
) -> AuthResponse:
    """
    Register a new account.

    - **email**: Login email, case-insensitive.
    - **password**: At least 8 characters.
    - **first_name** / **last_name**: Display name.
    """
    user = await auth.register(data)
    tokens = await auth.issue_session(user)
    set_auth_cookies(response, tokens, settings.auth.secure_cookies)
    await audit.log_event("register", user_email=user.email, entity_type="user", entity_id=user.id, request=request)
    return AuthResponse(user=UserSummary.model_validate(user))


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login",
    description="Sign in with email and password. Limited to 5 attempts per minute per client.",
    response_description="The signed-in user and session cookies.",
    responses={
        200: {"description": "Signed in"},
        400: {"description": "Email or password missing"},
        401: {"description": "Invalid email or password"},
        429: {"description": "Too many login attempts"},
    },
    dependencies=[Depends(login_rate_limit)],
)
async def login(
    data: LoginRequest,
    request: Request,
    response: Response,
    auth: AuthServiceDep,
    audit: AuditLoggerDep,
) -> AuthResponse:
    """
    Sign in with email and password.

    - **email**: Account email.
    - **password**: Account password.
    """
    user = await auth.authenticate(data.email, data.password)
    tokens = await auth.issue_session(user)
    set_auth_cookies(response, tokens, settings.auth.secure_cookies)
    await audit.log_event("login", user_email=user.email, entity_type="user", entity_id=user.id, request=request)
    return AuthResponse(user=UserSummary.model_validate(user))


@router.post(
    "/logout",
    response_model=SuccessResponse,
    summary="Logout",
    description="Clear the session cookies and revoke every refresh token of the signed-in user.",
    response_description="Success flag.",
)
async def logout(
    request: Request,
    response: Response,
    auth: AuthServiceDep,
    session_result: SessionResultDep,
    audit: AuditLoggerDep,
    refresh_token: Annotated[Optional[str], Cookie(alias=constant.REFRESH_TOKEN_COOKIE)] = None,
) -> SuccessResponse:
    """
    Sign out. Succeeds even without a valid session.

    When the access cookie no longer resolves, the refresh cookie's rotation
    family is revoked instead.
    """
    user = session_result.user
    if user is not None:
        await auth.revoke_user_sessions(user)
        await audit.log_event("logout", user_email=user.email, entity_type="user", entity_id=user.id, request=request)
    else:
        await auth.revoke_refresh_family(refresh_token)
    clear_auth_cookies(response, settings.auth.secure_cookies)
    return SuccessResponse(message="Logged out")


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Get Session",
    description="Resolve the access-token cookie into the current user.",
    response_description="The current user, or null with the reason the session is invalid.",
)
async def get_session_info(session_result: SessionResultDep) -> SessionResponse:
    """
    Inspect the current session.

    Never fails: an invalid session is reported through ``error``
    (``token_missing``, ``token_invalid``, ``token_expired`` or ``user_not_found``).
    """
    if session_result.user is None:
        return SessionResponse(error=session_result.error)
    return SessionResponse(user=UserSummary.model_validate(session_result.user), is_authenticated=True)


@router.post(
    "/refresh",
    response_model=AuthResponse,
    summary="Refresh Session",
    description="Rotate the refresh-token cookie into a new access/refresh pair.",
    response_description="The user and fresh session cookies.",
    responses={401: {"description": "Refresh token missing, invalid, expired or reused"}},
)
async def refresh(
    response: Response,
    auth: AuthServiceDep,
    refresh_token: Annotated[Optional[str], Cookie(alias=constant.REFRESH_TOKEN_COOKIE)] = None,
) -> AuthResponse:
    """Rotate tokens. A reused refresh token revokes its whole rotation family."""
    rotated = await auth.rotate_refresh_token(refresh_token)
    if rotated is None:
        raise AuthenticationRequiredError("Invalid refresh token")
    user, tokens = rotated
    set_auth_cookies(response, tokens, settings.auth.secure_cookies)
    return AuthResponse(user=UserSummary.model_validate(user))


@router.get(
    "/google",
    summary="Start Google Sign-In",
    description="Redirect to Google's consent screen. Existing session cookies are cleared first.",
    response_description="Redirect to Google.",
    responses={
        302: {"description": "Redirect to Google"},
        500: {"description": "Google OAuth is not configured"},
    },
)
async def google_login(google: GoogleClientDep) -> RedirectResponse:
    """Start the Google OAuth flow with a fresh ``state`` stored in a short-lived cookie."""
    if google is None:
        raise OAuthError("oauth_config", "Google OAuth is not configured", status_code=500)

    state = secrets.token_urlsafe(32)
    response = RedirectResponse(google.authorization_url(state), status_code=status.HTTP_302_FOUND)
    clear_auth_cookies(response, settings.auth.secure_cookies)
    response.set_cookie(
        constant.OAUTH_STATE_COOKIE,
        state,
        max_age=constant.OAUTH_STATE_TTL_SECONDS,
        httponly=True,
        secure=settings.auth.secure_cookies,
        samesite="lax",
        path="/",
    )
    return response


@router.get(
    "/google/callback",
    summary="Google Sign-In Callback",
    description=(
        "Complete the Google OAuth flow. Failures redirect to the login page with "
        "`?error=<code>`; success redirects to onboarding or the dashboard."
    ),
    response_description="Redirect into the web app.",
    responses={302: {"description": "Redirect into the web app"}},
)
async def google_callback(
    request: Request,
    auth: AuthServiceDep,
    audit: AuditLoggerDep,
    google: GoogleClientDep,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    oauth_state: Annotated[Optional[str], Cookie(alias=constant.OAUTH_STATE_COOKIE)] = None,
) -> RedirectResponse:
    """
    Handle Google's redirect.

    - **code**: Authorization code.
    - **state**: Must match the ``oauth_state`` cookie.
    - **error**: Set by Google when the user denied access.
    """
    if error:
        logger.warning(f"Google OAuth returned an error: {error}")
        return _login_redirect("oauth_error")
    if not code:
        return _login_redirect("missing_code")
    if not state or not oauth_state or not secrets.compare_digest(state, oauth_state):
        logger.warning("Google OAuth state mismatch")
        return _login_redirect("invalid_state")
    if google is None:
        return _login_redirect("oauth_config")

    try:
        google_tokens = await google.exchange_code(code)
        profile = await google.fetch_user_info(google_tokens.access_token)
        user, created = await auth.link_google_user(profile)
        tokens = await auth.issue_session(user)
    except OAuthError as e:
        logger.warning(f"Google OAuth failed: {e.code}: {e.message}")
        return _login_redirect(e.code)
    except Exception as e:
        logger.error(f"Google OAuth callback failed: {e}", exc_info=True)
        return _login_redirect("callback_error")

    await audit.log_event(
        "oauth_login",
        user_email=user.email,
        entity_type="user",
        entity_id=user.id,
        metadata={"provider": "google", "new_user": created},
        request=request,
    )

    target = "/dashboard" if user.onboarding_completed else "/onboarding"
    response = RedirectResponse(f"{settings.app_base_url}{target}", status_code=status.HTTP_302_FOUND)
    set_auth_cookies(response, tokens, settings.auth.secure_cookies)
    response.delete_cookie(constant.OAUTH_STATE_COOKIE, path="/")
    return response
