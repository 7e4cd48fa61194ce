"""Typed domain errors for the Herit backend.

Purpose:
- Let services and repositories fail with intent (not found, conflict, bad
  input) without importing FastAPI.
- Carry the HTTP status code and a structured payload so the server layer can
  render a JSON error body in one place.

Usage:
- Raise a subclass of `HeritError` from service code.
- `herit.server.exception_handlers` maps every `HeritError` to a JSON response
  of the form ``{"detail": message, **details}``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class HeritError(Exception):
    """Base error for all expected application failures.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code associated with the failure.
        details: Optional extra fields merged into the JSON error body.
    """

    status_code: int = 400

    def __init__(
        self, message: str, *, status_code: Optional[int] = None, details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}


class DomainValidationError(HeritError):
    """Raised when input passes schema validation but violates a business rule (HTTP 400)."""

    status_code = 400


class AuthenticationRequiredError(HeritError):
    """Raised when a request needs a valid session and has none (HTTP 401)."""

    status_code = 401

    def __init__(self, message: str = "Authentication required", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InvalidCredentialsError(AuthenticationRequiredError):
    """Raised when an email/password pair does not match (HTTP 401)."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class PermissionDeniedError(HeritError):
    status_code = 403


class ResourceNotFoundError(HeritError):
    """Raised when a resource does not exist or is not owned by the caller (HTTP 404).

    Args:
        resource: Resource kind, e.g. ``"Asset"``.
        resource_id: The identifier that was looked up.
    """

    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[str] = None) -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(HeritError):
    """Raised when a write collides with existing state (HTTP 409)."""

    status_code = 409


class RateLimitExceededError(HeritError):
    """Raised when a client exceeds its request budget (HTTP 429).

    Args:
        limit: Maximum number of requests in the window.
        reset_at: Epoch seconds at which the window resets.
        retry_after: Seconds until the client may retry.
    """

    status_code = 429

    def __init__(self, limit: int, reset_at: int, retry_after: int) -> None:
        super().__init__("Too many requests. Please try again later.")
        self.limit = limit
        self.reset_at = reset_at
        self.retry_after = retry_after

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": str(self.reset_at),
            "Retry-After": str(self.retry_after),
        }


class TokenError(Exception):
    """Base error for JWT verification failures."""

    code = "token_invalid"


class TokenExpiredError(TokenError):
    code = "token_expired"


class TokenInvalidError(TokenError):
    code = "token_invalid"


class OAuthError(HeritError):
    """Raised by the Google OAuth flow.

    Args:
        code: Short error code forwarded to the login page as ``?error=<code>``.
        message: Human-readable description for logs.
    """

    status_code = 502

    def __init__(self, code: str, message: Optional[str] = None, *, status_code: Optional[int] = None) -> None:
        super().__init__(message or code, status_code=status_code)
        self.code = code
