"""Unit tests for the typed domain errors."""

import pytest

from herit.core.errors import (
    AuthenticationRequiredError,
    ConflictError,
    DomainValidationError,
    HeritError,
    InvalidCredentialsError,
    OAuthError,
    PermissionDeniedError,
    RateLimitExceededError,
    ResourceNotFoundError,
    TokenExpiredError,
    TokenInvalidError,
)


class TestHeritErrorStatusCodes:
    @pytest.mark.parametrize(
        "error,expected_status",
        [
            (DomainValidationError("bad"), 400),
            (AuthenticationRequiredError(), 401),
            (InvalidCredentialsError(), 401),
            (PermissionDeniedError("nope"), 403),
            (ResourceNotFoundError("Asset"), 404),
            (ConflictError("dup"), 409),
            (RateLimitExceededError(limit=5, reset_at=100, retry_after=30), 429),
            (OAuthError("token_exchange"), 502),
        ],
    )
    def test_default_status_codes(self, error, expected_status):
        assert isinstance(error, HeritError)
        assert error.status_code == expected_status

    def test_status_code_override(self):
        error = OAuthError("oauth_config", "not configured", status_code=500)

        assert error.status_code == 500
        # Class default is untouched
        assert OAuthError.status_code == 502


class TestHeritErrorPayload:
    def test_message_and_details(self):
        error = DomainValidationError("Invalid", details={"missing_steps": ["signature"]})

        assert error.message == "Invalid"
        assert str(error) == "Invalid"
        assert error.details == {"missing_steps": ["signature"]}

    def test_details_default_to_empty_dict(self):
        assert ConflictError("dup").details == {}

    def test_authentication_messages(self):
        assert AuthenticationRequiredError().message == "Authentication required"
        assert InvalidCredentialsError().message == "Invalid email or password"

    def test_not_found_message(self):
        error = ResourceNotFoundError("Beneficiary", "b-1")

        assert error.message == "Beneficiary not found"
        assert error.resource == "Beneficiary"
        assert error.resource_id == "b-1"

    def test_rate_limit_headers(self):
        error = RateLimitExceededError(limit=5, reset_at=1700000060, retry_after=42)

        assert error.headers == {
            "X-RateLimit-Limit": "5",
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": "1700000060",
            "Retry-After": "42",
        }

    def test_oauth_error_code_doubles_as_message(self):
        error = OAuthError("user_info")

        assert error.code == "user_info"
        assert error.message == "user_info"


class TestTokenErrors:
    def test_codes(self):
        assert TokenExpiredError("x").code == "token_expired"
        assert TokenInvalidError("x").code == "token_invalid"

    def test_token_errors_are_not_http_errors(self):
        assert not isinstance(TokenInvalidError("x"), HeritError)
