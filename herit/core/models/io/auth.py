"""
Authentication I/O models for API requests and responses.

Request bodies are validated here so that handlers only ever see a
normalized, lower-cased email and a password bcrypt can hash.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from herit.core.models.domain.validators import validate_email, validate_password


class RegisterRequest(BaseModel):
    """Schema for email/password registration."""

    email: str = Field(description="Login email, stored lower-cased")
    password: str = Field(description="Plain-text password (8 characters minimum)")
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return validate_email(value)

    @field_validator("password")
    @classmethod
    def _password(cls, value: str) -> str:
        return validate_password(value)

    @field_validator("first_name", "last_name")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return value.strip().lower()


class UserSummary(BaseModel):
    """Public view of the signed-in user."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_photo_url: Optional[str] = None
    auth_provider: str = "email"
    onboarding_status: str
    onboarding_current_step: str
    onboarding_completed: bool = False


class AuthResponse(BaseModel):
    success: bool = True
    user: UserSummary


class SessionResponse(BaseModel):
    """Result of resolving the access-token cookie."""

    user: Optional[UserSummary] = None
    is_authenticated: bool = False
    error: Optional[str] = Field(
        default=None, description="token_missing, token_invalid, token_expired or user_not_found"
    )


class SuccessResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
