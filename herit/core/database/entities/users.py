"""
User entity models.

This module contains the database entity for application users. A user row
carries the account credentials, personal details captured during onboarding
and the per-step onboarding progress.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional

from sqlmodel import JSON, Field

from ..base import Base, new_id, utc_now


class UserBase(Base):
    """Base fields for an application user."""

    email: str = Field(max_length=255, unique=True, index=True, description="Lower-cased login email")
    password_hash: Optional[str] = Field(default=None, max_length=255, description="bcrypt hash, empty for OAuth users")

    # Personal information
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=50)
    date_of_birth: Optional[date] = Field(default=None)
    pps_number: Optional[str] = Field(default=None, max_length=20)
    profile_photo_url: Optional[str] = Field(default=None)

    # Address
    address_line_1: Optional[str] = Field(default=None, max_length=255)
    address_line_2: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    county: Optional[str] = Field(default=None, max_length=100)
    eircode: Optional[str] = Field(default=None, max_length=10)

    # Onboarding progress
    onboarding_status: str = Field(default="not_started", max_length=50)
    onboarding_current_step: str = Field(default="personal_info", max_length=50)
    onboarding_completed_at: Optional[datetime] = Field(default=None)

    personal_info_completed: bool = Field(default=False)
    personal_info_completed_at: Optional[datetime] = Field(default=None)
    signature_completed: bool = Field(default=False)
    signature_completed_at: Optional[datetime] = Field(default=None)
    legal_consent_completed: bool = Field(default=False)
    legal_consent_completed_at: Optional[datetime] = Field(default=None)
    legal_consents: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    verification_completed: bool = Field(default=False)
    verification_completed_at: Optional[datetime] = Field(default=None)
    verification_session_id: Optional[str] = Field(default=None, max_length=255)
    verification_status: Optional[str] = Field(default=None, max_length=50)

    # Authentication provider
    auth_provider: str = Field(default="email", max_length=50, description="email or google")
    auth_provider_id: Optional[str] = Field(default=None, max_length=255)

    # Bumped to invalidate outstanding access tokens
    session_version: int = Field(default=1)


class User(UserBase, table=True):
    """Persistent application user.

    Table: app_users
    """

    __tablename__ = "app_users"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @property
    def onboarding_completed(self) -> bool:
        """True once every step is done and onboarding has been finalized."""
        return bool(
            self.personal_info_completed
            and self.signature_completed
            and self.legal_consent_completed
            and self.verification_completed
            and self.onboarding_completed_at
        )

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part) or self.email

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, onboarding={self.onboarding_status})"
