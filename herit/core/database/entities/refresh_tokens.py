"""
Refresh token entity models.

Refresh tokens are never stored in the clear: only the SHA-256 hex digest of
the signed JWT is kept, grouped by the family created at login so that a
reused token can revoke every descendant.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class RefreshTokenBase(Base):
    """Base fields for a stored refresh token."""

    user_id: str = Field(foreign_key="app_users.id", ondelete="CASCADE", index=True, max_length=36)
    token_hash: str = Field(max_length=255, unique=True, description="SHA-256 hex digest of the token")
    family: str = Field(max_length=36, index=True, description="Rotation family shared by all descendants")
    revoked: bool = Field(default=False)
    revoked_at: Optional[datetime] = Field(default=None)
    expires_at: datetime


class RefreshToken(RefreshTokenBase, table=True):
    """Persistent refresh token record.

    Table: app_refresh_tokens
    """

    __tablename__ = "app_refresh_tokens"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    created_at: datetime = Field(default_factory=utc_now)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at <= (now or utc_now())
