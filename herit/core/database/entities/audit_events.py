"""
Audit event entity models.

Append-only log of security and workflow events (logins, onboarding steps,
asset and beneficiary changes).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlmodel import JSON, Field

from ..base import Base, new_id, utc_now


class AuditEventBase(Base):
    """Base fields for an audit event."""

    user_email: Optional[str] = Field(default=None, max_length=255, index=True)
    action: str = Field(max_length=100, index=True)
    entity_type: Optional[str] = Field(default=None, max_length=100)
    entity_id: Optional[str] = Field(default=None, max_length=255)
    event_metadata: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None)
    session_id: Optional[str] = Field(default=None, max_length=255)


class AuditEvent(AuditEventBase, table=True):
    """Persistent audit event.

    Table: audit_events
    """

    __tablename__ = "audit_events"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    timestamp: datetime = Field(default_factory=utc_now, index=True)
