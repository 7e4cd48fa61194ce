"""Audit I/O models."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class AuditEventCreate(BaseModel):
    """Schema for a client-reported audit event."""

    action: str = Field(min_length=1, max_length=100, description="Event action, e.g. 'onboarding_step_viewed'")
    entity_type: Optional[str] = Field(default=None, max_length=100)
    entity_id: Optional[str] = Field(default=None, max_length=255)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class AuditEventResponse(BaseModel):
    success: bool = True
    event_id: Optional[str] = None
