"""
Signature entity models.

This module groups the two tables behind digital signatures: the signature
itself (drawn, uploaded or typed with a template font) and the usage ledger
recording every document a signature was applied to.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlmodel import JSON, Field

from ..base import Base, new_id, utc_now


class SignatureBase(Base):
    """Base fields for a signature."""

    user_id: str = Field(foreign_key="app_users.id", ondelete="CASCADE", index=True, max_length=36)
    name: str = Field(max_length=255)
    signature_type: str = Field(max_length=50, description="drawn, uploaded or template")
    data: str = Field(description="Image data URL or typed text")
    hash: str = Field(max_length=255, description="SHA-256 hex digest of data")
    font_name: Optional[str] = Field(default=None, max_length=100)
    font_class_name: Optional[str] = Field(default=None, max_length=100)
    signature_metadata: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)


class Signature(SignatureBase, table=True):
    """Persistent signature.

    Table: signatures
    """

    __tablename__ = "signatures"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
    last_used: Optional[datetime] = Field(default=None)


class SignatureUsage(Base, table=True):
    """A record of a signature being applied to a document.

    Table: signature_usage
    """

    __tablename__ = "signature_usage"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    signature_id: str = Field(foreign_key="signatures.id", ondelete="CASCADE", index=True, max_length=36)
    user_id: str = Field(foreign_key="app_users.id", ondelete="CASCADE", index=True, max_length=36)
    document_type: str = Field(max_length=100)
    document_id: str = Field(max_length=255)
    usage_metadata: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    created_at: datetime = Field(default_factory=utc_now)
