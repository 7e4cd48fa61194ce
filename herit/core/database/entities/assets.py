"""
Asset entity models.

This module contains the database entity for the estate assets a user
records (bank accounts, property, vehicles, investments and so on).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class AssetBase(Base):
    """Base fields for an asset."""

    user_email: str = Field(max_length=255, index=True, description="Owner email")
    name: str = Field(max_length=255)
    asset_type: str = Field(max_length=100, description="Asset type identifier from the asset catalogue")
    value: float = Field(default=0.0, ge=0)
    currency: str = Field(default="EUR", max_length=3)
    description: Optional[str] = Field(default=None)

    account_number: Optional[str] = Field(default=None, max_length=255)
    bank_name: Optional[str] = Field(default=None, max_length=255)
    property_address: Optional[str] = Field(default=None)

    status: str = Field(default="active", max_length=50)


class Asset(AssetBase, table=True):
    """Persistent asset record.

    Table: assets
    """

    __tablename__ = "assets"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Asset(id={self.id}, type={self.asset_type}, value={self.value} {self.currency})"
