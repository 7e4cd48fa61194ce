"""
Beneficiary entity models.

A beneficiary is a person or organisation that inherits some share of a
user's estate, either as a percentage or through specific assets.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlmodel import JSON, Field

from ..base import Base, new_id, utc_now


class BeneficiaryBase(Base):
    """Base fields for a beneficiary."""

    user_email: str = Field(max_length=255, index=True, description="Owner email")
    name: str = Field(max_length=255)
    relationship_type: str = Field(max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    pps_number: Optional[str] = Field(default=None, max_length=20)
    photo_url: Optional[str] = Field(default=None)

    address_line_1: Optional[str] = Field(default=None, max_length=255)
    address_line_2: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    county: Optional[str] = Field(default=None, max_length=100)
    eircode: Optional[str] = Field(default=None, max_length=10)
    country: str = Field(default="Ireland", max_length=100)

    percentage: Optional[float] = Field(default=None, ge=0, le=100)
    specific_assets: Optional[List[str]] = Field(default=None, sa_type=JSON)
    conditions: Optional[str] = Field(default=None)

    status: str = Field(default="active", max_length=50)


class Beneficiary(BeneficiaryBase, table=True):
    """Persistent beneficiary record.

    Table: beneficiaries
    """

    __tablename__ = "beneficiaries"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
