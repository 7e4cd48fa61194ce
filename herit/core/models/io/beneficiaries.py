"""
Beneficiary I/O models for API requests and responses.

Empty strings sent by the form are treated as absent; every optional Irish
field is validated only when present.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from herit.core.models.domain.enums import RelationshipType
from herit.core.models.domain.validators import (
    blank_to_none,
    validate_county,
    validate_eircode,
    validate_email,
    validate_irish_phone,
    validate_pps_number,
)


class _BeneficiaryFields(BaseModel):
    """Validators shared by create and update payloads."""

    @field_validator(
        "email",
        "phone",
        "pps_number",
        "photo_url",
        "address_line_1",
        "address_line_2",
        "city",
        "county",
        "eircode",
        "conditions",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def _blank(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value) if isinstance(value, str) else value

    @field_validator("email", check_fields=False)
    @classmethod
    def _email(cls, value: Optional[str]) -> Optional[str]:
        return validate_email(value) if value else None

    @field_validator("phone", check_fields=False)
    @classmethod
    def _phone(cls, value: Optional[str]) -> Optional[str]:
        return validate_irish_phone(value) if value else None

    @field_validator("pps_number", check_fields=False)
    @classmethod
    def _pps(cls, value: Optional[str]) -> Optional[str]:
        return validate_pps_number(value) if value else None

    @field_validator("county", check_fields=False)
    @classmethod
    def _county(cls, value: Optional[str]) -> Optional[str]:
        return validate_county(value) if value else None

    @field_validator("eircode", check_fields=False)
    @classmethod
    def _eircode(cls, value: Optional[str]) -> Optional[str]:
        return validate_eircode(value) if value else None


class BeneficiaryCreate(_BeneficiaryFields):
    """Schema for creating a beneficiary."""

    name: str = Field(min_length=1, max_length=255)
    relationship_type: RelationshipType
    email: Optional[str] = None
    phone: Optional[str] = None
    pps_number: Optional[str] = None
    photo_url: Optional[str] = None
    address_line_1: Optional[str] = Field(default=None, max_length=255)
    address_line_2: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    county: Optional[str] = None
    eircode: Optional[str] = None
    country: str = Field(default="Ireland", max_length=100)
    percentage: Optional[float] = Field(default=None, ge=0, le=100)
    specific_assets: Optional[List[str]] = None
    conditions: Optional[str] = Field(default=None, max_length=1000)


class BeneficiaryUpdate(_BeneficiaryFields):
    """Schema for updating a beneficiary; only provided fields change."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    relationship_type: Optional[RelationshipType] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    pps_number: Optional[str] = None
    photo_url: Optional[str] = None
    address_line_1: Optional[str] = Field(default=None, max_length=255)
    address_line_2: Optional[str] = Field(default=None, max_length=255)
    city: Optional[str] = Field(default=None, max_length=100)
    county: Optional[str] = None
    eircode: Optional[str] = None
    country: Optional[str] = Field(default=None, max_length=100)
    percentage: Optional[float] = Field(default=None, ge=0, le=100)
    specific_assets: Optional[List[str]] = None
    conditions: Optional[str] = Field(default=None, max_length=1000)


class BeneficiaryRead(BaseModel):
    """Schema for reading a beneficiary from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_email: str
    name: str
    relationship_type: str
    email: Optional[str] = None
    phone: Optional[str] = None
    pps_number: Optional[str] = None
    photo_url: Optional[str] = None
    address_line_1: Optional[str] = None
    address_line_2: Optional[str] = None
    city: Optional[str] = None
    county: Optional[str] = None
    eircode: Optional[str] = None
    country: str
    percentage: Optional[float] = None
    specific_assets: Optional[List[str]] = None
    conditions: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime


class BeneficiaryListResponse(BaseModel):
    beneficiaries: List[BeneficiaryRead]
    total: int
    page: int
    page_size: int


class BeneficiaryCountResponse(BaseModel):
    count: int
    allocated_percentage: float
