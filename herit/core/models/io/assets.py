"""
Asset I/O models for API requests and responses.

This module contains Pydantic-based I/O schemas for the asset endpoints,
including the Irish asset form whose bank and property fields are nested
under ``irish_fields``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from herit.core.models.domain.asset_catalog import SUPPORTED_CURRENCIES
from herit.core.models.domain.enums import AssetStatus, AssetType
from herit.core.models.domain.validators import blank_to_none, validate_eircode, validate_irish_iban

MAX_ASSET_VALUE = 999_999_999


def _currency(value: str) -> str:
    value = value.strip().upper()
    if value not in SUPPORTED_CURRENCIES:
        raise ValueError(f"Unsupported currency: {value}")
    return value


class IrishAssetFields(BaseModel):
    """Irish-specific form fields for bank and property assets."""

    iban: Optional[str] = None
    irish_bank_name: Optional[str] = Field(default=None, max_length=255)
    eircode: Optional[str] = None
    property_type: Optional[str] = Field(default=None, max_length=100)

    @field_validator("iban", mode="before")
    @classmethod
    def _iban(cls, value: Optional[str]) -> Optional[str]:
        value = blank_to_none(value)
        return validate_irish_iban(value) if value else None

    @field_validator("eircode", mode="before")
    @classmethod
    def _eircode(cls, value: Optional[str]) -> Optional[str]:
        value = blank_to_none(value)
        return validate_eircode(value) if value else None

    @field_validator("irish_bank_name", "property_type", mode="before")
    @classmethod
    def _blank(cls, value: Optional[str]) -> Optional[str]:
        return blank_to_none(value)


class AssetCreate(BaseModel):
    """Schema for creating an asset via the Irish asset form."""

    name: str = Field(min_length=1, max_length=255)
    asset_type: AssetType
    value: float = Field(ge=0, le=MAX_ASSET_VALUE)
    currency: str = "EUR"
    description: Optional[str] = Field(default=None, max_length=1000)
    account_number: Optional[str] = Field(default=None, max_length=255)
    bank_name: Optional[str] = Field(default=None, max_length=255)
    property_address: Optional[str] = Field(default=None, max_length=500)
    irish_fields: Optional[IrishAssetFields] = None

    @field_validator("currency")
    @classmethod
    def _check_currency(cls, value: str) -> str:
        return _currency(value)


class AssetUpdate(BaseModel):
    """Schema for updating an asset; only provided fields change."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    asset_type: Optional[AssetType] = None
    value: Optional[float] = Field(default=None, ge=0, le=MAX_ASSET_VALUE)
    currency: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=1000)
    account_number: Optional[str] = Field(default=None, max_length=255)
    bank_name: Optional[str] = Field(default=None, max_length=255)
    property_address: Optional[str] = Field(default=None, max_length=500)
    status: Optional[AssetStatus] = None

    @field_validator("currency")
    @classmethod
    def _check_currency(cls, value: Optional[str]) -> Optional[str]:
        return _currency(value) if value is not None else None


class AssetRead(BaseModel):
    """Schema for reading an asset from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_email: str
    name: str
    asset_type: str
    category: Optional[str] = None
    value: float
    currency: str
    description: Optional[str] = None
    account_number: Optional[str] = None
    bank_name: Optional[str] = None
    property_address: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool


class CategorySummary(BaseModel):
    count: int = 0
    value: float = 0.0


class AssetSummary(BaseModel):
    total_value: float = 0.0
    asset_count: int = 0
    category_breakdown: Dict[str, CategorySummary] = Field(default_factory=dict)


class AssetListData(BaseModel):
    assets: List[AssetRead]
    pagination: Pagination
    summary: AssetSummary


class AssetListResponse(BaseModel):
    success: bool = True
    data: AssetListData


class AssetResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: AssetRead
