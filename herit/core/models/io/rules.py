"""
Inheritance rule I/O models for API requests and responses.

A rule definition is a list of conditions, all of which must hold, and the
event fired when they do. Operators are checked by the rule service so an
unknown operator is reported as an invalid rule definition.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RuleCondition(BaseModel):
    fact: str = Field(min_length=1, max_length=100, description="e.g. beneficiary-age")
    operator: str = Field(min_length=1, max_length=50)
    value: Any = None


class RuleEvent(BaseModel):
    type: str = Field(min_length=1, max_length=100)
    params: Optional[Dict[str, Any]] = None


class RuleDefinition(BaseModel):
    conditions: List[RuleCondition]
    event: RuleEvent


class RuleAllocationInput(BaseModel):
    """Share of one asset given to one beneficiary, as a percentage or an amount."""

    asset_id: str = Field(min_length=1, max_length=36)
    beneficiary_id: str = Field(min_length=1, max_length=36)
    allocation_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    allocation_amount: Optional[float] = Field(default=None, ge=0)


class RuleCreate(BaseModel):
    """Schema for creating an inheritance rule."""

    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    rule_definition: RuleDefinition
    priority: int = Field(default=1, ge=1, le=100)
    is_active: bool = True
    allocations: List[RuleAllocationInput] = Field(default_factory=list)


class RuleUpdate(BaseModel):
    """Schema for updating a rule; allocations, when given, replace the existing set."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    rule_definition: Optional[RuleDefinition] = None
    priority: Optional[int] = Field(default=None, ge=1, le=100)
    is_active: Optional[bool] = None
    allocations: Optional[List[RuleAllocationInput]] = None


class RuleAllocationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    rule_id: str
    asset_id: str
    beneficiary_id: str
    allocation_percentage: Optional[float] = None
    allocation_amount: Optional[float] = None
    created_at: datetime


class RuleRead(BaseModel):
    """Schema for reading a rule, with its allocations, from API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_email: str
    name: str
    description: Optional[str] = None
    rule_definition: Dict[str, Any]
    priority: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    allocations: List[RuleAllocationRead] = Field(default_factory=list)


class RuleListResponse(BaseModel):
    rules: List[RuleRead]


class AllocationValidationRequest(BaseModel):
    allocations: List[RuleAllocationInput]
    exclude_rule_id: Optional[str] = Field(default=None, description="Rule being edited; its allocations are ignored")


class ConflictingRule(BaseModel):
    rule_id: str
    rule_name: str
    allocation_percentage: Optional[float] = None
    allocation_amount: Optional[float] = None


class AssetAllocationDetail(BaseModel):
    """Combined allocation of one asset across the active rules and the proposal."""

    asset_id: str
    asset_name: str
    asset_value: float
    total_percentage_allocated: float
    total_amount_allocated: float
    remaining_percentage: float
    remaining_value: float
    is_over_allocated: bool
    conflicting_rules: List[ConflictingRule]


class AllocationValidationSummary(BaseModel):
    total_assets_checked: int
    over_allocated_count: int
    valid_allocations_count: int


class AllocationValidationResponse(BaseModel):
    is_valid: bool
    over_allocated_assets: List[str]
    asset_allocation_details: List[AssetAllocationDetail]
    summary: AllocationValidationSummary
