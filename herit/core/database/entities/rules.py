"""
Inheritance rule entity models.

A rule is a conditional bequest: a set of conditions on facts about a
beneficiary (age, education, ...) and the event fired when they hold. Each
rule carries allocations of specific assets to beneficiaries, either as a
percentage of the asset or as a fixed amount.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlmodel import JSON, Field

from ..base import Base, new_id, utc_now


class InheritanceRuleBase(Base):
    """Base fields for an inheritance rule."""

    user_email: str = Field(max_length=255, index=True, description="Owner email")
    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None)
    rule_definition: Dict[str, Any] = Field(sa_type=JSON, description="Conditions and event")
    priority: int = Field(default=1, ge=1, le=100)
    is_active: bool = Field(default=True)


class InheritanceRule(InheritanceRuleBase, table=True):
    """Persistent inheritance rule.

    Table: inheritance_rules
    """

    __tablename__ = "inheritance_rules"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class RuleAllocation(Base, table=True):
    """Share of one asset a rule hands to one beneficiary.

    Table: rule_allocations
    """

    __tablename__ = "rule_allocations"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    rule_id: str = Field(foreign_key="inheritance_rules.id", ondelete="CASCADE", index=True, max_length=36)
    asset_id: str = Field(foreign_key="assets.id", ondelete="CASCADE", index=True, max_length=36)
    beneficiary_id: str = Field(foreign_key="beneficiaries.id", ondelete="CASCADE", max_length=36)
    allocation_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    allocation_amount: Optional[float] = Field(default=None, ge=0)
    created_at: datetime = Field(default_factory=utc_now)
