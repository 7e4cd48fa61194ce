"""
Inheritance rule repositories.

Rules are scoped to an owner email. Allocations belong to exactly one rule
and are always replaced as a set when the rule changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import utc_now
from ..entities.rules import InheritanceRule, RuleAllocation
from .base import AsyncBaseRepository


@dataclass(frozen=True)
class ExistingAllocation:
    """An allocation of an active rule, joined with the rule's name."""

    asset_id: str
    rule_id: str
    rule_name: str
    allocation_percentage: Optional[float]
    allocation_amount: Optional[float]


class RuleRepository(AsyncBaseRepository[InheritanceRule]):
    """Repository for inheritance rule data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, InheritanceRule)

    async def get_by_id(self, rule_id: str) -> Optional[InheritanceRule]:
        stmt = select(InheritanceRule).where(InheritanceRule.id == rule_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owned(self, rule_id: str, user_email: str) -> Optional[InheritanceRule]:
        stmt = select(InheritanceRule).where(InheritanceRule.id == rule_id, InheritanceRule.user_email == user_email)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_email: str) -> List[InheritanceRule]:
        """A user's rules, newest first."""
        stmt = (
            select(InheritanceRule)
            .where(InheritanceRule.user_email == user_email)
            .order_by(InheritanceRule.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, rule: InheritanceRule) -> InheritanceRule:
        rule.updated_at = utc_now()
        return await super().update(rule)


class RuleAllocationRepository(AsyncBaseRepository[RuleAllocation]):
    """Repository for the asset allocations of inheritance rules."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, RuleAllocation)

    async def get_by_id(self, allocation_id: str) -> Optional[RuleAllocation]:
        stmt = select(RuleAllocation).where(RuleAllocation.id == allocation_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def for_rule(self, rule_id: str) -> List[RuleAllocation]:
        return await self.list(filters={"rule_id": rule_id})

    async def for_rules(self, rule_ids: Sequence[str]) -> Dict[str, List[RuleAllocation]]:
        """Allocations of several rules, grouped by rule id.

        Every requested rule id is present in the result, with an empty list
        when it has no allocations.
        """
        grouped: Dict[str, List[RuleAllocation]] = {rule_id: [] for rule_id in rule_ids}
        if not rule_ids:
            return grouped
        stmt = select(RuleAllocation).where(RuleAllocation.rule_id.in_(rule_ids))
        result = await self.session.execute(stmt)
        for allocation in result.scalars().all():
            grouped[allocation.rule_id].append(allocation)
        return grouped

    async def replace(self, rule_id: str, allocations: Sequence[RuleAllocation]) -> List[RuleAllocation]:
        """Swap the allocations of a rule for ``allocations`` in one commit.

        Args:
            rule_id: Rule whose allocations are replaced
            allocations: New allocations; their ``rule_id`` is overwritten

        Returns:
            The rule's allocations as stored
        """
        await self.session.execute(delete(RuleAllocation).where(RuleAllocation.rule_id == rule_id))
        for allocation in allocations:
            allocation.rule_id = rule_id
            self.session.add(allocation)
        await self.session.commit()
        return await self.for_rule(rule_id)

    async def existing_for_assets(
        self, user_email: str, asset_ids: Sequence[str], exclude_rule_id: Optional[str] = None
    ) -> List[ExistingAllocation]:
        """Allocations that a user's active rules already make on ``asset_ids``.

        Args:
            user_email: Owner email
            asset_ids: Assets to look at
            exclude_rule_id: Rule to leave out, used when editing it
        """
        if not asset_ids:
            return []
        stmt = (
            select(
                RuleAllocation.asset_id,
                RuleAllocation.rule_id,
                InheritanceRule.name,
                RuleAllocation.allocation_percentage,
                RuleAllocation.allocation_amount,
            )
            .join(InheritanceRule, RuleAllocation.rule_id == InheritanceRule.id)
            .where(
                RuleAllocation.asset_id.in_(asset_ids),
                InheritanceRule.user_email == user_email,
                InheritanceRule.is_active.is_(True),
            )
            .order_by(InheritanceRule.created_at)
        )
        if exclude_rule_id is not None:
            stmt = stmt.where(RuleAllocation.rule_id != exclude_rule_id)
        result = await self.session.execute(stmt)
        return [ExistingAllocation(*row) for row in result.all()]
