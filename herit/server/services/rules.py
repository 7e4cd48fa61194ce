"""
Inheritance Rule Service.

Owner-scoped rule operations. Every rule definition is checked before it is
stored, and the allocations of one rule may not give away more than 100% of
any asset. ``validate_allocation`` reports how a proposed set of allocations
adds up against the user's other active rules without storing anything.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from herit.core.database.entities.rules import InheritanceRule, RuleAllocation
from herit.core.database.repositories import (
    AssetRepository,
    BeneficiaryRepository,
    RuleAllocationRepository,
    RuleRepository,
)
from herit.core.errors import DomainValidationError, ResourceNotFoundError
from herit.core.logging_config import get_logger
from herit.core.models.domain.enums import RuleOperator
from herit.core.models.io.rules import (
    AllocationValidationRequest,
    AllocationValidationResponse,
    AllocationValidationSummary,
    AssetAllocationDetail,
    ConflictingRule,
    RuleAllocationInput,
    RuleAllocationRead,
    RuleCreate,
    RuleDefinition,
    RuleRead,
    RuleUpdate,
)

logger = get_logger(__name__)

MAX_ASSET_PERCENTAGE = 100.0
NUMERIC_OPERATORS = frozenset(
    {
        RuleOperator.less_than,
        RuleOperator.less_than_inclusive,
        RuleOperator.greater_than,
        RuleOperator.greater_than_inclusive,
    }
)
LIST_OPERATORS = frozenset({RuleOperator.in_, RuleOperator.not_in})

RuleWithAllocations = Tuple[InheritanceRule, List[RuleAllocation]]


def rule_definition_errors(definition: RuleDefinition) -> List[str]:
    """Problems that would stop ``definition`` from being evaluated; empty when it is usable."""
    errors = []
    for index, condition in enumerate(definition.conditions):
        try:
            operator = RuleOperator(condition.operator)
        except ValueError:
            errors.append(f"conditions[{index}]: unknown operator '{condition.operator}'")
            continue
        value = condition.value
        if operator in NUMERIC_OPERATORS and (isinstance(value, bool) or not isinstance(value, (int, float))):
            errors.append(f"conditions[{index}]: '{operator.value}' needs a numeric value")
        elif operator in LIST_OPERATORS and not isinstance(value, list):
            errors.append(f"conditions[{index}]: '{operator.value}' needs a list value")
    return errors


def over_allocated_assets(allocations: Sequence[RuleAllocationInput]) -> List[str]:
    """Assets whose percentages within ``allocations`` add up to more than 100, in first-seen order."""
    totals: Dict[str, float] = defaultdict(float)
    for allocation in allocations:
        totals[allocation.asset_id] += allocation.allocation_percentage or 0.0
    return [asset_id for asset_id, total in totals.items() if total > MAX_ASSET_PERCENTAGE]


def rule_read(rule: InheritanceRule, allocations: Sequence[RuleAllocation]) -> RuleRead:
    read = RuleRead.model_validate(rule)
    read.allocations = [RuleAllocationRead.model_validate(allocation) for allocation in allocations]
    return read


class RuleService:
    """
    Inheritance rule operations bound to one database session.

    Args:
        session: Request-scoped async database session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.rules = RuleRepository(session)
        self.allocations = RuleAllocationRepository(session)
        self.assets = AssetRepository(session)
        self.beneficiaries = BeneficiaryRepository(session)

    def _check_definition(self, definition: RuleDefinition) -> None:
        errors = rule_definition_errors(definition)
        if errors:
            raise DomainValidationError("Invalid rule definition", details={"errors": errors})

    async def _check_allocations(self, user_email: str, allocations: Sequence[RuleAllocationInput]) -> None:
        """
        Raises:
            DomainValidationError: Some asset is allocated past 100%.
            ResourceNotFoundError: An asset or beneficiary is missing or owned by someone else.
        """
        over = over_allocated_assets(allocations)
        if over:
            raise DomainValidationError("Asset allocation exceeds 100%", details={"over_allocated_assets": over})

        asset_ids = sorted({a.asset_id for a in allocations})
        owned_assets = {asset.id for asset in await self.assets.get_owned_many(asset_ids, user_email)}
        for asset_id in asset_ids:
            if asset_id not in owned_assets:
                raise ResourceNotFoundError("Asset", asset_id)

        beneficiary_ids = sorted({a.beneficiary_id for a in allocations})
        owned_beneficiaries = await self.beneficiaries.owned_ids(beneficiary_ids, user_email)
        for beneficiary_id in beneficiary_ids:
            if beneficiary_id not in owned_beneficiaries:
                raise ResourceNotFoundError("Beneficiary", beneficiary_id)

    async def list_rules(self, user_email: str) -> List[RuleWithAllocations]:
        rules = await self.rules.list_for_user(user_email)
        grouped = await self.allocations.for_rules([rule.id for rule in rules])
        return [(rule, grouped[rule.id]) for rule in rules]

    async def create_rule(self, user_email: str, data: RuleCreate) -> RuleWithAllocations:
        """
        Raises:
            DomainValidationError: Invalid definition or an over-allocated asset.
            ResourceNotFoundError: An allocation names an unknown asset or beneficiary.
        """
        self._check_definition(data.rule_definition)
        await self._check_allocations(user_email, data.allocations)

        rule = InheritanceRule(user_email=user_email, **data.model_dump(mode="json", exclude={"allocations"}))
        rule = await self.rules.create(rule)
        allocations = await self.allocations.replace(
            rule.id, [RuleAllocation(rule_id=rule.id, **a.model_dump()) for a in data.allocations]
        )
        logger.info(f"Rule {rule.id} created for {user_email} with {len(allocations)} allocations")
        return rule, allocations

    async def get_rule(self, user_email: str, rule_id: str) -> RuleWithAllocations:
        """
        Raises:
            ResourceNotFoundError: Missing or owned by someone else.
        """
        rule = await self.rules.get_owned(rule_id, user_email)
        if rule is None:
            raise ResourceNotFoundError("Rule", rule_id)
        return rule, await self.allocations.for_rule(rule.id)

    async def update_rule(self, user_email: str, rule_id: str, data: RuleUpdate) -> RuleWithAllocations:
        rule, allocations = await self.get_rule(user_email, rule_id)
        if data.rule_definition is not None:
            self._check_definition(data.rule_definition)
        if data.allocations is not None:
            await self._check_allocations(user_email, data.allocations)

        changes = data.model_dump(mode="json", exclude_unset=True, exclude={"allocations"})
        for field, value in changes.items():
            if value is None and field != "description":
                continue
            setattr(rule, field, value)
        rule = await self.rules.update(rule)

        if data.allocations is not None:
            allocations = await self.allocations.replace(
                rule.id, [RuleAllocation(rule_id=rule.id, **a.model_dump()) for a in data.allocations]
            )
        return rule, allocations

    async def delete_rule(self, user_email: str, rule_id: str) -> InheritanceRule:
        rule, _ = await self.get_rule(user_email, rule_id)
        await self.allocations.replace(rule.id, [])
        await self.rules.delete(rule.id)
        logger.info(f"Rule {rule_id} deleted for {user_email}")
        return rule

    async def validate_allocation(
        self, user_email: str, request: AllocationValidationRequest
    ) -> AllocationValidationResponse:
        """
        Add a proposed set of allocations to those of the user's other active rules.

        An asset is over-allocated when its combined percentage passes 100 or
        its combined fixed amounts pass its value. Every existing allocation
        of such an asset is listed as a conflicting rule.

        Raises:
            ResourceNotFoundError: An asset is missing or owned by someone else.
        """
        asset_ids = list(dict.fromkeys(a.asset_id for a in request.allocations))
        assets = {asset.id: asset for asset in await self.assets.get_owned_many(asset_ids, user_email)}
        for asset_id in asset_ids:
            if asset_id not in assets:
                raise ResourceNotFoundError("Asset", asset_id)

        existing = await self.allocations.existing_for_assets(
            user_email, asset_ids, exclude_rule_id=request.exclude_rule_id
        )

        details = []
        for asset_id in asset_ids:
            asset = assets[asset_id]
            current = [a for a in existing if a.asset_id == asset_id]
            proposed = [a for a in request.allocations if a.asset_id == asset_id]
            percentage = sum(a.allocation_percentage or 0.0 for a in current + proposed)
            amount = sum(a.allocation_amount or 0.0 for a in current + proposed)
            details.append(
                AssetAllocationDetail(
                    asset_id=asset.id,
                    asset_name=asset.name,
                    asset_value=asset.value,
                    total_percentage_allocated=percentage,
                    total_amount_allocated=amount,
                    remaining_percentage=max(0.0, MAX_ASSET_PERCENTAGE - percentage),
                    remaining_value=max(0.0, asset.value - amount),
                    is_over_allocated=percentage > MAX_ASSET_PERCENTAGE or amount > asset.value,
                    conflicting_rules=[
                        ConflictingRule(
                            rule_id=a.rule_id,
                            rule_name=a.rule_name,
                            allocation_percentage=a.allocation_percentage,
                            allocation_amount=a.allocation_amount,
                        )
                        for a in current
                    ],
                )
            )

        over = [detail.asset_id for detail in details if detail.is_over_allocated]
        return AllocationValidationResponse(
            is_valid=not over,
            over_allocated_assets=over,
            asset_allocation_details=details,
            summary=AllocationValidationSummary(
                total_assets_checked=len(details),
                over_allocated_count=len(over),
                valid_allocations_count=len(details) - len(over),
            ),
        )
