"""
Inheritance Rule Endpoints.

CRUD for the signed-in user's conditional bequests and a dry-run check of
how proposed asset allocations add up against the user's other active
rules. Deleting a rule removes its allocations with it.
"""

from fastapi import APIRouter, Request, status

from herit.core.logging_config import get_logger
from herit.core.models.io.auth import SuccessResponse
from herit.core.models.io.rules import (
    AllocationValidationRequest,
    AllocationValidationResponse,
    RuleCreate,
    RuleListResponse,
    RuleRead,
    RuleUpdate,
)
from herit.server.services.deps import AuditLoggerDep, CurrentUserDep, RuleServiceDep
from herit.server.services.rules import rule_read

logger = get_logger(__name__)

router = APIRouter()

_NOT_FOUND = {404: {"description": "Rule not found"}, 401: {"description": "Not signed in"}}


@router.get(
    "",
    response_model=RuleListResponse,
    summary="List Rules",
    description="List the user's inheritance rules, newest first, each with its allocations.",
    response_description="All of the user's rules.",
    responses={401: {"description": "Not signed in"}},
)
async def list_rules(user: CurrentUserDep, rules: RuleServiceDep) -> RuleListResponse:
    rows = await rules.list_rules(user.email)
    return RuleListResponse(rules=[rule_read(rule, allocations) for rule, allocations in rows])


@router.post(
    "",
    response_model=RuleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Rule",
    description="Add an inheritance rule with its asset allocations.",
    response_description="The created rule.",
    responses={
        400: {"description": "Invalid rule definition or an asset allocated past 100%"},
        401: {"description": "Not signed in"},
        404: {"description": "Asset or beneficiary not found"},
    },
)
async def create_rule(
    data: RuleCreate,
    request: Request,
    user: CurrentUserDep,
    rules: RuleServiceDep,
    audit: AuditLoggerDep,
) -> RuleRead:
    """
    Create a rule.

    - **name**: Required.
    - **rule_definition**: Conditions (fact, operator, value) that must all hold, and the event they fire.
    - **priority**: 1-100.
    - **allocations**: Assets given to beneficiaries, by percentage or amount.
    """
    rule, allocations = await rules.create_rule(user.email, data)
    await audit.log_event(
        "rule_created",
        user_email=user.email,
        entity_type="inheritance_rule",
        entity_id=rule.id,
        metadata={"rule_name": rule.name, "allocations_count": len(allocations)},
        request=request,
    )
    return rule_read(rule, allocations)


@router.post(
    "/validate-allocation",
    response_model=AllocationValidationResponse,
    summary="Validate Allocation",
    description="Check proposed allocations against the allocations of the user's other active rules.",
    response_description="Per-asset totals, remaining capacity and conflicting rules.",
    responses={
        400: {"description": "Invalid data"},
        401: {"description": "Not signed in"},
        404: {"description": "Asset not found"},
    },
)
async def validate_allocation(
    data: AllocationValidationRequest, user: CurrentUserDep, rules: RuleServiceDep
) -> AllocationValidationResponse:
    """
    Dry-run an allocation.

    - **allocations**: Proposed allocations.
    - **exclude_rule_id**: The rule being edited, so its stored allocations are not counted twice.
    """
    return await rules.validate_allocation(user.email, data)


@router.get(
    "/{rule_id}",
    response_model=RuleRead,
    summary="Get Rule",
    description="Retrieve one of the user's rules with its allocations.",
    response_description="The rule.",
    responses=_NOT_FOUND,
)
async def get_rule(rule_id: str, user: CurrentUserDep, rules: RuleServiceDep) -> RuleRead:
    rule, allocations = await rules.get_rule(user.email, rule_id)
    return rule_read(rule, allocations)


@router.put(
    "/{rule_id}",
    response_model=RuleRead,
    summary="Update Rule",
    description="Update the provided fields of a rule. Allocations, when given, replace the existing ones.",
    response_description="The updated rule.",
    responses={400: {"description": "Invalid rule definition or an asset allocated past 100%"}, **_NOT_FOUND},
)
async def update_rule(
    rule_id: str,
    data: RuleUpdate,
    request: Request,
    user: CurrentUserDep,
    rules: RuleServiceDep,
    audit: AuditLoggerDep,
) -> RuleRead:
    rule, allocations = await rules.update_rule(user.email, rule_id, data)
    await audit.log_event(
        "rule_updated",
        user_email=user.email,
        entity_type="inheritance_rule",
        entity_id=rule.id,
        metadata={"fields": sorted(data.model_fields_set)},
        request=request,
    )
    return rule_read(rule, allocations)


@router.delete(
    "/{rule_id}",
    response_model=SuccessResponse,
    summary="Delete Rule",
    description="Delete one of the user's rules together with its allocations.",
    response_description="Success flag.",
    responses=_NOT_FOUND,
)
async def delete_rule(
    rule_id: str,
    request: Request,
    user: CurrentUserDep,
    rules: RuleServiceDep,
    audit: AuditLoggerDep,
) -> SuccessResponse:
    rule = await rules.delete_rule(user.email, rule_id)
    await audit.log_event(
        "rule_deleted",
        user_email=user.email,
        entity_type="inheritance_rule",
        entity_id=rule_id,
        metadata={"rule_name": rule.name},
        request=request,
    )
    return SuccessResponse(message="Rule deleted")
