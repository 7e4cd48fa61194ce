"""
Beneficiary Endpoints.

CRUD for the signed-in user's beneficiaries, scoped to the session user's
email. Deleted beneficiaries are hidden. The percentages of active
beneficiaries may add up to at most 100.
"""

from typing import Optional

from fastapi import APIRouter, Query, Request, status

from herit.core.logging_config import get_logger
from herit.core.models.domain.enums import RelationshipType, SortOrder
from herit.core.models.io.auth import SuccessResponse
from herit.core.models.io.beneficiaries import (
    BeneficiaryCountResponse,
    BeneficiaryCreate,
    BeneficiaryListResponse,
    BeneficiaryRead,
    BeneficiaryUpdate,
)
from herit.server.services.deps import AuditLoggerDep, BeneficiaryServiceDep, CurrentUserDep

logger = get_logger(__name__)

router = APIRouter()

_NOT_FOUND = {404: {"description": "Beneficiary not found"}, 401: {"description": "Not signed in"}}


@router.get(
    "",
    response_model=BeneficiaryListResponse,
    summary="List Beneficiaries",
    description="List the user's beneficiaries with search, relationship filter, sorting and pagination.",
    response_description="A page of beneficiaries.",
    responses={401: {"description": "Not signed in"}},
)
async def list_beneficiaries(
    user: CurrentUserDep,
    beneficiaries: BeneficiaryServiceDep,
    search: Optional[str] = Query(None, description="Matches name, email or phone"),
    relationship_type: Optional[RelationshipType] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    sort_by: str = Query("created_at", description="name, created_at, relationship_type or percentage"),
    sort_order: SortOrder = SortOrder.desc,
) -> BeneficiaryListResponse:
    """
    List beneficiaries.

    - **search**: Case-insensitive text search.
    - **relationship_type**: Filter by relationship.
    - **page** / **page_size**: Pagination.
    - **sort_by** / **sort_order**: Sorting.
    """
    rows, total = await beneficiaries.list_beneficiaries(
        user.email,
        page=page,
        page_size=page_size,
        search=search,
        relationship_type=relationship_type.value if relationship_type else None,
        sort_by=sort_by,
        sort_order=sort_order.value,
    )
    return BeneficiaryListResponse(
        beneficiaries=[BeneficiaryRead.model_validate(row) for row in rows],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post(
    "",
    response_model=BeneficiaryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Beneficiary",
    description="Add a beneficiary. Fails when the total allocation would exceed 100%.",
    response_description="The created beneficiary.",
    responses={400: {"description": "Invalid data or allocation exceeded"}, 401: {"description": "Not signed in"}},
)
async def create_beneficiary(
    data: BeneficiaryCreate,
    request: Request,
    user: CurrentUserDep,
    beneficiaries: BeneficiaryServiceDep,
    audit: AuditLoggerDep,
) -> BeneficiaryRead:
    """
    Create a beneficiary.

    - **name** / **relationship_type**: Required.
    - **email**, **phone**, **pps_number**, **county**, **eircode**: Validated when present.
    - **percentage**: Share of the estate (0-100).
    """
    beneficiary = await beneficiaries.create_beneficiary(user.email, data)
    await audit.log_event(
        "beneficiary_created",
        user_email=user.email,
        entity_type="beneficiary",
        entity_id=beneficiary.id,
        metadata={"relationship_type": beneficiary.relationship_type, "percentage": beneficiary.percentage},
        request=request,
    )
    return BeneficiaryRead.model_validate(beneficiary)


@router.get(
    "/count",
    response_model=BeneficiaryCountResponse,
    summary="Count Beneficiaries",
    description="Number of active beneficiaries and the percentage already allocated.",
    response_description="Count object.",
    responses={401: {"description": "Not signed in"}},
)
async def count_beneficiaries(user: CurrentUserDep, beneficiaries: BeneficiaryServiceDep) -> BeneficiaryCountResponse:
    count, allocated = await beneficiaries.count(user.email)
    return BeneficiaryCountResponse(count=count, allocated_percentage=allocated)


@router.get(
    "/{beneficiary_id}",
    response_model=BeneficiaryRead,
    summary="Get Beneficiary",
    description="Retrieve one of the user's beneficiaries.",
    response_description="The beneficiary.",
    responses=_NOT_FOUND,
)
async def get_beneficiary(
    beneficiary_id: str, user: CurrentUserDep, beneficiaries: BeneficiaryServiceDep
) -> BeneficiaryRead:
    return BeneficiaryRead.model_validate(await beneficiaries.get_beneficiary(user.email, beneficiary_id))


@router.put(
    "/{beneficiary_id}",
    response_model=BeneficiaryRead,
    summary="Update Beneficiary",
    description="Update the provided fields of one of the user's beneficiaries.",
    response_description="The updated beneficiary.",
    responses={400: {"description": "Invalid data or allocation exceeded"}, **_NOT_FOUND},
)
async def update_beneficiary(
    beneficiary_id: str,
    data: BeneficiaryUpdate,
    request: Request,
    user: CurrentUserDep,
    beneficiaries: BeneficiaryServiceDep,
    audit: AuditLoggerDep,
) -> BeneficiaryRead:
    beneficiary = await beneficiaries.update_beneficiary(user.email, beneficiary_id, data)
    await audit.log_event(
        "beneficiary_updated",
        user_email=user.email,
        entity_type="beneficiary",
        entity_id=beneficiary.id,
        metadata={"fields": sorted(data.model_fields_set)},
        request=request,
    )
    return BeneficiaryRead.model_validate(beneficiary)


@router.delete(
    "/{beneficiary_id}",
    response_model=SuccessResponse,
    summary="Delete Beneficiary",
    description="Soft-delete one of the user's beneficiaries.",
    response_description="Success flag.",
    responses=_NOT_FOUND,
)
async def delete_beneficiary(
    beneficiary_id: str,
    request: Request,
    user: CurrentUserDep,
    beneficiaries: BeneficiaryServiceDep,
    audit: AuditLoggerDep,
) -> SuccessResponse:
    await beneficiaries.delete_beneficiary(user.email, beneficiary_id)
    await audit.log_event(
        "beneficiary_deleted",
        user_email=user.email,
        entity_type="beneficiary",
        entity_id=beneficiary_id,
        request=request,
    )
    return SuccessResponse(message="Beneficiary deleted")
