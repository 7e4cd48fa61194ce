"""
Asset Endpoints.

CRUD for the signed-in user's assets. Every query is scoped to the session
user's email; other users' assets are reported as not found. Deletion is a
soft delete (status ``inactive``).
"""

from typing import Optional

from fastapi import APIRouter, Query, Request, status

from herit.core.logging_config import get_logger
from herit.core.models.domain.asset_catalog import catalog_payload
from herit.core.models.domain.enums import AssetCategory, AssetStatus, AssetType, SortOrder
from herit.core.models.io.assets import (
    AssetCreate,
    AssetListResponse,
    AssetResponse,
    AssetUpdate,
)
from herit.server.services.assets import asset_read
from herit.server.services.deps import AssetServiceDep, AuditLoggerDep, CurrentUserDep

logger = get_logger(__name__)

router = APIRouter()

_NOT_FOUND = {404: {"description": "Asset not found"}, 401: {"description": "Not signed in"}}


@router.get(
    "",
    response_model=AssetListResponse,
    summary="List Assets",
    description=(
        "List the user's assets with search, category/type/status filters, sorting and "
        "pagination. Soft-deleted assets are hidden unless a status filter is given."
    ),
    response_description="A page of assets with pagination and a portfolio summary.",
    responses={401: {"description": "Not signed in"}},
)
async def list_assets(
    user: CurrentUserDep,
    assets: AssetServiceDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Matches name, description, bank name or address"),
    category: Optional[AssetCategory] = None,
    asset_type: Optional[AssetType] = None,
    status_filter: Optional[AssetStatus] = Query(None, alias="status"),
    sort_by: str = Query("created_at", description="created_at, name, value or asset_type"),
    sort_order: SortOrder = SortOrder.desc,
) -> AssetListResponse:
    """
    List assets.

    - **page** / **limit**: Pagination (limit 1-100).
    - **search**: Case-insensitive text search.
    - **category** / **asset_type** / **status**: Filters.
    - **sort_by** / **sort_order**: Sorting.
    """
    data = await assets.list_assets(
        user.email,
        page=page,
        limit=limit,
        search=search,
        category=category.value if category else None,
        asset_type=asset_type.value if asset_type else None,
        status=status_filter.value if status_filter else None,
        sort_by=sort_by,
        sort_order=sort_order.value,
    )
    return AssetListResponse(data=data)


@router.post(
    "",
    response_model=AssetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Asset",
    description="Create an asset from the Irish asset form.",
    response_description="The created asset.",
    responses={400: {"description": "Invalid asset data"}, 401: {"description": "Not signed in"}},
)
async def create_asset(
    data: AssetCreate,
    request: Request,
    user: CurrentUserDep,
    assets: AssetServiceDep,
    audit: AuditLoggerDep,
) -> AssetResponse:
    """
    Create an asset.

    - **name**, **asset_type**, **value**: Required.
    - **currency**: EUR by default.
    - **irish_fields**: IBAN, Irish bank name, eircode and property type.
    """
    asset = await assets.create_asset(user.email, data)
    await audit.log_event(
        "asset_created",
        user_email=user.email,
        entity_type="asset",
        entity_id=asset.id,
        metadata={"asset_type": asset.asset_type, "value": asset.value},
        request=request,
    )
    return AssetResponse(message="Asset created successfully", data=asset_read(asset))


@router.get(
    "/categories",
    summary="Get Asset Categories",
    description="Asset category and type definitions and the supported currencies.",
    response_description="Asset catalogue.",
)
async def get_categories():
    return {"success": True, "data": catalog_payload()}


@router.get(
    "/{asset_id}",
    response_model=AssetResponse,
    summary="Get Asset",
    description="Retrieve one of the user's assets.",
    response_description="The asset.",
    responses=_NOT_FOUND,
)
async def get_asset(asset_id: str, user: CurrentUserDep, assets: AssetServiceDep) -> AssetResponse:
    asset = await assets.get_asset(user.email, asset_id)
    return AssetResponse(data=asset_read(asset))


@router.put(
    "/{asset_id}",
    response_model=AssetResponse,
    summary="Update Asset",
    description="Update the provided fields of one of the user's assets.",
    response_description="The updated asset.",
    responses={400: {"description": "Invalid asset data"}, **_NOT_FOUND},
)
async def update_asset(
    asset_id: str,
    data: AssetUpdate,
    request: Request,
    user: CurrentUserDep,
    assets: AssetServiceDep,
    audit: AuditLoggerDep,
) -> AssetResponse:
    asset = await assets.update_asset(user.email, asset_id, data)
    await audit.log_event(
        "asset_updated",
        user_email=user.email,
        entity_type="asset",
        entity_id=asset.id,
        metadata={"fields": sorted(data.model_fields_set)},
        request=request,
    )
    return AssetResponse(message="Asset updated successfully", data=asset_read(asset))


@router.delete(
    "/{asset_id}",
    response_model=AssetResponse,
    summary="Delete Asset",
    description="Soft-delete one of the user's assets.",
    response_description="The deleted asset.",
    responses=_NOT_FOUND,
)
async def delete_asset(
    asset_id: str,
    request: Request,
    user: CurrentUserDep,
    assets: AssetServiceDep,
    audit: AuditLoggerDep,
) -> AssetResponse:
    asset = await assets.delete_asset(user.email, asset_id)
    await audit.log_event(
        "asset_deleted", user_email=user.email, entity_type="asset", entity_id=asset.id, request=request
    )
    return AssetResponse(message="Asset deleted successfully", data=asset_read(asset))
