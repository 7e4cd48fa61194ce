"""
Asset Service.

Owner-scoped asset operations: listing with a category summary, creation
from the Irish asset form, partial updates and soft deletion.
"""

from __future__ import annotations

import math
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from herit.core.database.entities.assets import Asset
from herit.core.database.repositories import AssetQuery, AssetRepository
from herit.core.errors import ResourceNotFoundError
from herit.core.logging_config import get_logger
from herit.core.models.domain.asset_catalog import category_for_type, types_for_category
from herit.core.models.io.assets import (
    AssetCreate,
    AssetListData,
    AssetRead,
    AssetSummary,
    AssetUpdate,
    CategorySummary,
    Pagination,
)

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "asset_type", "value", "currency", "status")


def asset_read(asset: Asset) -> AssetRead:
    read = AssetRead.model_validate(asset)
    read.category = category_for_type(asset.asset_type).value
    return read


def paginate(page: int, page_size: int, total: int) -> Pagination:
    total_pages = math.ceil(total / page_size) if total else 0
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_count=total,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


class AssetService:
    """
    Asset operations bound to one database session.

    Args:
        session: Request-scoped async database session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.assets = AssetRepository(session)

    async def list_assets(
        self,
        user_email: str,
        *,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
        category: Optional[str] = None,
        asset_type: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> AssetListData:
        """List one page of a user's assets plus a summary of all their visible assets."""
        asset_types = None
        if asset_type:
            asset_types = [asset_type]
        if category:
            in_category = types_for_category(category)
            asset_types = [t for t in asset_types if t in in_category] if asset_types else in_category

        query = AssetQuery(
            search=search,
            asset_types=asset_types,
            status=status,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=limit,
            offset=(page - 1) * limit,
        )
        assets, total = await self.assets.search(user_email, query)
        return AssetListData(
            assets=[asset_read(asset) for asset in assets],
            pagination=paginate(page, limit, total),
            summary=await self.summary(user_email),
        )

    async def summary(self, user_email: str) -> AssetSummary:
        summary = AssetSummary()
        for asset_type, count, value in await self.assets.totals_by_type(user_email):
            category = category_for_type(asset_type).value
            bucket = summary.category_breakdown.setdefault(category, CategorySummary())
            bucket.count += count
            bucket.value += value
            summary.asset_count += count
            summary.total_value += value
        return summary

    async def create_asset(self, user_email: str, data: AssetCreate) -> Asset:
        """
        Create an asset from the Irish asset form.

        ``irish_fields`` fill in the bank name and account number (IBAN) when
        the plain fields are empty, and the property address is stored as
        ``"<eircode>, <property_type>"``.
        """
        irish = data.irish_fields
        bank_name = data.bank_name or (irish.irish_bank_name if irish else None)
        account_number = data.account_number or (irish.iban if irish else None)
        property_address = data.property_address
        if irish and (irish.eircode or irish.property_type):
            property_address = ", ".join(part for part in (irish.eircode, irish.property_type) if part)

        asset = Asset(
            user_email=user_email,
            name=data.name.strip(),
            asset_type=data.asset_type.value,
            value=data.value,
            currency=data.currency,
            description=data.description,
            account_number=account_number,
            bank_name=bank_name,
            property_address=property_address,
            status="active",
        )
        asset = await self.assets.create(asset)
        logger.info(f"Asset {asset.id} created for {user_email}")
        return asset

    async def get_asset(self, user_email: str, asset_id: str) -> Asset:
        """
        Raises:
            ResourceNotFoundError: Missing, soft-deleted or owned by someone else.
        """
        asset = await self.assets.get_owned(asset_id, user_email)
        if asset is None:
            raise ResourceNotFoundError("Asset", asset_id)
        return asset

    async def update_asset(self, user_email: str, asset_id: str, data: AssetUpdate) -> Asset:
        asset = await self.get_asset(user_email, asset_id)
        for field, value in data.model_dump(mode="json", exclude_unset=True).items():
            # Required columns cannot be cleared
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(asset, field, value)
        return await self.assets.update(asset)

    async def delete_asset(self, user_email: str, asset_id: str) -> Asset:
        asset = await self.get_asset(user_email, asset_id)
        asset = await self.assets.soft_delete(asset)
        logger.info(f"Asset {asset_id} soft-deleted for {user_email}")
        return asset
