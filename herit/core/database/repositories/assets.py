"""
Asset repository.

All queries are scoped to an owner email. Soft-deleted assets (status
``inactive``) are excluded from listings unless a status filter asks for them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import utc_now
from ..entities.assets import Asset
from .base import AsyncBaseRepository, QueryBuilder

ASSET_SEARCH_FIELDS = ("name", "description", "bank_name", "property_address")
ASSET_SORT_FIELDS = ("created_at", "name", "value", "asset_type")
HIDDEN_STATUSES = ("inactive",)


@dataclass(frozen=True)
class AssetQuery:
    """Filter, sort and paging options for listing a user's assets."""

    search: Optional[str] = None
    asset_types: Optional[Sequence[str]] = None
    status: Optional[str] = None
    sort_by: str = "created_at"
    sort_order: str = "desc"
    limit: int = 20
    offset: int = 0


class AssetRepository(AsyncBaseRepository[Asset]):
    """Repository for asset data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Asset)

    async def get_by_id(self, asset_id: str) -> Optional[Asset]:
        stmt = select(Asset).where(Asset.id == asset_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owned(self, asset_id: str, user_email: str) -> Optional[Asset]:
        """Get an asset only if it belongs to ``user_email`` and is not soft-deleted.

        Args:
            asset_id: Asset ID
            user_email: Owner email

        Returns:
            Asset instance or None
        """
        stmt = select(Asset).where(
            Asset.id == asset_id,
            Asset.user_email == user_email,
            Asset.status.notin_(HIDDEN_STATUSES),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owned_many(self, asset_ids: Sequence[str], user_email: str) -> List[Asset]:
        """The subset of ``asset_ids`` that belongs to ``user_email`` and is not soft-deleted."""
        if not asset_ids:
            return []
        stmt = select(Asset).where(
            Asset.id.in_(asset_ids),
            Asset.user_email == user_email,
            Asset.status.notin_(HIDDEN_STATUSES),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, asset: Asset) -> Asset:
        asset.updated_at = utc_now()
        return await super().update(asset)

    async def soft_delete(self, asset: Asset) -> Asset:
        asset.status = "inactive"
        return await self.update(asset)

    def _filtered(self, user_email: str, query: AssetQuery):
        stmt = select(Asset).where(Asset.user_email == user_email)
        if query.status:
            stmt = stmt.where(Asset.status == query.status)
        else:
            stmt = stmt.where(Asset.status.notin_(HIDDEN_STATUSES))
        if query.asset_types is not None:
            stmt = stmt.where(Asset.asset_type.in_(list(query.asset_types)))
        return QueryBuilder.apply_search(stmt, Asset, query.search, ASSET_SEARCH_FIELDS)

    async def search(self, user_email: str, query: AssetQuery) -> Tuple[List[Asset], int]:
        """List a user's assets matching ``query``.

        Args:
            user_email: Owner email
            query: Filter, sort and paging options

        Returns:
            Tuple of (page of assets, total number of matches)
        """
        stmt = self._filtered(user_email, query)
        total = (await self.session.execute(QueryBuilder.count_of(stmt))).scalar_one()

        stmt = QueryBuilder.apply_sorting(stmt, Asset, query.sort_by, query.sort_order, ASSET_SORT_FIELDS)
        stmt = QueryBuilder.apply_pagination(stmt, query.limit, query.offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), int(total)

    async def totals_by_type(self, user_email: str) -> List[Tuple[str, int, float]]:
        """Aggregate a user's visible assets per asset type.

        Returns:
            List of (asset_type, count, total value)
        """
        stmt = (
            select(Asset.asset_type, func.count(Asset.id), func.coalesce(func.sum(Asset.value), 0.0))
            .where(Asset.user_email == user_email, Asset.status.notin_(HIDDEN_STATUSES))
            .group_by(Asset.asset_type)
        )
        result = await self.session.execute(stmt)
        return [(row[0], int(row[1]), float(row[2])) for row in result.all()]
