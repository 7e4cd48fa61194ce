"""
Beneficiary repository.

All queries are scoped to an owner email. Rows with status ``deleted`` are
soft-deleted and never returned.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import utc_now
from ..entities.beneficiaries import Beneficiary
from .base import AsyncBaseRepository, QueryBuilder

BENEFICIARY_SEARCH_FIELDS = ("name", "email", "phone")
BENEFICIARY_SORT_FIELDS = ("created_at", "name", "relationship_type", "percentage")
DELETED = "deleted"


@dataclass(frozen=True)
class BeneficiaryQuery:
    """Filter, sort and paging options for listing a user's beneficiaries."""

    search: Optional[str] = None
    relationship_type: Optional[str] = None
    sort_by: str = "created_at"
    sort_order: str = "desc"
    limit: int = 10
    offset: int = 0


class BeneficiaryRepository(AsyncBaseRepository[Beneficiary]):
    """Repository for beneficiary data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Beneficiary)

    async def get_by_id(self, beneficiary_id: str) -> Optional[Beneficiary]:
        stmt = select(Beneficiary).where(Beneficiary.id == beneficiary_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owned(self, beneficiary_id: str, user_email: str) -> Optional[Beneficiary]:
        stmt = select(Beneficiary).where(
            Beneficiary.id == beneficiary_id,
            Beneficiary.user_email == user_email,
            Beneficiary.status != DELETED,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def owned_ids(self, beneficiary_ids: Sequence[str], user_email: str) -> Set[str]:
        """The subset of ``beneficiary_ids`` that belongs to ``user_email`` and is not deleted."""
        if not beneficiary_ids:
            return set()
        stmt = select(Beneficiary.id).where(
            Beneficiary.id.in_(beneficiary_ids),
            Beneficiary.user_email == user_email,
            Beneficiary.status != DELETED,
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def update(self, beneficiary: Beneficiary) -> Beneficiary:
        beneficiary.updated_at = utc_now()
        return await super().update(beneficiary)

    async def soft_delete(self, beneficiary: Beneficiary) -> Beneficiary:
        beneficiary.status = DELETED
        return await self.update(beneficiary)

    async def search(self, user_email: str, query: BeneficiaryQuery) -> Tuple[List[Beneficiary], int]:
        """List a user's beneficiaries matching ``query``.

        Returns:
            Tuple of (page of beneficiaries, total number of matches)
        """
        stmt = select(Beneficiary).where(Beneficiary.user_email == user_email, Beneficiary.status != DELETED)
        if query.relationship_type:
            stmt = stmt.where(Beneficiary.relationship_type == query.relationship_type)
        stmt = QueryBuilder.apply_search(stmt, Beneficiary, query.search, BENEFICIARY_SEARCH_FIELDS)

        total = (await self.session.execute(QueryBuilder.count_of(stmt))).scalar_one()

        stmt = QueryBuilder.apply_sorting(
            stmt, Beneficiary, query.sort_by, query.sort_order, BENEFICIARY_SORT_FIELDS
        )
        stmt = QueryBuilder.apply_pagination(stmt, query.limit, query.offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), int(total)

    async def count_active(self, user_email: str) -> int:
        stmt = select(func.count(Beneficiary.id)).where(
            Beneficiary.user_email == user_email, Beneficiary.status != DELETED
        )
        return int((await self.session.execute(stmt)).scalar_one())

    async def allocated_percentage(self, user_email: str, exclude_id: Optional[str] = None) -> float:
        """Sum of ``percentage`` over a user's active beneficiaries.

        Args:
            user_email: Owner email
            exclude_id: Beneficiary to leave out, used when updating it

        Returns:
            Allocated percentage (0 when nothing is allocated)
        """
        stmt = select(func.coalesce(func.sum(Beneficiary.percentage), 0.0)).where(
            Beneficiary.user_email == user_email, Beneficiary.status != DELETED
        )
        if exclude_id is not None:
            stmt = stmt.where(Beneficiary.id != exclude_id)
        return float((await self.session.execute(stmt)).scalar_one())
