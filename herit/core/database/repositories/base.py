"""
Repository base class and query helpers.

Every Herit repository wraps one ``AsyncSession`` and one SQLModel table.
Writes commit immediately; a request-scoped session therefore never holds an
open transaction across service calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(ABC, Generic[EntityType]):
    """
    Common persistence operations for one table.

    Args:
        session: Async session bound to the current request
        model: SQLModel table class handled by the repository
    """

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        self.session = session
        self.model = model

    async def _save(self, entity: EntityType) -> EntityType:
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def create(self, entity: EntityType) -> EntityType:
        """Insert ``entity`` and return it with database defaults loaded."""
        return await self._save(entity)

    async def update(self, entity: EntityType) -> EntityType:
        return await self._save(entity)

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        """Return the row with primary key ``entity_id``, or None."""

    async def delete(self, entity_id: str) -> bool:
        """
        Hard-delete a row. Assets and beneficiaries use their soft delete instead.

        Returns:
            False when no row has that id
        """
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """
        Args:
            limit: Page size, unbounded when None
            offset: Rows to skip
            filters: Column equality filters; None values and unknown columns are ignored
        """
        stmt = select(self.model)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class QueryBuilder:
    """Composable helpers for the search, sort and paging used by list endpoints."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_search(stmt, model: Type[EntityType], term: Optional[str], fields: Sequence[str]):
        """
        Case-insensitive substring match of ``term`` against any of ``fields``.

        Blank terms leave the statement unchanged.
        """
        if not term or not term.strip():
            return stmt
        pattern = f"%{term.strip()}%"
        return stmt.where(or_(*(getattr(model, name).ilike(pattern) for name in fields)))

    @staticmethod
    def apply_sorting(stmt, model: Type[EntityType], sort_by: str, sort_order: str, allowed: Sequence[str]):
        """
        Order by ``sort_by`` when it is in ``allowed``, otherwise by ``allowed[0]``.

        Anything other than ``"asc"`` sorts descending.
        """
        column = getattr(model, sort_by if sort_by in allowed else allowed[0])
        return stmt.order_by(column.asc() if sort_order == "asc" else column.desc())

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt

    @staticmethod
    def count_of(stmt):
        """Wrap a filtered select in ``SELECT count(*)``."""
        return select(func.count()).select_from(stmt.order_by(None).subquery())
