"""
Audit event repository.

Audit events are append-only: there is no update path.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.audit_events import AuditEvent
from .base import AsyncBaseRepository


class AuditEventRepository(AsyncBaseRepository[AuditEvent]):
    """Repository for audit events."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AuditEvent)

    async def get_by_id(self, event_id: str) -> Optional[AuditEvent]:
        stmt = select(AuditEvent).where(AuditEvent.id == event_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, entity: AuditEvent) -> AuditEvent:
        raise NotImplementedError("Audit events are append-only")

    async def list_for_user(self, user_email: str, action: Optional[str] = None, limit: int = 100) -> List[AuditEvent]:
        """Newest-first audit trail of one user.

        Args:
            user_email: User email
            action: Optional action filter, e.g. ``login``
            limit: Maximum number of events

        Returns:
            List of AuditEvent instances
        """
        stmt = select(AuditEvent).where(AuditEvent.user_email == user_email)
        if action:
            stmt = stmt.where(AuditEvent.action == action)
        stmt = stmt.order_by(AuditEvent.timestamp.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
