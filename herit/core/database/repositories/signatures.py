"""
Signature repository.

Covers both the signatures table and the signature usage ledger.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import utc_now
from ..entities.signatures import Signature, SignatureUsage
from .base import AsyncBaseRepository


class SignatureRepository(AsyncBaseRepository[Signature]):
    """Repository for signatures and their usage records."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Signature)

    async def get_by_id(self, signature_id: str) -> Optional[Signature]:
        stmt = select(Signature).where(Signature.id == signature_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owned(self, signature_id: str, user_id: str) -> Optional[Signature]:
        stmt = select(Signature).where(Signature.id == signature_id, Signature.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_latest_for_user(self, user_id: str) -> Optional[Signature]:
        """Most recently created signature of a user, or None."""
        stmt = (
            select(Signature)
            .where(Signature.user_id == user_id)
            .order_by(Signature.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def record_usage(self, signature: Signature, usage: SignatureUsage) -> SignatureUsage:
        """Persist a usage record and stamp ``last_used`` on the signature.

        Args:
            signature: The signature that was applied
            usage: Usage record to persist

        Returns:
            Persisted usage record
        """
        signature.last_used = utc_now()
        self.session.add(signature)
        self.session.add(usage)
        await self.session.commit()
        await self.session.refresh(usage)
        return usage

    async def list_usage(self, signature_id: str) -> List[SignatureUsage]:
        stmt = (
            select(SignatureUsage)
            .where(SignatureUsage.signature_id == signature_id)
            .order_by(SignatureUsage.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
