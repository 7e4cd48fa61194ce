"""
Refresh token repository.

Stores hashed refresh tokens and implements the revocation primitives used
by token rotation: revoke one token, a whole family, or every token of a user.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..base import utc_now
from ..entities.refresh_tokens import RefreshToken
from .base import AsyncBaseRepository


class RefreshTokenRepository(AsyncBaseRepository[RefreshToken]):
    """Repository for refresh token records."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, RefreshToken)

    async def get_by_id(self, token_id: str) -> Optional[RefreshToken]:
        stmt = select(RefreshToken).where(RefreshToken.id == token_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_hash(self, token_hash: str, family: Optional[str] = None) -> Optional[RefreshToken]:
        """Find a stored token by the digest of its JWT.

        Args:
            token_hash: SHA-256 hex digest of the refresh JWT
            family: When given, the token must also belong to this family

        Returns:
            RefreshToken instance or None
        """
        stmt = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        if family is not None:
            stmt = stmt.where(RefreshToken.family == family)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def revoke(self, token: RefreshToken) -> RefreshToken:
        token.revoked = True
        token.revoked_at = utc_now()
        return await self.update(token)

    async def revoke_family(self, family: str) -> int:
        """Revoke every still-active token of a rotation family.

        Returns:
            Number of tokens revoked
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.family == family, RefreshToken.revoked.is_(False))
            .values(revoked=True, revoked_at=utc_now())
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0

    async def revoke_all_for_user(self, user_id: str) -> int:
        """Revoke every still-active token belonging to a user.

        Returns:
            Number of tokens revoked
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.revoked.is_(False))
            .values(revoked=True, revoked_at=utc_now())
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0
