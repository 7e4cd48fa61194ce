"""Unit tests for refresh token repository."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from herit.core.database.base import utc_now
from herit.core.database.entities.refresh_tokens import RefreshToken
from herit.core.database.repositories.refresh_tokens import RefreshTokenRepository


class TestRefreshTokenRepository:
    @pytest.fixture
    def mock_session(self):
        session = AsyncMock()
        session.add = MagicMock()
        mock_result = MagicMock()
        mock_result.rowcount = 3
        session.execute = AsyncMock(return_value=mock_result)
        return session

    @pytest.fixture
    def repository(self, mock_session):
        return RefreshTokenRepository(mock_session)

    async def test_revoke_marks_token(self, repository, mock_session, sample_refresh_token_data):
        token = RefreshToken(**sample_refresh_token_data)

        result = await repository.revoke(token)

        assert result.revoked is True
        assert result.revoked_at is not None
        mock_session.commit.assert_called_once()

    async def test_revoke_family_returns_rowcount(self, repository, mock_session):
        assert await repository.revoke_family("family_456") == 3
        mock_session.commit.assert_called_once()

    async def test_revoke_all_for_user_handles_missing_rowcount(self, repository, mock_session):
        mock_session.execute.return_value.rowcount = None

        assert await repository.revoke_all_for_user("user_123") == 0


class TestRefreshTokenRepositoryWithDatabase:
    @pytest.fixture
    async def tokens(self, in_memory_session, persisted_user):
        repository = RefreshTokenRepository(in_memory_session)
        expires = utc_now() + timedelta(days=7)
        created = []
        for token_hash, family in (("h1", "fam_a"), ("h2", "fam_a"), ("h3", "fam_b")):
            created.append(
                await repository.create(
                    RefreshToken(user_id=persisted_user.id, token_hash=token_hash, family=family, expires_at=expires)
                )
            )
        return created

    async def test_get_by_hash_with_family(self, in_memory_session, tokens):
        repository = RefreshTokenRepository(in_memory_session)

        assert (await repository.get_by_hash("h1")).id == tokens[0].id
        assert (await repository.get_by_hash("h1", family="fam_a")).id == tokens[0].id
        assert await repository.get_by_hash("h1", family="fam_b") is None
        assert await repository.get_by_hash("unknown") is None

    async def test_revoke_family_only_touches_that_family(self, in_memory_session, tokens):
        repository = RefreshTokenRepository(in_memory_session)

        assert await repository.revoke_family("fam_a") == 2
        # Already revoked tokens are not counted twice
        assert await repository.revoke_family("fam_a") == 0

        other = await repository.get_by_hash("h3")
        await in_memory_session.refresh(other)
        assert other.revoked is False

    async def test_revoke_all_for_user(self, in_memory_session, tokens, persisted_user):
        repository = RefreshTokenRepository(in_memory_session)

        assert await repository.revoke_all_for_user(persisted_user.id) == 3
        assert await repository.revoke_all_for_user("someone_else") == 0
