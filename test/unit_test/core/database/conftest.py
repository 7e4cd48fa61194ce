"""Test configuration for database unit tests.

This module provides common fixtures for testing the centralized database
layer against an in-memory SQLite database.
"""

from __future__ import annotations

from datetime import timedelta
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from herit.core.database import create_all, create_sessionmaker, utc_now
from herit.core.database.entities.users import User


@pytest.fixture(scope="function")
async def in_memory_engine() -> AsyncGenerator:
    """Create in-memory SQLite engine with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture(scope="function")
async def in_memory_session(in_memory_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create in-memory SQLite session for testing."""
    async with create_sessionmaker(in_memory_engine)() as session:
        yield session


@pytest.fixture(scope="function")
async def persisted_user(in_memory_session) -> User:
    user = User(email="aoife@example.ie", password_hash="x", first_name="Aoife", last_name="Byrne")
    in_memory_session.add(user)
    await in_memory_session.commit()
    await in_memory_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def sample_asset_data() -> dict:
    """Sample asset data for testing."""
    return {
        "user_email": "aoife@example.ie",
        "name": "Current Account",
        "asset_type": "bank_account",
        "value": 12500.0,
        "currency": "EUR",
        "bank_name": "AIB",
        "status": "active",
    }


@pytest.fixture(scope="function")
def sample_beneficiary_data() -> dict:
    """Sample beneficiary data for testing."""
    return {
        "user_email": "aoife@example.ie",
        "name": "Ciara Byrne",
        "relationship_type": "child",
        "email": "ciara@example.ie",
        "country": "Ireland",
        "percentage": 40.0,
        "status": "active",
    }


@pytest.fixture(scope="function")
def sample_refresh_token_data() -> dict:
    """Sample refresh token data for testing."""
    return {
        "user_id": "user_123",
        "token_hash": "a" * 64,
        "family": "family_456",
        "expires_at": utc_now() + timedelta(days=7),
    }
