"""
Unit tests for FastAPI application lifespan management.

Tests verify that startup initializes the database and monitoring, and that
a database failure at startup is logged rather than aborting the server.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI

from herit.server.main import lifespan

pytestmark = pytest.mark.asyncio


class TestLifespanStartup:
    """Test application startup lifespan events."""

    async def test_lifespan_initializes_database_and_logfire(self):
        app = FastAPI()

        with (
            patch("herit.server.main.init_db", new_callable=AsyncMock) as mock_init_db,
            patch("herit.server.main.initialize_logfire") as mock_logfire,
        ):
            async with lifespan(app):
                mock_init_db.assert_awaited_once()
                mock_logfire.assert_called_once_with(app)

    async def test_lifespan_survives_database_failure(self):
        app = FastAPI()

        with (
            patch("herit.server.main.init_db", new_callable=AsyncMock, side_effect=RuntimeError("db down")),
            patch("herit.server.main.initialize_logfire") as mock_logfire,
            patch("herit.server.main.logger") as mock_logger,
        ):
            async with lifespan(app):
                pass

        mock_logger.error.assert_called_once()
        assert "Database initialization failed" in mock_logger.error.call_args[0][0]
        mock_logfire.assert_called_once_with(app)


class TestLifespanShutdown:
    async def test_lifespan_logs_shutdown(self):
        with (
            patch("herit.server.main.init_db", new_callable=AsyncMock),
            patch("herit.server.main.initialize_logfire"),
            patch("herit.server.main.logger") as mock_logger,
        ):
            async with lifespan(FastAPI()):
                mock_logger.info.reset_mock()

        mock_logger.info.assert_called_once_with("Shutting down Herit API...")


class TestApplicationWiring:
    async def test_routes_mounted_under_api_prefix(self):
        from herit.server.main import app

        paths = {route.path for route in app.routes}

        assert "/api/health" in paths
        assert "/api/auth/login" in paths
        assert "/api/onboarding/status" in paths
        assert "/api/assets" in paths
        assert "/api/beneficiaries/{beneficiary_id}" in paths
        assert "/api/audit/log-event" in paths
