"""Unit tests for the audit logger."""

from unittest.mock import AsyncMock, patch

from sqlalchemy.exc import OperationalError
from starlette.requests import Request

from herit.core.database.entities.users import User
from herit.core.database.repositories import AuditEventRepository, UserRepository
from herit.server.services.audit import AuditLogger


def _request() -> Request:
    return Request(
        {
            "type": "http",
            "headers": [(b"user-agent", b"pytest-agent"), (b"x-forwarded-for", b"203.0.113.7")],
            "client": ("127.0.0.1", 5000),
        }
    )


class TestAuditLogger:
    async def test_log_event(self, session):
        audit = AuditLogger(session)

        event = await audit.log_event(
            "asset_created",
            user_email="aoife@example.ie",
            entity_type="asset",
            entity_id="asset_1",
            metadata={"name": "Current Account"},
            request=_request(),
        )

        assert event is not None
        stored = await AuditEventRepository(session).list_for_user("aoife@example.ie")
        assert [e.action for e in stored] == ["asset_created"]
        assert stored[0].ip_address == "203.0.113.7"
        assert stored[0].user_agent == "pytest-agent"
        assert stored[0].event_metadata == {"name": "Current Account"}

    async def test_without_request(self, session):
        event = await AuditLogger(session).log_event("login")

        assert event.ip_address is None
        assert event.user_agent is None
        assert event.event_metadata == {}

    async def test_database_errors_are_swallowed(self, session):
        failure = OperationalError("INSERT", {}, Exception("database is locked"))

        with patch.object(AuditEventRepository, "create", AsyncMock(side_effect=failure)):
            event = await AuditLogger(session).log_event("login", user_email="aoife@example.ie")

        assert event is None

    async def test_failed_write_leaves_request_objects_loaded(self, session):
        persisted_user = await UserRepository(session).create(
            User(email="aoife@example.ie", password_hash="x", first_name="Aoife", last_name="Byrne")
        )
        failure = OperationalError("INSERT", {}, Exception("database is locked"))

        with patch.object(AuditEventRepository, "create", AsyncMock(side_effect=failure)):
            await AuditLogger(session).log_event("login", user_email=persisted_user.email)

        assert "email" in persisted_user.__dict__
        assert persisted_user.email == "aoife@example.ie"
