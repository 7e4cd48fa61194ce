import pytest
from httpx import AsyncClient

from herit.core.database.repositories import AuditEventRepository

pytestmark = pytest.mark.asyncio


async def test_log_event_signed_in(auth_client: AsyncClient, session):
    response = await auth_client.post(
        "/api/audit/log-event",
        json={"action": "will_downloaded", "entity_type": "document", "entity_id": "doc-1", "metadata": {"pages": 3}},
        headers={"User-Agent": "pytest-browser", "X-Forwarded-For": "198.51.100.4"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True

    event = await AuditEventRepository(session).get_by_id(body["event_id"])
    assert event.user_email == "aoife@example.ie"
    assert event.action == "will_downloaded"
    assert event.event_metadata == {"pages": 3}
    assert event.ip_address == "198.51.100.4"
    assert event.user_agent == "pytest-browser"


async def test_log_event_anonymous(client: AsyncClient, session):
    response = await client.post("/api/audit/log-event", json={"action": "landing_viewed"})

    assert response.status_code == 200
    event = await AuditEventRepository(session).get_by_id(response.json()["event_id"])
    assert event.user_email is None


async def test_log_event_requires_action(client: AsyncClient):
    response = await client.post("/api/audit/log-event", json={"metadata": {}})

    assert response.status_code == 400
