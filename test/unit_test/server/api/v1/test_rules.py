from typing import Dict, Tuple

import pytest
from httpx import AsyncClient

from herit.core.database.repositories import AuditEventRepository

pytestmark = pytest.mark.asyncio

AT_25 = {
    "conditions": [{"fact": "beneficiary-age", "operator": "greaterThanInclusive", "value": 25}],
    "event": {"type": "release-inheritance"},
}


async def _estate(client: AsyncClient) -> Tuple[str, str]:
    """Create one asset and one beneficiary and return their ids."""
    asset = await client.post("/api/assets", json={"name": "Family Home", "asset_type": "land", "value": 200000})
    assert asset.status_code == 201, asset.text
    beneficiary = await client.post("/api/beneficiaries", json={"name": "Ciara", "relationship_type": "child"})
    assert beneficiary.status_code == 201, beneficiary.text
    return asset.json()["data"]["id"], beneficiary.json()["id"]


def _rule(asset_id: str, beneficiary_id: str, percentage: float = 50, **fields) -> Dict:
    return {
        "name": "Ciara at 25",
        "rule_definition": AT_25,
        "allocations": [
            {"asset_id": asset_id, "beneficiary_id": beneficiary_id, "allocation_percentage": percentage}
        ],
        **fields,
    }


async def test_requires_session(client: AsyncClient):
    assert (await client.get("/api/rules")).status_code == 401
    assert (await client.post("/api/rules/validate-allocation", json={"allocations": []})).status_code == 401


async def test_rule_lifecycle(auth_client: AsyncClient, session):
    asset_id, beneficiary_id = await _estate(auth_client)

    created = await auth_client.post("/api/rules", json=_rule(asset_id, beneficiary_id))
    assert created.status_code == 201, created.text
    rule = created.json()
    assert rule["user_email"] == "aoife@example.ie"
    assert rule["priority"] == 1
    assert rule["allocations"][0]["allocation_percentage"] == 50
    url = f"/api/rules/{rule['id']}"

    listed = (await auth_client.get("/api/rules")).json()
    assert [r["id"] for r in listed["rules"]] == [rule["id"]]
    assert (await auth_client.get(url)).json()["allocations"] == rule["allocations"]

    updated = await auth_client.put(url, json={"name": "Ciara at 30", "allocations": []})
    assert updated.status_code == 200
    assert updated.json()["name"] == "Ciara at 30"
    assert updated.json()["allocations"] == []

    deleted = await auth_client.delete(url)
    assert deleted.json() == {"success": True, "message": "Rule deleted"}
    assert (await auth_client.get(url)).status_code == 404

    actions = [e.action for e in await AuditEventRepository(session).list_for_user("aoife@example.ie")]
    assert {"rule_created", "rule_updated", "rule_deleted"}.issubset(actions)


async def test_invalid_rule_definition(auth_client: AsyncClient):
    definition = {**AT_25, "conditions": [{"fact": "beneficiary-age", "operator": "olderThan", "value": 25}]}

    response = await auth_client.post("/api/rules", json={"name": "Bad", "rule_definition": definition})

    assert response.status_code == 400
    assert response.json() == {
        "detail": "Invalid rule definition",
        "errors": ["conditions[0]: unknown operator 'olderThan'"],
    }


async def test_over_allocated_rule(auth_client: AsyncClient):
    asset_id, beneficiary_id = await _estate(auth_client)
    payload = _rule(asset_id, beneficiary_id, 60)
    payload["allocations"].append({**payload["allocations"][0], "allocation_percentage": 41})

    response = await auth_client.post("/api/rules", json=payload)

    assert response.status_code == 400
    assert response.json() == {"detail": "Asset allocation exceeds 100%", "over_allocated_assets": [asset_id]}


@pytest.mark.parametrize("override", [{"name": ""}, {"priority": 0}, {"rule_definition": {"conditions": []}}])
async def test_create_invalid(auth_client: AsyncClient, override):
    response = await auth_client.post("/api/rules", json={"name": "Rule", "rule_definition": AT_25, **override})

    assert response.status_code == 400
    assert response.json()["detail"] == "Validation failed"


async def test_rules_are_private(auth_client: AsyncClient, registration):
    asset_id, beneficiary_id = await _estate(auth_client)
    rule = (await auth_client.post("/api/rules", json=_rule(asset_id, beneficiary_id))).json()

    auth_client.cookies.clear()
    assert (await auth_client.post("/api/auth/register", json={**registration, "email": "sean@example.ie"})).is_success

    assert (await auth_client.get(f"/api/rules/{rule['id']}")).status_code == 404
    assert (await auth_client.get("/api/rules")).json() == {"rules": []}
    # Someone else's asset cannot be allocated
    response = await auth_client.post("/api/rules", json=_rule(asset_id, beneficiary_id))
    assert response.status_code == 404
    assert response.json() == {"detail": "Asset not found"}


async def test_validate_allocation(auth_client: AsyncClient):
    asset_id, beneficiary_id = await _estate(auth_client)
    existing = (await auth_client.post("/api/rules", json=_rule(asset_id, beneficiary_id, 70))).json()
    proposal = {"allocations": _rule(asset_id, beneficiary_id, 40)["allocations"]}

    response = await auth_client.post("/api/rules/validate-allocation", json=proposal)

    assert response.status_code == 200
    body = response.json()
    assert body["is_valid"] is False
    assert body["over_allocated_assets"] == [asset_id]
    detail = body["asset_allocation_details"][0]
    assert detail["asset_name"] == "Family Home"
    assert detail["total_percentage_allocated"] == 110
    assert detail["conflicting_rules"][0]["rule_id"] == existing["id"]
    assert body["summary"] == {"total_assets_checked": 1, "over_allocated_count": 1, "valid_allocations_count": 0}

    # Editing the existing rule does not count its own allocations twice
    response = await auth_client.post(
        "/api/rules/validate-allocation", json={**proposal, "exclude_rule_id": existing["id"]}
    )
    assert response.json()["is_valid"] is True


async def test_validate_allocation_unknown_asset(auth_client: AsyncClient):
    proposal = {"allocations": [{"asset_id": "missing", "beneficiary_id": "x", "allocation_percentage": 10}]}

    response = await auth_client.post("/api/rules/validate-allocation", json=proposal)

    assert response.status_code == 404
