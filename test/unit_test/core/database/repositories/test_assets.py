"""Unit tests for asset repository against an in-memory database."""

from __future__ import annotations

import pytest

from herit.core.database.entities.assets import Asset
from herit.core.database.repositories.assets import AssetQuery, AssetRepository

OWNER = "aoife@example.ie"


@pytest.fixture
async def repository(in_memory_session) -> AssetRepository:
    return AssetRepository(in_memory_session)


@pytest.fixture
async def assets(repository, sample_asset_data):
    rows = [
        {**sample_asset_data},
        {**sample_asset_data, "name": "House in Galway", "asset_type": "residential_property", "value": 350000.0,
         "bank_name": None, "property_address": "H91 AB12, Detached"},
        {**sample_asset_data, "name": "Old Savings", "asset_type": "savings_account", "value": 900.0,
         "status": "inactive"},
        {**sample_asset_data, "name": "Car", "asset_type": "vehicle", "value": 8000.0, "bank_name": None},
        {**sample_asset_data, "user_email": "sean@example.ie", "name": "Someone else's account"},
    ]
    return [await repository.create(Asset(**row)) for row in rows]


class TestAssetRepository:
    async def test_get_owned_scopes_to_owner(self, repository, assets):
        assert (await repository.get_owned(assets[0].id, OWNER)).id == assets[0].id
        assert await repository.get_owned(assets[4].id, OWNER) is None

    async def test_get_owned_hides_inactive(self, repository, assets):
        assert await repository.get_owned(assets[2].id, OWNER) is None
        assert (await repository.get_by_id(assets[2].id)).status == "inactive"

    async def test_soft_delete(self, repository, assets):
        await repository.soft_delete(assets[0])

        assert await repository.get_owned(assets[0].id, OWNER) is None

    async def test_search_excludes_inactive_by_default(self, repository, assets):
        rows, total = await repository.search(OWNER, AssetQuery())

        assert total == 3
        assert {row.name for row in rows} == {"Current Account", "House in Galway", "Car"}

    async def test_search_with_status_filter(self, repository, assets):
        rows, total = await repository.search(OWNER, AssetQuery(status="inactive"))

        assert total == 1
        assert rows[0].name == "Old Savings"

    async def test_search_text_is_case_insensitive(self, repository, assets):
        rows, total = await repository.search(OWNER, AssetQuery(search="galway"))
        assert total == 1
        assert rows[0].name == "House in Galway"

        rows, _ = await repository.search(OWNER, AssetQuery(search="aib"))
        assert [row.name for row in rows] == ["Current Account"]

    async def test_search_blank_text_is_ignored(self, repository, assets):
        _, total = await repository.search(OWNER, AssetQuery(search="   "))
        assert total == 3

    async def test_search_by_asset_types(self, repository, assets):
        rows, total = await repository.search(OWNER, AssetQuery(asset_types=["vehicle", "residential_property"]))
        assert total == 2

        _, total = await repository.search(OWNER, AssetQuery(asset_types=[]))
        assert total == 0

    async def test_search_sort_and_paginate(self, repository, assets):
        rows, total = await repository.search(OWNER, AssetQuery(sort_by="value", sort_order="asc", limit=2))

        assert total == 3
        assert [row.name for row in rows] == ["Car", "Current Account"]

        rows, _ = await repository.search(OWNER, AssetQuery(sort_by="value", sort_order="asc", limit=2, offset=2))
        assert [row.name for row in rows] == ["House in Galway"]

    async def test_search_unknown_sort_column_falls_back(self, repository, assets):
        rows, total = await repository.search(OWNER, AssetQuery(sort_by="password_hash"))
        assert total == len(rows) == 3

    async def test_totals_by_type(self, repository, assets):
        totals = {asset_type: (count, value) for asset_type, count, value in await repository.totals_by_type(OWNER)}

        assert totals == {
            "bank_account": (1, 12500.0),
            "residential_property": (1, 350000.0),
            "vehicle": (1, 8000.0),
        }

    async def test_totals_for_user_without_assets(self, repository):
        assert await repository.totals_by_type("nobody@example.ie") == []
