"""Unit tests for asset and beneficiary entity models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from herit.core.database.entities.assets import Asset, AssetBase
from herit.core.database.entities.beneficiaries import BeneficiaryBase


class TestAssetBase:
    def test_valid_data(self, sample_asset_data):
        asset = AssetBase(**sample_asset_data)

        assert asset.name == "Current Account"
        assert asset.currency == "EUR"
        assert asset.status == "active"

    def test_negative_value_rejected(self, sample_asset_data):
        with pytest.raises(ValidationError):
            AssetBase(**{**sample_asset_data, "value": -1})

    def test_missing_required_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            AssetBase()

        error_fields = {error["loc"][0] for error in exc_info.value.errors()}
        assert {"user_email", "name", "asset_type"}.issubset(error_fields)

    def test_repr(self, sample_asset_data):
        asset = Asset(id="asset_1", **sample_asset_data)
        assert repr(asset) == "Asset(id=asset_1, type=bank_account, value=12500.0 EUR)"


class TestBeneficiaryBase:
    def test_defaults(self):
        beneficiary = BeneficiaryBase(user_email="a@example.ie", name="Ciara", relationship_type="child")

        assert beneficiary.country == "Ireland"
        assert beneficiary.status == "active"
        assert beneficiary.percentage is None

    @pytest.mark.parametrize("percentage", [-0.5, 100.5])
    def test_percentage_bounds(self, sample_beneficiary_data, percentage):
        with pytest.raises(ValidationError):
            BeneficiaryBase(**{**sample_beneficiary_data, "percentage": percentage})
