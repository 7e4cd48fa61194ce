"""Unit tests for request/response schemas.

Covers the normalization and cross-field rules the API relies on; plain
type/length constraints are left to Pydantic.
"""

from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from herit.core.models.domain.enums import AssetType, SignatureType
from herit.core.models.io.assets import AssetCreate, AssetUpdate, IrishAssetFields
from herit.core.models.io.auth import LoginRequest, RegisterRequest
from herit.core.models.io.beneficiaries import BeneficiaryCreate, BeneficiaryUpdate
from herit.core.models.io.onboarding import CompletionStatus, PersonalInfoRequest, SignatureRequest


@pytest.fixture
def personal_info_data() -> dict:
    return {
        "first_name": "Aoife",
        "last_name": "Murphy",
        "phone_number": "087 123 4567",
        "date_of_birth": "1985-04-12",
    }


class TestAuthModels:
    def test_register_normalizes_email_and_names(self):
        data = RegisterRequest(email=" Aoife@Example.IE ", password="s3cret-pass", first_name=" Aoife ", last_name="M")

        assert data.email == "aoife@example.ie"
        assert data.first_name == "Aoife"

    def test_register_rejects_short_password(self):
        with pytest.raises(ValidationError) as exc_info:
            RegisterRequest(email="a@example.ie", password="short", first_name="A", last_name="M")

        assert exc_info.value.errors()[0]["loc"] == ("password",)

    def test_register_rejects_blank_name(self):
        with pytest.raises(ValidationError):
            RegisterRequest(email="a@example.ie", password="long-enough", first_name="   ", last_name="M")

    def test_login_requires_both_fields(self):
        with pytest.raises(ValidationError):
            LoginRequest(email="", password="")

    def test_login_lowercases_email(self):
        assert LoginRequest(email="A@Example.ie", password="x").email == "a@example.ie"


class TestPersonalInfoRequest:
    def test_valid_minimal(self, personal_info_data):
        data = PersonalInfoRequest(**personal_info_data)

        assert data.phone_number == "0871234567"
        assert data.date_of_birth == date(1985, 4, 12)
        assert data.pps_number is None

    def test_optional_fields_validated_when_present(self, personal_info_data):
        data = PersonalInfoRequest(**personal_info_data, pps_number="1234567a", eircode="d02 xy56", county="cork")

        assert data.pps_number == "1234567A"
        assert data.eircode == "D02 XY56"
        assert data.county == "Cork"

    def test_blank_optional_fields_become_none(self, personal_info_data):
        data = PersonalInfoRequest(**personal_info_data, pps_number="", eircode=" ", city="")

        assert data.pps_number is None
        assert data.eircode is None
        assert data.city is None

    def test_invalid_eircode(self, personal_info_data):
        with pytest.raises(ValidationError):
            PersonalInfoRequest(**personal_info_data, eircode="12345")

    def test_future_date_of_birth(self, personal_info_data):
        personal_info_data["date_of_birth"] = (date.today() + timedelta(days=1)).isoformat()

        with pytest.raises(ValidationError, match="future"):
            PersonalInfoRequest(**personal_info_data)


class TestSignatureRequest:
    def test_template_requires_font_and_class(self):
        with pytest.raises(ValidationError, match="font"):
            SignatureRequest(name="Aoife Murphy", signature_type="template", signature_data="Aoife Murphy", font="x")

    def test_template_with_font(self):
        data = SignatureRequest(
            name="Aoife Murphy",
            signature_type="template",
            signature_data="Aoife Murphy",
            font="Dancing Script",
            class_name="font-dancing",
        )

        assert data.signature_type == SignatureType.template

    def test_drawn_signature_needs_no_font(self):
        data = SignatureRequest(name="Aoife", signature_type="drawn", signature_data="data:image/png;base64,AAAA")

        assert data.font is None


class TestAssetModels:
    def test_create_defaults(self):
        data = AssetCreate(name="Current account", asset_type="bank_account", value=1500)

        assert data.asset_type == AssetType.bank_account
        assert data.currency == "EUR"

    def test_currency_is_normalized(self):
        assert AssetCreate(name="x", asset_type="art", value=1, currency="gbp").currency == "GBP"

    def test_unsupported_currency(self):
        with pytest.raises(ValidationError, match="Unsupported currency"):
            AssetCreate(name="x", asset_type="art", value=1, currency="JPY")

    @pytest.mark.parametrize("value", [-1, 1_000_000_000])
    def test_value_bounds(self, value):
        with pytest.raises(ValidationError):
            AssetCreate(name="x", asset_type="art", value=value)

    def test_unknown_asset_type(self):
        with pytest.raises(ValidationError):
            AssetCreate(name="x", asset_type="spaceship", value=1)

    def test_irish_fields(self):
        fields = IrishAssetFields(iban="IE29 AIBK 9311 5212 3456 78", eircode="d02xy56", irish_bank_name=" ")

        assert fields.iban == "IE29AIBK93115212345678"
        assert fields.eircode == "D02XY56"
        assert fields.irish_bank_name is None

    def test_invalid_iban(self):
        with pytest.raises(ValidationError, match="IBAN"):
            IrishAssetFields(iban="GB29NWBK60161331926819")

    def test_update_tracks_only_sent_fields(self):
        data = AssetUpdate(value=10, currency="usd")

        assert data.model_fields_set == {"value", "currency"}
        assert data.currency == "USD"


class TestBeneficiaryModels:
    def test_create_normalizes_optional_fields(self):
        data = BeneficiaryCreate(
            name="Ciara Murphy",
            relationship_type="child",
            email="Ciara@Example.ie",
            phone="",
            county="galway",
            eircode="h91 ab12",
            percentage=50,
        )

        assert data.email == "ciara@example.ie"
        assert data.phone is None
        assert data.county == "Galway"
        assert data.eircode == "H91 AB12"
        assert data.country == "Ireland"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("relationship_type", "pet"),
            ("email", "not-an-email"),
            ("phone", "12345"),
            ("pps_number", "ABC"),
            ("county", "Yorkshire"),
            ("percentage", 101),
        ],
    )
    def test_create_rejects_invalid(self, field, value):
        data = {"name": "Ciara", "relationship_type": "child", field: value}

        with pytest.raises(ValidationError):
            BeneficiaryCreate(**data)

    def test_update_allows_partial(self):
        data = BeneficiaryUpdate(percentage=25)

        assert data.model_fields_set == {"percentage"}


class TestCompletionStatus:
    def test_missing_lists_incomplete_steps_in_order(self):
        status = CompletionStatus(personal_info=True, signature=False, legal_consent=True, verification=False)

        assert status.missing == ["signature", "verification"]
