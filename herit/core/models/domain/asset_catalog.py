"""
Asset catalogue.

Static definitions of asset categories, asset types and supported currencies
served to the asset forms and used to group assets by category.
"""

from __future__ import annotations

from typing import Dict, List

from .enums import AssetCategory, AssetType

CATEGORY_DEFINITIONS: Dict[AssetCategory, dict] = {
    AssetCategory.financial: {
        "name": "Financial Assets",
        "description": "Bank accounts, investments, savings, and financial instruments",
        "types": [
            AssetType.bank_account,
            AssetType.savings_account,
            AssetType.investment_account,
            AssetType.pension,
            AssetType.shares,
            AssetType.bonds,
            AssetType.cryptocurrency,
        ],
    },
    AssetCategory.property: {
        "name": "Property Assets",
        "description": "Real estate, land, and property investments",
        "types": [
            AssetType.residential_property,
            AssetType.commercial_property,
            AssetType.land,
            AssetType.rental_property,
        ],
    },
    AssetCategory.personal: {
        "name": "Personal Property",
        "description": "Vehicles, jewelry, art, and personal belongings",
        "types": [
            AssetType.vehicle,
            AssetType.jewelry,
            AssetType.art,
            AssetType.collectibles,
            AssetType.furniture,
            AssetType.electronics,
        ],
    },
    AssetCategory.business: {
        "name": "Business Assets",
        "description": "Business interests, shares, and commercial property",
        "types": [
            AssetType.business_shares,
            AssetType.intellectual_property,
            AssetType.business_equipment,
        ],
    },
    AssetCategory.digital: {
        "name": "Digital Assets",
        "description": "Cryptocurrency, online accounts, and digital property",
        "types": [
            AssetType.digital_currency,
            AssetType.online_accounts,
            AssetType.digital_files,
            AssetType.domain_names,
        ],
    },
}

TYPE_DEFINITIONS: Dict[AssetType, dict] = {
    AssetType.bank_account: {"name": "Bank Account", "required_fields": ["bank_name", "account_number"]},
    AssetType.savings_account: {"name": "Savings Account", "required_fields": ["bank_name", "account_number"]},
    AssetType.investment_account: {"name": "Investment Account", "required_fields": ["account_number"]},
    AssetType.pension: {"name": "Pension Fund", "required_fields": []},
    AssetType.shares: {"name": "Shares & Stocks", "required_fields": []},
    AssetType.bonds: {"name": "Bonds", "required_fields": []},
    AssetType.cryptocurrency: {"name": "Cryptocurrency", "required_fields": []},
    AssetType.residential_property: {"name": "Residential Property", "required_fields": ["property_address"]},
    AssetType.commercial_property: {"name": "Commercial Property", "required_fields": ["property_address"]},
    AssetType.land: {"name": "Land", "required_fields": ["property_address"]},
    AssetType.rental_property: {"name": "Rental Property", "required_fields": ["property_address"]},
    AssetType.vehicle: {"name": "Vehicle", "required_fields": []},
    AssetType.jewelry: {"name": "Jewelry", "required_fields": []},
    AssetType.art: {"name": "Art & Collectibles", "required_fields": []},
    AssetType.collectibles: {"name": "Collectibles", "required_fields": []},
    AssetType.furniture: {"name": "Furniture", "required_fields": []},
    AssetType.electronics: {"name": "Electronics", "required_fields": []},
    AssetType.business_shares: {"name": "Business Shares", "required_fields": []},
    AssetType.intellectual_property: {"name": "Intellectual Property", "required_fields": []},
    AssetType.business_equipment: {"name": "Business Equipment", "required_fields": []},
    AssetType.digital_currency: {"name": "Digital Currency", "required_fields": []},
    AssetType.online_accounts: {"name": "Online Accounts", "required_fields": []},
    AssetType.digital_files: {"name": "Digital Files", "required_fields": []},
    AssetType.domain_names: {"name": "Domain Names", "required_fields": []},
}

CURRENCY_OPTIONS: List[dict] = [
    {"value": "EUR", "label": "Euro (€)", "symbol": "€"},
    {"value": "USD", "label": "US Dollar ($)", "symbol": "$"},
    {"value": "GBP", "label": "British Pound (£)", "symbol": "£"},
    {"value": "CHF", "label": "Swiss Franc (CHF)", "symbol": "CHF"},
    {"value": "CAD", "label": "Canadian Dollar (CAD)", "symbol": "CAD"},
    {"value": "AUD", "label": "Australian Dollar (AUD)", "symbol": "AUD"},
]

SUPPORTED_CURRENCIES = frozenset(option["value"] for option in CURRENCY_OPTIONS)


def category_for_type(asset_type: str) -> AssetCategory:
    """Return the category an asset type belongs to; unknown types count as personal."""
    for category, definition in CATEGORY_DEFINITIONS.items():
        if asset_type in {t.value for t in definition["types"]}:
            return category
    return AssetCategory.personal


def types_for_category(category: AssetCategory | str) -> List[str]:
    definition = CATEGORY_DEFINITIONS.get(AssetCategory(category))
    return [t.value for t in definition["types"]] if definition else []


def catalog_payload() -> dict:
    """Serializable view of the catalogue for the categories endpoint."""
    return {
        "categories": {
            category.value: {**definition, "types": [t.value for t in definition["types"]]}
            for category, definition in CATEGORY_DEFINITIONS.items()
        },
        "types": {
            asset_type.value: {**definition, "category": category_for_type(asset_type.value).value}
            for asset_type, definition in TYPE_DEFINITIONS.items()
        },
        "currencies": CURRENCY_OPTIONS,
    }
