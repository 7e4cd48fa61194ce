"""Enumerations shared by entities, I/O models and services."""

from __future__ import annotations

from enum import Enum


class OnboardingStatus(str, Enum):
    """Overall progress of a user's onboarding."""

    not_started = "not_started"
    in_progress = "in_progress"
    completed = "completed"


class OnboardingStep(str, Enum):
    """
    Steps of the onboarding flow, in order.

    ``completed`` is the terminal marker stored in ``onboarding_current_step``
    once onboarding has been finalized.
    """

    personal_info = "personal_info"
    signature = "signature"
    legal_consent = "legal_consent"
    verification = "verification"
    completed = "completed"


class AuthProvider(str, Enum):
    email = "email"
    google = "google"


class SignatureType(str, Enum):
    """How a signature was produced."""

    drawn = "drawn"
    uploaded = "uploaded"
    template = "template"  # Typed name rendered in a script font.


class VerificationMethod(str, Enum):
    """Identity verification options offered in the last onboarding step."""

    stripe_identity = "stripe_identity"
    manual = "manual"
    skip = "skip"


class AssetCategory(str, Enum):
    financial = "financial"
    property = "property"
    personal = "personal"
    business = "business"
    digital = "digital"


class AssetType(str, Enum):
    """Concrete asset kinds, grouped by category in ``asset_catalog``."""

    # Financial
    bank_account = "bank_account"
    savings_account = "savings_account"
    investment_account = "investment_account"
    pension = "pension"
    shares = "shares"
    bonds = "bonds"
    cryptocurrency = "cryptocurrency"
    # Property
    residential_property = "residential_property"
    commercial_property = "commercial_property"
    land = "land"
    rental_property = "rental_property"
    # Personal
    vehicle = "vehicle"
    jewelry = "jewelry"
    art = "art"
    collectibles = "collectibles"
    furniture = "furniture"
    electronics = "electronics"
    # Business
    business_shares = "business_shares"
    intellectual_property = "intellectual_property"
    business_equipment = "business_equipment"
    # Digital
    digital_currency = "digital_currency"
    online_accounts = "online_accounts"
    digital_files = "digital_files"
    domain_names = "domain_names"


class AssetStatus(str, Enum):
    active = "active"
    inactive = "inactive"  # Soft-deleted.
    pending_verification = "pending_verification"
    disputed = "disputed"


class RelationshipType(str, Enum):
    """Relationship of a beneficiary to the user."""

    spouse = "spouse"
    child = "child"
    parent = "parent"
    sibling = "sibling"
    grandchild = "grandchild"
    grandparent = "grandparent"
    niece_nephew = "niece_nephew"
    aunt_uncle = "aunt_uncle"
    cousin = "cousin"
    friend = "friend"
    charity = "charity"
    other = "other"


class BeneficiaryStatus(str, Enum):
    active = "active"
    deleted = "deleted"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class RuleOperator(str, Enum):
    """Comparison operators accepted in inheritance rule conditions."""

    equal = "equal"
    not_equal = "notEqual"
    less_than = "lessThan"
    less_than_inclusive = "lessThanInclusive"
    greater_than = "greaterThan"
    greater_than_inclusive = "greaterThanInclusive"
    in_ = "in"
    not_in = "notIn"
    contains = "contains"
    does_not_contain = "doesNotContain"
