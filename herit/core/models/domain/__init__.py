"""Domain enums, validators and static catalogues for Herit."""

from .enums import (
    AssetCategory,
    AssetStatus,
    AssetType,
    AuthProvider,
    BeneficiaryStatus,
    OnboardingStatus,
    OnboardingStep,
    RelationshipType,
    SignatureType,
    SortOrder,
    VerificationMethod,
)

__all__ = [
    "AssetCategory",
    "AssetStatus",
    "AssetType",
    "AuthProvider",
    "BeneficiaryStatus",
    "OnboardingStatus",
    "OnboardingStep",
    "RelationshipType",
    "SignatureType",
    "SortOrder",
    "VerificationMethod",
]
