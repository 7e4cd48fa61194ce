"""
Database repository layer using SQLModel.

This package contains all repository classes organized by business domain
and table relationships. Each module provides type-safe data access operations
for its corresponding SQLModel entity models.

Modules:
- base: AsyncBaseRepository interface and QueryBuilder utilities
- users: User lookups by id and email
- refresh_tokens: Hashed refresh token storage and revocation
- assets: Owner-scoped asset search and aggregation
- beneficiaries: Owner-scoped beneficiary search and allocation totals
- rules: Inheritance rules and their per-asset allocations
- signatures: Signatures and signature usage ledger
- audit_events: Append-only audit log
"""

from .assets import AssetQuery, AssetRepository
from .audit_events import AuditEventRepository
from .beneficiaries import BeneficiaryQuery, BeneficiaryRepository
from .refresh_tokens import RefreshTokenRepository
from .rules import ExistingAllocation, RuleAllocationRepository, RuleRepository
from .signatures import SignatureRepository
from .users import UserRepository

__all__ = [
    "AssetQuery",
    "AssetRepository",
    "AuditEventRepository",
    "BeneficiaryQuery",
    "BeneficiaryRepository",
    "ExistingAllocation",
    "RefreshTokenRepository",
    "RuleAllocationRepository",
    "RuleRepository",
    "SignatureRepository",
    "UserRepository",
]
