"""
Database entity models.

This package contains all database entity models organized by business domain
and table relationships.

Modules:
- users: Application users and onboarding progress
- refresh_tokens: Hashed refresh tokens grouped by rotation family
- assets: Estate assets
- beneficiaries: Estate beneficiaries
- rules: Inheritance rules and their asset allocations
- signatures: Digital signatures and their usage ledger
- audit_events: Append-only audit log
"""

from . import (
    assets,
    audit_events,
    beneficiaries,
    refresh_tokens,
    rules,
    signatures,
    users,
)

__all__ = [
    "assets",
    "audit_events",
    "beneficiaries",
    "refresh_tokens",
    "rules",
    "signatures",
    "users",
]
