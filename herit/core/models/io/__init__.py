"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- auth: Registration, login and session models
- onboarding: Per-step onboarding payloads
- assets: Asset CRUD, listing and summary models
- beneficiaries: Beneficiary CRUD and listing models
- rules: Inheritance rules, allocations and allocation checks
- audit: Client-reported audit events
"""
