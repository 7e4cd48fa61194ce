"""Initial schema for Herit

Revision ID: 20261019_000000
Revises: None
Create Date: 2026-10-19 00:00:00.000000

Creates every table of the Herit backend:
- Accounts and sessions (app_users, app_refresh_tokens)
- Estate data (assets, beneficiaries)
- Digital signatures (signatures, signature_usage)
- Audit trail (audit_events)

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # Create app_users table
    op.create_table(
        "app_users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("phone_number", sa.String(50), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("pps_number", sa.String(20), nullable=True),
        sa.Column("profile_photo_url", sa.String(), nullable=True),
        sa.Column("address_line_1", sa.String(255), nullable=True),
        sa.Column("address_line_2", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("county", sa.String(100), nullable=True),
        sa.Column("eircode", sa.String(10), nullable=True),
        sa.Column("onboarding_status", sa.String(50), nullable=False, server_default="not_started"),
        sa.Column("onboarding_current_step", sa.String(50), nullable=False, server_default="personal_info"),
        sa.Column("onboarding_completed_at", sa.DateTime(), nullable=True),
        sa.Column("personal_info_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("personal_info_completed_at", sa.DateTime(), nullable=True),
        sa.Column("signature_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("signature_completed_at", sa.DateTime(), nullable=True),
        sa.Column("legal_consent_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("legal_consent_completed_at", sa.DateTime(), nullable=True),
        sa.Column("legal_consents", sa.JSON(), nullable=True),
        sa.Column("verification_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verification_completed_at", sa.DateTime(), nullable=True),
        sa.Column("verification_session_id", sa.String(255), nullable=True),
        sa.Column("verification_status", sa.String(50), nullable=True),
        sa.Column("auth_provider", sa.String(50), nullable=False, server_default="email"),
        sa.Column("auth_provider_id", sa.String(255), nullable=True),
        sa.Column("session_version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_app_users_email", "email", unique=True),
    )

    # Create app_refresh_tokens table
    op.create_table(
        "app_refresh_tokens",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("token_hash", sa.String(255), nullable=False),
        sa.Column("family", sa.String(36), nullable=False),
        sa.Column("revoked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("revoked_at", sa.DateTime(), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["app_users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("token_hash"),
        sa.Index("ix_app_refresh_tokens_user_id", "user_id"),
        sa.Index("ix_app_refresh_tokens_family", "family"),
    )

    # Create assets table
    op.create_table(
        "assets",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("asset_type", sa.String(100), nullable=False),
        sa.Column("value", sa.Float(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="EUR"),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("account_number", sa.String(255), nullable=True),
        sa.Column("bank_name", sa.String(255), nullable=True),
        sa.Column("property_address", sa.String(), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_assets_user_email", "user_email"),
    )

    # Create beneficiaries table
    op.create_table(
        "beneficiaries",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("relationship_type", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("pps_number", sa.String(20), nullable=True),
        sa.Column("photo_url", sa.String(), nullable=True),
        sa.Column("address_line_1", sa.String(255), nullable=True),
        sa.Column("address_line_2", sa.String(255), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("county", sa.String(100), nullable=True),
        sa.Column("eircode", sa.String(10), nullable=True),
        sa.Column("country", sa.String(100), nullable=False, server_default="Ireland"),
        sa.Column("percentage", sa.Float(), nullable=True),
        sa.Column("specific_assets", sa.JSON(), nullable=True),
        sa.Column("conditions", sa.String(), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_beneficiaries_user_email", "user_email"),
    )

    # Create signatures table
    op.create_table(
        "signatures",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("signature_type", sa.String(50), nullable=False),
        sa.Column("data", sa.String(), nullable=False),
        sa.Column("hash", sa.String(255), nullable=False),
        sa.Column("font_name", sa.String(100), nullable=True),
        sa.Column("font_class_name", sa.String(100), nullable=True),
        sa.Column("signature_metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("last_used", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["app_users.id"], ondelete="CASCADE"),
        sa.Index("ix_signatures_user_id", "user_id"),
    )

    # Create signature_usage table
    op.create_table(
        "signature_usage",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("signature_id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("document_type", sa.String(100), nullable=False),
        sa.Column("document_id", sa.String(255), nullable=False),
        sa.Column("usage_metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["signature_id"], ["signatures.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["app_users.id"], ondelete="CASCADE"),
        sa.Index("ix_signature_usage_signature_id", "signature_id"),
        sa.Index("ix_signature_usage_user_id", "user_id"),
    )

    # Create audit_events table
    op.create_table(
        "audit_events",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_email", sa.String(255), nullable=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("entity_type", sa.String(100), nullable=True),
        sa.Column("entity_id", sa.String(255), nullable=True),
        sa.Column("event_metadata", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.String(), nullable=True),
        sa.Column("session_id", sa.String(255), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_audit_events_user_email", "user_email"),
        sa.Index("ix_audit_events_action", "action"),
        sa.Index("ix_audit_events_timestamp", "timestamp"),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("audit_events")
    op.drop_table("signature_usage")
    op.drop_table("signatures")
    op.drop_table("beneficiaries")
    op.drop_table("assets")
    op.drop_table("app_refresh_tokens")
    op.drop_table("app_users")
