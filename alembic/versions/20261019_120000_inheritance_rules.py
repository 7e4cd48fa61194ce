"""Inheritance rules and their asset allocations

Revision ID: 20261019_120000
Revises: 20261019_000000
Create Date: 2026-10-19 12:00:00.000000

Adds:
- inheritance_rules: conditional bequests owned by a user
- rule_allocations: asset shares each rule gives to a beneficiary

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_120000"
down_revision: Union[str, None] = "20261019_000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the rule tables."""

    # Create inheritance_rules table
    op.create_table(
        "inheritance_rules",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("rule_definition", sa.JSON(), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_inheritance_rules_user_email", "user_email"),
    )

    # Create rule_allocations table
    op.create_table(
        "rule_allocations",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("rule_id", sa.String(36), nullable=False),
        sa.Column("asset_id", sa.String(36), nullable=False),
        sa.Column("beneficiary_id", sa.String(36), nullable=False),
        sa.Column("allocation_percentage", sa.Float(), nullable=True),
        sa.Column("allocation_amount", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["rule_id"], ["inheritance_rules.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["asset_id"], ["assets.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["beneficiary_id"], ["beneficiaries.id"], ondelete="CASCADE"),
        sa.Index("ix_rule_allocations_rule_id", "rule_id"),
        sa.Index("ix_rule_allocations_asset_id", "asset_id"),
    )


def downgrade() -> None:
    """Drop the rule tables."""
    op.drop_table("rule_allocations")
    op.drop_table("inheritance_rules")
