"""create_rules_table

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 09:12:44.318205

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create rules table."""
    op.create_table(
        "rules",
        sa.Column("id", sa.String(length=36), nullable=False, comment="Rule ID (UUID)"),
        sa.Column(
            "rule_string",
            sa.Text(),
            nullable=False,
            comment="Rule expression as submitted",
        ),
        sa.Column(
            "ast",
            sa.Text(),
            nullable=False,
            comment="Canonical rule tree (JSON)",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("(CURRENT_TIMESTAMP)"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_rules_created_at"), "rules", ["created_at"], unique=False)


def downgrade() -> None:
    """Drop rules table."""
    op.drop_index(op.f("ix_rules_created_at"), table_name="rules")
    op.drop_table("rules")
