# ruff: noqa: I001
"""Smart categorization ledger tables.

Revision ID: 0001_sc_core
Revises: None
Create Date: 2026-10-16
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_sc_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # sc_categories
    op.create_table(
        "sc_categories",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("kind", sa.String(), nullable=False),
        sa.Column("color", sa.String(), nullable=True),
        sa.Column("icon", sa.String(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("'1'")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint(
            "kind in ('income','essential','discretionary','investment','debt_payment','no_compute')",
            name="ck_sc_category_kind",
        ),
    )

    # sc_transactions
    op.create_table(
        "sc_transactions",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("currency_code", sa.CHAR(3), nullable=False, server_default="EUR"),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("merchant", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("kind", sa.String(), nullable=False),
        sa.Column(
            "category_id",
            sa.String(),
            sa.ForeignKey("sc_categories.id", deferrable=True, initially="DEFERRED"),
            nullable=True,
        ),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("content_hash", sa.CHAR(64), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint(
            "kind in ('income','expense','investment')",
            name="ck_sc_tx_kind",
        ),
    )
    op.create_index("ix_sc_tx_content_hash", "sc_transactions", ["content_hash"])


def downgrade() -> None:
    op.drop_index("ix_sc_tx_content_hash", table_name="sc_transactions")
    op.drop_table("sc_transactions")
    op.drop_table("sc_categories")
