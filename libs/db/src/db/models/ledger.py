from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    CHAR,
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Reference: sc_categories
# ---------------------------


class LedgerCategory(Base):
    __tablename__ = "sc_categories"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    kind: Mapped[str] = mapped_column(String, nullable=False)
    # Presentation only; the engine passes these through untouched.
    color: Mapped[str | None] = mapped_column(String, nullable=True)
    icon: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="1")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "kind in ('income','essential','discretionary','investment','debt_payment','no_compute')",
            name="ck_sc_category_kind",
        ),
    )


# ---------------------------
# Core: sc_transactions
# ---------------------------


class LedgerTransaction(Base):
    __tablename__ = "sc_transactions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    currency_code: Mapped[str] = mapped_column(CHAR(3), nullable=False, server_default="EUR")
    date: Mapped[date] = mapped_column(Date, nullable=False)
    merchant: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    kind: Mapped[str] = mapped_column(String, nullable=False)
    category_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("sc_categories.id", deferrable=True, initially="DEFERRED"),
        nullable=True,
    )
    # Stored as a JSON array; the engine treats it as an ordered set.
    tags: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    # Import identity (duplicate detection). Not unique: overlapping exports
    # are allowed in and flagged later. The pattern key is never stored.
    content_hash: Mapped[str] = mapped_column(CHAR(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "kind in ('income','expense','investment')",
            name="ck_sc_tx_kind",
        ),
        Index("ix_sc_tx_content_hash", "content_hash"),
    )


__all__ = [
    "Base",
    "LedgerCategory",
    "LedgerTransaction",
]
