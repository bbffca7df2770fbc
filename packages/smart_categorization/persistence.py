"""SQLAlchemy-backed repository over the ``db`` library's ledger tables.

Every repository call opens its own ``session_scope`` and commits on exit, so
writes are record-atomic and nothing spans records. That matches the engine's
best-effort contract for scoped commands.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from db.client import session_scope
from db.models.ledger import LedgerCategory, LedgerTransaction
from sqlalchemy import func, select

from .logging_setup import get_logger
from .models import Category, CategoryKind, Money, Transaction, TransactionKind

logger = get_logger(__name__)


def _to_decimal_2(raw: Decimal) -> Decimal:
    return Decimal(str(raw)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _to_domain(row: LedgerTransaction) -> Transaction:
    return Transaction(
        id=row.id,
        amount=Money(_to_decimal_2(row.amount), row.currency_code),
        date=row.date,
        merchant=row.merchant,
        description=row.description,
        kind=TransactionKind(row.kind),
        category_id=row.category_id,
        tags=tuple(str(t) for t in (row.tags or [])),
    )


def _category_to_domain(row: LedgerCategory) -> Category:
    return Category(
        id=row.id,
        name=row.name,
        kind=CategoryKind(row.kind),
        color=row.color,
        icon=row.icon,
    )


def _copy_onto(row: LedgerTransaction, tx: Transaction) -> None:
    row.amount = _to_decimal_2(tx.amount.amount)
    row.currency_code = tx.amount.currency
    row.date = tx.date
    row.merchant = tx.merchant
    row.description = tx.description
    row.kind = str(tx.kind)
    row.category_id = tx.category_id
    row.tags = list(tx.tags)
    row.content_hash = tx.content_hash


class SqlAlchemyRepository:
    """:class:`~smart_categorization.repository.TransactionRepository` over SQL.

    ``database_url`` overrides the ``DATABASE_URL`` environment variable.
    """

    def __init__(self, *, database_url: str | None = None) -> None:
        self._url = database_url

    def find_by_id(self, transaction_id: str) -> Transaction | None:
        with session_scope(database_url=self._url) as session:
            row = session.get(LedgerTransaction, transaction_id)
            return _to_domain(row) if row is not None else None

    def find_all(self) -> list[Transaction]:
        stmt = select(LedgerTransaction).order_by(LedgerTransaction.date, LedgerTransaction.id)
        with session_scope(database_url=self._url) as session:
            return [_to_domain(r) for r in session.scalars(stmt)]

    def save(self, transaction: Transaction) -> None:
        """Upsert by id."""

        with session_scope(database_url=self._url) as session:
            row = session.get(LedgerTransaction, transaction.id)
            if row is None:
                row = LedgerTransaction(id=transaction.id)
                session.add(row)
            else:
                row.updated_at = func.now()
            _copy_onto(row, transaction)

    def update_tags(self, transaction_id: str, tags: Sequence[str]) -> None:
        """Replace the tag set wholesale."""

        with session_scope(database_url=self._url) as session:
            row = session.get(LedgerTransaction, transaction_id)
            if row is None:
                raise LookupError(f"unknown transaction: {transaction_id!r}")
            row.tags = list(dict.fromkeys(tags))
            row.updated_at = func.now()

    def find_category_by_id(self, category_id: str) -> Category | None:
        with session_scope(database_url=self._url) as session:
            row = session.get(LedgerCategory, category_id)
            if row is None or not row.is_active:
                return None
            return _category_to_domain(row)

    def upsert_categories(self, categories: Iterable[Category]) -> int:
        """Insert or update categories; returns how many rows were written."""

        written = 0
        with session_scope(database_url=self._url) as session:
            for cat in categories:
                row = session.get(LedgerCategory, cat.id)
                if row is None:
                    row = LedgerCategory(id=cat.id)
                    session.add(row)
                row.name = cat.name
                row.kind = str(cat.kind)
                row.color = cat.color
                row.icon = cat.icon
                row.is_active = True
                written += 1
        logger.debug("Upserted %d categories", written)
        return written


__all__ = ["SqlAlchemyRepository"]
