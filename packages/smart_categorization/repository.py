"""Repository capability set consumed by the orchestrator.

The engine does not know how transactions are stored. It needs five
record-at-a-time operations, described by :class:`TransactionRepository`.
Implementations signal "absent" with ``None`` and signal I/O failure by
raising; the orchestrator turns raised exceptions into ``PersistenceError``
outcomes.

``InMemoryRepository`` backs the tests and small embedded uses;
:mod:`smart_categorization.persistence` provides the SQLAlchemy one.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Protocol, runtime_checkable

from .models import Category, Transaction


@runtime_checkable
class TransactionRepository(Protocol):
    def find_by_id(self, transaction_id: str) -> Transaction | None: ...

    def find_all(self) -> list[Transaction]: ...

    def save(self, transaction: Transaction) -> None: ...

    def update_tags(self, transaction_id: str, tags: Sequence[str]) -> None: ...

    def find_category_by_id(self, category_id: str) -> Category | None: ...


class InMemoryRepository:
    """Dict-backed repository with upsert ``save`` and wholesale tag replace.

    Each method call runs under one lock, so a single read or write is atomic.
    A read followed by a write is two calls; another thread may write between
    them.
    """

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        categories: Iterable[Category] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._transactions: dict[str, Transaction] = {t.id: t for t in transactions}
        self._categories: dict[str, Category] = {c.id: c for c in categories}

    def find_by_id(self, transaction_id: str) -> Transaction | None:
        with self._lock:
            return self._transactions.get(transaction_id)

    def find_all(self) -> list[Transaction]:
        with self._lock:
            return list(self._transactions.values())

    def save(self, transaction: Transaction) -> None:
        with self._lock:
            self._transactions[transaction.id] = transaction

    def update_tags(self, transaction_id: str, tags: Sequence[str]) -> None:
        with self._lock:
            current = self._transactions.get(transaction_id)
            if current is None:
                raise KeyError(f"unknown transaction: {transaction_id!r}")
            self._transactions[transaction_id] = replace(current, tags=tuple(tags))

    def find_category_by_id(self, category_id: str) -> Category | None:
        with self._lock:
            return self._categories.get(category_id)

    def add_category(self, category: Category) -> None:
        with self._lock:
            self._categories[category.id] = category


__all__ = ["InMemoryRepository", "TransactionRepository"]
