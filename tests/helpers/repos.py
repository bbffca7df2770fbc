"""Repository doubles: call recording and targeted failures."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from smart_categorization.models import Category, Transaction
from smart_categorization.repository import InMemoryRepository


class RecordingRepository(InMemoryRepository):
    """In-memory repository that logs every call as ``(method, arg)``."""

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        categories: Iterable[Category] = (),
    ) -> None:
        super().__init__(transactions, categories)
        self.calls: list[tuple[str, str | None]] = []

    @property
    def methods(self) -> list[str]:
        return [name for name, _ in self.calls]

    def find_by_id(self, transaction_id: str) -> Transaction | None:
        self.calls.append(("find_by_id", transaction_id))
        return super().find_by_id(transaction_id)

    def find_all(self) -> list[Transaction]:
        self.calls.append(("find_all", None))
        return super().find_all()

    def save(self, transaction: Transaction) -> None:
        self.calls.append(("save", transaction.id))
        super().save(transaction)

    def update_tags(self, transaction_id: str, tags: Sequence[str]) -> None:
        self.calls.append(("update_tags", transaction_id))
        super().update_tags(transaction_id, tags)

    def find_category_by_id(self, category_id: str) -> Category | None:
        self.calls.append(("find_category_by_id", category_id))
        return super().find_category_by_id(category_id)


class FlakyRepository(RecordingRepository):
    """Raise ``OSError`` for writes to ``failing_ids`` or calls to ``failing_methods``."""

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        categories: Iterable[Category] = (),
        *,
        failing_ids: Iterable[str] = (),
        failing_methods: Iterable[str] = (),
    ) -> None:
        super().__init__(transactions, categories)
        self.failing_ids = set(failing_ids)
        self.failing_methods = set(failing_methods)
        # find_all is also used to compute suggestions; count the reads so a
        # test can fail only the later ones.
        self.find_all_failures_after: int | None = None
        self._find_all_reads = 0

    def _maybe_fail(self, method: str, tx_id: str | None = None) -> None:
        if method in self.failing_methods:
            raise OSError(f"{method} unavailable")
        if tx_id is not None and tx_id in self.failing_ids and method in {"save", "update_tags"}:
            raise OSError(f"disk full while writing {tx_id}")

    def find_by_id(self, transaction_id: str) -> Transaction | None:
        self._maybe_fail("find_by_id")
        return super().find_by_id(transaction_id)

    def find_all(self) -> list[Transaction]:
        self._maybe_fail("find_all")
        self._find_all_reads += 1
        if (
            self.find_all_failures_after is not None
            and self._find_all_reads > self.find_all_failures_after
        ):
            raise OSError("connection reset")
        return super().find_all()

    def save(self, transaction: Transaction) -> None:
        self._maybe_fail("save", transaction.id)
        super().save(transaction)

    def update_tags(self, transaction_id: str, tags: Sequence[str]) -> None:
        self._maybe_fail("update_tags", transaction_id)
        super().update_tags(transaction_id, tags)

    def find_category_by_id(self, category_id: str) -> Category | None:
        self._maybe_fail("find_category_by_id")
        return super().find_category_by_id(category_id)
