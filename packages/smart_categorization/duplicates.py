"""Duplicate detection over a transaction collection.

Used for display and import de-duplication, not for categorization scope.
Two transactions are duplicates when either

- their ``content_hash`` is equal (the same row imported twice), or
- they are fuzzy duplicates: same kind, amounts within the amount tolerance
  (one cent by default) in the same currency, dates at most one day apart,
  and merchant similarity at or above the fuzzy threshold.

Duplicate-ness is made transitive with a disjoint set, so ``A~B`` and ``B~C``
end up in one group.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from .config import DEFAULT_AMOUNT_TOLERANCE, DEFAULT_FUZZY_THRESHOLD
from .models import Transaction
from .similarity import is_same_payee

_MAX_DAY_GAP = 1


class _DisjointSet:
    def __init__(self, size: int) -> None:
        self.parent = list(range(size))

    def find(self, a: int) -> int:
        parent = self.parent
        while parent[a] != a:
            parent[a] = parent[parent[a]]
            a = parent[a]
        return a

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra == rb:
            return
        # Lowest index stays root so groups order by first appearance.
        if rb < ra:
            ra, rb = rb, ra
        self.parent[rb] = ra


def is_fuzzy_duplicate(
    a: Transaction,
    b: Transaction,
    threshold: float | None = None,
    amount_tolerance: float | None = None,
) -> bool:
    limit = DEFAULT_FUZZY_THRESHOLD if threshold is None else threshold
    tolerance = DEFAULT_AMOUNT_TOLERANCE if amount_tolerance is None else amount_tolerance
    return (
        a.kind == b.kind
        and a.amount.is_close_to(b.amount, tolerance)
        and abs((a.date - b.date).days) <= _MAX_DAY_GAP
        and is_same_payee(a.merchant, b.merchant, limit)
    )


def find_duplicate_groups(
    transactions: Sequence[Transaction],
    threshold: float | None = None,
    amount_tolerance: float | None = None,
) -> list[list[Transaction]]:
    """Return groups (size >= 2) of mutually duplicate transactions."""

    items = list(transactions)
    ds = _DisjointSet(len(items))

    by_hash: defaultdict[str, list[int]] = defaultdict(list)
    for i, tx in enumerate(items):
        by_hash[tx.content_hash].append(i)
    for idxs in by_hash.values():
        for j in idxs[1:]:
            ds.union(idxs[0], j)

    # Pairwise fuzzy pass; collections here are a single user's ledger.
    for i in range(len(items)):
        for j in range(i + 1, len(items)):
            if ds.find(i) == ds.find(j):
                continue
            if is_fuzzy_duplicate(items[i], items[j], threshold, amount_tolerance):
                ds.union(i, j)

    groups: dict[int, list[Transaction]] = {}
    for i, tx in enumerate(items):
        groups.setdefault(ds.find(i), []).append(tx)
    return [g for root, g in sorted(groups.items()) if len(g) > 1]


__all__ = ["find_duplicate_groups", "is_fuzzy_duplicate"]
