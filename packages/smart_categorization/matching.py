"""Matching engine: which transactions are "the same kind of thing".

Two strategies exist and are kept separate on purpose:

- ``find_pattern_matches``: exact pattern-key equality. Governs scope
  ``pattern``.
- ``find_matches``: the broad heuristic. A candidate matches on equal keys,
  on merchant containment in either direction, or on an amount within the
  tolerance. Governs scope ``all``.

Both exclude the source by id and keep input order. Kind filtering is applied
by ``matches_for_scope``; the raw finders do not look at kinds.
"""

from __future__ import annotations

from collections.abc import Iterable

from .config import DEFAULT_AMOUNT_TOLERANCE
from .models import CategorizationScope, Transaction
from .normalizers import normalize
from .patterns import build_key


def find_pattern_matches(source: Transaction, transactions: Iterable[Transaction]) -> list[Transaction]:
    key = build_key(source)
    return [t for t in transactions if t.id != source.id and build_key(t) == key]


def _merchant_contains(a: str, b: str) -> bool:
    # Empty merchants would otherwise be a substring of everything.
    if not a or not b:
        return False
    return a in b or b in a


def find_matches(
    source: Transaction,
    transactions: Iterable[Transaction],
    *,
    amount_tolerance: float | None = None,
) -> list[Transaction]:
    """Broad match: equal key, merchant containment, or near-equal amount."""

    tolerance = DEFAULT_AMOUNT_TOLERANCE if amount_tolerance is None else amount_tolerance
    key = build_key(source)
    merchant = normalize(source.merchant)

    out: list[Transaction] = []
    for t in transactions:
        if t.id == source.id:
            continue
        if (
            build_key(t) == key
            or _merchant_contains(normalize(t.merchant), merchant)
            or t.amount.is_close_to(source.amount, tolerance)
        ):
            out.append(t)
    return out


def same_kind(source: Transaction, candidates: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in candidates if t.kind == source.kind]


def matches_for_scope(
    source: Transaction,
    transactions: Iterable[Transaction],
    scope: CategorizationScope,
    *,
    amount_tolerance: float | None = None,
) -> list[Transaction]:
    """Kind-compatible matches for ``scope`` (empty for ``single``)."""

    scope = CategorizationScope(scope)
    if scope is CategorizationScope.SINGLE:
        return []
    if scope is CategorizationScope.PATTERN:
        found = find_pattern_matches(source, transactions)
    else:
        found = find_matches(source, transactions, amount_tolerance=amount_tolerance)
    return same_kind(source, found)


__all__ = [
    "find_matches",
    "find_pattern_matches",
    "matches_for_scope",
    "same_kind",
]
