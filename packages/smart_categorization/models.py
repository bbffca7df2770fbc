"""Domain records, commands and result payloads for smart categorization.

Records are frozen ``dataclass`` instances. Mutation is expressed by returning
a new record (``Transaction.with_category`` / ``Transaction.with_tag``); the
repository decides how the new state is stored.

Commands are small typed records with a ``validate()`` method that reports
*every* violated constraint as a :class:`Violation` instead of raising.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from enum import StrEnum


class TransactionKind(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"
    INVESTMENT = "investment"


class CategoryKind(StrEnum):
    INCOME = "income"
    ESSENTIAL = "essential"
    DISCRETIONARY = "discretionary"
    INVESTMENT = "investment"
    DEBT_PAYMENT = "debt_payment"
    NO_COMPUTE = "no_compute"


class CategorizationScope(StrEnum):
    """Breadth of a categorization or tag command."""

    SINGLE = "single"
    PATTERN = "pattern"
    ALL = "all"


# ---------------------------------------------------------------------------
# Ledger records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Money:
    amount: Decimal
    currency: str = "EUR"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        object.__setattr__(self, "currency", self.currency.strip().upper())

    def is_close_to(self, other: Money, tolerance: float) -> bool:
        """Same currency and ``|a - b| < tolerance``."""

        if self.currency != other.currency:
            return False
        return abs(self.amount - other.amount) < Decimal(str(tolerance))


@dataclass(frozen=True, slots=True)
class Category:
    """Read-only category reference; presentation fields are carried through."""

    id: str
    name: str
    kind: CategoryKind
    color: str | None = None
    icon: str | None = None


@dataclass(frozen=True, slots=True)
class Transaction:
    """A ledger entry as seen by the categorization engine.

    ``tags`` behaves as a set (no duplicates) but keeps insertion order so
    that displays stay stable.
    """

    id: str
    amount: Money
    date: date
    merchant: str
    kind: TransactionKind
    description: str | None = None
    category_id: str | None = None
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        deduped = tuple(dict.fromkeys(self.tags))
        if deduped != self.tags:
            object.__setattr__(self, "tags", deduped)

    @property
    def content_hash(self) -> str:
        """SHA-256 over the import identity fields (not the pattern key).

        Two rows from overlapping CSV exports produce the same hash, which is
        what duplicate-import detection keys on.
        """

        payload = {
            "date": self.date.isoformat(),
            "merchant": " ".join(self.merchant.split()),
            "amount": f"{self.amount.amount:.2f}",
            "currency": self.amount.currency,
            "kind": str(self.kind),
        }
        data = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
        return hashlib.sha256(data.encode("utf-8")).hexdigest()

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def with_category(self, category_id: str) -> Transaction:
        return replace(self, category_id=category_id)

    def with_tag(self, tag: str) -> Transaction:
        """Return a copy carrying ``tag``; unchanged when already present."""

        if tag in self.tags:
            return self
        return replace(self, tags=(*self.tags, tag))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Violation:
    field: str
    message: str


def _blank(value: str | None) -> bool:
    return value is None or not str(value).strip()


def _scope_violation(scope: object) -> Violation | None:
    try:
        CategorizationScope(scope)
    except ValueError:
        return Violation("scope", f"Invalid categorization scope: {scope!r}")
    return None


@dataclass(frozen=True, slots=True)
class CategorizeCommand:
    transaction_id: str
    category_id: str
    scope: CategorizationScope | str = CategorizationScope.SINGLE
    # Intent to keep a standing rule; the engine only emits a descriptor.
    apply_to_future: bool = False

    def validate(self) -> list[Violation]:
        errors: list[Violation] = []
        if _blank(self.transaction_id):
            errors.append(Violation("transaction_id", "Transaction ID cannot be empty"))
        if _blank(self.category_id):
            errors.append(Violation("category_id", "Category ID cannot be empty"))
        scope_err = _scope_violation(self.scope)
        if scope_err is not None:
            errors.append(scope_err)
        return errors


@dataclass(frozen=True, slots=True)
class TagCommand:
    transaction_id: str
    tag: str
    scope: CategorizationScope | str = CategorizationScope.SINGLE

    def validate(self) -> list[Violation]:
        errors: list[Violation] = []
        if _blank(self.transaction_id):
            errors.append(Violation("transaction_id", "Transaction ID cannot be empty"))
        if _blank(self.tag):
            errors.append(Violation("tag", "Tag cannot be empty"))
        scope_err = _scope_violation(self.scope)
        if scope_err is not None:
            errors.append(scope_err)
        return errors


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RuleDescriptor:
    """Standing-rule intent emitted for ``apply_to_future``; never stored here."""

    id: str
    pattern_key: str
    pattern_label: str
    category_id: str
    kind: TransactionKind
    # Higher runs first when several rules match; new rules start at 0.
    priority: int = 0


@dataclass(frozen=True, slots=True)
class Suggestion:
    """An offer to expand a categorization to similar transactions."""

    scope: CategorizationScope
    pattern_label: str
    match_count: int
    confidence: float
    reason: str
    category_id: str | None = None
    # Share of matches already carrying ``category_id`` (0 when none do).
    agreement: float = 0.0
    match_ids: tuple[str, ...] = ()
    # Keyword buckets found in the merchant name, e.g. ("food",).
    hints: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class CategorizationResult:
    transaction: Transaction
    applied_count: int
    suggestions: list[Suggestion] = field(default_factory=list)
    created_rule: RuleDescriptor | None = None
    # Secondary applications that failed; callers compare against expectations.
    skipped: int = 0


@dataclass(frozen=True, slots=True)
class TagResult:
    transaction: Transaction
    applied_count: int
    affected_ids: list[str] = field(default_factory=list)
    skipped: int = 0


__all__ = [
    "CategorizationResult",
    "CategorizationScope",
    "CategorizeCommand",
    "Category",
    "CategoryKind",
    "Money",
    "RuleDescriptor",
    "Suggestion",
    "TagCommand",
    "TagResult",
    "Transaction",
    "TransactionKind",
    "Violation",
]
