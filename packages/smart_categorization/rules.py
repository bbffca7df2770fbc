"""Rule descriptors for "apply to future" and their in-memory application.

The orchestrator only *emits* a :class:`RuleDescriptor`; storing it is the
host application's job. ``apply_rules`` lets the host run stored descriptors
against newly imported, uncategorized transactions.
"""

from __future__ import annotations

import uuid
from collections import Counter
from collections.abc import Iterable, Sequence

from .models import RuleDescriptor, Transaction
from .patterns import build_key, pattern_label


def build_rule(tx: Transaction, category_id: str, priority: int = 0) -> RuleDescriptor:
    return RuleDescriptor(
        id=f"rule-{uuid.uuid4().hex[:12]}",
        pattern_key=build_key(tx),
        pattern_label=pattern_label(tx),
        category_id=category_id,
        kind=tx.kind,
        priority=priority,
    )


def apply_rules(
    rules: Sequence[RuleDescriptor], transactions: Iterable[Transaction]
) -> tuple[list[Transaction], Counter[str]]:
    """Categorize uncategorized transactions with the best matching rule.

    A rule matches when both the pattern key and the kind are equal. Among
    matching rules the highest ``priority`` wins; equal priorities keep the
    order of ``rules``. Returns the (possibly updated) transactions in input
    order and a per-rule count of applications. Categorized transactions are
    never overwritten.
    """

    ordered = sorted(rules, key=lambda r: -r.priority)
    applied: Counter[str] = Counter()
    out: list[Transaction] = []
    for tx in transactions:
        if tx.category_id is not None:
            out.append(tx)
            continue
        key = build_key(tx)
        rule = next((r for r in ordered if r.pattern_key == key and r.kind == tx.kind), None)
        if rule is None:
            out.append(tx)
            continue
        out.append(tx.with_category(rule.category_id))
        applied[rule.id] += 1
    return out, applied


__all__ = ["apply_rules", "build_rule"]
