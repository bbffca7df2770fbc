"""Post-hoc "apply to similar?" suggestions.

For a given transaction the generator looks at what scope ``pattern`` and
scope ``all`` would reach, and describes each non-empty reach: how many
transactions, which existing category dominates among them and how strongly.
Nothing is mutated; an empty list simply means there is nothing to offer.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from .config import MatchingSettings
from .matching import matches_for_scope
from .models import CategorizationScope, Suggestion, Transaction
from .normalizers import category_hints
from .patterns import pattern_label

# Base confidence per scope; the strict matcher is trusted more.
_BASE_CONFIDENCE: dict[CategorizationScope, float] = {
    CategorizationScope.PATTERN: 0.95,
    CategorizationScope.ALL: 0.75,
}


def _dominant_category(matches: Sequence[Transaction]) -> tuple[str | None, int]:
    counts = Counter(t.category_id for t in matches if t.category_id)
    if not counts:
        return None, 0
    # most_common keeps first-seen order among ties
    category_id, count = counts.most_common(1)[0]
    return category_id, count


def _confidence(scope: CategorizationScope, match_count: int, agreeing: int) -> float:
    volume_bonus = min(match_count / 10, 0.2)
    agreement = agreeing / match_count if match_count else 0.0
    return min(_BASE_CONFIDENCE[scope] * agreement + volume_bonus, 1.0)


def _reason(label: str, match_count: int, category_id: str | None, agreeing: int) -> str:
    noun = "transaction" if match_count == 1 else "transactions"
    if category_id is None:
        return f'{match_count} other {noun} look like "{label}"; none is categorized yet'
    pct = round(agreeing / match_count * 100)
    return (
        f'{agreeing}/{match_count} {noun} ({pct}%) like "{label}" '
        f"are categorized as {category_id}"
    )


def _build(
    tx: Transaction, scope: CategorizationScope, matches: Sequence[Transaction]
) -> Suggestion:
    category_id, agreeing = _dominant_category(matches)
    label = pattern_label(tx)
    count = len(matches)
    return Suggestion(
        scope=scope,
        pattern_label=label,
        match_count=count,
        confidence=_confidence(scope, count, agreeing),
        reason=_reason(label, count, category_id, agreeing),
        category_id=category_id,
        agreement=agreeing / count if count else 0.0,
        match_ids=tuple(t.id for t in matches),
        hints=tuple(category_hints(tx.merchant)),
    )


def suggest(
    tx: Transaction,
    transactions: Sequence[Transaction],
    settings: MatchingSettings | None = None,
) -> list[Suggestion]:
    """Suggest scope expansions for ``tx``, most confident first."""

    settings = settings or MatchingSettings()
    pattern_matches = matches_for_scope(tx, transactions, CategorizationScope.PATTERN)
    broad_matches = matches_for_scope(
        tx,
        transactions,
        CategorizationScope.ALL,
        amount_tolerance=settings.amount_tolerance,
    )

    out: list[Suggestion] = []
    if pattern_matches:
        out.append(_build(tx, CategorizationScope.PATTERN, pattern_matches))
    # Only worth offering when it reaches further than the strict pattern.
    if len(broad_matches) > len(pattern_matches):
        out.append(_build(tx, CategorizationScope.ALL, broad_matches))

    out = [s for s in out if s.confidence >= settings.suggestion_min_confidence]
    out.sort(key=lambda s: s.confidence, reverse=True)
    return out


__all__ = ["suggest"]
