"""Canonicalization of merchant names and descriptions.

``normalize`` produces the comparable form used by every matcher: case-folded,
punctuation removed, whitespace collapsed and trimmed. ``strip_digits`` is the
extra step applied to descriptions before they enter a pattern key, so that
invoice numbers, card fragments and dates-in-text do not split one recurring
payee into many patterns.

``category_hints`` scans a normalized string for coarse keyword buckets. It is
pure substring containment and has nothing to do with the edit-distance score
in :mod:`smart_categorization.similarity`.
"""

from __future__ import annotations

import re
import unicodedata

# Anything that is not a word character or whitespace, plus underscore (which
# ``\w`` would otherwise keep).
_PUNCT_RE = re.compile(r"[^\w\s]|_")
_DIGITS_RE = re.compile(r"\d+")

HINT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "food": ("restaurant", "cafe", "pizza", "burger", "food", "kitchen", "bistro", "bar", "pub"),
    "transport": ("taxi", "uber", "lyft", "bus", "train", "metro", "gas", "fuel", "parking"),
    "shopping": ("store", "shop", "market", "mall", "amazon", "ebay", "clothing", "fashion"),
    "utilities": ("electric", "water", "gas", "internet", "phone", "mobile", "utility"),
    "health": ("pharmacy", "hospital", "clinic", "doctor", "medical", "health", "dental"),
    "entertainment": ("cinema", "movie", "theater", "concert", "game", "sport", "gym", "fitness"),
}


def _collapse(s: str) -> str:
    # str.split() with no argument splits on any whitespace run and drops
    # leading/trailing whitespace.
    return " ".join(s.split())


def normalize(text: str | None) -> str:
    """Return the canonical comparable form of ``text``.

    Steps, in order: NFKC + case-fold, drop non-alphanumeric/non-space
    characters, collapse whitespace runs, trim. ``None`` and blank input yield
    ``""``. The function is idempotent.
    """

    if not text:
        return ""
    s = unicodedata.normalize("NFKC", str(text)).casefold()
    s = _PUNCT_RE.sub("", s)
    return _collapse(s)


def strip_digits(text: str | None) -> str:
    """Remove every digit, then collapse whitespace and trim.

    >>> strip_digits("amazon 4471")
    'amazon'
    """

    if not text:
        return ""
    return _collapse(_DIGITS_RE.sub("", str(text)))


def category_hints(text: str | None) -> list[str]:
    """Return hint bucket names whose keywords occur in ``normalize(text)``.

    Buckets are reported in declaration order, each at most once.
    """

    name = normalize(text)
    if not name:
        return []
    return [
        bucket
        for bucket, keywords in HINT_KEYWORDS.items()
        if any(keyword in name for keyword in keywords)
    ]


__all__ = [
    "HINT_KEYWORDS",
    "category_hints",
    "normalize",
    "strip_digits",
]
