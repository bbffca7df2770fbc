"""Edit-distance similarity between merchant strings."""

from __future__ import annotations

from .config import DEFAULT_FUZZY_THRESHOLD
from .normalizers import normalize


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit cost for insert, delete and substitute.

    Two-row dynamic programme; memory is ``O(min(len(a), len(b)))``.
    """

    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + (ca != cb),  # substitution
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str | None, b: str | None) -> float:
    """Return a closeness score in ``[0, 1]`` for two merchant strings.

    Both inputs are normalized first. Identical strings (including two empty
    strings) score ``1.0``; an empty string against a non-empty one scores
    ``0.0``. Otherwise ``(max_len - distance) / max_len``.
    """

    na, nb = normalize(a), normalize(b)
    if na == nb:
        return 1.0
    if not na or not nb:
        return 0.0
    max_len = max(len(na), len(nb))
    return (max_len - edit_distance(na, nb)) / max_len


def is_same_payee(a: str | None, b: str | None, threshold: float | None = None) -> bool:
    """True when ``similarity(a, b)`` reaches ``threshold`` (default 0.8)."""

    limit = DEFAULT_FUZZY_THRESHOLD if threshold is None else threshold
    return similarity(a, b) >= limit


__all__ = ["edit_distance", "is_same_payee", "similarity"]
