"""Pattern keys: the grouping identity for scope ``pattern``.

A transaction's pattern is ``normalize(merchant)`` joined with the
digit-stripped normalized description. The key is a short, opaque hash of
that text. Keys are recomputed on every match and never stored, so renaming a
merchant changes its future matches only.
"""

from __future__ import annotations

from .models import Transaction
from .normalizers import normalize, strip_digits

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_MASK32 = 0xFFFFFFFF


def pattern_text(merchant: str | None, description: str | None) -> str:
    """Return the canonical ``merchant_description`` text that gets hashed."""

    return f"{normalize(merchant)}_{strip_digits(normalize(description))}"


def _to_signed32(n: int) -> int:
    n &= _MASK32
    return n - (1 << 32) if n & 0x80000000 else n


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    sign = "-" if n < 0 else ""
    n = abs(n)
    digits: list[str] = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
    return sign + "".join(reversed(digits))


def fold_hash(text: str) -> str:
    """Fold ``text`` into a signed 32-bit accumulator and base-36 encode it.

    Each character updates ``h = h * 31 + ord(c)`` with 32-bit wrap-around.
    Unlike the builtin ``hash()`` this is stable across processes.
    """

    h = 0
    for ch in text:
        h = _to_signed32(h * 31 + ord(ch))
    return _base36(h)


def build_key(tx: Transaction) -> str:
    """Pattern key for ``tx``; equal keys mean pattern-equal transactions."""

    return fold_hash(pattern_text(tx.merchant, tx.description))


def pattern_label(tx: Transaction) -> str:
    """Readable label for the pattern (suggestions, rule descriptors)."""

    merchant = normalize(tx.merchant)
    desc = strip_digits(normalize(tx.description))
    if merchant and desc:
        return f"{merchant} / {desc}"
    return merchant or desc or "(no merchant)"


__all__ = ["build_key", "fold_hash", "pattern_label", "pattern_text"]
