"""Bounded fan-out of independent per-record mutations.

``apply_each`` runs a callable over items with at most ``concurrency`` calls in
flight and never lets one item's failure affect another: every call yields an
:class:`ItemResult` holding either the return value or the exception it
raised. Results come back in input order.

With ``concurrency == 1`` the calls run inline on the caller's thread, so a
sequential configuration has no thread-pool overhead at all.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Generic, TypeVar

InT = TypeVar("InT")
OutT = TypeVar("OutT")


@dataclass(frozen=True, slots=True)
class ItemResult(Generic[InT, OutT]):
    item: InT
    value: OutT | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _call(fn: Callable[[InT], OutT], item: InT) -> ItemResult[InT, OutT]:
    try:
        return ItemResult(item=item, value=fn(item))
    except Exception as exc:  # noqa: BLE001 - isolation is the point
        return ItemResult(item=item, error=exc)


def apply_each(
    items: Iterable[InT],
    fn: Callable[[InT], OutT],
    *,
    concurrency: int = 1,
) -> list[ItemResult[InT, OutT]]:
    """Apply ``fn`` to every item, isolating failures per item."""

    if not isinstance(concurrency, int) or concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    if concurrency == 1:
        return [_call(fn, item) for item in items]

    it = enumerate(items)
    results: dict[int, ItemResult[InT, OutT]] = {}
    future_to_idx: dict[Future, int] = {}

    def _submit(pool: ThreadPoolExecutor) -> Future | None:
        try:
            idx, item = next(it)
        except StopIteration:
            return None
        fut = pool.submit(_call, fn, item)
        future_to_idx[fut] = idx
        return fut

    with ThreadPoolExecutor(max_workers=concurrency) as pool:
        active: set[Future] = set()
        for _ in range(concurrency):
            fut = _submit(pool)
            if fut is None:
                break
            active.add(fut)

        # Keep the window full until the input is drained.
        while active:
            done, active = wait(active, return_when=FIRST_COMPLETED)
            for fut in done:
                results[future_to_idx.pop(fut)] = fut.result()
            for _ in range(len(done)):
                fut = _submit(pool)
                if fut is None:
                    break
                active.add(fut)

    return [results[i] for i in sorted(results)]


__all__ = ["ItemResult", "apply_each"]
