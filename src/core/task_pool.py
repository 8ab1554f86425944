"""Bounded fan-out with a join barrier.

Each stage submits independent units of work to a thread pool, waits for
all of them, and receives one ``ItemResult`` per input in input order.
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterable, TypeVar

from core.types import ItemResult

S = TypeVar("S")
T = TypeVar("T")


def run_parallel(
    items: Iterable[S],
    work: Callable[[S], T],
    max_workers: int,
) -> list[ItemResult[S, T]]:
    """Run ``work`` over ``items`` concurrently and collect per-item outcomes.

    Args:
        items: Inputs, one unit of work each.
        work: Function applied to one input.
        max_workers: Upper bound of concurrently running units.

    Returns:
        Results in input order; exceptions become failed results.
    """
    pending = list(items)
    if not pending:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(pending)))) as executor:
        futures = [executor.submit(work, item) for item in pending]
        return [_collect(item, future) for item, future in zip(pending, futures)]


def _collect(item: S, future: Future[T]) -> ItemResult[S, T]:
    try:
        return ItemResult(item=item, value=future.result())
    except Exception as error:
        return ItemResult(item=item, error=f"{type(error).__name__}: {error}")
