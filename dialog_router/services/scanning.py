"""Sequential short-circuiting scans shared by the collector and resolver."""

from __future__ import annotations

from typing import Awaitable, Callable, Iterable, Optional, Sequence, TypeVar

T = TypeVar("T")


async def find_async(
    items: Iterable[T], predicate: Callable[[T], Awaitable[bool]]
) -> Optional[T]:
    """Return the first item whose predicate resolves truthy.

    Predicates are awaited one at a time in iteration order; items after the
    first hit are never evaluated. Exceptions raised by a predicate propagate.
    """
    for item in items:
        if await predicate(item):
            return item
    return None


def first_non_empty(stages: Iterable[Callable[[], Sequence[T]]]) -> list[T]:
    """Run ``stages`` in order and return the first non-empty result."""
    for stage in stages:
        result = stage()
        if result:
            return list(result)
    return []


async def first_result(stages: Iterable[Callable[[], Awaitable[Optional[T]]]]) -> Optional[T]:
    """Await ``stages`` in order and return the first result that is not ``None``."""
    for stage in stages:
        result = await stage()
        if result is not None:
            return result
    return None


__all__ = ["find_async", "first_non_empty", "first_result"]
