"""Bounded task pools and error containment for batch work."""

from __future__ import annotations

import asyncio
from functools import wraps

from typing import TYPE_CHECKING, ParamSpec, TypeVar

from src.helpers.logging import get_logger
from src.helpers.metrics import record_swallowed_error


if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable


logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


async def gather_bounded(
    limit: int, coroutines: Iterable[Awaitable[T]]
) -> list[T]:
    """Run awaitables with at most ``limit`` in flight and join them all.

    Awaitables are started in iteration order, so with ``limit=1`` they run
    strictly one after another. Results are returned in input order
    regardless of completion order.

    Args:
        limit: Maximum number of awaitables running concurrently
        coroutines: Awaitables to run

    Returns:
        Results in the same order as the inputs

    Raises:
        ValueError: If limit is less than 1

    Example:
        ```python
        from src.helpers.concurrency import gather_bounded

        blocks = await gather_bounded(20, [fetch(h) for h in hashes])
        ```
    """
    if limit < 1:
        msg = f"Concurrency limit must be at least 1, got {limit}"
        raise ValueError(msg)

    semaphore = asyncio.Semaphore(limit)

    async def run(awaitable: Awaitable[T]) -> T:
        async with semaphore:
            return await awaitable

    return await asyncio.gather(*[run(c) for c in coroutines])


def swallow_errors(
    operation: str,
    default_factory: Callable[[], T],
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator turning any failure into a default value.

    Each swallowed failure is logged and counted under ``operation`` in the
    swallowed-errors counter so batch degradation stays observable.

    Args:
        operation: Name used in log lines and as the counter label
        default_factory: Builds the value returned on failure

    Returns:
        Decorated function that never raises ``Exception`` subclasses

    Example:
        ```python
        @swallow_errors("address_page", list)
        async def fetch_page(offset: int) -> list[Transaction]:
            ...

        # A failing page yields [] instead of raising
        ```
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.warning("%s failed: %s", operation, e)
                record_swallowed_error(operation)
                return default_factory()

        return wrapper

    return decorator


__all__ = ["gather_bounded", "swallow_errors"]
