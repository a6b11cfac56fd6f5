"""Bounded fan-out helpers for catalog search.

Candidate sourcing issues a few dozen independent search queries per
profile.  They all go through one shared semaphore so a single profile
generation cannot burst past the catalog's rate limit.

1. **throttled_gather** -- ``asyncio.gather`` with each awaitable wrapped in
   a semaphore acquire/release.  Failures come back as exception objects.

2. **parallel_search** -- fan out N query dicts to one search function,
   log the failures, and return ``(query, results)`` pairs for the
   queries that succeeded, in input order.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

import structlog

from src.utils.errors import ConfigurationError
from src.utils.logging import get_logger

_T = TypeVar("_T")

DEFAULT_SEARCH_CONCURRENCY = 5

# Shared by every sourcer that is not given its own semaphore.
_SEARCH_SEMAPHORE = asyncio.Semaphore(DEFAULT_SEARCH_CONCURRENCY)

_logger: structlog.BoundLogger = get_logger(__name__)


def make_search_semaphore(limit: int = DEFAULT_SEARCH_CONCURRENCY) -> asyncio.Semaphore:
    """Create a semaphore for a sourcer configured with its own limit."""
    if limit < 1:
        raise ConfigurationError(f"search concurrency must be >= 1, got {limit}")
    return asyncio.Semaphore(limit)


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently, at most ``semaphore`` slots at a time.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Concurrency limit.  Defaults to the module-level search semaphore.
    return_exceptions:
        Mirrors ``asyncio.gather``: failures are returned in place of
        results instead of cancelling the siblings.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as the input awaitables.
    """
    if semaphore is None:
        semaphore = _SEARCH_SEMAPHORE

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    return await asyncio.gather(*(_wrapped(c) for c in coros), return_exceptions=return_exceptions)


async def parallel_search(
    search_fn: Callable[..., Awaitable[list[Any]]],
    queries: list[dict[str, Any]],
    semaphore: asyncio.Semaphore | None = None,
    logger: structlog.BoundLogger | None = None,
    error_event: str = "search_query_failed",
) -> list[tuple[dict[str, Any], list[Any]]]:
    """Call ``search_fn(**query)`` for every query under the shared limit.

    Failed queries are logged under *error_event* and left out of the
    result; the remaining queries are unaffected.
    """
    if logger is None:
        logger = _logger

    raw_results = await throttled_gather(
        [search_fn(**q) for q in queries],
        semaphore=semaphore,
        return_exceptions=True,
    )

    succeeded: list[tuple[dict[str, Any], list[Any]]] = []
    for query, result in zip(queries, raw_results):
        if isinstance(result, BaseException):
            logger.warning(error_event, query=query.get("query"), error=str(result))
            continue
        succeeded.append((query, list(result)))
    return succeeded
