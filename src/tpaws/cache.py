"""Process-scoped memoization for outbound calls.

A single CLI invocation often asks for the same ticket, region or pull request
more than once. ``memoized`` keeps the first successful result per argument
tuple for the lifetime of the process. There is no expiry, no eviction and no
sharing across processes: a pull request created during the run will not show
up in a listing that was already cached.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from collections.abc import Callable, Hashable
from typing import Any, TypeVar

logger = logging.getLogger("tpaws.cache")

F = TypeVar("F", bound=Callable[..., Any])


def _freeze(value: Any) -> Hashable:
    try:
        hash(value)
    except TypeError:
        return (type(value).__qualname__, repr(value))
    return value


def make_key(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Hashable:
    """Build a cache key from call arguments.

    Positional and keyword arguments are kept apart. Unhashable arguments
    (lists, dicts) are keyed by their type name and ``repr``.
    """
    return (
        tuple(_freeze(a) for a in args),
        tuple((k, _freeze(v)) for k, v in sorted(kwargs.items())),
    )


def memoized(func: F) -> F:
    """Cache results of ``func`` keyed by its arguments.

    Works for plain functions, methods (``self`` is part of the key) and
    coroutine functions. Exceptions are not cached. Concurrent awaits of the
    same coroutine call share one in-flight task.
    """
    cache: dict[Hashable, Any] = {}

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            key = make_key(args, kwargs)
            task = cache.get(key)
            if task is None:
                task = asyncio.ensure_future(func(*args, **kwargs))
                cache[key] = task
            else:
                logger.debug("cache hit: %s", func.__qualname__)
            try:
                return await asyncio.shield(task)
            except BaseException:
                if task.done() and cache.get(key) is task:
                    del cache[key]
                raise

        wrapper: Any = async_wrapper
    else:

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            key = make_key(args, kwargs)
            if key in cache:
                logger.debug("cache hit: %s", func.__qualname__)
                return cache[key]
            result = func(*args, **kwargs)
            cache[key] = result
            return result

        wrapper = sync_wrapper

    wrapper.cache_clear = cache.clear
    wrapper.cache_size = lambda: len(cache)
    return wrapper  # type: ignore[no-any-return]
