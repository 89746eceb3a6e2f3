r"""Helpers for values that may or may not need to be awaited."""

from __future__ import annotations

__all__ = ["resolve"]

import inspect
from typing import Any


async def resolve(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged.

    Hooks and wrapped callables may be plain functions or coroutine
    functions; this lets the caller treat both the same way.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aspectwrap.utils.awaitables import resolve
        >>> async def answer():
        ...     return 42
        ...
        >>> asyncio.run(resolve(answer()))
        42
        >>> asyncio.run(resolve(7))
        7

        ```
    """
    if inspect.isawaitable(value):
        return await value
    return value
