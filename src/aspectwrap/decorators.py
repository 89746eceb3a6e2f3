r"""Decorator front-end for the two wrapping orchestrators."""

from __future__ import annotations

__all__ = ["aspect"]

import inspect
from typing import Any

from aspectwrap.options import ClassWrapperOptions, FunctionWrapperOptions
from aspectwrap.wrap_class import wrap_class
from aspectwrap.wrap_function import wrap_function


def aspect(target: Any = None, /, **options: Any) -> Any:
    """Wrap the decorated class or function.

    Classes go through ``wrap_class`` with ``ClassWrapperOptions(**options)``;
    anything else goes through ``wrap_function`` with
    ``FunctionWrapperOptions(**options)``. The decorator can be used bare or
    with keyword options.

    Args:
        target: The decorated class or callable. Supplied by Python when
            the decorator is used bare.
        **options: Fields of the matching options dataclass.

    Returns:
        The wrapped class or function, or a decorator when called with
        options only.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aspectwrap import RetryPolicy, aspect
        >>> @aspect(retry=RetryPolicy(attempts=5))
        ... def fetch(key):
        ...     return {"key": key}
        ...
        >>> asyncio.run(fetch("a"))
        {'key': 'a'}
        >>> @aspect
        ... class Repository:
        ...     def get(self, key):
        ...         return key.upper()
        ...
        >>> asyncio.run(Repository().get("a"))
        'A'

        ```
    """

    def decorator(obj: Any) -> Any:
        if inspect.isclass(obj):
            return wrap_class(obj, ClassWrapperOptions(**options))
        return wrap_function(obj, FunctionWrapperOptions(**options))

    if target is None:
        return decorator
    return decorator(target)
