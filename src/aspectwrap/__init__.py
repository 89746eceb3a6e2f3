r"""aspectwrap - Instrument functions and classes with logging, hooks and retry.

This package wraps an arbitrary callable, or every eligible method of a
class, so that each invocation is observed (entry, exit and error log
lines plus before/after/on_error/finally hooks) and made resilient
(automatic retry with exponential backoff and jitter), without callers
changing how they invoke it. Wrapped calls always return a coroutine.

Key Features:
    - ``wrap_function`` and ``wrap_class`` drop-in replacements
    - Exponential backoff with optional jitter and a delay cap
    - Pluggable retry predicate (429 and 503 are retried by default)
    - Sync or async lifecycle hooks with a per-call ``HookContext``
    - Member selection by name filter, visibility, inheritance and kind
    - Any structured logger, stdlib ``logging`` by default

Example:
    ```pycon
    >>> import asyncio
    >>> from aspectwrap import RetryPolicy, wrap_class
    >>> class Api:
    ...     def fetch(self, key):
    ...         return {"key": key}
    ...
    >>> WrappedApi = wrap_class(Api, retry=RetryPolicy(attempts=5, initial_delay=0.2))
    >>> asyncio.run(WrappedApi().fetch("user-1"))
    {'key': 'user-1'}

    ```
"""

from __future__ import annotations

__all__ = [
    "ClassWrapperOptions",
    "FunctionWrapperOptions",
    "HookContext",
    "Logger",
    "LoggingAdapter",
    "RetryInfo",
    "RetryPolicy",
    "WrapperOptions",
    "__version__",
    "aspect",
    "execute_with_retry",
    "wrap_class",
    "wrap_function",
]

from importlib.metadata import PackageNotFoundError, version

from aspectwrap.callbacks import RetryInfo
from aspectwrap.context import HookContext
from aspectwrap.decorators import aspect
from aspectwrap.loggers import Logger, LoggingAdapter
from aspectwrap.options import ClassWrapperOptions, FunctionWrapperOptions, WrapperOptions
from aspectwrap.retry import RetryPolicy, execute_with_retry
from aspectwrap.wrap_class import wrap_class
from aspectwrap.wrap_function import wrap_function

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
