r"""Function wrapping orchestrator.

``wrap_function`` returns a drop-in replacement for a callable whose calls
go through the shared call lifecycle (hooks, logs and retry). The
replacement always returns a coroutine, even when the original is
synchronous, since retrying requires suspending between attempts.
"""

from __future__ import annotations

__all__ = ["ANONYMOUS", "WrappedFunction", "resolve_name", "wrap_function"]

import functools
import inspect
import sys
import types
from typing import TYPE_CHECKING, Any

from aspectwrap.invocation import invoke
from aspectwrap.options import FunctionWrapperOptions

if TYPE_CHECKING:
    from collections.abc import Callable

ANONYMOUS = "anonymous"


def resolve_name(fn: Callable[..., Any], name: str | None = None) -> str:
    """Return the name a wrapped callable is known by.

    The explicit ``name`` wins, then the callable's own ``__name__``.
    Lambdas and callables without a name resolve to ``"anonymous"``.

    Example:
        ```pycon
        >>> from aspectwrap.wrap_function import resolve_name
        >>> def fetch_user():
        ...     pass
        ...
        >>> resolve_name(fetch_user)
        'fetch_user'
        >>> resolve_name(fetch_user, "load")
        'load'
        >>> resolve_name(lambda: None)
        'anonymous'

        ```
    """
    if name:
        return name
    own_name = getattr(fn, "__name__", None)
    if not own_name or own_name == "<lambda>":
        return ANONYMOUS
    return own_name


class WrappedFunction:
    """Callable routing every call of ``fn`` through the call lifecycle.

    Calling the wrapper returns a coroutine resolving to the result of
    ``fn``, and on Python 3.12+ ``inspect.iscoroutinefunction`` reports it
    as such. Stored on a class, the wrapper behaves like a plain function:
    reading it through an instance binds that instance as the first
    argument, unless ``preserve_context`` is disabled.

    Args:
        fn: The original callable. It is never modified.
        options: The wrapping options.
    """

    def __init__(self, fn: Callable[..., Any], options: FunctionWrapperOptions) -> None:
        # update_wrapper copies fn.__dict__, so it runs before our own attributes are set
        if options.preserve_name:
            functools.update_wrapper(self, fn)
        else:
            self.__wrapped__ = fn
        self.name = resolve_name(fn, options.name)
        self.options = options
        if options.preserve_name:
            self.__name__ = self.name
            if options.name is not None:
                self.__qualname__ = self.name
        else:
            self.__name__ = "wrapped"
        if sys.version_info >= (3, 12):
            inspect.markcoroutinefunction(self)

    def __repr__(self) -> str:
        return f"<{self.__class__.__qualname__} {self.name}>"

    async def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return await invoke(
            self.__wrapped__,
            args,
            kwargs,
            name=self.name,
            label=f"function {self.name}",
            context_name=self.name,
            options=self.options,
        )

    def __get__(self, instance: object, owner: type | None = None) -> Any:
        if instance is None or not self.options.preserve_context:
            return self
        return types.MethodType(self, instance)


def wrap_function(
    fn: Callable[..., Any],
    options: FunctionWrapperOptions | None = None,
    **overrides: Any,
) -> WrappedFunction:
    """Wrap a callable with logging, lifecycle hooks and retry.

    Args:
        fn: The callable to wrap. It may be synchronous or return an
            awaitable.
        options: The wrapping options. Defaults to
            ``FunctionWrapperOptions()``.
        **overrides: Option fields overriding those of ``options``.

    Returns:
        The wrapper. Calling it returns a coroutine.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aspectwrap import wrap_function
        >>> def add(a, b):
        ...     return a + b
        ...
        >>> wrapped = wrap_function(add)
        >>> wrapped.__name__
        'add'
        >>> asyncio.run(wrapped(2, 3))
        5

        ```
    """
    if not callable(fn):
        msg = f"wrap_function expects a callable, got {type(fn).__name__}"
        raise TypeError(msg)
    options = options if options is not None else FunctionWrapperOptions()
    if overrides:
        options = options.merge(**overrides)
    return WrappedFunction(fn, options)
