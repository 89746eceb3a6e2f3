r"""Option dataclasses shared by the function and class wrappers.

``WrapperOptions`` carries the lifecycle hooks, the logger and the retry
policy. ``ClassWrapperOptions`` and ``FunctionWrapperOptions`` add the
settings specific to each orchestrator.
"""

from __future__ import annotations

__all__ = ["ClassWrapperOptions", "FunctionWrapperOptions", "MethodFilter", "WrapperOptions"]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Union

from aspectwrap.config import DEFAULT_LOG_LEVEL
from aspectwrap.utils.validation import validate_log_level

if TYPE_CHECKING:
    from collections.abc import Callable, Collection

    from aspectwrap.context import HookContext
    from aspectwrap.loggers import Logger
    from aspectwrap.retry.policy import RetryPolicy

# A collection of method names, a single name, or a predicate over names
MethodFilter = Union["Collection[str]", str, "Callable[[str], bool]"]


@dataclass
class WrapperOptions:
    """Options common to every wrapped call.

    Hooks may be plain functions or coroutine functions; the wrapper
    awaits whatever they return before moving on.

    Args:
        before: ``before(name, args, context)``, called before the first
            attempt.
        after: ``after(name, result, context)``, called once the call
            succeeded.
        on_error: ``on_error(name, error, context)``, called once the call
            failed for good.
        finally_: ``finally_(name, context)``, always called last.
        logger: Logger receiving the entry, exit, error and retry lines.
            Defaults to ``aspectwrap.loggers.default_logger``.
        log_level: Level of the entry and exit lines.
        retry: Retry policy. Defaults to ``RetryPolicy()``.
    """

    before: Callable[[str, tuple[Any, ...], HookContext], Any] | None = None
    after: Callable[[str, Any, HookContext], Any] | None = None
    on_error: Callable[[str, Exception, HookContext], Any] | None = None
    finally_: Callable[[str, HookContext], Any] | None = None
    logger: Logger | None = None
    log_level: str = DEFAULT_LOG_LEVEL
    retry: RetryPolicy | None = None

    def __post_init__(self) -> None:
        validate_log_level(self.log_level)

    def merge(self, **overrides: Any) -> Any:
        """Create a copy with the given options overridden.

        Only non-``None`` override values are applied, so the result of
        ``merge`` has the same type as ``self``.

        Args:
            **overrides: Fields to override.

        Returns:
            A new options instance.

        Example:
            ```pycon
            >>> from aspectwrap.options import WrapperOptions
            >>> options = WrapperOptions(log_level="debug")
            >>> options.merge(log_level="warn").log_level
            'warn'
            >>> options.merge(log_level=None).log_level
            'debug'

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)


@dataclass
class ClassWrapperOptions(WrapperOptions):
    """Options for ``wrap_class``.

    Args:
        method_filter: Restricts wrapping to the listed method names, or
            to the names accepted by a predicate.
        include_static: Wrap static and class methods.
        include_inherited: Wrap methods inherited from base classes.
        include_private: Wrap methods whose name starts with ``_``.
        include_accessors: Instrument property getters. Reading such a
            property then yields an awaitable.
    """

    method_filter: MethodFilter | None = None
    include_static: bool = True
    include_inherited: bool = False
    include_private: bool = False
    include_accessors: bool = False


@dataclass
class FunctionWrapperOptions(WrapperOptions):
    """Options for ``wrap_function``.

    Args:
        name: Name used in logs and hooks. Defaults to the name of the
            wrapped callable.
        preserve_name: Make the wrapper report the resolved name and the
            original's metadata (module, docstring, ...).
        preserve_context: Bind the receiver when the wrapper is used as a
            method, like a plain function would.
    """

    name: str | None = None
    preserve_name: bool = True
    preserve_context: bool = True
