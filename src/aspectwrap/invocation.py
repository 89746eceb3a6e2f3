r"""Shared call lifecycle used by every wrapped function and method.

The lifecycle of one call is: ``before`` hook, entry log line, attempts
through the retry engine, then either exit log line and ``after`` hook or
error log line and ``on_error`` hook, and finally the ``finally_`` hook.
Each step is awaited before the next one starts.
"""

from __future__ import annotations

__all__ = ["build_retry_policy", "invoke"]

import functools
import logging
from typing import TYPE_CHECKING, Any

from aspectwrap.context import HookContext
from aspectwrap.loggers import get_default_logger
from aspectwrap.retry.executor import execute_with_retry
from aspectwrap.retry.policy import RetryPolicy
from aspectwrap.utils.awaitables import resolve

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from aspectwrap.loggers import Logger
    from aspectwrap.options import WrapperOptions

logger: logging.Logger = logging.getLogger(__name__)


def build_retry_policy(options: WrapperOptions, call_logger: Logger, label: str) -> RetryPolicy:
    """Return the retry policy of one call site.

    The configured policy (or the default one) is completed with the
    wrapper's logger and the call label, unless it already names its own.
    """
    policy = options.retry if options.retry is not None else RetryPolicy()
    return policy.merge(
        logger=policy.logger if policy.logger is not None else call_logger,
        label=policy.label if policy.label is not None else label,
    )


async def invoke(
    target: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: Mapping[str, Any],
    *,
    name: str,
    options: WrapperOptions,
    label: str | None = None,
    context_name: str | None = None,
) -> Any:
    """Run one instrumented call of ``target``.

    Args:
        target: The original callable, already bound to its receiver.
        args: Positional arguments of the call.
        kwargs: Keyword arguments of the call.
        name: Name of the function or method, passed to the hooks and
            put in the log payloads.
        options: Hooks, logger and retry policy of the call site.
        label: Label of the call site used in log messages and by the
            retry engine. Defaults to ``name``.
        context_name: Name given to the call's ``HookContext``. Defaults
            to ``label``.

    Returns:
        The result of the first successful attempt.

    Raises:
        Exception: The error raised by ``target`` (the same object), or
            the error raised by a hook.
    """
    label = label if label is not None else name
    call_logger = options.logger if options.logger is not None else get_default_logger()
    log = getattr(call_logger, options.log_level)
    context = HookContext(name=context_name if context_name is not None else label)

    try:
        if options.before is not None:
            await resolve(options.before(name, args, context))

        payload: dict[str, Any] = {"method": name, "args": args}
        if kwargs:
            payload["kwargs"] = dict(kwargs)
        log(payload, f"Entering {label}")

        try:
            result = await execute_with_retry(
                functools.partial(target, *args, **kwargs),
                build_retry_policy(options, call_logger, label),
            )
        except Exception as exc:
            context.finish(error=exc)
            logger.debug(f"{label} failed after {context.duration:.3f}s")
            call_logger.error({"method": name, "error": exc}, f"Error in {label}")
            if options.on_error is not None:
                await resolve(options.on_error(name, exc, context))
            raise

        context.finish()
        payload = {"method": name}
        if result is not None:
            payload["result"] = result
        log(payload, f"Exiting {label}")
        if options.after is not None:
            await resolve(options.after(name, result, context))
        return result
    finally:
        if options.finally_ is not None:
            await resolve(options.finally_(name, context))
