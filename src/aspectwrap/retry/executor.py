r"""Asynchronous retry executor.

This module provides the AsyncRetryExecutor class, which runs a thunk (a
zero-argument callable performing one attempt) until it succeeds, fails
with a non-retryable error, or runs out of attempts.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor", "execute_with_retry"]

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from aspectwrap.callbacks import invoke_on_retry
from aspectwrap.retry.decider import RetryDecider
from aspectwrap.retry.policy import RetryPolicy
from aspectwrap.retry.strategy import RetryStrategy
from aspectwrap.utils.awaitables import resolve

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRetryExecutor:
    """Executes a thunk with automatic retry logic.

    The executor composes a ``RetryDecider`` (is this error worth another
    attempt?) and a ``RetryStrategy`` (how long to wait before it?). It
    holds no per-call state, so one executor can serve any number of
    concurrent calls.

    Attributes:
        policy: The retry policy.
        strategy: Strategy for calculating retry delays.
        decider: Logic for deciding whether to retry.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aspectwrap.retry import AsyncRetryExecutor, RetryPolicy
        >>> executor = AsyncRetryExecutor(RetryPolicy(attempts=2, initial_delay=0.01))
        >>> asyncio.run(executor.execute(lambda: 42))
        42

        ```
    """

    def __init__(self, policy: RetryPolicy | None = None) -> None:
        self.policy = policy if policy is not None else RetryPolicy()
        self.strategy: RetryStrategy = RetryStrategy(
            backoff_factor=self.policy.backoff_factor,
            max_delay=self.policy.max_delay,
            jitter=self.policy.jitter,
        )
        self.decider: RetryDecider = RetryDecider(self.policy.retry_if)

    async def execute(self, thunk: Callable[[], Any]) -> Any:
        """Run ``thunk`` until it succeeds or retrying stops.

        The thunk may return a plain value or an awaitable; awaitables are
        awaited. Between attempts the executor sleeps with
        ``asyncio.sleep``, so other tasks keep running during backoff.

        Args:
            thunk: Zero-argument callable performing one attempt. It is
                called again on every retry, so it must be safe to repeat.

        Returns:
            The value produced by the first successful attempt.

        Raises:
            Exception: The error of the last attempt, unchanged, when it is
                not retryable or when the attempts are exhausted.
        """
        policy = self.policy
        remaining = policy.attempts
        current_delay = policy.initial_delay
        attempt = 0

        while True:
            attempt += 1
            try:
                return await resolve(thunk())
            except Exception as exc:
                remaining -= 1
                should_retry, reason = self.decider.should_retry(exc, remaining)
                if not should_retry:
                    logger.debug(f"{policy.label or 'call'}: giving up after attempt {attempt} ({reason})")
                    raise

                if policy.logger is not None and policy.label is not None:
                    policy.logger.warn(
                        {"error": exc, "remaining_attempts": remaining},
                        f"Error in {policy.label}, retrying...",
                    )

                sleep_time = self.strategy.calculate_delay(current_delay)
                logger.debug(
                    f"{policy.label or 'call'}: will retry ({reason}), "
                    f"waiting {sleep_time:.3f}s before attempt {attempt + 1}/{policy.attempts}"
                )
                invoke_on_retry(
                    policy.on_retry,
                    name=policy.label,
                    attempt=attempt,
                    attempts=policy.attempts,
                    wait_time=sleep_time,
                    error=exc,
                )
                await asyncio.sleep(sleep_time)
                current_delay = self.strategy.next_delay(current_delay)


async def execute_with_retry(thunk: Callable[[], Any], policy: RetryPolicy | None = None) -> Any:
    r"""Run ``thunk`` with the retry behaviour described by ``policy``.

    Functional shortcut for ``AsyncRetryExecutor(policy).execute(thunk)``.

    Args:
        thunk: Zero-argument callable performing one attempt.
        policy: Retry policy. Defaults to ``RetryPolicy()``.

    Returns:
        The value produced by the first successful attempt.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aspectwrap.retry import RetryPolicy, execute_with_retry
        >>> calls = []
        >>> def flaky():
        ...     calls.append(1)
        ...     if len(calls) < 3:
        ...         raise ConnectionError("reset")
        ...     return "ok"
        ...
        >>> asyncio.run(execute_with_retry(flaky, RetryPolicy(initial_delay=0.001)))
        'ok'
        >>> len(calls)
        3

        ```
    """
    return await AsyncRetryExecutor(policy).execute(thunk)
