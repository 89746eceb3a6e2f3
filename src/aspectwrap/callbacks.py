r"""Retry observer callback and its payload.

``RetryPolicy.on_retry`` is called once before every backoff sleep, which
makes it the natural place to collect retry metrics or to alert on
flapping dependencies.

Example:
    ```pycon
    >>> from aspectwrap.callbacks import RetryInfo
    >>> from aspectwrap.retry import RetryPolicy
    >>> def report(info: RetryInfo) -> None:
    ...     print(f"{info.name}: attempt {info.attempt}/{info.attempts} in {info.wait_time:.2f}s")
    ...
    >>> policy = RetryPolicy(on_retry=report)

    ```
"""

from __future__ import annotations

__all__ = ["RetryInfo", "invoke_on_retry"]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class RetryInfo:
    """Information passed to the ``on_retry`` callback.

    Attributes:
        name: Label of the retried call, or ``None`` when the policy
            carries no label.
        attempt: Number of the attempt about to run (1-indexed). The first
            retry is attempt 2.
        attempts: Total attempt budget of the policy.
        wait_time: Seconds the engine is about to sleep.
        error: The error that triggered the retry.
    """

    name: str | None
    attempt: int
    attempts: int
    wait_time: float
    error: Exception


def invoke_on_retry(
    on_retry: Callable[[RetryInfo], None] | None,
    *,
    name: str | None,
    attempt: int,
    attempts: int,
    wait_time: float,
    error: Exception,
) -> None:
    """Invoke the ``on_retry`` callback if provided.

    Args:
        on_retry: Optional callback to invoke before each backoff sleep.
        name: Label of the retried call.
        attempt: Number of the attempt that just failed (1-indexed). The
            callback receives the number of the next attempt.
        attempts: Total attempt budget.
        wait_time: Seconds the engine is about to sleep.
        error: The error that triggered the retry.
    """
    if on_retry is not None:
        on_retry(
            RetryInfo(
                name=name,
                attempt=attempt + 1,
                attempts=attempts,
                wait_time=wait_time,
                error=error,
            )
        )
