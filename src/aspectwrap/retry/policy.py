r"""Retry policy configuration."""

from __future__ import annotations

__all__ = ["RetryPolicy"]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from aspectwrap.config import (
    DEFAULT_ATTEMPTS,
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_INITIAL_DELAY,
    DEFAULT_JITTER,
    DEFAULT_MAX_DELAY,
)
from aspectwrap.retry.decider import default_retry_predicate
from aspectwrap.utils.validation import validate_retry_params

if TYPE_CHECKING:
    from collections.abc import Callable

    from aspectwrap.callbacks import RetryInfo
    from aspectwrap.loggers import Logger


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for the retry engine.

    All times are in seconds.

    Args:
        attempts: Total number of attempts, the first one included. Must
            be >= 1; 1 disables retries.
        initial_delay: Delay before the first retry. Must be >= 0.
        backoff_factor: Multiplier applied to the delay after each retry.
            Must be > 0.
        max_delay: Upper bound for a single delay, applied after jitter.
            Must be >= 0.
        jitter: Whether to randomize each delay over ``[0.5x, 1.5x)``.
        retry_if: Predicate receiving the raw error and returning whether
            to retry. Defaults to ``default_retry_predicate``.
        logger: Optional logger receiving a warn line before each retry.
        label: Label of the call in the retry lines. Retry lines are only
            emitted when both ``logger`` and ``label`` are set.
        on_retry: Optional callback receiving a ``RetryInfo`` before each
            backoff sleep.

    Example:
        ```pycon
        >>> from aspectwrap.retry import RetryPolicy
        >>> policy = RetryPolicy()
        >>> policy.attempts
        3
        >>> policy.merge(attempts=5).attempts
        5
        >>> policy.attempts  # Original unchanged
        3

        ```
    """

    attempts: int = DEFAULT_ATTEMPTS
    initial_delay: float = DEFAULT_INITIAL_DELAY
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    max_delay: float = DEFAULT_MAX_DELAY
    jitter: bool = DEFAULT_JITTER
    retry_if: Callable[[Exception], bool] = default_retry_predicate
    logger: Logger | None = None
    label: str | None = None
    on_retry: Callable[[RetryInfo], None] | None = None

    def __post_init__(self) -> None:
        validate_retry_params(
            attempts=self.attempts,
            initial_delay=self.initial_delay,
            backoff_factor=self.backoff_factor,
            max_delay=self.max_delay,
        )

    def merge(self, **overrides: Any) -> RetryPolicy:
        """Create a new policy with the given parameters overridden.

        Only non-``None`` override values are applied.

        Args:
            **overrides: Fields to override.

        Returns:
            A new ``RetryPolicy``.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)
