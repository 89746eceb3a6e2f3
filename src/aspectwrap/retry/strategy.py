r"""Backoff delay calculation.

This module provides the RetryStrategy class computing the sleep time
before each retry from the current backoff delay.
"""

from __future__ import annotations

__all__ = ["RetryStrategy"]

import logging
import random

logger: logging.Logger = logging.getLogger(__name__)


class RetryStrategy:
    """Strategy for calculating retry delays with jitter and a cap.

    The caller owns the un-jittered delay and grows it by
    ``backoff_factor`` after every retry with ``next_delay``; this class
    only turns that delay into the actual sleep time.

    Args:
        backoff_factor: Multiplier applied to the delay after each retry.
        max_delay: Upper bound in seconds for a single sleep, applied
            after jitter.
        jitter: Whether to randomize each delay over ``[0.5x, 1.5x)``.

    Example:
        ```pycon
        >>> from aspectwrap.retry.strategy import RetryStrategy
        >>> strategy = RetryStrategy(backoff_factor=2.0, max_delay=1.0, jitter=False)
        >>> strategy.calculate_delay(0.4)
        0.4
        >>> strategy.next_delay(0.4)
        0.8
        >>> strategy.calculate_delay(1.6)
        1.0

        ```
    """

    def __init__(self, backoff_factor: float, max_delay: float, jitter: bool) -> None:
        self.backoff_factor = backoff_factor
        self.max_delay = max_delay
        self.jitter = jitter

    def calculate_delay(self, current_delay: float) -> float:
        """Calculate the sleep time before the next attempt.

        Args:
            current_delay: The un-jittered backoff delay in seconds.

        Returns:
            Sleep time in seconds, never above ``max_delay``.
        """
        if self.jitter:
            delay = current_delay * (0.5 + random.random())  # noqa: S311
        else:
            delay = current_delay
        if delay > self.max_delay:
            logger.debug(f"Capping sleep time from {delay:.3f}s to {self.max_delay:.3f}s")
            delay = self.max_delay
        return delay

    def next_delay(self, current_delay: float) -> float:
        """Return the un-jittered delay to use after the next retry."""
        return current_delay * self.backoff_factor
