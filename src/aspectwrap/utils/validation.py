r"""Parameter validation utilities for retry policies and wrapper options.

This module provides validation functions to ensure configuration values
meet the required constraints before a wrapped call is ever made.
"""

from __future__ import annotations

__all__ = ["validate_log_level", "validate_retry_params"]

from aspectwrap.config import LOG_LEVELS


def validate_retry_params(
    attempts: int,
    initial_delay: float,
    backoff_factor: float,
    max_delay: float,
) -> None:
    """Validate retry parameters.

    Args:
        attempts: Total number of attempts, the first call included.
            Must be >= 1. A value of 1 means no retries.
        initial_delay: Delay in seconds before the first retry.
            Must be >= 0.
        backoff_factor: Multiplier applied to the delay after each retry.
            Must be > 0.
        max_delay: Upper bound in seconds for a single delay. Must be >= 0.

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from aspectwrap.utils.validation import validate_retry_params
        >>> validate_retry_params(attempts=3, initial_delay=0.1, backoff_factor=2.0, max_delay=30.0)
        >>> validate_retry_params(
        ...     attempts=0, initial_delay=0.1, backoff_factor=2.0, max_delay=30.0
        ... )  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: attempts must be >= 1, got 0

        ```
    """
    if isinstance(attempts, bool) or not isinstance(attempts, int):
        msg = f"attempts must be an integer, got {attempts!r}"
        raise TypeError(msg)
    if attempts < 1:
        msg = f"attempts must be >= 1, got {attempts}"
        raise ValueError(msg)
    if initial_delay < 0:
        msg = f"initial_delay must be >= 0, got {initial_delay}"
        raise ValueError(msg)
    if backoff_factor <= 0:
        msg = f"backoff_factor must be > 0, got {backoff_factor}"
        raise ValueError(msg)
    if max_delay < 0:
        msg = f"max_delay must be >= 0, got {max_delay}"
        raise ValueError(msg)


def validate_log_level(log_level: str) -> None:
    """Validate the level used for entry and exit log lines.

    Args:
        log_level: One of ``"debug"``, ``"info"``, ``"warn"`` or ``"error"``.

    Raises:
        ValueError: If the level is not supported.
    """
    if log_level not in LOG_LEVELS:
        msg = f"log_level must be one of {LOG_LEVELS}, got {log_level!r}"
        raise ValueError(msg)
