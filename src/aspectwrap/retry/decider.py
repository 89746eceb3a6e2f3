r"""Retry decision logic.

This module provides the default retry predicate and the RetryDecider
class that applies a predicate to the error raised by an attempt.
"""

from __future__ import annotations

__all__ = ["RetryDecider", "default_retry_predicate", "extract_status_code"]

import logging
from typing import TYPE_CHECKING

import httpx

from aspectwrap.config import RETRY_STATUS_CODES

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


def _as_status(value: object) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def extract_status_code(error: BaseException) -> int | None:
    """Return the numeric status carried by an error, if any.

    The status is looked up, in order, on an integer ``status``
    attribute, an integer ``status_code`` attribute, and the response of
    an ``httpx.HTTPStatusError``.

    Args:
        error: The error raised by an attempt.

    Returns:
        The status code, or ``None`` if the error carries none.

    Example:
        ```pycon
        >>> from aspectwrap.retry.decider import extract_status_code
        >>> class ApiError(Exception):
        ...     def __init__(self, status):
        ...         super().__init__(f"status {status}")
        ...         self.status = status
        ...
        >>> extract_status_code(ApiError(503))
        503
        >>> extract_status_code(ValueError("boom"))

        ```
    """
    for attribute in ("status", "status_code"):
        status = _as_status(getattr(error, attribute, None))
        if status is not None:
            return status
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return None


def default_retry_predicate(error: BaseException) -> bool:
    """Decide whether an error is worth another attempt.

    Errors carrying a numeric status are retried only for 429 and 503.
    Errors without a status are always retried.

    Args:
        error: The error raised by an attempt.

    Returns:
        ``True`` if the attempt should be retried.

    Example:
        ```pycon
        >>> from aspectwrap.retry.decider import default_retry_predicate
        >>> class ApiError(Exception):
        ...     def __init__(self, status):
        ...         super().__init__(f"status {status}")
        ...         self.status = status
        ...
        >>> default_retry_predicate(ApiError(429))
        True
        >>> default_retry_predicate(ApiError(401))
        False
        >>> default_retry_predicate(ConnectionError("reset"))
        True

        ```
    """
    status = extract_status_code(error)
    if status is None:
        return True
    return status in RETRY_STATUS_CODES


class RetryDecider:
    """Decides whether a failed attempt should be retried.

    Args:
        retry_if: Predicate receiving the raw error. Defaults to
            ``default_retry_predicate``.
    """

    def __init__(self, retry_if: Callable[[Exception], bool] | None = None) -> None:
        self.retry_if = retry_if if retry_if is not None else default_retry_predicate

    def should_retry(self, error: Exception, remaining: int) -> tuple[bool, str]:
        """Determine if an error should trigger another attempt.

        Args:
            error: The error raised by the attempt.
            remaining: Attempts left after the one that just failed.

        Returns:
            Tuple of (should_retry, reason).
        """
        if not self.retry_if(error):
            return (False, f"{type(error).__name__} is not retryable")
        if remaining <= 0:
            return (False, "attempts exhausted")
        return (True, f"{type(error).__name__}")
