r"""Retry engine for wrapped calls.

Public API:
    - RetryPolicy: Configuration for retry behavior
    - RetryDecider: Logic for deciding whether to retry
    - RetryStrategy: Backoff delay calculation with jitter and cap
    - AsyncRetryExecutor: Asynchronous retry executor
    - execute_with_retry: Functional entry point to the executor
    - default_retry_predicate: Predicate used when none is configured
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryExecutor",
    "RetryDecider",
    "RetryPolicy",
    "RetryStrategy",
    "default_retry_predicate",
    "execute_with_retry",
    "extract_status_code",
]

from aspectwrap.retry.decider import RetryDecider, default_retry_predicate, extract_status_code
from aspectwrap.retry.executor import AsyncRetryExecutor, execute_with_retry
from aspectwrap.retry.policy import RetryPolicy
from aspectwrap.retry.strategy import RetryStrategy
