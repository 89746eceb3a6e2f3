r"""Default configuration values for wrapped calls.

These defaults are used whenever a ``RetryPolicy`` or one of the wrapper
option dataclasses is created without an explicit value.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_ATTEMPTS",
    "DEFAULT_BACKOFF_FACTOR",
    "DEFAULT_INITIAL_DELAY",
    "DEFAULT_JITTER",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_MAX_DELAY",
    "LOG_LEVELS",
    "RETRY_STATUS_CODES",
]

# Total number of attempts, the first call included
DEFAULT_ATTEMPTS = 3

# Delay in seconds before the first retry
DEFAULT_INITIAL_DELAY = 0.1

# Multiplier applied to the delay after every retry
# With the defaults: 0.1s, 0.2s, 0.4s, ...
DEFAULT_BACKOFF_FACTOR = 2.0

# Upper bound in seconds for a single backoff delay (applied after jitter)
DEFAULT_MAX_DELAY = 30.0

DEFAULT_JITTER = True

# Status codes that the default retry predicate treats as transient
# 429: Too Many Requests - Rate limiting
# 503: Service Unavailable - Server overloaded or down
RETRY_STATUS_CODES = (429, 503)

# Level used for the entry and exit lines of a wrapped call
DEFAULT_LOG_LEVEL = "info"

LOG_LEVELS = ("debug", "info", "warn", "error")
