r"""Utility functions shared by the wrapping and retry modules."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "get_correlation_id",
    "log_structured",
    "resolve",
    "set_correlation_id",
    "validate_log_level",
    "validate_retry_params",
]

from aspectwrap.utils.awaitables import resolve
from aspectwrap.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_correlation_id,
    log_structured,
    set_correlation_id,
)
from aspectwrap.utils.validation import validate_log_level, validate_retry_params
