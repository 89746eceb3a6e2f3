r"""Structured logging utilities for machine-readable call logs.

Wrapped calls emit their entry, exit, error and retry lines through the
stdlib ``logging`` module with the call payload attached to the record.
This module provides an opt-in JSON formatter that renders those records,
together with a correlation id that can be used to group all the lines
produced while serving one request.

Example:
    Render aspectwrap call logs as JSON:

    ```python
    import logging
    from aspectwrap.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("aspectwrap")
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    ```

    Tag every line emitted while handling a request:

    ```python
    from aspectwrap.utils.structured_logging import clear_correlation_id, set_correlation_id

    set_correlation_id("request-123")
    try:
        await client.fetch("user-1")
    finally:
        clear_correlation_id()
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "get_correlation_id",
    "log_structured",
    "set_correlation_id",
]

import contextvars
import json
import logging
import time
from typing import Any

# Context variable so concurrent tasks keep their own correlation id
_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "aspectwrap_correlation_id", default=None
)

# Attributes every LogRecord carries; anything else came from ``extra``
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def get_correlation_id() -> str | None:
    """Return the correlation id of the current context, if any.

    Example:
        ```pycon
        >>> from aspectwrap.utils.structured_logging import (
        ...     clear_correlation_id,
        ...     get_correlation_id,
        ...     set_correlation_id,
        ... )
        >>> set_correlation_id("req-123")
        >>> get_correlation_id()
        'req-123'
        >>> clear_correlation_id()
        >>> get_correlation_id()

        ```
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation id for the current context.

    Args:
        correlation_id: The id to attach to subsequent log lines
            (e.g. a request id or a trace id).
    """
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation id for the current context."""
    _correlation_id.set(None)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each record becomes one JSON object with the fields ``timestamp``,
    ``level``, ``logger``, ``message``, ``module``, ``function`` and
    ``line``, the current correlation id when one is set, the formatted
    exception when present, and every field passed through ``extra``
    (the call ``payload`` for aspectwrap records). Values that JSON cannot
    represent, such as exception instances or arbitrary call arguments,
    are rendered with ``repr``.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from io import StringIO
        >>> from aspectwrap.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_structured")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.INFO)
        >>> logger.info("Entering add", extra={"payload": {"method": "add", "args": (2, 3)}})
        >>> json.loads(stream.getvalue())["payload"]
        {'method': 'add', 'args': [2, 3]}

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        correlation_id = get_correlation_id()
        if correlation_id is not None:
            log_data["correlation_id"] = correlation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value

        return json.dumps(log_data, default=repr)

    def formatTime(  # noqa: N802
        self, record: logging.LogRecord, datefmt: str | None = None
    ) -> str:
        """Format the record timestamp as ISO 8601 (UTC, milliseconds).

        ``datefmt`` is accepted for compatibility and ignored.
        """
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """Log a message with structured fields attached to the record.

    Args:
        logger: Logger to use.
        level: Log level (e.g. ``logging.INFO``).
        message: Log message.
        **extra: Fields to attach to the record. Names must not clash
            with the standard ``LogRecord`` attributes.
    """
    logger.log(level, message, extra=extra)
