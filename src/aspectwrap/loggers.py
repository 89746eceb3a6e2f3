r"""Logging collaborator used by wrapped calls.

A wrapped call reports its lifecycle through any object implementing the
``Logger`` protocol: six level methods taking a structured payload and an
optional message. Structured loggers in the style of pino or structlog fit
the protocol directly. When no logger is supplied, calls are reported to
the stdlib ``logging`` module through ``LoggingAdapter``.
"""

from __future__ import annotations

__all__ = ["TRACE", "Logger", "LoggingAdapter", "default_logger", "get_default_logger"]

import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from aspectwrap.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Mapping

# Finer than DEBUG, for the ``trace`` method of the protocol
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


@runtime_checkable
class Logger(Protocol):
    """Structured logger accepted by the wrappers.

    Each method receives a mapping with the call details (method name,
    arguments, result or error) and an optional human readable message.
    """

    def debug(self, payload: Mapping[str, Any], message: str | None = None) -> None: ...

    def info(self, payload: Mapping[str, Any], message: str | None = None) -> None: ...

    def warn(self, payload: Mapping[str, Any], message: str | None = None) -> None: ...

    def error(self, payload: Mapping[str, Any], message: str | None = None) -> None: ...

    def fatal(self, payload: Mapping[str, Any], message: str | None = None) -> None: ...

    def trace(self, payload: Mapping[str, Any], message: str | None = None) -> None: ...


class LoggingAdapter:
    """Adapt a stdlib ``logging.Logger`` to the ``Logger`` protocol.

    The payload is attached to the emitted record as its ``payload``
    attribute, so handlers and formatters (see
    ``aspectwrap.utils.structured_logging.StructuredFormatter``) can render
    it. ``warn`` maps to ``WARNING``, ``fatal`` to ``CRITICAL`` and
    ``trace`` to the custom ``TRACE`` level.

    Args:
        logger: The stdlib logger to write to. Defaults to the
            ``aspectwrap`` logger.

    Example:
        ```pycon
        >>> import logging
        >>> from aspectwrap.loggers import LoggingAdapter
        >>> adapter = LoggingAdapter(logging.getLogger("my_app"))
        >>> adapter.info({"method": "add", "args": (2, 3)}, "Entering add")

        ```
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger if logger is not None else logging.getLogger("aspectwrap")

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(logger={self.logger.name!r})"

    def _log(self, level: int, payload: Mapping[str, Any], message: str | None) -> None:
        if self.logger.isEnabledFor(level):
            log_structured(self.logger, level, message or "", payload=dict(payload))

    def debug(self, payload: Mapping[str, Any], message: str | None = None) -> None:
        self._log(logging.DEBUG, payload, message)

    def info(self, payload: Mapping[str, Any], message: str | None = None) -> None:
        self._log(logging.INFO, payload, message)

    def warn(self, payload: Mapping[str, Any], message: str | None = None) -> None:
        self._log(logging.WARNING, payload, message)

    def error(self, payload: Mapping[str, Any], message: str | None = None) -> None:
        self._log(logging.ERROR, payload, message)

    def fatal(self, payload: Mapping[str, Any], message: str | None = None) -> None:
        self._log(logging.CRITICAL, payload, message)

    def trace(self, payload: Mapping[str, Any], message: str | None = None) -> None:
        self._log(TRACE, payload, message)


default_logger: LoggingAdapter = LoggingAdapter()


def get_default_logger() -> LoggingAdapter:
    r"""Return the logger used when a wrapper is created without one."""
    return default_logger
