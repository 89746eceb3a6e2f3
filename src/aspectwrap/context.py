r"""Per-invocation context handed to the lifecycle hooks."""

from __future__ import annotations

__all__ = ["HookContext"]

import time
from dataclasses import dataclass, field


@dataclass
class HookContext:
    """Identity and timing of one wrapped call.

    A fresh context is created for every invocation and passed to each
    hook of that invocation. Only the invocation wrapper updates it.

    Attributes:
        name: Label of the call site, e.g. ``"add"``, ``"static create"``
            or ``"function fetch"``.
        start_time: ``time.monotonic()`` value taken when the call started.
        duration: Elapsed seconds, set once the call has settled.
        error: The error the call ultimately failed with, if any.

    Example:
        ```pycon
        >>> from aspectwrap.context import HookContext
        >>> context = HookContext(name="add")
        >>> context.settled
        False
        >>> context.finish()
        >>> context.settled
        True

        ```
    """

    name: str
    start_time: float = field(default_factory=time.monotonic)
    duration: float | None = None
    error: Exception | None = None

    @property
    def settled(self) -> bool:
        """Whether the call has succeeded or failed for good."""
        return self.duration is not None

    def finish(self, error: Exception | None = None) -> None:
        """Record the outcome of the call.

        Args:
            error: The terminal error, or ``None`` on success.
        """
        if error is not None:
            self.error = error
        self.duration = time.monotonic() - self.start_time
