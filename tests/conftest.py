from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import Mock, patch

import pytest

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping


class RecordingLogger:
    """Logger collecting every call as ``(level, payload, message)``."""

    def __init__(self) -> None:
        self.records: list[tuple[str, dict[str, Any], str | None]] = []

    def _record(self, level: str, payload: Mapping[str, Any], message: str | None) -> None:
        self.records.append((level, dict(payload), message))

    def debug(self, payload: Mapping[str, Any], message: str | None = None) -> None:
        self._record("debug", payload, message)

    def info(self, payload: Mapping[str, Any], message: str | None = None) -> None:
        self._record("info", payload, message)

    def warn(self, payload: Mapping[str, Any], message: str | None = None) -> None:
        self._record("warn", payload, message)

    def error(self, payload: Mapping[str, Any], message: str | None = None) -> None:
        self._record("error", payload, message)

    def fatal(self, payload: Mapping[str, Any], message: str | None = None) -> None:
        self._record("fatal", payload, message)

    def trace(self, payload: Mapping[str, Any], message: str | None = None) -> None:
        self._record("trace", payload, message)

    def messages(self, level: str | None = None) -> list[str | None]:
        return [msg for lvl, _, msg in self.records if level is None or lvl == level]


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock callback function for testing hooks."""
    return Mock()
