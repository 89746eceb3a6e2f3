from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock

import pytest

from aspectwrap import RetryPolicy, aspect
from aspectwrap.options import ClassWrapperOptions, FunctionWrapperOptions
from aspectwrap.wrap_function import WrappedFunction

if TYPE_CHECKING:
    from conftest import RecordingLogger


class ApiError(Exception):
    def __init__(self, status: int) -> None:
        super().__init__(f"status {status}")
        self.status = status


############################
#     Tests for aspect     #
############################


@pytest.mark.asyncio
async def test_aspect_bare_function() -> None:
    @aspect
    def double(value: int) -> int:
        return value * 2

    assert isinstance(double, WrappedFunction)
    assert double.__name__ == "double"
    assert await double(4) == 8


@pytest.mark.asyncio
async def test_aspect_function_with_options(recording_logger: RecordingLogger) -> None:
    @aspect(name="twice", logger=recording_logger, log_level="debug")
    def double(value: int) -> int:
        return value * 2

    assert isinstance(double.options, FunctionWrapperOptions)
    assert await double(4) == 8
    assert recording_logger.records == [
        ("debug", {"method": "twice", "args": (4,)}, "Entering function twice"),
        ("debug", {"method": "twice", "result": 8}, "Exiting function twice"),
    ]


@pytest.mark.asyncio
async def test_aspect_function_retry(mock_asleep: Mock, recording_logger: RecordingLogger) -> None:
    calls = []

    @aspect(logger=recording_logger, retry=RetryPolicy(attempts=2))
    async def fetch() -> str:
        calls.append(1)
        if len(calls) == 1:
            raise ApiError(429)
        return "ok"

    assert await fetch() == "ok"
    assert len(calls) == 2
    assert mock_asleep.call_count == 1


@pytest.mark.asyncio
async def test_aspect_bare_class() -> None:
    @aspect
    class Repository:
        def get(self, key: str) -> str:
            return key.upper()

    repository = Repository()
    assert repository.__class__.__name__ == "Repository"
    assert isinstance(Repository._aspect_options, ClassWrapperOptions)
    assert await repository.get("a") == "A"


@pytest.mark.asyncio
async def test_aspect_class_with_options(recording_logger: RecordingLogger) -> None:
    @aspect(method_filter=["get"], logger=recording_logger)
    class Repository:
        def get(self, key: str) -> str:
            return key.upper()

        def put(self, key: str) -> str:
            return key

    repository = Repository()
    assert await repository.get("a") == "A"
    assert repository.put("b") == "b"
    assert recording_logger.messages() == ["Entering get", "Exiting get"]


def test_aspect_rejects_unknown_option() -> None:
    with pytest.raises(TypeError):

        @aspect(include_static=True)
        def noop() -> None:
            pass


def test_aspect_invalid_log_level() -> None:
    with pytest.raises(ValueError, match=r"log_level must be one of"):

        @aspect(log_level="verbose")
        def noop() -> None:
            pass
