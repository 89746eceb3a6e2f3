r"""Unit tests for the function wrapping orchestrator."""

from __future__ import annotations

import inspect
import sys
from typing import TYPE_CHECKING
from unittest.mock import ANY, Mock

import pytest

from aspectwrap import FunctionWrapperOptions, HookContext, RetryPolicy, wrap_function
from aspectwrap.wrap_function import ANONYMOUS, WrappedFunction, resolve_name

if TYPE_CHECKING:
    from conftest import RecordingLogger


class ApiError(Exception):
    def __init__(self, status: int) -> None:
        super().__init__(f"status {status}")
        self.status = status


def add(a: int, b: int) -> int:
    """Add two numbers."""
    return a + b


async def fetch_user(user_id: int) -> dict:
    return {"id": user_id}


##################################
#     Tests for resolve_name     #
##################################


def test_resolve_name_own_name() -> None:
    assert resolve_name(add) == "add"


def test_resolve_name_explicit_name() -> None:
    assert resolve_name(add, "sum") == "sum"


def test_resolve_name_lambda() -> None:
    assert resolve_name(lambda: None) == ANONYMOUS


def test_resolve_name_without_name() -> None:
    class Handler:
        def __call__(self) -> None:
            pass

    assert resolve_name(Handler()) == "anonymous"


###################################
#     Tests for wrap_function     #
###################################


def test_wrap_function_rejects_non_callable() -> None:
    with pytest.raises(TypeError, match=r"wrap_function expects a callable, got int"):
        wrap_function(42)


def test_wrap_function_returns_wrapper() -> None:
    wrapped = wrap_function(add)
    assert isinstance(wrapped, WrappedFunction)
    assert wrapped.__wrapped__ is add
    assert repr(wrapped) == "<WrappedFunction add>"


def test_wrap_function_preserve_name() -> None:
    wrapped = wrap_function(add)
    assert wrapped.__name__ == "add"
    assert wrapped.__doc__ == "Add two numbers."
    assert wrapped.__module__ == add.__module__


def test_wrap_function_explicit_name() -> None:
    wrapped = wrap_function(add, name="sum")
    assert wrapped.name == "sum"
    assert wrapped.__name__ == "sum"
    assert wrapped.__qualname__ == "sum"


def test_wrap_function_no_preserve_name() -> None:
    wrapped = wrap_function(add, preserve_name=False)
    assert wrapped.__name__ == "wrapped"
    assert wrapped.name == "add"
    assert wrapped.__wrapped__ is add


def test_wrap_function_does_not_modify_original() -> None:
    wrap_function(add, name="sum")
    assert add.__name__ == "add"
    assert add(1, 2) == 3


def test_wrap_function_twice() -> None:
    inner = wrap_function(add, name="inner")
    outer = wrap_function(inner, name="outer")
    assert outer.name == "outer"
    assert inner.name == "inner"
    assert outer.__wrapped__ is inner


@pytest.mark.asyncio
async def test_wrap_function_returns_coroutine(recording_logger: RecordingLogger) -> None:
    wrapped = wrap_function(add, logger=recording_logger)
    pending = wrapped(2, 3)
    assert inspect.iscoroutine(pending)
    assert await pending == 5


@pytest.mark.asyncio
async def test_wrap_function_lifecycle(recording_logger: RecordingLogger) -> None:
    before, after, finally_ = Mock(), Mock(), Mock()
    wrapped = wrap_function(
        add, before=before, after=after, finally_=finally_, logger=recording_logger
    )
    assert await wrapped(2, 3) == 5
    before.assert_called_once_with("add", (2, 3), ANY)
    after.assert_called_once_with("add", 5, ANY)
    finally_.assert_called_once_with("add", ANY)
    context = before.call_args.args[2]
    assert isinstance(context, HookContext)
    assert context.name == "add"
    assert recording_logger.records == [
        ("info", {"method": "add", "args": (2, 3)}, "Entering function add"),
        ("info", {"method": "add", "result": 5}, "Exiting function add"),
    ]


@pytest.mark.asyncio
async def test_wrap_function_async(recording_logger: RecordingLogger) -> None:
    wrapped = wrap_function(fetch_user, logger=recording_logger)
    assert await wrapped(user_id=7) == {"id": 7}
    assert recording_logger.records[0] == (
        "info",
        {"method": "fetch_user", "args": (), "kwargs": {"user_id": 7}},
        "Entering function fetch_user",
    )


@pytest.mark.asyncio
async def test_wrap_function_anonymous(recording_logger: RecordingLogger) -> None:
    wrapped = wrap_function(lambda: "value", logger=recording_logger)
    assert await wrapped() == "value"
    assert recording_logger.messages() == [
        "Entering function anonymous",
        "Exiting function anonymous",
    ]


@pytest.mark.asyncio
async def test_wrap_function_explicit_name_in_logs(recording_logger: RecordingLogger) -> None:
    before = Mock()
    wrapped = wrap_function(add, name="sum", before=before, logger=recording_logger)
    await wrapped(1, 1)
    before.assert_called_once_with("sum", (1, 1), ANY)
    assert recording_logger.messages() == ["Entering function sum", "Exiting function sum"]


@pytest.mark.asyncio
async def test_wrap_function_retry_then_succeed(
    mock_asleep: Mock, recording_logger: RecordingLogger
) -> None:
    on_error = Mock()
    calls = []

    def flaky() -> int:
        calls.append(1)
        if len(calls) < 3:
            raise ApiError(503)
        return 42

    wrapped = wrap_function(
        flaky,
        on_error=on_error,
        logger=recording_logger,
        retry=RetryPolicy(attempts=3, initial_delay=0.1, max_delay=1.0),
    )
    assert await wrapped() == 42
    assert len(calls) == 3
    on_error.assert_not_called()
    assert mock_asleep.call_count == 2
    for call in mock_asleep.call_args_list:
        assert 0.05 <= call.args[0] <= 1.0
    assert recording_logger.messages("warn") == [
        "Error in function flaky, retrying...",
        "Error in function flaky, retrying...",
    ]


@pytest.mark.asyncio
async def test_wrap_function_non_retryable_error(
    mock_asleep: Mock, recording_logger: RecordingLogger
) -> None:
    on_error = Mock()
    error = ApiError(401)
    calls = []

    def unauthorized() -> None:
        calls.append(1)
        raise error

    wrapped = wrap_function(unauthorized, on_error=on_error, logger=recording_logger)
    with pytest.raises(ApiError) as exc_info:
        await wrapped()
    assert exc_info.value is error
    assert len(calls) == 1
    mock_asleep.assert_not_called()
    on_error.assert_called_once_with("unauthorized", error, ANY)
    assert on_error.call_args.args[2].error is error
    assert recording_logger.records[-1] == (
        "error",
        {"method": "unauthorized", "error": error},
        "Error in function unauthorized",
    )


@pytest.mark.asyncio
async def test_wrap_function_retries_exhausted(
    mock_asleep: Mock, recording_logger: RecordingLogger
) -> None:
    calls = []

    def unavailable() -> None:
        calls.append(1)
        raise ApiError(503)

    wrapped = wrap_function(unavailable, logger=recording_logger, retry=RetryPolicy(attempts=4))
    with pytest.raises(ApiError):
        await wrapped()
    assert len(calls) == 4
    assert mock_asleep.call_count == 3


########################################
#     Tests for receiver binding       #
########################################


class Greeter:
    def __init__(self, greeting: str) -> None:
        self.greeting = greeting

    def greet(self, name: str) -> str:
        return f"{self.greeting} {name}"

    wrapped_greet = wrap_function(greet)
    unbound_greet = wrap_function(greet, preserve_context=False)


@pytest.mark.asyncio
async def test_wrap_function_preserve_context() -> None:
    greeter = Greeter("hello")
    assert await greeter.wrapped_greet("bob") == "hello bob"


def test_wrap_function_class_access_returns_wrapper() -> None:
    assert Greeter.wrapped_greet is Greeter.__dict__["wrapped_greet"]


@pytest.mark.asyncio
async def test_wrap_function_no_preserve_context() -> None:
    greeter = Greeter("hi")
    assert greeter.unbound_greet is Greeter.__dict__["unbound_greet"]
    assert await greeter.unbound_greet(greeter, "ann") == "hi ann"


def test_wrap_function_options_object() -> None:
    options = FunctionWrapperOptions(name="sum", log_level="debug")
    wrapped = wrap_function(add, options)
    assert wrapped.options is options
    assert wrapped.name == "sum"


@pytest.mark.asyncio
async def test_wrap_function_context_uses_bare_name(recording_logger: RecordingLogger) -> None:
    before, on_error = Mock(), Mock()

    async def fetch() -> None:
        raise ApiError(401)

    wrapped = wrap_function(fetch, before=before, on_error=on_error, logger=recording_logger)
    with pytest.raises(ApiError):
        await wrapped()
    assert before.call_args.args[2].name == "fetch"
    assert on_error.call_args.args[2].name == "fetch"
    assert recording_logger.messages("error") == ["Error in function fetch"]


@pytest.mark.asyncio
async def test_wrap_function_context_uses_explicit_name() -> None:
    before = Mock()
    await wrap_function(add, name="sum", before=before)(1, 2)
    assert before.call_args.args[2].name == "sum"


@pytest.mark.skipif(sys.version_info < (3, 12), reason="requires inspect.markcoroutinefunction")
def test_wrap_function_is_coroutine_function() -> None:
    assert inspect.iscoroutinefunction(wrap_function(add))
    assert inspect.iscoroutinefunction(wrap_function(fetch_user))
    assert inspect.iscoroutinefunction(Greeter("hi").wrapped_greet)
    assert not inspect.iscoroutinefunction(add)
