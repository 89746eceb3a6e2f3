r"""Class wrapping orchestrator.

``wrap_class`` builds a drop-in replacement for a class. Each instance of
the replacement owns an instance of the original class and routes the
eligible methods through the shared call lifecycle; every other attribute
is read from, and written to, the owned instance. The original class is
never modified.
"""

from __future__ import annotations

__all__ = ["SPECIAL_METHODS", "WrappedInstance", "wrap_class"]

import functools
import inspect
import logging
from typing import TYPE_CHECKING, Any

from aspectwrap.invocation import invoke
from aspectwrap.members import MemberKind, MemberSelectionPolicy, collect_members
from aspectwrap.options import ClassWrapperOptions

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Coroutine

    from aspectwrap.members import Member

logger: logging.Logger = logging.getLogger(__name__)

# Data model methods forwarded to the owned instance when the wrapped class
# (or one of its bases other than ``object``) defines them. ``__hash__`` is
# handled together with ``__eq__``.
SPECIAL_METHODS = (
    "__bool__",
    "__len__",
    "__length_hint__",
    "__iter__",
    "__next__",
    "__reversed__",
    "__contains__",
    "__getitem__",
    "__setitem__",
    "__delitem__",
    "__eq__",
    "__ne__",
    "__lt__",
    "__le__",
    "__gt__",
    "__ge__",
    "__call__",
    "__enter__",
    "__exit__",
    "__aenter__",
    "__aexit__",
    "__aiter__",
    "__anext__",
    "__await__",
    "__format__",
    "__bytes__",
    "__int__",
    "__float__",
    "__complex__",
    "__index__",
    "__round__",
    "__neg__",
    "__pos__",
    "__abs__",
    "__invert__",
    "__add__",
    "__sub__",
    "__mul__",
    "__matmul__",
    "__truediv__",
    "__floordiv__",
    "__mod__",
    "__divmod__",
    "__pow__",
    "__lshift__",
    "__rshift__",
    "__and__",
    "__or__",
    "__xor__",
    "__radd__",
    "__rsub__",
    "__rmul__",
    "__rmatmul__",
    "__rtruediv__",
    "__rfloordiv__",
    "__rmod__",
    "__rpow__",
    "__rand__",
    "__ror__",
    "__rxor__",
    "__iadd__",
    "__isub__",
    "__imul__",
    "__ior__",
    "__iand__",
)


def _method_invoker(
    instance: object, name: str, options: ClassWrapperOptions
) -> Callable[..., Coroutine[Any, Any, Any]]:
    # The bound method is looked up on every call so later rebinding on the
    # instance is honoured.
    original = getattr(instance, name)

    @functools.wraps(original)
    async def invoker(*args: Any, **kwargs: Any) -> Any:
        return await invoke(getattr(instance, name), args, kwargs, name=name, options=options)

    return invoker


def _static_invoker(
    cls: type, name: str, options: ClassWrapperOptions
) -> Callable[..., Coroutine[Any, Any, Any]]:
    original = getattr(cls, name)

    @functools.wraps(original)
    async def invoker(*args: Any, **kwargs: Any) -> Any:
        return await invoke(
            getattr(cls, name), args, kwargs, name=name, label=f"static {name}", options=options
        )

    return invoker


def _defines(cls: type, name: str) -> bool:
    return any(name in vars(owner) for owner in cls.__mro__ if owner is not object)


def _unwrap(value: Any) -> Any:
    if isinstance(value, WrappedInstance):
        return object.__getattribute__(value, "_aspect_instance")
    return value


async def _rebind(proxy: WrappedInstance, instance: object, pending: Awaitable[Any]) -> Any:
    result = await pending
    return proxy if result is instance else result


def _special_forwarder(name: str) -> Callable[..., Any]:
    # Special methods are looked up on the type, so __getattr__ never sees them
    def forward(self: WrappedInstance, *args: Any, **kwargs: Any) -> Any:
        instance = object.__getattribute__(self, "_aspect_instance")
        result = getattr(instance, name)(*(_unwrap(arg) for arg in args), **kwargs)
        if inspect.iscoroutine(result):
            return _rebind(self, instance, result)
        return self if result is instance else result

    forward.__name__ = name
    forward.__qualname__ = f"WrappedInstance.{name}"
    return forward


def _special_methods(cls: type) -> dict[str, Any]:
    r"""Return the special methods forwarding to the owned instance.

    Example:
        ```pycon
        >>> from aspectwrap.wrap_class import _special_methods
        >>> class Bag:
        ...     def __len__(self):
        ...         return 0
        ...
        >>> sorted(_special_methods(Bag))
        ['__len__']

        ```
    """
    methods = {name: _special_forwarder(name) for name in SPECIAL_METHODS if _defines(cls, name)}
    if "__eq__" in methods:
        # Defining __eq__ alone would reset __hash__ to None on the generated class
        methods["__hash__"] = _special_forwarder("__hash__") if cls.__hash__ is not None else None
    elif _defines(cls, "__hash__") and cls.__hash__ is not None:
        methods["__hash__"] = _special_forwarder("__hash__")
    return methods


class WrappedClassType(type):
    """Metaclass of the generated classes.

    Class-level attributes that were not wrapped (constants, unwrapped
    static methods, ...) are read through to the original class.
    """

    def __getattr__(cls, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        return getattr(cls.__wrapped__, name)


class WrappedInstance:
    """Base class of the generated classes.

    Attributes:
        _aspect_instance: The owned instance of the original class.
        _aspect_invokers: Wrapped method invokers by name.
    """

    __wrapped__: type
    _aspect_members: tuple[Member, ...] = ()
    _aspect_accessors: frozenset[str] = frozenset()
    _aspect_options: ClassWrapperOptions

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        cls = type(self)
        instance = cls.__wrapped__(*args, **kwargs)
        invokers = {
            member.name: _method_invoker(instance, member.name, cls._aspect_options)
            for member in cls._aspect_members
            if member.kind is MemberKind.INSTANCE
        }
        object.__setattr__(self, "_aspect_instance", instance)
        object.__setattr__(self, "_aspect_invokers", invokers)

    @property
    def __class__(self) -> type:
        return type(self).__wrapped__

    def __getattr__(self, name: str) -> Any:
        state = object.__getattribute__(self, "__dict__")
        if "_aspect_instance" not in state:
            raise AttributeError(name)
        invokers = state["_aspect_invokers"]
        if name in invokers:
            return invokers[name]
        instance = state["_aspect_instance"]
        cls = type(self)
        if name in cls._aspect_accessors:
            return invoke(
                functools.partial(getattr, instance, name),
                (),
                {},
                name=name,
                options=cls._aspect_options,
            )
        return getattr(instance, name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._aspect_instance, name, value)

    def __delattr__(self, name: str) -> None:
        delattr(self._aspect_instance, name)

    def __dir__(self) -> list[str]:
        return sorted(set(dir(self._aspect_instance)))

    def __repr__(self) -> str:
        return repr(self._aspect_instance)

    def __str__(self) -> str:
        return str(self._aspect_instance)


def wrap_class(
    cls: type,
    options: ClassWrapperOptions | None = None,
    **overrides: Any,
) -> type:
    """Wrap a class with logging, lifecycle hooks and retry.

    The returned class is constructed with the same arguments as ``cls``.
    Its instances expose the same attributes as instances of ``cls``, pass
    ``isinstance(obj, cls)`` checks, and route the eligible methods
    through the call lifecycle: calling such a method returns a coroutine.
    Eligible static and class methods are wrapped on the returned class
    itself, class methods staying bound to ``cls``. Nothing is called at
    wrap time, and errors raised by the constructor of ``cls`` propagate
    unchanged.

    Args:
        cls: The class to wrap. It is never modified.
        options: The wrapping options. Defaults to
            ``ClassWrapperOptions()``.
        **overrides: Option fields overriding those of ``options``.

    Returns:
        The generated class.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aspectwrap import wrap_class
        >>> class Calculator:
        ...     def add(self, a, b):
        ...         return a + b
        ...
        >>> WrappedCalculator = wrap_class(Calculator)
        >>> calculator = WrappedCalculator()
        >>> isinstance(calculator, Calculator)
        True
        >>> asyncio.run(calculator.add(2, 3))
        5

        ```
    """
    if not isinstance(cls, type):
        msg = f"wrap_class expects a class, got {type(cls).__name__}"
        raise TypeError(msg)
    options = options if options is not None else ClassWrapperOptions()
    if overrides:
        options = options.merge(**overrides)

    policy = MemberSelectionPolicy.from_options(options)
    members = policy.select(collect_members(cls))
    logger.debug(f"Wrapping {cls.__qualname__}: {[member.name for member in members]}")

    namespace: dict[str, Any] = {
        "__module__": cls.__module__,
        "__qualname__": cls.__qualname__,
        "__doc__": cls.__doc__,
        "__wrapped__": cls,
        "_aspect_members": members,
        "_aspect_accessors": frozenset(
            member.name for member in members if member.kind is MemberKind.ACCESSOR
        ),
        "_aspect_options": options,
    }
    namespace.update(_special_methods(cls))
    for member in members:
        if member.kind.is_static:
            namespace[member.name] = staticmethod(_static_invoker(cls, member.name, options))

    return WrappedClassType(cls.__name__, (WrappedInstance,), namespace)
