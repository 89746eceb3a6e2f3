r"""Selection of the class members eligible for wrapping.

``collect_members`` turns a class into a flat, finite list of candidate
members, computed once when the class is wrapped. ``MemberSelectionPolicy``
then decides which of them get instrumented, from their name, kind and
whether they are inherited.
"""

from __future__ import annotations

__all__ = [
    "CONSTRUCTOR_NAMES",
    "Member",
    "MemberKind",
    "MemberSelectionPolicy",
    "collect_members",
    "is_dunder",
]

import functools
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from aspectwrap.options import ClassWrapperOptions, MethodFilter

CONSTRUCTOR_NAMES = frozenset({"__init__", "__new__"})


class MemberKind(Enum):
    INSTANCE = "instance"
    STATIC = "static"
    CLASS = "class"
    ACCESSOR = "accessor"

    @property
    def is_static(self) -> bool:
        """Whether members of this kind are called on the class."""
        return self in (MemberKind.STATIC, MemberKind.CLASS)


@dataclass(frozen=True)
class Member:
    """A candidate member of a class.

    Attributes:
        name: Attribute name.
        kind: What the attribute is.
        inherited: Whether it is defined on a base class rather than on
            the wrapped class itself.
        owner: The class defining it.
    """

    name: str
    kind: MemberKind
    inherited: bool
    owner: type


def is_dunder(name: str) -> bool:
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def _member_kind(value: object) -> MemberKind | None:
    if isinstance(value, staticmethod):
        return MemberKind.STATIC
    if isinstance(value, classmethod):
        return MemberKind.CLASS
    if isinstance(value, (property, functools.cached_property)):
        return MemberKind.ACCESSOR
    if inspect.isfunction(value):
        return MemberKind.INSTANCE
    return None


def collect_members(cls: type) -> tuple[Member, ...]:
    """List the members of ``cls`` that could be wrapped.

    The method resolution order is walked from ``cls`` up to, and
    excluding, ``object``. A name defined lower in the MRO hides the same
    name higher up. Static and class methods are only taken from ``cls``
    itself. Special (dunder) methods and data attributes are skipped.

    Args:
        cls: The class to inspect.

    Returns:
        The candidate members, own members first, in definition order.

    Example:
        ```pycon
        >>> from aspectwrap.members import collect_members
        >>> class Base:
        ...     def ping(self):
        ...         return "pong"
        ...
        >>> class Calculator(Base):
        ...     def add(self, a, b):
        ...         return a + b
        ...     @staticmethod
        ...     def zero():
        ...         return 0
        ...
        >>> [(m.name, m.kind.value, m.inherited) for m in collect_members(Calculator)]
        [('add', 'instance', False), ('zero', 'static', False), ('ping', 'instance', True)]

        ```
    """
    members: list[Member] = []
    seen: set[str] = set()
    for owner in cls.__mro__:
        if owner is object:
            break
        inherited = owner is not cls
        for name, value in vars(owner).items():
            if name in seen or is_dunder(name):
                continue
            seen.add(name)
            kind = _member_kind(value)
            if kind is None or (inherited and kind.is_static):
                continue
            members.append(Member(name=name, kind=kind, inherited=inherited, owner=owner))
    return tuple(members)


@dataclass(frozen=True)
class MemberSelectionPolicy:
    """Rules deciding which members of a class are wrapped.

    Args:
        method_filter: Restricts wrapping to the listed method names, or
            to the names accepted by a predicate.
        include_static: Wrap static and class methods.
        include_inherited: Wrap members inherited from base classes.
        include_private: Wrap members whose name starts with ``_``.
        include_accessors: Wrap property getters.

    Example:
        ```pycon
        >>> from aspectwrap.members import MemberSelectionPolicy
        >>> policy = MemberSelectionPolicy(method_filter=["add"])
        >>> policy.is_eligible("add", is_inherited=False)
        True
        >>> policy.is_eligible("sub", is_inherited=False)
        False
        >>> policy.is_eligible("add", is_inherited=True)
        False

        ```
    """

    method_filter: MethodFilter | None = None
    include_static: bool = True
    include_inherited: bool = False
    include_private: bool = False
    include_accessors: bool = False

    @classmethod
    def from_options(cls, options: ClassWrapperOptions) -> MemberSelectionPolicy:
        return cls(
            method_filter=options.method_filter,
            include_static=options.include_static,
            include_inherited=options.include_inherited,
            include_private=options.include_private,
            include_accessors=options.include_accessors,
        )

    def is_eligible(self, name: str, is_inherited: bool = False) -> bool:
        """Decide from its name whether a member may be wrapped.

        Args:
            name: The member name.
            is_inherited: Whether the member comes from a base class.

        Returns:
            ``True`` if the member passes the name rules.
        """
        if name in CONSTRUCTOR_NAMES:
            return False
        if is_inherited and not self.include_inherited:
            return False
        if name.startswith("_") and not self.include_private:
            return False
        if self.method_filter is None:
            return True
        if isinstance(self.method_filter, str):
            return name == self.method_filter
        if isinstance(self.method_filter, Callable):
            return bool(self.method_filter(name))
        return name in self.method_filter

    def accepts(self, member: Member) -> bool:
        """Decide whether a collected member is wrapped."""
        if member.kind.is_static and not self.include_static:
            return False
        if member.kind is MemberKind.ACCESSOR and not self.include_accessors:
            return False
        return self.is_eligible(member.name, member.inherited)

    def select(self, members: Iterable[Member]) -> tuple[Member, ...]:
        """Return the members to wrap, preserving their order."""
        return tuple(member for member in members if self.accepts(member))
