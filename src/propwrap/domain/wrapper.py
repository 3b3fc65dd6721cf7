"""ValueWrapper base and the generic Restrict wrapper.

INVARIANT: A wrapped value is never observable in an out-of-constraint
state. Every write goes through ``_commit`` before it lands, and the
constructor applies the same step to the initial value.

A wrapper works two ways:

- Standalone box: ``age = Restrict(18, rule)``; read and write ``age.value``.
- Class-level descriptor: declared in a class body, the wrapper keeps the
  rule and each owner instance keeps only its own held value, stored in
  the instance ``__dict__``. Copying an owner copies the value, never a
  shared box. Reading the attribute on the class returns the wrapper itself.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any, Generic, Self, TypeVar, overload

from propwrap.domain.capabilities import identity_of

T = TypeVar("T")

Rule = Callable[[T], T]

_SLOT_PREFIX = "__propwrap_"


class ValueWrapper(Generic[T]):
    """Holds exactly one value and funnels every write through ``_commit``.

    Subclasses override ``_commit(previous, new)`` to return the value that
    actually gets stored (clamped, truncated, collapsed, or *previous*).

    As a descriptor the owner class needs an instance ``__dict__``, so
    ``__slots__``-only classes are not supported. In a ``@dataclass``,
    declare the wrapper without an annotation: an annotated wrapper becomes
    the field default and gets written through its own rule.
    """

    _value: T
    _name: str | None = None

    @property
    def value(self) -> T:
        """The current, already rule-satisfying value."""
        return self._value

    @value.setter
    def value(self, new: T) -> None:
        self._value = self._commit(self._value, new)

    def _commit(self, previous: T, new: T) -> T:
        return new

    # --- Descriptor protocol ---

    def __set_name__(self, owner: type, name: str) -> None:
        self._name = name

    @overload
    def __get__(self, instance: None, owner: type | None = None) -> Self: ...

    @overload
    def __get__(self, instance: object, owner: type | None = None) -> T: ...

    def __get__(self, instance: object | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self.read(instance)

    def __set__(self, instance: object, value: T) -> None:
        self.write(instance, value)

    def _slot(self, instance: object) -> tuple[dict[str, Any], str]:
        if self._name is None:
            msg = f"{type(self).__name__} is not attached to a class attribute"
            raise AttributeError(msg)
        return vars(instance), _SLOT_PREFIX + self._name

    def read(self, instance: object) -> T:
        """Return *instance*'s value, seeding it from the declared initial on first use."""
        state, slot = self._slot(instance)
        if slot not in state:
            state[slot] = copy.deepcopy(self._value)
        return state[slot]

    def write(self, instance: object, new: T) -> None:
        state, slot = self._slot(instance)
        state[slot] = self._commit(self.read(instance), new)

    def bind(self, instance: object) -> BoundValue[T]:
        """Return a view of this wrapper's value on *instance*."""
        self._slot(instance)
        return BoundValue(self, instance)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"


class BoundValue(Generic[T]):
    """One owner instance's wrapped value, read and written through its wrapper."""

    __slots__ = ("instance", "wrapper")

    def __init__(self, wrapper: ValueWrapper[T], instance: object) -> None:
        self.wrapper = wrapper
        self.instance = instance

    @property
    def value(self) -> T:
        return self.wrapper.read(self.instance)

    @value.setter
    def value(self, new: T) -> None:
        self.wrapper.write(self.instance, new)


class Restrict(ValueWrapper[T]):
    """Applies a caller-supplied rule on construction and after every write.

    The rule must be total and idempotent: ``rule(rule(x)) == rule(x)``.

    Examples:
        >>> adult = Restrict(17, lambda v: max(18, min(v, 100)))
        >>> adult.value
        18
        >>> adult.value = 101
        >>> adult.value
        100
    """

    def __init__(self, initial: T, rule: Rule[T]) -> None:
        self._rule = rule
        self._value = rule(initial)

    @classmethod
    def from_identity(cls, kind: type[T], rule: Rule[T]) -> Restrict[T]:
        """Start from ``kind``'s identity element instead of an explicit value."""
        return cls(identity_of(kind), rule)

    @property
    def rule(self) -> Rule[T]:
        return self._rule

    def _commit(self, previous: T, new: T) -> T:
        return self._rule(new)


def wrapper_of(instance: object, name: str) -> BoundValue[Any]:
    """Return the bound value behind attribute *name* of *instance*.

    Raises:
        AttributeError: *name* is not a ValueWrapper-backed attribute.
    """
    descriptor = getattr(type(instance), name, None)
    if not isinstance(descriptor, ValueWrapper):
        msg = f"{type(instance).__name__}.{name} is not a wrapped attribute"
        raise AttributeError(msg)
    return descriptor.bind(instance)
