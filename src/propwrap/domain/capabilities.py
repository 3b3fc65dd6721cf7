"""Value capabilities — emptiness, absence, and identity.

Three orthogonal capabilities a wrapped value type may provide:

- Emptiable: the value can report an "empty" state (``""``, ``[]``, ``0``).
- Nilable: the type has a representable absent state. ``None`` is the
  absent state for every type unless the value defines ``to_absent()``.
- IdentityBearing: the type has one designated identity element used as
  an implicit initial value (``0``, ``""``, ``[]``).

Builtins get these capabilities structurally; user types opt in by
implementing the protocols below.
"""

from __future__ import annotations

import copy
from decimal import Decimal
from fractions import Fraction
from numbers import Number
from typing import Any, ClassVar, Protocol, Self, TypeVar, runtime_checkable

from propwrap.errors import CapabilityError

T = TypeVar("T")

# Builtin types whose zero-argument constructor yields the identity element.
BUILTIN_IDENTITIES: frozenset[type] = frozenset(
    {
        int,
        float,
        complex,
        bool,
        str,
        bytes,
        list,
        tuple,
        dict,
        set,
        frozenset,
        Decimal,
        Fraction,
    }
)


@runtime_checkable
class Emptiable(Protocol):
    """A value that can report whether it is empty."""

    def is_empty(self) -> bool: ...


@runtime_checkable
class Nilable(Protocol):
    """A value whose type has a representable absent state."""

    def is_absent(self) -> bool: ...

    def to_absent(self) -> Self: ...


@runtime_checkable
class IdentityBearing(Protocol):
    """A type exposing a designated identity element."""

    identity: ClassVar[Any]


def supports_emptiness(value: Any) -> bool:
    """Return True if :func:`is_empty` can answer for *value*."""
    if value is None or isinstance(value, (Emptiable, Number)):
        return True
    try:
        len(value)
    except TypeError:
        return False
    return True


def is_empty(value: Any) -> bool:
    """Return True if *value* is empty-but-present.

    ``None`` is absent, never empty. A custom ``is_empty()`` wins over the
    structural checks; numbers are empty at zero, sized values at length 0.

    Raises:
        CapabilityError: *value* has no notion of emptiness.
    """
    if value is None:
        return False
    if isinstance(value, Emptiable):
        return bool(value.is_empty())
    if isinstance(value, Number):
        return value == 0
    try:
        return len(value) == 0
    except TypeError:
        msg = f"{type(value).__name__} values have no empty state"
        raise CapabilityError(msg) from None


def is_absent(value: Any) -> bool:
    """Return True if *value* is in its absent state."""
    if value is None:
        return True
    if isinstance(value, Nilable):
        return bool(value.is_absent())
    return False


def absent_of(value: Any) -> Any:
    """Return the absent representation matching *value* (usually ``None``)."""
    if value is not None and isinstance(value, Nilable):
        return value.to_absent()
    return None


def has_identity(kind: type) -> bool:
    """Return True if :func:`identity_of` can produce a value for *kind*."""
    return kind in BUILTIN_IDENTITIES or hasattr(kind, "identity")


def identity_of(kind: type[T]) -> T:
    """Return the identity element of *kind*.

    A class-level ``identity`` attribute wins; it is copied so mutable
    identities are never shared between wrappers.

    Raises:
        CapabilityError: *kind* has no designated identity.
    """
    if hasattr(kind, "identity"):
        return copy.deepcopy(kind.identity)  # type: ignore[attr-defined]
    if kind in BUILTIN_IDENTITIES:
        return kind()
    msg = f"{kind.__name__} has no identity element"
    raise CapabilityError(msg)
