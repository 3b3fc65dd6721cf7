"""Derived constraint wrappers — WithinRange, Truncated, NilIfEmpty, RegEx.

Each wrapper either corrects an invalid write (clamp, truncate, collapse)
or reverts it (regex). None of them ever reports the violation: after a
write returns, the held value is valid.

The pure rules (``clamp``, ``truncate``, ``collapse_empty``) are exposed
separately; each is idempotent and leaves ``None`` untouched so the same
wrapper serves both ``int`` and ``int | None`` fields.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from numbers import Number
from typing import Any, TypeVar

from propwrap.domain.capabilities import absent_of, identity_of, is_empty, supports_emptiness
from propwrap.domain.wrapper import Restrict, ValueWrapper
from propwrap.errors import CapabilityError

logger = logging.getLogger(__name__)

N = TypeVar("N")
S = TypeVar("S", bound=Sequence[Any])
T = TypeVar("T")

# ---------------------------------------------------------------------------
# Pure rules
# ---------------------------------------------------------------------------


def clamp(value: N, low: N, high: N) -> N:
    """Bound *value* to the closed range ``[low, high]``.

    Examples:
        >>> clamp(17, 18, 100)
        18
        >>> clamp(None, 18, 100) is None
        True
    """
    if value is None:
        return value
    return min(high, max(low, value))  # type: ignore[type-var]


def truncate(value: S, max_length: int) -> S:
    """Keep the first *max_length* elements of *value*."""
    if value is None or len(value) <= max_length:
        return value
    return value[:max_length]  # type: ignore[return-value]


def collapse_empty(value: T) -> T | None:
    """Replace an empty-but-present value with its absent state."""
    if is_empty(value):
        return absent_of(value)
    return value


# ---------------------------------------------------------------------------
# Wrappers
# ---------------------------------------------------------------------------


class WithinRange(Restrict[N]):
    """Clamps every write to ``[low, high]``.

    Both bounds must be ordered numbers. When starting from the identity
    element and ``0`` lies outside the range, the first clamp already
    fires at construction.
    """

    def __init__(self, initial: N, low: N, high: N) -> None:
        if not isinstance(low, Number) or not isinstance(high, Number):
            msg = "WithinRange bounds must be numbers"
            raise CapabilityError(msg)
        if low > high:  # type: ignore[operator]
            msg = f"Lower bound {low!r} exceeds upper bound {high!r}"
            raise ValueError(msg)
        self.low = low
        self.high = high

        def rule(value: N) -> N:
            bounded = clamp(value, low, high)
            if bounded != value:
                logger.debug("Clamped %r to %r", value, bounded)
            return bounded

        super().__init__(initial, rule)

    @classmethod
    def from_identity(  # type: ignore[override]
        cls, low: N, high: N, kind: type[N] | None = None
    ) -> WithinRange[N]:
        """Start from the identity of *kind* (inferred from *low* when omitted).

        An explicit *kind* also converts both bounds, so clamped values keep it.
        """
        if kind is None:
            return cls(identity_of(type(low)), low, high)
        return cls(identity_of(kind), kind(low), kind(high))  # type: ignore[call-arg]


class Truncated(Restrict[S]):
    """Keeps only the first ``max_length`` elements of every write.

    The initial value must be a sequence (str, bytes, list, tuple, ...).
    """

    def __init__(self, initial: S, max_length: int) -> None:
        if initial is not None and not isinstance(initial, Sequence):
            msg = f"Truncated needs a sequence, got {type(initial).__name__}"
            raise CapabilityError(msg)
        if max_length < 0:
            msg = f"max_length must be non-negative, got {max_length}"
            raise ValueError(msg)
        self.max_length = max_length

        def rule(value: S) -> S:
            cut = truncate(value, max_length)
            if cut is not value:
                logger.debug("Truncated value of length %d to %d", len(value), max_length)
            return cut

        super().__init__(initial, rule)

    @classmethod
    def from_identity(  # type: ignore[override]
        cls, max_length: int, kind: type[S] = str  # type: ignore[assignment]
    ) -> Truncated[S]:
        return cls(identity_of(kind), max_length)


class NilIfEmpty(ValueWrapper[T | None]):
    """Collapses empty values (``0``, ``""``, ``[]``) to the absent state.

    Absent and zero-like values are unified into one absent representation,
    on construction and on every write.

    Examples:
        >>> name = NilIfEmpty("")
        >>> name.value is None
        True
        >>> name.value = "17"
        >>> name.value
        '17'
    """

    def __init__(self, initial: T | None = None) -> None:
        if not supports_emptiness(initial):
            msg = f"{type(initial).__name__} values have no empty state"
            raise CapabilityError(msg)
        self._value = collapse_empty(initial)

    def _commit(self, previous: T | None, new: T | None) -> T | None:
        collapsed = collapse_empty(new)
        if collapsed is not new:
            logger.debug("Collapsed empty %r to absent", new)
        return collapsed


NilIfZero = NilIfEmpty


class RegEx(ValueWrapper[str]):
    """Rejects writes that do not fully match *pattern*.

    A rejected write leaves the previous value in place. The initial value
    is accepted as-is; validation starts with the first write.
    """

    def __init__(self, initial: str, pattern: str | re.Pattern[str], flags: int = 0) -> None:
        self.pattern = re.compile(pattern, flags) if isinstance(pattern, str) else pattern
        self._value = initial

    @classmethod
    def from_identity(cls, pattern: str | re.Pattern[str], kind: type[str] = str) -> RegEx:
        return cls(identity_of(kind), pattern)

    def matches(self, candidate: str) -> bool:
        """Whole-string match test against the compiled pattern."""
        return self.pattern.fullmatch(candidate) is not None

    def _commit(self, previous: str, new: str) -> str:
        if new is None or self.matches(new):
            return new
        logger.debug("Rejected %r (pattern %s), kept %r", new, self.pattern.pattern, previous)
        return previous
