"""propwrap — constrained value wrappers that enforce invariants on write."""

from __future__ import annotations

from propwrap.domain.capabilities import (
    Emptiable,
    IdentityBearing,
    Nilable,
    identity_of,
    is_absent,
    is_empty,
)
from propwrap.domain.constraints import (
    NilIfEmpty,
    NilIfZero,
    RegEx,
    Truncated,
    WithinRange,
    clamp,
    collapse_empty,
    truncate,
)
from propwrap.domain.defaults import KeyValueStore, StoredDefault
from propwrap.domain.wrapper import Restrict, ValueWrapper, wrapper_of
from propwrap.errors import CapabilityError, PropwrapError, StoreError
from propwrap.infrastructure.stores import JsonFileStore, MemoryStore

__version__ = "0.1.0"

__all__ = [
    "CapabilityError",
    "Emptiable",
    "IdentityBearing",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "NilIfEmpty",
    "NilIfZero",
    "Nilable",
    "PropwrapError",
    "RegEx",
    "Restrict",
    "StoreError",
    "StoredDefault",
    "Truncated",
    "ValueWrapper",
    "WithinRange",
    "__version__",
    "clamp",
    "collapse_empty",
    "identity_of",
    "is_absent",
    "is_empty",
    "truncate",
    "wrapper_of",
]
