"""StoredDefault — a typed accessor over an external key-value store.

The accessor owns no data. Reads look the key up in the store and fall
back to the default when the entry is missing or not of the expected
type. Writing the absent state removes the entry.

Serialization contract: stored values are JSON-representable. Writes are
dumped with a pydantic ``TypeAdapter`` in JSON mode; reads are validated
in strict JSON mode, so a tuple or date round-trips through its JSON form
while a string never silently becomes an int.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Generic, Protocol, Self, TypeVar, overload

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json, to_jsonable_python

from propwrap.domain.capabilities import identity_of, is_absent
from propwrap.errors import CapabilityError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValueStore(Protocol):
    """Persisted store the accessor reads and writes through."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class StoredDefault(Generic[T]):
    """Get/set accessor for *key* in *store*, defaulting to *default*.

    Args:
        key: Store key.
        default: Returned when the key is missing or holds a value of the
            wrong type.
        store: Backing store. ``None`` resolves lazily to the process-wide
            standard store.
        kind: Expected value type. Inferred from *default* when omitted;
            with neither, stored values are returned unchecked.

    Raises:
        CapabilityError: *kind* has no JSON representation.
    """

    def __init__(
        self,
        key: str,
        default: T,
        store: KeyValueStore | None = None,
        *,
        kind: Any = None,
    ) -> None:
        self.key = key
        self.default = default
        self._store = store
        if kind is None and default is not None:
            kind = type(default)
        self.kind = kind
        self._adapter: TypeAdapter[Any] | None = None
        if kind is not None:
            try:
                self._adapter = TypeAdapter(kind)
            except PydanticSchemaGenerationError as exc:
                msg = f"{kind!r} values cannot be stored as JSON"
                raise CapabilityError(msg) from exc

    @classmethod
    def from_identity(
        cls, key: str, kind: type[T], store: KeyValueStore | None = None
    ) -> StoredDefault[T]:
        """Use the identity element of *kind* as the default."""
        return cls(key, identity_of(kind), store, kind=kind)

    @property
    def store(self) -> KeyValueStore:
        if self._store is None:
            from propwrap.infrastructure.stores import standard_store

            return standard_store()
        return self._store

    @property
    def projected(self) -> Self:
        """Read-only projection of the accessor itself."""
        return self

    @property
    def value(self) -> T:
        raw = self.store.get(self.key)
        if raw is None:
            return copy.deepcopy(self.default)
        if self._adapter is None:
            return raw
        try:
            return self._adapter.validate_json(to_json(raw), strict=True)
        except (ValidationError, PydanticSerializationError):
            logger.debug("Stored value for %r is not a valid %r, using default", self.key, self.kind)
            return copy.deepcopy(self.default)

    @value.setter
    def value(self, new: T) -> None:
        if is_absent(new):
            self.store.remove(self.key)
            return
        if self._adapter is not None:
            payload = self._adapter.dump_python(new, mode="json")
        else:
            payload = to_jsonable_python(new)
        self.store.set(self.key, payload)

    # --- Descriptor protocol ---

    @overload
    def __get__(self, instance: None, owner: type | None = None) -> Self: ...

    @overload
    def __get__(self, instance: object, owner: type | None = None) -> T: ...

    def __get__(self, instance: object | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self.value

    def __set__(self, instance: object, value: T) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"StoredDefault(key={self.key!r}, default={self.default!r})"
