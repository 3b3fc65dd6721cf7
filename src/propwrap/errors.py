"""Exception hierarchy for propwrap.

INVARIANT: Constraint violations never raise. Wrappers silently clamp,
truncate, collapse, or revert. Exceptions only signal misuse at
construction time or a broken backing store.
"""

from __future__ import annotations


class PropwrapError(Exception):
    """Base class for all propwrap errors."""


class CapabilityError(PropwrapError, TypeError):
    """A value or type lacks a capability the wrapper requires."""


class StoreError(PropwrapError):
    """A key-value store could not be read or written."""
