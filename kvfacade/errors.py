"""Exception hierarchy for kvfacade.

Every failure surfaced by a facade operation is a KVError, so callers can
catch one type and read the message. Subclasses tell validation, stored-type
and store failures apart for callers that care.
"""

from __future__ import annotations


class KVError(Exception):
    """Base error for all facade operations."""

    def __init__(self, message: str, kind: str = "error") -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind

    def __str__(self) -> str:
        return self.message


class ValidationError(KVError):
    """A key, value or paging argument is missing or has the wrong type."""


class ValueTypeError(KVError):
    """The stored value cannot take part in the requested operation."""


class StoreError(KVError):
    """The document store failed; the original message is preserved."""
