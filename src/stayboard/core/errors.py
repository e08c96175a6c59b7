# src/stayboard/core/errors.py

from __future__ import annotations


class StayboardError(Exception):
    """Base class for errors raised inside the state layer."""


class ValidationError(StayboardError):
    """A client-supplied field failed a precondition."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class StorageError(StayboardError):
    """A persisted value could not be decoded."""


class AuthorizationError(StayboardError):
    """A role-gated operation was attempted by an identity without the role."""
