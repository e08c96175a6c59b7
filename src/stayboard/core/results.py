# src/stayboard/core/results.py

"""
Tagged results for role-gated repository operations.

Callers branch on `result.ok` (or isinstance) instead of re-reading repository
state to find out whether a permission check dropped the call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Granted(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Denied:
    """The change was not applied; reason is shown to the user."""

    reason: str

    @property
    def ok(self) -> bool:
        return False


AccessResult = Granted[T] | Denied
