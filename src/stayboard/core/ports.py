# src/stayboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the repositories and the session.

The state layer depends on Protocols instead of concrete implementations.
This keeps storage and notification swappable and makes testing easier.
"""

from typing import Any, Awaitable, Callable, Protocol

from .models import Identity


class KeyValueStore(Protocol):
    """Local-storage style persistence: string values, whole-collection JSON arrays."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...
    def contains(self, key: str) -> bool: ...

    def load(self, key: str) -> list[dict[str, Any]] | None: ...
    def save(self, key: str, records: list[dict[str, Any]]) -> None: ...


class Notifier(Protocol):
    """
    User-facing notification channel.

    variant is "default" for confirmations and "destructive" for failures.
    How a notice is shown (console line, toast, nothing) is the caller's business.
    """

    def notify(self, title: str, description: str = "", *, variant: str = "default") -> None: ...


SessionListener = Callable[[Identity | None], Awaitable[None]]
StateListener = Callable[[list[Any]], None]
