# src/stayboard/repos/base.py

"""
Shared machinery for the entity repositories.

A repository is an in-memory ordered list kept equal to the JSON snapshot last
written for its storage key. Mutations follow one pattern:

- snapshot the list at invocation
- wait the simulated latency (asyncio.sleep)
- build the new list from the snapshot
- persist the whole list, then publish it

Overlapping mutations therefore race: whichever finishes last overwrites the
collection (whole-snapshot last-write-wins). Readers see the old list until a
mutation settles.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from ..core.errors import StorageError
from ..core.models import Identity
from ..core.ports import KeyValueStore, Notifier, StateListener
from ..core.session import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Repository(Generic[T]):
    #: label used in notices ("Task added", "Error loading tasks", ...)
    entity = "item"
    entity_plural = "items"

    def __init__(
        self,
        store: KeyValueStore,
        session: Session,
        notifier: Notifier,
        *,
        load_delay: float = 0.5,
        mutation_delay: float = 0.3,
        seed_demo_data: bool = True,
    ) -> None:
        self._store = store
        self._session = session
        self._notifier = notifier
        self._load_delay = max(0.0, float(load_delay))
        self._mutation_delay = max(0.0, float(mutation_delay))
        self._seed_demo_data = seed_demo_data

        self._items: list[T] = []
        self._listeners: list[StateListener] = []
        self._in_flight = 0

        session.subscribe(self._on_session_change)

    # ---- to be provided by subclasses ----

    def _storage_key(self, identity: Identity) -> str:
        raise NotImplementedError

    def _decode(self, rec: dict[str, Any]) -> T:
        raise NotImplementedError

    def _encode(self, item: T) -> dict[str, Any]:
        raise NotImplementedError

    def _demo_items(self, identity: Identity) -> list[T]:
        return []

    # ---- state ----

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    def list(self) -> list[T]:
        return list(self._items)

    def get(self, item_id: str) -> T | None:
        return next((x for x in self._items if getattr(x, "id", None) == item_id), None)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, items: list[T]) -> None:
        self._items = list(items)
        for listener in list(self._listeners):
            try:
                listener(self.list())
            except Exception:
                logger.exception("%s listener failed", type(self).__name__)

    # ---- session wiring ----

    async def _on_session_change(self, identity: Identity | None) -> None:
        if identity is None:
            self._publish([])
            return
        await self.reload()

    # ---- load / persist ----

    def _decode_all(self, key: str, records: list[dict[str, Any]]) -> list[T]:
        out: list[T] = []
        for rec in records:
            try:
                out.append(self._decode(rec))
            except StorageError:
                logger.warning("Skipping unreadable %s record in key=%s id=%s", self.entity, key, rec.get("id"))
        return out

    def _persist(self, key: str, items: list[T]) -> None:
        self._store.save(key, [self._encode(x) for x in items])

    async def reload(self) -> None:
        identity = self._session.identity
        if identity is None:
            self._publish([])
            return

        key = self._storage_key(identity)
        self._in_flight += 1
        try:
            await asyncio.sleep(self._load_delay)

            records = self._store.load(key)
            if records is not None:
                items = self._decode_all(key, records)
            elif not self._store.contains(key) and self._seed_demo_data:
                items = self._demo_items(identity)
                self._persist(key, items)
                logger.info("Seeded %d demo %s records key=%s", len(items), self.entity, key)
            else:
                items = []

            if self._session.identity is not identity:
                logger.debug("Dropping stale %s load for key=%s", self.entity, key)
                return
            self._publish(items)
            logger.debug("Loaded %d %s records key=%s", len(items), self.entity, key)
        except Exception:
            logger.exception("Failed to load %s records key=%s", self.entity, key)
            self._notifier.notify(
                f"Error loading {self.entity_plural}",
                f"Failed to load {self.entity_plural}",
                variant="destructive",
            )
        finally:
            self._in_flight -= 1

    async def _mutate(
        self,
        build: Callable[[list[T]], list[T] | None],
        *,
        action: str,
        success: tuple[str, str] | None,
        failure: tuple[str, str],
    ) -> bool:
        """
        Run one mutation against the invocation-time snapshot.

        `build` returns the new collection, or None when there is nothing to
        change (unknown id). Returns True when a new collection was committed.
        """
        identity = self._session.identity
        if identity is None:
            logger.info("%s %s ignored: no active session", self.entity, action)
            return False

        key = self._storage_key(identity)
        snapshot = list(self._items)

        self._in_flight += 1
        try:
            await asyncio.sleep(self._mutation_delay)

            updated = build(snapshot)
            if updated is None:
                logger.debug("%s %s: nothing to change", self.entity, action)
                return False

            self._persist(key, updated)
            if self._session.identity is identity:
                self._publish(updated)
            else:
                logger.debug("Session changed during %s %s; not republishing", self.entity, action)

            logger.info("%s %s committed key=%s size=%d", self.entity, action, key, len(updated))
            if success is not None:
                self._notifier.notify(*success)
            return True
        except Exception:
            logger.exception("%s %s failed key=%s", self.entity, action, key)
            self._notifier.notify(*failure, variant="destructive")
            return False
        finally:
            self._in_flight -= 1

    def _report_denied(self, title: str, reason: str) -> None:
        logger.info("%s denied: %s", title, reason)
        self._notifier.notify(title, reason, variant="destructive")
