# src/stayboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the store, session and repositories into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.notify import NoticeBoard
from ..core.ports import KeyValueStore
from ..core.session import Session
from ..core.state import AppState
from ..repos.bookings import BookingRepository
from ..repos.properties import PropertyRepository
from ..repos.tasks import TaskRepository
from ..storage.local_store import LocalStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, store: KeyValueStore | None = None) -> AppState:
    """
    Wire store, notices, session and the three repositories.

    settings=None reads get_settings(). store=None opens a file-backed
    LocalStore at settings.storage_path; tests pass an in-memory one.
    """
    if settings is None:
        settings = get_settings()

    if store is None:
        _ensure_local_dirs(settings)
        store = LocalStore(settings.storage_path)

    notices = NoticeBoard()
    session = Session(
        store,
        notices,
        password=settings.demo_password,
        login_delay=settings.login_delay,
    )

    common = dict(
        mutation_delay=settings.mutation_delay,
        seed_demo_data=settings.seed_demo_data,
    )
    tasks = TaskRepository(store, session, notices, load_delay=settings.load_delay, **common)
    properties = PropertyRepository(store, session, notices, load_delay=settings.load_delay, **common)
    bookings = BookingRepository(
        store,
        session,
        notices,
        load_delay=settings.booking_load_delay,
        properties=properties,
        **common,
    )

    logger.debug("AppState wired (seed_demo_data=%s)", settings.seed_demo_data)
    return AppState(
        settings=settings,
        store=store,
        notices=notices,
        session=session,
        tasks=tasks,
        properties=properties,
        bookings=bookings,
    )
