# src/stayboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..repos.bookings import BookingRepository
from ..repos.properties import PropertyRepository
from ..repos.tasks import TaskRepository
from .notify import NoticeBoard
from .ports import KeyValueStore
from .session import Session


@dataclass
class AppState:
    # Settings object (real Settings or a test SimpleNamespace).
    settings: Any

    store: KeyValueStore
    notices: NoticeBoard
    session: Session

    tasks: TaskRepository
    properties: PropertyRepository
    bookings: BookingRepository
