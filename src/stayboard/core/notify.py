# src/stayboard/core/notify.py

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from .models import utcnow

logger = logging.getLogger(__name__)


class Variant(StrEnum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True, slots=True)
class Notice:
    title: str
    description: str
    variant: Variant
    at: datetime


class NoticeBoard:
    """
    Default Notifier: logs every notice and keeps the most recent ones.

    A connector may attach a sink (e.g. print to console) to surface notices
    as they happen.
    """

    def __init__(self, *, keep: int = 50, sink: Callable[[Notice], None] | None = None) -> None:
        self._recent: deque[Notice] = deque(maxlen=max(1, keep))
        self._sink = sink

    def set_sink(self, sink: Callable[[Notice], None] | None) -> None:
        self._sink = sink

    def notify(self, title: str, description: str = "", *, variant: str = "default") -> None:
        try:
            v = Variant(variant)
        except ValueError:
            v = Variant.DEFAULT
        notice = Notice(title=title, description=description, variant=v, at=utcnow())
        self._recent.append(notice)

        if v is Variant.DESTRUCTIVE:
            logger.warning("Notice: %s - %s", title, description)
        else:
            logger.info("Notice: %s - %s", title, description)

        if self._sink is not None:
            try:
                self._sink(notice)
            except Exception:
                logger.debug("Notice sink failed.", exc_info=True)

    def recent(self, limit: int = 10) -> list[Notice]:
        items = list(self._recent)
        return items[-limit:] if limit > 0 else []

    def clear(self) -> None:
        self._recent.clear()
