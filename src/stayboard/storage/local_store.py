# src/stayboard/storage/local_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from ..core.errors import StorageError

logger = logging.getLogger(__name__)


class LocalStore:
    """
    String key-value store holding JSON text, local-storage style.

    Backing:
    - path=None: process memory only (tests, throwaway demos)
    - path: a single JSON object {key: text} mirrored to disk on every write

    Every write rewrites the whole file (tmp + os.replace). There is no
    partial write and no per-record storage: a collection is one value.

    The store is date-agnostic; callers own (de)serialization of their fields.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._data: dict[str, str] = {}
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._data = self._read_file(self._path)
        logger.info("LocalStore ready path=%s keys=%d", self._path or ":memory:", len(self._data))

    # ---- low-level helpers ----

    @staticmethod
    def _read_file(path: Path) -> dict[str, str]:
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read local storage from %s; starting empty", path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Local storage file %s is not an object; starting empty", path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _flush(self) -> None:
        if self._path is None:
            return
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            # Holds the session token and identity; keep it private on disk.
            os.chmod(self._path, 0o600)

    # ---- raw string access ----

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    def contains(self, key: str) -> bool:
        return key in self._data

    def keys(self) -> list[str]:
        return list(self._data)

    # ---- JSON collections ----

    def load(self, key: str) -> list[dict[str, Any]] | None:
        """
        Return the JSON array stored under `key`, or None.

        None covers both "never saved" and "stored text is unusable";
        use contains() to tell them apart. Decode failures are logged, never raised.
        """
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            value = self._decode(key, raw)
        except StorageError:
            logger.warning("Ignoring unreadable value for key=%s", key, exc_info=True)
            return None
        logger.debug("load key=%s records=%d", key, len(value))
        return value

    def save(self, key: str, records: list[dict[str, Any]]) -> None:
        text = json.dumps(list(records), ensure_ascii=False)
        self._data[key] = text
        self._flush()
        logger.debug("save key=%s records=%d bytes=%d", key, len(records), len(text))

    @staticmethod
    def _decode(key: str, raw: str) -> list[dict[str, Any]]:
        try:
            value = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"value for {key!r} is not valid JSON") from e
        if not isinstance(value, list):
            raise StorageError(f"value for {key!r} is not a JSON array")
        return [v for v in value if isinstance(v, dict)]
