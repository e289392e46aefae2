"""Perishable JSON cache layered over a key/value store."""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Optional

from ..application.interfaces import IKeyValueStore

LOGGER = logging.getLogger(__name__)


class ExpiringCache:
    """Store JSON values with an absolute expiry time.

    Entries are written as ``{"data": ..., "expire": <unix millis>}``. Reads
    of expired or unparsable entries delete them and return ``None``.
    """

    def __init__(self, store: IKeyValueStore, clock: Callable[[], float] = time.time):
        self._store = store
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def set(self, key: str, data: Any, expire_ms: int) -> None:
        payload = {"data": data, "expire": self._now_ms() + int(expire_ms)}
        self._store.set(key, json.dumps(payload))

    def get(self, key: str) -> Optional[Any]:
        raw = self._store.get(key)
        if not raw:
            return None
        try:
            payload = json.loads(raw)
            expire = int(payload["expire"])
            data = payload["data"]
        except (ValueError, KeyError, TypeError) as exc:
            LOGGER.error("Dropping unreadable cache entry %s: %s", key, exc)
            self._store.remove(key)
            return None
        if self._now_ms() > expire:
            self._store.remove(key)
            return None
        return data

    def remove(self, key: str) -> None:
        self._store.remove(key)

    def clear(self) -> None:
        self._store.clear()

    def remove_item_from_list(self, list_key: str, item_id: Any, expire_ms: int) -> None:
        """Drop the element whose ``id`` equals *item_id* from a cached list."""

        items = self.get(list_key)
        if isinstance(items, list):
            remaining = [item for item in items if not (isinstance(item, dict) and item.get("id") == item_id)]
            self.set(list_key, remaining, expire_ms)
