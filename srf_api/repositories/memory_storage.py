"""In-memory RecordStore, used by tests and as a throwaway fixture store."""

from __future__ import annotations

import copy
import threading
from typing import Any

from srf_api.domain.collections import Collection, is_subscribed


class MemoryStore:
    def __init__(self, initial: dict | None = None) -> None:
        self._data: dict[Collection, list] = {c: [] for c in Collection}
        for name, records in (initial or {}).items():
            self._data[Collection(name)] = list(records)
        self._lock = threading.Lock()

    def ensure_ready(self) -> None:
        return None

    def read_all(self, collection: Collection) -> list:
        with self._lock:
            return copy.deepcopy(self._data[Collection(collection)])

    def count(self, collection: Collection) -> int:
        with self._lock:
            return len(self._data[Collection(collection)])

    def append(self, collection: Collection, record: Any) -> int:
        with self._lock:
            records = self._data[Collection(collection)]
            records.append(copy.deepcopy(record))
            return len(records)

    def subscribe(self, email: str, date: str) -> bool:
        with self._lock:
            records = self._data[Collection.NEWSLETTER]
            if is_subscribed(records, email):
                return False
            records.append({"email": email.strip(), "date": date})
            return True
