"""Storage interface shared by the file-backed and in-memory record stores."""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from srf_api.domain.collections import Collection


class StorageError(Exception):
    """Raised when a collection cannot be persisted."""


@runtime_checkable
class RecordStore(Protocol):
    def ensure_ready(self) -> None: ...

    def append(self, collection: Collection, record: Any) -> int: ...

    def read_all(self, collection: Collection) -> list: ...

    def count(self, collection: Collection) -> int: ...

    def subscribe(self, email: str, date: str) -> bool: ...
