"""
JSON-file persistence: one file per collection, each holding a JSON array.

Every append is a whole-file rewrite guarded by a per-collection lock, so
requests served from the threadpool cannot interleave their
read-modify-write cycles. Reads fail open (missing, empty or corrupted file
is treated as no data); writes raise StorageError.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from srf_api.domain.collections import FILE_NAMES, Collection, is_subscribed
from .base import StorageError

logger = logging.getLogger(__name__)


class JsonFileStore:
    """RecordStore backed by ``<data_dir>/<collection file>.json``."""

    def __init__(self, data_dir: str | os.PathLike) -> None:
        self.data_dir = Path(data_dir)
        self._locks = {c: threading.Lock() for c in Collection}

    def path_for(self, collection: Collection) -> Path:
        return self.data_dir / FILE_NAMES[Collection(collection)]

    def ensure_ready(self) -> None:
        """Create the data directory and seed missing files with ``[]``.

        Failures are logged only; appends retry the directory creation.
        """
        for collection in Collection:
            path = self.path_for(collection)
            if path.exists():
                continue
            try:
                self._write(path, [])
            except StorageError:
                continue
            logger.info("Created %s", path)

    # ------------------------------ io ------------------------------
    def _read(self, path: Path) -> list:
        if not path.exists():
            return []
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.warning("Error reading %s: %s", path, exc)
            return []
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.warning("Corrupted JSON in %s, treating as empty: %s", path, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Expected a JSON array in %s, got %s", path, type(data).__name__)
            return []
        return data

    def _write(self, path: Path, data: list) -> None:
        payload = json.dumps(data, ensure_ascii=False, indent=2)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            logger.error("Error writing %s: %s", path, exc)
            raise StorageError(f"could not write {path.name}") from exc

    # ------------------------------ api ------------------------------
    def read_all(self, collection: Collection) -> list:
        collection = Collection(collection)
        with self._locks[collection]:
            return self._read(self.path_for(collection))

    def count(self, collection: Collection) -> int:
        return len(self.read_all(collection))

    def append(self, collection: Collection, record: Any) -> int:
        collection = Collection(collection)
        path = self.path_for(collection)
        with self._locks[collection]:
            data = self._read(path)
            data.append(record)
            self._write(path, data)
            return len(data)

    def subscribe(self, email: str, date: str) -> bool:
        path = self.path_for(Collection.NEWSLETTER)
        with self._locks[Collection.NEWSLETTER]:
            data = self._read(path)
            if is_subscribed(data, email):
                return False
            data.append({"email": email.strip(), "date": date})
            self._write(path, data)
            return True
