"""
One-way, deduplicating copy of the local collections into the mirror store.

Each run walks every collection, skips records whose dedup key is already in
the mirror and inserts the rest. Nothing is ever updated or deleted on either
side, so a run that fails halfway is simply resumed by the next one.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from srf_api.domain.collections import Collection, dedup_key
from srf_api.repositories.base import RecordStore

logger = logging.getLogger(__name__)

SYNC_ORDER = (
    Collection.DONATIONS,
    Collection.VOLUNTEER,
    Collection.CONTACT,
    Collection.NEWSLETTER,
)


class Mirror(Protocol):
    def exists(self, collection: Collection, key: tuple) -> bool: ...

    def insert(self, collection: Collection, record: Any) -> None: ...


@dataclass
class CollectionResult:
    collection: Collection
    inserted: int = 0
    skipped: int = 0
    invalid: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SyncReport:
    started_at: float
    finished_at: float = 0.0
    results: list[CollectionResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results)

    @property
    def inserted(self) -> int:
        return sum(r.inserted for r in self.results)

    def as_dict(self) -> dict:
        return {
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "ok": self.ok,
            "collections": {
                r.collection.value: {
                    "inserted": r.inserted,
                    "skipped": r.skipped,
                    "invalid": r.invalid,
                    "error": r.error,
                }
                for r in self.results
            },
        }


class SyncService:
    """Copies local records into the mirror, one collection at a time."""

    def __init__(self, store: RecordStore, mirror: Mirror) -> None:
        self.store = store
        self.mirror = mirror
        self._running = threading.Lock()
        self.last_report: Optional[SyncReport] = None

    @property
    def running(self) -> bool:
        return self._running.locked()

    def sync_collection(self, collection: Collection) -> CollectionResult:
        result = CollectionResult(collection)
        seen: set[tuple] = set()
        for record in self.store.read_all(collection):
            key = dedup_key(collection, record)
            if key is None:
                result.invalid += 1
                continue
            if key in seen or self.mirror.exists(collection, key):
                result.skipped += 1
                continue
            self.mirror.insert(collection, record)
            seen.add(key)
            result.inserted += 1
        return result

    def run_once(self) -> Optional[SyncReport]:
        """Run a full pass. Returns None when another pass is still running."""
        if not self._running.acquire(blocking=False):
            logger.warning("Sync already in progress; skipping this run")
            return None
        try:
            report = SyncReport(started_at=time.time())
            for collection in SYNC_ORDER:
                try:
                    result = self.sync_collection(collection)
                except Exception as exc:
                    logger.exception("Error syncing %s to mirror", collection.value)
                    result = CollectionResult(collection, error=str(exc) or exc.__class__.__name__)
                report.results.append(result)
            report.finished_at = time.time()
            self.last_report = report
            if report.ok:
                logger.info("Synced local JSON files to mirror (%d new records).", report.inserted)
            else:
                failed = ", ".join(r.collection.value for r in report.results if not r.ok)
                logger.warning("Sync finished with errors in: %s", failed)
            return report
        finally:
            self._running.release()


def next_slot(previous: float, now: float, interval: float) -> tuple[float, int]:
    """Next tick after ``previous`` that is still in the future, and how many were passed over."""
    upcoming = previous + interval
    if upcoming > now:
        return upcoming, 0
    missed = int((now - upcoming) // interval) + 1
    return upcoming + missed * interval, missed


class SyncScheduler:
    """Runs SyncService.run_once on a fixed wall-clock cadence in a daemon thread.

    Ticks that fall inside a run still in progress are dropped, not queued.
    """

    def __init__(self, service: SyncService, interval_seconds: float) -> None:
        self.service = service
        self.interval = float(interval_seconds)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def alive(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def start(self) -> None:
        if self.alive:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="mirror-sync", daemon=True)
        self._thread.start()
        logger.info("Mirror sync scheduled every %.0f seconds", self.interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout)
        self._thread = None

    def _loop(self) -> None:
        next_run = time.monotonic() + self.interval
        while not self._stop.wait(max(0.0, next_run - time.monotonic())):
            try:
                self.service.run_once()
            except Exception:
                logger.exception("Unexpected error in scheduled sync")
            next_run, missed = next_slot(next_run, time.monotonic(), self.interval)
            if missed:
                logger.warning("Sync run overran its slot; skipping %d scheduled run(s)", missed)
