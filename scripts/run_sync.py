#!/usr/bin/env python3
"""
Copy the local JSON collections into the mirror database once.

Usage:
  python scripts/run_sync.py [--data-dir ./data] [--create-tables]
"""
from __future__ import annotations

import argparse
import json
import logging
import sys

from srf_api.core.config import get_settings
from srf_api.core.log import configure_logging
from srf_api.db.create_tables import create_all
from srf_api.repositories.json_storage import JsonFileStore
from srf_api.repositories.sql_repository import MirrorRepository
from srf_api.services.sync_service import SyncService

logger = logging.getLogger("run_sync")


def main() -> int:
    ap = argparse.ArgumentParser(description="Sync local form submissions to the mirror database")
    ap.add_argument("--data-dir", help="Directory holding the JSON files (default: DATA_DIR)")
    ap.add_argument("--create-tables", action="store_true", help="Create the mirror tables before syncing")
    args = ap.parse_args()

    configure_logging()
    settings = get_settings()
    if not settings.mirror_database_url:
        raise SystemExit("MIRROR_DATABASE_URL is not configured")
    if args.create_tables:
        create_all()

    store = JsonFileStore(args.data_dir or settings.data_dir)
    report = SyncService(store, MirrorRepository()).run_once()
    if report is None:
        return 1
    print(json.dumps(report.as_dict(), indent=2))
    return 0 if report.ok else 2


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
