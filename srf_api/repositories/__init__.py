"""
Persistence adapters.

Services depend on the RecordStore protocol rather than touching the JSON
files; the mirror database is reached only through MirrorRepository.
"""

from .base import RecordStore, StorageError
from .json_storage import JsonFileStore
from .memory_storage import MemoryStore

__all__ = ["RecordStore", "StorageError", "JsonFileStore", "MemoryStore"]
