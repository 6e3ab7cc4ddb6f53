"""
Infrastructure package for the Activity Store.

Centralizes persistence concerns (in-memory and file-backed key-value stores).
Keep this layer focused on I/O, decoupled from store and query logic.
"""

from activity_store.infrastructure.persistence import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    QuotaExceededError,
)

__all__ = [
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "QuotaExceededError",
]
