"""
Key-value state storage.

This module provides:
- KeyValueStore: Abstract async get/put interface consumed by the core
- MemoryStore: In-process store (tests, single-node runs)
- FileStore: Durable append-only JSONL write log with hash chain
"""

from .base import KeyValueStore
from .memory import MemoryStore
from .file_store import FileStore, ZERO_HASH

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "FileStore",
    "ZERO_HASH",
]
