"""
In-memory key-value store.
"""

from typing import Any, Dict, Optional, Sequence

from ..core.canonical import canonicalize, safe_clone
from .base import KeyValueStore, Write


class MemoryStore(KeyValueStore):
    """
    Dict-backed store. Values are kept in canonical form and copied on the way
    in and out, so callers never share mutable state with the store.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self._data[key] = canonicalize(value)

    async def get(self, key: str) -> Optional[Any]:
        return safe_clone(self._data.get(key))

    async def put(self, key: str, value: Any) -> None:
        self._data[key] = canonicalize(value)

    async def apply(self, writes: Sequence[Write]) -> None:
        staged = [(key, canonicalize(value)) for key, value in writes]
        for key, value in staged:
            self._data[key] = value

    def snapshot(self) -> Dict[str, Any]:
        return safe_clone(self._data)
