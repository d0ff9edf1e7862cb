"""
File-based key-value store using an append-only JSONL write log.

Each line is a hash chain record holding one committed batch:
    {"prev_hash": "...", "batch_hash": "...", "batch": {"n": 3, "writes": [[key, value], ...]}}

State is rebuilt by folding the log on open.
"""

import hashlib
import json
import os
from typing import Any, Dict, Optional, Sequence

from ..core.canonical import canonical_json_bytes, canonical_json_str, canonicalize, safe_clone
from ..core.errors import LogIntegrityError, StoreUnavailableError
from .base import KeyValueStore, Write

try:
    import fcntl
except ImportError:  # Windows or unsupported platform
    fcntl = None

ZERO_HASH = "0" * 64


def hash_batch(prev_hash: str, batch: Dict[str, Any]) -> str:
    """SHA-256 over prev_hash + canonical batch bytes."""
    b = prev_hash.encode("utf-8") + canonical_json_bytes(batch)
    return hashlib.sha256(b).hexdigest()


class FileStore(KeyValueStore):
    """
    Durable key-value store.

    Guarantees:
    - Append-only write log (no rewrites)
    - One record per batch, so an operation's writes land together or not at all
    - Fsync after each record
    - Hash chain integrity, verified on load
    """

    def __init__(self, path: str) -> None:
        """
        Open (or create) the store at path and rebuild state from the log.

        Raises:
            StoreUnavailableError: If the file cannot be read or created
            LogIntegrityError: If the hash chain does not verify
        """
        self.path = path
        self._data: Dict[str, Any] = {}
        self._last_hash = ZERO_HASH
        self._batches = 0

        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            if not os.path.exists(path):
                with open(path, "wb") as f:
                    f.write(b"")
            self._load()
        except OSError as ex:
            raise StoreUnavailableError(str(ex)) from ex

    def _load(self) -> None:
        with open(self.path, "rb") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    rec = json.loads(line)
                    batch = rec["batch"]
                    prev_hash, batch_hash = rec["prev_hash"], rec["batch_hash"]
                except (ValueError, KeyError, TypeError) as ex:
                    raise LogIntegrityError(f"unreadable store record at batch {self._batches}") from ex
                if prev_hash != self._last_hash:
                    raise LogIntegrityError(f"store chain broken at batch {self._batches}")
                if hash_batch(self._last_hash, batch) != batch_hash:
                    raise LogIntegrityError(f"store batch hash mismatch at batch {self._batches}")
                for key, value in batch["writes"]:
                    self._data[key] = value
                self._last_hash = batch_hash
                self._batches += 1

    @property
    def last_hash(self) -> str:
        return self._last_hash

    async def get(self, key: str) -> Optional[Any]:
        return safe_clone(self._data.get(key))

    async def put(self, key: str, value: Any) -> None:
        await self.apply([(key, value)])

    async def apply(self, writes: Sequence[Write]) -> None:
        if not writes:
            return
        batch = {
            "n": self._batches,
            "writes": [[key, canonicalize(value)] for key, value in writes],
        }
        batch_hash = hash_batch(self._last_hash, batch)
        rec = {"prev_hash": self._last_hash, "batch_hash": batch_hash, "batch": batch}
        line = canonical_json_str(rec) + "\n"

        try:
            with open(self.path, "ab") as f:
                if fcntl:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                f.write(line.encode("utf-8"))
                f.flush()
                os.fsync(f.fileno())
                if fcntl:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except OSError as ex:
            raise StoreUnavailableError(str(ex)) from ex

        for key, value in batch["writes"]:
            self._data[key] = value
        self._last_hash = batch_hash
        self._batches += 1

    def snapshot(self) -> Dict[str, Any]:
        return safe_clone(self._data)
