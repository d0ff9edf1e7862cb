"""
Ordered operation logs.

The file log stores one hash chain record per line:
    {"prev_hash": "...", "op_hash": "...", "op": {...}}
"""

import hashlib
import json
import os
from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Tuple

from ..core.canonical import canonical_json_bytes, canonical_json_str
from ..core.errors import LogIntegrityError, StoreUnavailableError
from ..core.operation import Operation

try:
    import fcntl
except ImportError:  # Windows or unsupported platform
    fcntl = None

ZERO_HASH = "0" * 64


def hash_operation(prev_hash: str, op: Operation) -> str:
    """
    Compute hash of an operation chained to the previous hash.

    Hash input: prev_hash + canonical_json(op with seq)
    """
    b = prev_hash.encode("utf-8") + canonical_json_bytes(op.to_dict())
    return hashlib.sha256(b).hexdigest()


class OperationLog(ABC):
    """
    Abstract operation log.

    All implementations must guarantee:
    - Append-only
    - Dense sequence numbers starting at 0, assigned on append
    - read() yields operations in sequence order
    """

    @abstractmethod
    def append(self, op: Operation) -> Operation:
        """Append op and return it with seq assigned."""
        ...

    @abstractmethod
    def read(self, from_seq: int = 0) -> Iterator[Operation]:
        ...

    def __len__(self) -> int:
        return sum(1 for _ in self.read())


class MemoryOperationLog(OperationLog):
    def __init__(self) -> None:
        self._ops: List[Operation] = []

    def append(self, op: Operation) -> Operation:
        op = op.with_seq(len(self._ops))
        self._ops.append(op)
        return op

    def read(self, from_seq: int = 0) -> Iterator[Operation]:
        for op in self._ops[from_seq:]:
            yield op

    def __len__(self) -> int:
        return len(self._ops)


class FileOperationLog(OperationLog):
    """
    File-based append-only operation log.

    Guarantees:
    - Append-only (no mutations)
    - Fsync after each append (durability)
    - Hash chain integrity (verify())
    """

    def __init__(self, path: str) -> None:
        self.path = path
        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            if not os.path.exists(path):
                with open(path, "wb") as f:
                    f.write(b"")
        except OSError as ex:
            raise StoreUnavailableError(str(ex)) from ex

    def _records(self) -> Iterator[dict]:
        with open(self.path, "rb") as f:
            for line in f:
                if not line.strip():
                    continue
                yield json.loads(line)

    def _last_seq_and_hash(self) -> Tuple[int, str]:
        """
        Returns:
            (last_seq, last_hash), or (-1, ZERO_HASH) if the log is empty
        """
        last_seq = -1
        last_hash = ZERO_HASH
        for rec in self._records():
            last_seq = rec["op"]["seq"]
            last_hash = rec["op_hash"]
        return last_seq, last_hash

    def append(self, op: Operation) -> Operation:
        """
        Append operation with hash chain.

        Raises:
            StoreUnavailableError: If the log cannot be written
        """
        try:
            with open(self.path, "a+b") as f:
                if fcntl:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                last_seq, last_hash = self._last_seq_and_hash()
                op = op.with_seq(last_seq + 1)
                rec = {
                    "prev_hash": last_hash,
                    "op_hash": hash_operation(last_hash, op),
                    "op": op.to_dict(),
                }
                f.seek(0, os.SEEK_END)
                f.write((canonical_json_str(rec) + "\n").encode("utf-8"))
                f.flush()
                os.fsync(f.fileno())
                if fcntl:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except OSError as ex:
            raise StoreUnavailableError(str(ex)) from ex
        return op

    def read(self, from_seq: int = 0) -> Iterator[Operation]:
        for rec in self._records():
            if rec["op"]["seq"] < from_seq:
                continue
            yield Operation.from_dict(rec["op"])

    def last_hash(self) -> Optional[str]:
        return self._last_seq_and_hash()[1]

    def verify(self) -> int:
        """
        Verify the hash chain end to end.

        Returns:
            Number of verified records

        Raises:
            LogIntegrityError: On the first broken link
        """
        prev = ZERO_HASH
        count = 0
        for rec in self._records():
            op = Operation.from_dict(rec["op"])
            if op.seq != count:
                raise LogIntegrityError(f"sequence gap at record {count}: seq={op.seq}")
            if rec["prev_hash"] != prev:
                raise LogIntegrityError(f"prev_hash mismatch at seq {op.seq}")
            if hash_operation(prev, op) != rec["op_hash"]:
                raise LogIntegrityError(f"op_hash mismatch at seq {op.seq}")
            prev = rec["op_hash"]
            count += 1
        return count
