"""
Ledger-side driver.

The ledger owns ordering. This module provides:
- OperationLog: Abstract ordered log of admitted operations
- MemoryOperationLog / FileOperationLog: Implementations (JSONL with hash chain)
- replay: Deliver a log to a contract one operation at a time
"""

from .log import OperationLog, MemoryOperationLog, FileOperationLog, ZERO_HASH, hash_operation
from .runner import ReplayResult, replay

__all__ = [
    "OperationLog",
    "MemoryOperationLog",
    "FileOperationLog",
    "ZERO_HASH",
    "hash_operation",
    "ReplayResult",
    "replay",
]
