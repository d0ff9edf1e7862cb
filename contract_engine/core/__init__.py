"""
Core deterministic execution primitives.

This module provides the foundational abstractions shared by every contract:
- Operation: Immutable unit of work delivered in ledger order
- ExecutionResult / Decline: Per-operation outcome
- Canonical: Deterministic serialization, freezing and cloning
- IDs: Stable identifier and state hash generation
- Errors: Construction-time and fault taxonomy
"""

from .operation import Operation, OperationKind
from .result import Decline, ExecutionResult, ResultStatus, Route, SCHEMA_DECLINE_REASON
from .canonical import canonicalize, canonical_json_bytes, canonical_json_str, freeze, safe_clone
from .ids import stable_id, state_hash
from .errors import (
    ContractError,
    DuplicateBindingError,
    UnknownSchemaError,
    RegistrySealedError,
    StoreAccessError,
    StoreUnavailableError,
    ConcurrentExecutionError,
    DeterminismError,
    LogIntegrityError,
)

__all__ = [
    "Operation",
    "OperationKind",
    "Decline",
    "ExecutionResult",
    "ResultStatus",
    "Route",
    "SCHEMA_DECLINE_REASON",
    "canonicalize",
    "canonical_json_bytes",
    "canonical_json_str",
    "freeze",
    "safe_clone",
    "stable_id",
    "state_hash",
    "ContractError",
    "DuplicateBindingError",
    "UnknownSchemaError",
    "RegistrySealedError",
    "StoreAccessError",
    "StoreUnavailableError",
    "ConcurrentExecutionError",
    "DeterminismError",
    "LogIntegrityError",
]
