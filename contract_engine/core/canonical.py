"""
Canonical serialization for deterministic hashing.

Every value that crosses the store boundary or gets hashed goes through these
functions, so replicas produce identical bytes for identical state.
"""

import json
import math
from types import MappingProxyType
from typing import Any, Mapping

from .errors import DeterminismError


def canonicalize(obj: Any) -> Any:
    """
    Convert arbitrary nested mapping/sequence to canonical form.

    Rules:
    - mapping keys sorted alphabetically (keys must be strings)
    - tuples converted to lists
    - frozen mappings converted to plain dicts
    - floats must be finite

    Raises:
        DeterminismError: If a value has no canonical JSON form
    """
    if isinstance(obj, Mapping):
        for k in obj.keys():
            if not isinstance(k, str):
                raise DeterminismError(f"non-string key: {k!r}")
        return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    if isinstance(obj, float) and not math.isfinite(obj):
        raise DeterminismError(f"non-finite float: {obj!r}")
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    raise DeterminismError(f"value of type {type(obj).__name__} is not canonically serializable")


def canonical_json_bytes(obj: Any) -> bytes:
    """
    Deterministic JSON bytes for hashing.

    Guarantees:
    - sort_keys=True (secondary safety)
    - separators remove whitespace
    - ensure_ascii=False keeps UTF-8 stable
    - canonical preprocessing via canonicalize()
    """
    canon = canonicalize(obj)
    s = json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    return s.encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    """Deterministic JSON string (for display or storage)."""
    return canonical_json_bytes(obj).decode("utf-8")


def freeze(obj: Any) -> Any:
    """
    Deep-freeze a canonical value.

    Mappings become read-only MappingProxyType views over private copies,
    lists become tuples. Scalars are returned as is.
    """
    if isinstance(obj, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return tuple(freeze(x) for x in obj)
    return obj


def safe_clone(obj: Any) -> Any:
    """
    Detached mutable deep copy of a (possibly frozen) value.

    Handlers use this whenever they need to derive a value from the operation
    payload or from something read out of the store.
    """
    if isinstance(obj, Mapping):
        return {k: safe_clone(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [safe_clone(x) for x in obj]
    return obj
