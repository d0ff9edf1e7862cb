"""
Stable identifier generation.

Provides deterministic ID generation without randomness.
"""

import hashlib
from typing import Any, Mapping

from .canonical import canonical_json_bytes


def stable_id(*parts: str) -> str:
    """
    Generate stable ID derived from inputs (no randomness).

    Example:
        stable_id("op", "syncDeliveryLane", "3") -> "a3f2..."
    """
    raw = "|".join(parts).encode("utf-8")
    return hashlib.sha256(raw).hexdigest()


def state_hash(snapshot: Mapping[str, Any]) -> str:
    """
    SHA-256 of a store snapshot in canonical form.

    Two replicas hold identical state iff their state hashes are equal.
    """
    return hashlib.sha256(canonical_json_bytes(snapshot)).hexdigest()
