"""
Per-invocation execution context.

Every handler receives one ExecutionContext. It carries the operation and a
store accessor scoped to that single invocation: writes are buffered in order
and committed as one batch by the core after the handler returns; reads see
the buffered writes first. Once the invocation closes the accessor is dead.
"""

from typing import Any, Dict, List, Optional, Tuple

from .core.canonical import canonicalize, freeze, safe_clone
from .core.errors import StoreAccessError
from .core.operation import Operation
from .schema import SchemaValidator
from .store.base import KeyValueStore


class ExecutionContext:
    """
    Attributes:
        op: The operation being executed (read-only)
        value: The operation payload (deep-frozen)
        address: Origin address of the submitter, or None
    """

    def __init__(self, op: Operation, store: KeyValueStore, validator: SchemaValidator) -> None:
        self.op = op
        self._store = store
        self._validator = validator
        self._latest: Dict[str, Any] = {}
        self._writes: List[Tuple[str, Any]] = []
        self._active = True

    @property
    def value(self) -> Any:
        return self.op.payload

    @property
    def address(self) -> Optional[str]:
        return self.op.origin_address

    @property
    def active(self) -> bool:
        return self._active

    def _require_active(self, action: str) -> None:
        if not self._active:
            raise StoreAccessError(f"{action} outside an active handler invocation")

    async def get(self, key: str) -> Any:
        """
        Read key, seeing this invocation's own pending writes first.

        Returns:
            Frozen value, or None if absent
        """
        self._require_active("get")
        if key in self._latest:
            return freeze(self._latest[key])
        return freeze(await self._store.get(key))

    async def put(self, key: str, value: Any) -> None:
        """
        Buffer a write. The value is copied in canonical form immediately.

        Raises:
            DeterminismError: If value has no canonical JSON form
        """
        self._require_active("put")
        if not isinstance(key, str) or not key:
            raise StoreAccessError(f"store keys must be non-empty strings, got {key!r}")
        canon = canonicalize(value)
        self._latest[key] = canon
        self._writes.append((key, canon))

    def validate(self, schema: str, payload: Any) -> bool:
        """Check payload against a registered schema."""
        return self._validator.validate(schema, payload)

    def writes(self) -> Tuple[Tuple[str, Any], ...]:
        """Pending writes in the order they were issued."""
        return tuple((key, safe_clone(value)) for key, value in self._writes)

    def discard(self) -> None:
        self._latest.clear()
        self._writes.clear()

    def close(self) -> None:
        self._active = False
