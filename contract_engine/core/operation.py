"""
Operation model.

An Operation is one admitted unit of work, delivered to the contract in ledger
order. Operations and their payloads are immutable once constructed.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from .canonical import canonical_json_bytes, freeze, safe_clone
from .ids import stable_id


class OperationKind(str, Enum):
    CALL = "call"
    FEATURE = "feature"
    MESSAGE = "message"


@dataclass(frozen=True)
class Operation:
    """
    Immutable operation record.

    Fields:
        kind: Operation category as submitted
        function_name: Public function name (calls only)
        feature_name: Emitting feature (feature events only)
        payload: Structured value, deep-frozen on construction
        origin_address: Submitter identity, None for synthesized events
        seq: Position in the operation log (assigned by the log)
    """
    kind: OperationKind
    payload: Any = None
    function_name: Optional[str] = None
    feature_name: Optional[str] = None
    origin_address: Optional[str] = None
    seq: Optional[int] = None
    _digest: str = field(default="", init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        kind = OperationKind(self.kind)
        if kind is OperationKind.CALL and not self.function_name:
            raise ValueError("call operations require function_name")
        if kind is not OperationKind.CALL and self.function_name is not None:
            raise ValueError("function_name is only valid on call operations")
        if kind is OperationKind.FEATURE and not self.feature_name:
            raise ValueError("feature operations require feature_name")
        if kind is not OperationKind.FEATURE and self.feature_name is not None:
            raise ValueError("feature_name is only valid on feature operations")

        # Canonical check doubles as the determinism gate for payloads.
        body = canonical_json_bytes(self._body(kind, self.payload))
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "payload", freeze(self.payload))
        object.__setattr__(self, "_digest", stable_id(body.decode("utf-8")))

    def _body(self, kind: OperationKind, payload: Any) -> Dict[str, Any]:
        return {
            "kind": kind.value,
            "function_name": self.function_name,
            "feature_name": self.feature_name,
            "origin_address": self.origin_address,
            "payload": payload,
        }

    @classmethod
    def call(cls, function_name: str, payload: Any = None, origin_address: Optional[str] = None) -> "Operation":
        return cls(OperationKind.CALL, payload, function_name=function_name, origin_address=origin_address)

    @classmethod
    def feature(cls, feature_name: str, payload: Any = None) -> "Operation":
        return cls(OperationKind.FEATURE, payload, feature_name=feature_name)

    @classmethod
    def message(cls, payload: Any = None, origin_address: Optional[str] = None) -> "Operation":
        return cls(OperationKind.MESSAGE, payload, origin_address=origin_address)

    def digest(self) -> str:
        """Stable content hash (excludes seq)."""
        return self._digest

    def with_seq(self, seq: int) -> "Operation":
        return replace(self, seq=seq)

    def require_seq(self) -> int:
        """
        Get sequence number or raise error if not assigned.

        Raises:
            ValueError: If seq is None
        """
        if self.seq is None:
            raise ValueError("Operation.seq is required but None")
        return self.seq

    def to_dict(self) -> Dict[str, Any]:
        data = self._body(self.kind, safe_clone(self.payload))
        data["seq"] = self.seq
        return data

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Operation":
        return Operation(
            kind=OperationKind(data["kind"]),
            payload=data.get("payload"),
            function_name=data.get("function_name"),
            feature_name=data.get("feature_name"),
            origin_address=data.get("origin_address"),
            seq=data.get("seq"),
        )
