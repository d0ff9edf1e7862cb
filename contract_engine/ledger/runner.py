"""
Replay runner: deliver an operation log to a contract.

Delivery is strictly sequential in log order. Declines are reported, store
faults propagate and halt the replay; the runner never retries.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..contract import Contract
from ..core.ids import state_hash
from ..core.result import ExecutionResult
from ..logging_config import get_logger
from .log import OperationLog

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReplayResult:
    """
    Result of replay operation.

    Fields:
        applied: Number of operations delivered
        executed: Number that executed
        declined: Number that were declined
        state_hash: Hash of the store snapshot after the last operation
        results: Per-operation results in delivery order
    """
    applied: int
    executed: int
    declined: int
    state_hash: str
    results: Tuple[ExecutionResult, ...] = ()


async def replay(log: OperationLog, contract: Contract, to_seq: Optional[int] = None) -> ReplayResult:
    """
    Replay operations into a contract.

    Same log + same initial store always produces the same state hash.

    Args:
        log: Operation log to read from
        contract: Contract bound to the target store
        to_seq: Stop at this sequence (inclusive, None = all)
    """
    results = []
    executed = declined = 0

    for op in log.read(from_seq=0):
        if to_seq is not None and op.require_seq() > to_seq:
            break
        result = await contract.execute(op)
        results.append(result)
        if result.declined:
            declined += 1
        else:
            executed += 1

    final_hash = state_hash(contract.store.snapshot())
    logger.info("replayed %d operations (%d declined), state %s", len(results), declined, final_hash)
    return ReplayResult(
        applied=len(results),
        executed=executed,
        declined=declined,
        state_hash=final_hash,
        results=tuple(results),
    )
