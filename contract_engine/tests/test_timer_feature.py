"""
Tests for the host-side timer feature.
"""

from contract_engine.features import CURRENT_TIME_KEY, TIMER_FEATURE, TimerFeature
from contract_engine.core.operation import OperationKind
from contract_engine.ledger import MemoryOperationLog, replay
from contract_engine.sample import DeliveryLaneContract
from contract_engine.store import MemoryStore


async def test_tick_submits_feature_operation():
    submitted = []

    async def submit(op):
        submitted.append(op)

    timer = TimerFeature(submit, clock=lambda: 1234)
    op = await timer.tick()

    assert submitted == [op]
    assert op.kind is OperationKind.FEATURE
    assert op.feature_name == TIMER_FEATURE
    assert dict(op.payload) == {"key": CURRENT_TIME_KEY, "value": 1234}


async def test_run_emits_requested_ticks_into_log():
    log = MemoryOperationLog()
    readings = iter([10, 20, 30])

    async def submit(op):
        log.append(op)

    emitted = await TimerFeature(submit, interval=0, clock=lambda: next(readings)).run(ticks=3)

    assert emitted == 3
    store = MemoryStore()
    await replay(log, DeliveryLaneContract(store))
    assert store.snapshot() == {CURRENT_TIME_KEY: 30}
