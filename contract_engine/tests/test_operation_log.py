"""
Tests for the operation log hash chain.
"""

import json
import os
import tempfile

import pytest

from contract_engine.core.errors import LogIntegrityError
from contract_engine.core.operation import Operation
from contract_engine.ledger import FileOperationLog, MemoryOperationLog, ZERO_HASH, hash_operation


def test_append_assigns_dense_seq():
    with tempfile.TemporaryDirectory() as tmpdir:
        log = FileOperationLog(os.path.join(tmpdir, "ops.log"))

        seqs = [log.append(Operation.message({"i": i})).seq for i in range(5)]

        assert seqs == [0, 1, 2, 3, 4]
        assert [op.payload["i"] for op in log.read(from_seq=3)] == [3, 4]
        assert len(log) == 5
        assert log.verify() == 5


def test_chain_links():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "ops.log")
        log = FileOperationLog(path)
        op0 = log.append(Operation.call("f", {"a": 1}, origin_address="x"))
        log.append(Operation.feature("timer_feature", {"key": "currentTime", "value": 1}))

        with open(path) as f:
            recs = [json.loads(line) for line in f]

        assert recs[0]["prev_hash"] == ZERO_HASH
        assert recs[0]["op_hash"] == hash_operation(ZERO_HASH, op0)
        assert recs[1]["prev_hash"] == recs[0]["op_hash"]
        assert log.last_hash() == recs[1]["op_hash"]


def test_tamper_detected():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, "ops.log")
        log = FileOperationLog(path)
        log.append(Operation.call("f", {"a": 1}))
        log.append(Operation.call("f", {"a": 2}))

        with open(path) as f:
            lines = f.readlines()
        rec = json.loads(lines[0])
        rec["op"]["payload"]["a"] = 100
        lines[0] = json.dumps(rec) + "\n"
        with open(path, "w") as f:
            f.writelines(lines)

        with pytest.raises(LogIntegrityError):
            log.verify()


def test_read_round_trips_operations():
    with tempfile.TemporaryDirectory() as tmpdir:
        log = FileOperationLog(os.path.join(tmpdir, "ops.log"))
        original = Operation.message({"type": "msg", "msg": "hi"}, origin_address="peer")
        log.append(original)

        (back,) = list(log.read())
        assert back.digest() == original.digest()
        assert back.seq == 0


def test_memory_log():
    log = MemoryOperationLog()
    log.append(Operation.message({}))
    log.append(Operation.message({"n": 1}))

    assert len(log) == 2
    assert [op.seq for op in log.read()] == [0, 1]
    assert [op.seq for op in log.read(from_seq=1)] == [1]
