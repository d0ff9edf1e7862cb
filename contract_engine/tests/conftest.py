import pytest

from contract_engine.sample import DeliveryLaneContract
from contract_engine.store import MemoryStore


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def delivery(store):
    return DeliveryLaneContract(store)
