"""
Tests for handler registries and contract construction rules.
"""

import pytest

from contract_engine.contract import Contract
from contract_engine.core.errors import DuplicateBindingError, RegistrySealedError, UnknownSchemaError
from contract_engine.core.operation import Operation
from contract_engine.registry import FeatureRegistry, FunctionRegistry, MessageInterceptor
from contract_engine.store import MemoryStore


async def _noop(ctx):
    return None


def test_function_registry_rejects_duplicates():
    reg = FunctionRegistry()
    first = reg.register("f", _noop)

    with pytest.raises(DuplicateBindingError):
        reg.register("f", _noop, schema="s")
    assert reg.lookup("f") is first
    assert reg.lookup(None) is None
    assert "f" in reg and len(reg) == 1


def test_feature_registry_rejects_duplicates():
    reg = FeatureRegistry()
    reg.register("timer_feature", _noop)

    with pytest.raises(DuplicateBindingError):
        reg.register("timer_feature", _noop)


def test_message_interceptor_accepts_one_handler():
    """Second registration is rejected; the first stays in effect."""
    mi = MessageInterceptor()
    first = mi.set(_noop)

    with pytest.raises(DuplicateBindingError):
        mi.set(_noop)
    assert mi.binding is first


def test_sealed_registries_reject_registration():
    reg = FunctionRegistry()
    reg.seal()
    with pytest.raises(RegistrySealedError):
        reg.register("f", _noop)

    mi = MessageInterceptor()
    mi.seal()
    with pytest.raises(RegistrySealedError):
        mi.set(_noop)


class Echo(Contract):
    def __init__(self, store):
        super().__init__(store)
        self.add_schema("echo", {"$$strict": True, "text": {"type": "string"}})
        self.add_function("echo", schema="echo")
        self.add_function("echoTwice")

    async def echo(self, ctx):
        return ctx.value["text"]

    async def echo_twice(self, ctx):
        return "again"

    def not_async(self, ctx):
        return None


def test_add_function_resolves_snake_case():
    c = Echo(MemoryStore())
    assert c.functions.lookup("echoTwice").handler == c.echo_twice
    assert c.functions.lookup("echo").schema == "echo"


def test_add_function_requires_coroutine_method():
    c = Echo(MemoryStore())
    with pytest.raises(AttributeError):
        c.add_function("missing")
    with pytest.raises(AttributeError):
        c.add_function("not_async")


def test_core_methods_cannot_be_exposed():
    c = Echo(MemoryStore())
    with pytest.raises(AttributeError):
        c.add_function("execute")
    with pytest.raises(AttributeError):
        c.add_function("put")


def test_add_function_requires_registered_schema():
    c = Echo(MemoryStore())
    with pytest.raises(UnknownSchemaError):
        c.add_function("echo_twice", schema="nope")


async def test_duplicate_function_keeps_original_binding():
    """Rejected duplicate registration leaves the original usable."""
    c = Echo(MemoryStore())
    with pytest.raises(DuplicateBindingError):
        c.add_function("echo")

    result = await c.execute(Operation.call("echo", {"text": "hi"}))
    assert result.ok
    assert result.value == "hi"


async def test_registries_seal_on_first_operation():
    c = Echo(MemoryStore())
    await c.execute(Operation.call("echoTwice"))

    with pytest.raises(RegistrySealedError):
        c.add_feature("late_feature", _noop)
    with pytest.raises(RegistrySealedError):
        c.set_message_handler(_noop)
