"""
Tests for named schema validation.
"""

import pytest

from contract_engine.core.canonical import freeze
from contract_engine.core.errors import DuplicateBindingError, UnknownSchemaError
from contract_engine.schema import SchemaValidator

LANE = {
    "$$strict": True,
    "status": {"type": "string", "min": 1, "max": 8},
    "note": {"type": "string", "optional": True},
}


@pytest.fixture
def validator():
    v = SchemaValidator()
    v.register_schema("lane", LANE)
    return v


def test_valid_payload(validator):
    assert validator.validate("lane", {"status": "ok"})
    assert validator.validate("lane", {"status": "ok", "note": "n"})
    assert validator.errors("lane", {"status": "ok"}) == []


def test_frozen_payload_accepted(validator):
    assert validator.validate("lane", freeze({"status": "ok"}))


def test_strict_rejects_unknown_fields(validator):
    assert not validator.validate("lane", {"status": "ok", "extra": 1})


def test_non_strict_ignores_unknown_fields():
    v = SchemaValidator()
    v.register_schema("entry", {"key": {"type": "string", "min": 1}, "value": {"type": "any"}})

    assert v.validate("entry", {"key": "k", "value": [1, 2], "other": True})
    assert not v.validate("entry", {"value": 1})


def test_required_any_rejects_null():
    v = SchemaValidator()
    v.register_schema("entry", {
        "key": {"type": "string"},
        "value": {"type": "any"},
        "meta": {"type": "any", "optional": True},
    })

    assert v.validate("entry", {"key": "k", "value": 0})
    assert v.validate("entry", {"key": "k", "value": False})
    assert not v.validate("entry", {"key": "k", "value": None})
    assert not v.validate("entry", {"key": "k"})
    assert v.validate("entry", {"key": "k", "value": 1, "meta": None})


def test_field_names_shadowing_model_attributes():
    v = SchemaValidator()
    v.register_schema("doc", {"$$strict": True, "_id": {"type": "string", "min": 1}})
    v.register_schema("cfg", {"$$strict": True, "model_config": {"type": "number"}})
    v.register_schema("misc", {
        "model_dump": {"type": "string"},
        "json": {"type": "boolean"},
        "copy": {"type": "any", "optional": True},
        "f0": {"type": "number", "optional": True},
    })

    assert not v.validate("doc", {})
    assert v.validate("doc", {"_id": "x"})
    assert v.errors("doc", {"_id": ""})[0].startswith("_id:")

    assert not v.validate("cfg", {})
    assert v.validate("cfg", {"model_config": 3})
    assert not v.validate("cfg", {"model_config": "3"})

    assert v.validate("misc", {"model_dump": "a", "json": True, "copy": [1], "f0": 2})
    assert v.validate("misc", {"model_dump": "a", "json": False})
    assert not v.validate("misc", {"model_dump": "a", "json": "yes"})
    assert not v.validate("misc", {"json": True})


@pytest.mark.parametrize("status", ["", "toolongvalue", 5, None, True])
def test_string_bounds_and_type(validator, status):
    assert not validator.validate("lane", {"status": status})


def test_number_bounds_and_strictness():
    v = SchemaValidator()
    v.register_schema("n", {"x": {"type": "number", "min": 0, "max": 10}})

    assert v.validate("n", {"x": 0})
    assert v.validate("n", {"x": 9.5})
    assert not v.validate("n", {"x": 11})
    assert not v.validate("n", {"x": -1})
    assert not v.validate("n", {"x": "5"})
    assert not v.validate("n", {"x": True})
    assert not v.validate("n", {"x": float("nan")})


def test_boolean_is_strict():
    v = SchemaValidator()
    v.register_schema("b", {"flag": {"type": "boolean"}})

    assert v.validate("b", {"flag": False})
    assert not v.validate("b", {"flag": 0})


def test_nested_object_shorthand():
    """The $$type shorthand declares a nested strict object."""
    v = SchemaValidator()
    v.register_schema("wrapped", {
        "value": {
            "$$strict": True,
            "$$type": "object",
            "status": {"type": "string", "min": 1},
        }
    })

    assert v.validate("wrapped", {"value": {"status": "ok"}})
    assert not v.validate("wrapped", {"value": {"status": "ok", "x": 1}})
    assert not v.validate("wrapped", {"value": "ok"})


def test_nested_object_props():
    v = SchemaValidator()
    v.register_schema("p", {"meta": {"type": "object", "strict": True, "props": {"a": {"type": "number"}}}})

    assert v.validate("p", {"meta": {"a": 1}})
    assert not v.validate("p", {"meta": {"a": 1, "b": 2}})


def test_non_object_payload_rejected(validator):
    assert not validator.validate("lane", None)
    assert not validator.validate("lane", ["status"])
    assert validator.errors("lane", "x")


def test_errors_name_the_field(validator):
    errs = validator.errors("lane", {"status": ""})
    assert len(errs) == 1
    assert errs[0].startswith("status:")


def test_schema_names_are_immutable(validator):
    with pytest.raises(DuplicateBindingError):
        validator.register_schema("lane", {"other": {"type": "any"}})
    assert validator.validate("lane", {"status": "ok"})


def test_unknown_schema(validator):
    with pytest.raises(UnknownSchemaError):
        validator.validate("missing", {})


def test_unknown_type_rejected_at_registration():
    v = SchemaValidator()
    with pytest.raises(ValueError):
        v.register_schema("bad", {"x": {"type": "date"}})
    assert not v.has_schema("bad")
