"""
Named, strictly typed payload schemas.

A definition maps field names to rules:

    {
        "$$strict": True,
        "status": {"type": "string", "min": 1, "max": 128},
        "count": {"type": "number", "min": 0, "optional": True},
        "meta": {"type": "object", "strict": True, "props": {...}},
        "value": {"type": "any"},
    }

Nested objects may also use the shorthand form
``{"$$type": "object", "$$strict": True, "<field>": rule, ...}``.
For strings min/max bound the length, for numbers the value.
"""

from typing import Annotated, Any, Dict, List, Mapping, Optional, Tuple, Type, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationError,
    confloat,
    conint,
    constr,
    create_model,
)

from ..core.canonical import safe_clone
from ..core.errors import DuplicateBindingError, UnknownSchemaError
from ..logging_config import get_logger

logger = get_logger(__name__)

_TYPES = ("string", "number", "boolean", "object", "any")
_DIRECTIVES = ("$$strict", "$$type")


def _present(value: Any) -> Any:
    if value is None:
        raise ValueError("value is required")
    return value


_REQUIRED_ANY = Annotated[Any, AfterValidator(_present)]


def _model_name(name: str) -> str:
    return "".join(ch if ch.isalnum() else "_" for ch in name) or "Schema"


def _object_parts(rule: Mapping[str, Any]) -> Tuple[Dict[str, Any], bool]:
    """Split an object rule into (props, strict) for both supported spellings."""
    if "$$type" in rule:
        props = {k: v for k, v in rule.items() if k not in _DIRECTIVES}
        return props, bool(rule.get("$$strict", False))
    return dict(rule.get("props") or {}), bool(rule.get("strict", False))


def _field_type(model_name: str, field_name: str, rule: Mapping[str, Any]) -> Any:
    if not isinstance(rule, Mapping):
        raise ValueError(f"rule for {field_name!r} must be a mapping")

    kind = "object" if rule.get("$$type") == "object" else rule.get("type")
    if kind not in _TYPES:
        raise ValueError(f"unsupported type for {field_name!r}: {kind!r}")

    lo = rule.get("min")
    hi = rule.get("max")

    if kind == "string":
        return constr(strict=True, min_length=lo, max_length=hi)
    if kind == "number":
        # bool is rejected by both strict members.
        return Union[
            conint(strict=True, ge=lo, le=hi),
            confloat(strict=True, ge=lo, le=hi, allow_inf_nan=False),
        ]
    if kind == "boolean":
        return StrictBool
    if kind == "object":
        props, strict = _object_parts(rule)
        if not props and not strict:
            return Dict[str, Any]
        return compile_schema(f"{model_name}_{field_name}", props, strict=strict)
    return _REQUIRED_ANY


def compile_schema(name: str, definition: Mapping[str, Any], strict: Optional[bool] = None) -> Type[BaseModel]:
    """
    Compile a schema definition into a pydantic model class.

    Raises:
        ValueError: If the definition uses an unknown type or malformed rule
    """
    if strict is None:
        strict = bool(definition.get("$$strict", False))
    model_name = _model_name(name)

    # Payload keys only ever appear as aliases, so names like "_id" or
    # "model_config" cannot collide with pydantic's own attributes.
    fields: Dict[str, Any] = {}
    for field_name, rule in definition.items():
        if field_name in _DIRECTIVES:
            continue
        tp = _field_type(model_name, field_name, rule)
        attr = f"f{len(fields)}"
        if rule.get("optional", False):
            if tp is _REQUIRED_ANY:
                tp = Any
            fields[attr] = (Optional[tp], Field(default=None, alias=field_name))
        else:
            fields[attr] = (tp, Field(..., alias=field_name))

    config = ConfigDict(strict=True, extra="forbid" if strict else "ignore")
    return create_model(model_name, __config__=config, **fields)


class SchemaValidator:
    """
    Registry of named schemas.

    Usage:
        validator = SchemaValidator()
        validator.register_schema("entry", {"key": {"type": "string", "min": 1}})
        validator.validate("entry", {"key": "currentTime"})  # True
    """

    def __init__(self) -> None:
        self._models: Dict[str, Type[BaseModel]] = {}

    def register_schema(self, name: str, definition: Mapping[str, Any]) -> None:
        """
        Register a schema. Names are immutable for the lifetime of the process.

        Raises:
            DuplicateBindingError: If name is already registered
            ValueError: If definition is malformed
        """
        if name in self._models:
            raise DuplicateBindingError(f"schema already registered: {name}")
        self._models[name] = compile_schema(name, definition)

    def has_schema(self, name: str) -> bool:
        return name in self._models

    def _model(self, name: str) -> Type[BaseModel]:
        try:
            return self._models[name]
        except KeyError:
            raise UnknownSchemaError(f"schema not registered: {name}") from None

    def validate(self, name: str, payload: Any) -> bool:
        """Return True if payload satisfies the named schema. Never raises for bad payloads."""
        return not self.errors(name, payload)

    def errors(self, name: str, payload: Any) -> List[str]:
        """Validation errors as 'path: message' strings (empty when valid)."""
        model = self._model(name)
        if not isinstance(payload, Mapping):
            return [f"payload must be an object, got {type(payload).__name__}"]
        try:
            model.model_validate(safe_clone(payload))
        except ValidationError as ex:
            out = []
            for err in ex.errors():
                loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
                out.append(f"{loc}: {err.get('msg')}")
            logger.debug("schema %s rejected payload: %s", name, "; ".join(out))
            return out
        return []
