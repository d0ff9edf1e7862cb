"""
Handler registries.

Bindings map an immutable name to exactly one handler, resolved once while the
contract is constructed. After the contract seals (first operation, or an
explicit seal()) no registry can be reopened.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from .core.errors import DuplicateBindingError, RegistrySealedError
from .core.result import Route

# Handler signature: async (ctx: ExecutionContext) -> value | Decline | None
Handler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True)
class HandlerBinding:
    name: str
    handler: Handler
    route: Route
    schema: Optional[str] = None


class _Registry:
    route: Route
    kind: str

    def __init__(self) -> None:
        self._bindings: Dict[str, HandlerBinding] = {}
        self._sealed = False

    def seal(self) -> None:
        self._sealed = True

    def _check_open(self, name: str) -> None:
        if self._sealed:
            raise RegistrySealedError(f"cannot register {self.kind} {name!r}: registry is sealed")
        if name in self._bindings:
            raise DuplicateBindingError(f"{self.kind} already registered: {name}")

    def lookup(self, name: Optional[str]) -> Optional[HandlerBinding]:
        if name is None:
            return None
        return self._bindings.get(name)

    def names(self) -> list:
        return sorted(self._bindings)

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)


class FunctionRegistry(_Registry):
    """
    Public function name -> handler, with an optional gating schema.

    Usage:
        functions = FunctionRegistry()
        functions.register("syncDeliveryLane", handler, schema="syncDeliveryLane")
    """

    route = Route.FUNCTION
    kind = "function"

    def register(self, name: str, handler: Handler, schema: Optional[str] = None) -> HandlerBinding:
        """
        Raises:
            DuplicateBindingError: If name is already bound
            RegistrySealedError: If the registry is sealed
        """
        self._check_open(name)
        binding = HandlerBinding(name=name, handler=handler, route=self.route, schema=schema)
        self._bindings[name] = binding
        return binding


class FeatureRegistry(_Registry):
    """
    Feature name -> handler. Feature payloads are not pre-validated; each
    handler validates what it trusts.
    """

    route = Route.FEATURE
    kind = "feature"

    def register(self, name: str, handler: Handler) -> HandlerBinding:
        self._check_open(name)
        binding = HandlerBinding(name=name, handler=handler, route=self.route)
        self._bindings[name] = binding
        return binding


class MessageInterceptor:
    """
    The single handler every unmatched operation is passed to.

    Only one handler may be set; a second registration is rejected so the
    interceptor in effect is always the one declared first.
    """

    def __init__(self) -> None:
        self._binding: Optional[HandlerBinding] = None
        self._sealed = False

    def seal(self) -> None:
        self._sealed = True

    def set(self, handler: Handler) -> HandlerBinding:
        if self._sealed:
            raise RegistrySealedError("cannot set message handler: registry is sealed")
        if self._binding is not None:
            raise DuplicateBindingError("message handler already set")
        self._binding = HandlerBinding(name="<message>", handler=handler, route=Route.MESSAGE)
        return self._binding

    @property
    def binding(self) -> Optional[HandlerBinding]:
        return self._binding
