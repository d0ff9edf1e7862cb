"""
Contract: the deterministic execution core.

A contract declares its schemas, public functions, feature hooks and message
handler once, in __init__. After that it only ever executes operations, one at
a time, in the order the ledger delivers them:

    Received -> Classified -> Executed | Declined

Classification order:
    1. function_name bound in the function registry -> function path
    2. feature_name bound in the feature registry   -> feature path
    3. otherwise                                     -> message path

Exactly one path runs per operation. Handlers write through their
ExecutionContext; the writes are committed as one ordered batch after the
handler returns, and never when it declines.

Rules for handler code (nothing here can enforce all of them):
    - no random values, no wall clock, no network or file I/O
    - no try/except control flow and no retries
    - never mutate ctx.op or ctx.value, use safe_clone() to derive values
    - time is whatever a feature wrote to the store, never a local clock
"""

import inspect
import re
from typing import Any, Mapping, Optional, Tuple

from .context import ExecutionContext
from .core.errors import ConcurrentExecutionError, StoreAccessError, StoreUnavailableError, UnknownSchemaError
from .core.operation import Operation
from .core.result import SCHEMA_DECLINE_REASON, Decline, ExecutionResult, Route
from .logging_config import get_logger
from .registry import FeatureRegistry, FunctionRegistry, Handler, HandlerBinding, MessageInterceptor
from .schema import SchemaValidator
from .store.base import KeyValueStore

logger = get_logger(__name__)

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(name: str) -> str:
    return _CAMEL.sub("_", name).lower()


class Contract:
    """
    Base class for contracts.

    Usage:
        class Counter(Contract):
            def __init__(self, store):
                super().__init__(store)
                self.add_schema("bump", {"$$strict": True, "by": {"type": "number", "min": 1}})
                self.add_function("bump", schema="bump")

            async def bump(self, ctx):
                n = await ctx.get("n") or 0
                await ctx.put("n", n + ctx.value["by"])

        result = await Counter(MemoryStore()).execute(Operation.call("bump", {"by": 2}))
    """

    def __init__(self, store: KeyValueStore, validator: Optional[SchemaValidator] = None) -> None:
        self.store = store
        self.check = validator or SchemaValidator()
        self.functions = FunctionRegistry()
        self.features = FeatureRegistry()
        self.messages = MessageInterceptor()
        self._active: Optional[ExecutionContext] = None
        self._in_flight = False

    # -- setup ---------------------------------------------------------------

    def add_schema(self, name: str, definition: Mapping[str, Any]) -> None:
        self.check.register_schema(name, definition)

    def add_function(self, name: str, schema: Optional[str] = None) -> HandlerBinding:
        """
        Expose a coroutine method of this contract as a public function.

        The method is looked up as `name`, then as its snake_case form, so the
        public name "syncDeliveryLane" binds `sync_delivery_lane`. Names of
        Contract's own methods are never resolved.

        Raises:
            AttributeError: If no such coroutine method exists
            UnknownSchemaError: If schema is given but not registered
            DuplicateBindingError: If name is already bound
        """
        handler = None
        for attr in (name, _snake(name)):
            # core methods (execute, get, put, ...) are never public functions
            if hasattr(Contract, attr):
                continue
            handler = getattr(self, attr, None)
            if handler is not None:
                break
        if handler is None or not inspect.iscoroutinefunction(handler):
            raise AttributeError(f"{type(self).__name__} has no coroutine method for function {name!r}")
        if schema is not None and not self.check.has_schema(schema):
            raise UnknownSchemaError(f"function {name!r} bound to unknown schema {schema!r}")
        return self.functions.register(name, handler, schema=schema)

    def add_feature(self, feature_name: str, handler: Handler) -> HandlerBinding:
        return self.features.register(feature_name, handler)

    def set_message_handler(self, handler: Handler) -> HandlerBinding:
        return self.messages.set(handler)

    def seal(self) -> None:
        """Close all registries. Called automatically before the first operation."""
        self.functions.seal()
        self.features.seal()
        self.messages.seal()

    # -- store access during an invocation -----------------------------------

    async def get(self, key: str) -> Any:
        if self._active is None:
            raise StoreAccessError("get outside an active handler invocation")
        return await self._active.get(key)

    async def put(self, key: str, value: Any) -> None:
        if self._active is None:
            raise StoreAccessError("put outside an active handler invocation")
        await self._active.put(key, value)

    # -- execution ------------------------------------------------------------

    def classify(self, op: Operation) -> Tuple[Route, Optional[HandlerBinding]]:
        binding = self.functions.lookup(op.function_name)
        if binding is not None:
            return Route.FUNCTION, binding
        binding = self.features.lookup(op.feature_name)
        if binding is not None:
            return Route.FEATURE, binding
        binding = self.messages.binding
        if binding is not None:
            return Route.MESSAGE, binding
        return Route.UNHANDLED, None

    async def execute(self, op: Operation) -> ExecutionResult:
        """
        Execute one operation to completion.

        Returns:
            ExecutionResult (executed or declined)

        Raises:
            ConcurrentExecutionError: If another operation is still in flight
            StoreUnavailableError: If the store faults; nothing is committed
        """
        if self._in_flight:
            raise ConcurrentExecutionError("an operation is already executing on this contract")
        self._in_flight = True
        try:
            self.seal()
            return await self._run(op)
        finally:
            self._in_flight = False

    async def _run(self, op: Operation) -> ExecutionResult:
        log = get_logger(__name__, trace_id=op.digest())
        route, binding = self.classify(op)
        log.debug("classified %s operation as %s", op.kind.value, route.value)

        if binding is None:
            return ExecutionResult.executed(Route.UNHANDLED)

        if binding.schema is not None and not self.check.validate(binding.schema, op.payload):
            log.info("declined %s: %s", binding.name, SCHEMA_DECLINE_REASON)
            return ExecutionResult.decline(route, SCHEMA_DECLINE_REASON)

        ctx = ExecutionContext(op, self.store, self.check)
        self._active = ctx
        try:
            value = await self._invoke(binding, ctx, log)
        finally:
            ctx.close()
            self._active = None

        if isinstance(value, Decline):
            ctx.discard()
            log.info("declined %s: %s", binding.name, value.reason)
            return ExecutionResult.decline(route, value.reason)

        writes = ctx.writes()
        await self.store.apply(writes)
        return ExecutionResult.executed(route, value=value, writes=writes)

    async def _invoke(self, binding: HandlerBinding, ctx: ExecutionContext, log) -> Any:
        if binding.route is Route.FUNCTION:
            return await binding.handler(ctx)

        # Feature and message paths are best-effort: a fault degrades to a no-op.
        try:
            return await binding.handler(ctx)
        except StoreUnavailableError:
            raise
        except Exception:
            log.warning("%s handler %s failed, skipping writes", binding.route.value, binding.name, exc_info=True)
            ctx.discard()
            return None
