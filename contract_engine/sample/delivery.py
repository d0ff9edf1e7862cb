"""
Delivery lane sample contract.

Public functions:
    syncDeliveryLane  - record the lane status (schema gated)
    peekDeliveryLane  - return the lane status
    readSnapshot      - lane status, time and first chat messages
    readChatLast      - last captured chat message
    readTimer         - replicated current time

Feature "timer_feature" persists currentTime. The message handler captures
chat messages into "chat_last".
"""

from typing import Any, Dict, Mapping

from ..context import ExecutionContext
from ..contract import Contract
from ..core.canonical import safe_clone
from ..core.result import Decline
from ..features.timer import CURRENT_TIME_KEY, TIMER_FEATURE
from ..logging_config import get_logger
from ..store.base import KeyValueStore

logger = get_logger(__name__)

LANE_KEY = "delivery_lane_status"
CHAT_LAST_KEY = "chat_last"


class DeliveryLaneContract(Contract):
    def __init__(self, store: KeyValueStore) -> None:
        super().__init__(store)

        self.add_schema("syncDeliveryLane", {
            "$$strict": True,
            "op": {"type": "string", "min": 1, "max": 128, "optional": True},
            "status": {"type": "string", "max": 128},
            "note": {"type": "string", "max": 256},
        })
        self.add_function("syncDeliveryLane", schema="syncDeliveryLane")
        self.add_function("peekDeliveryLane")

        # loose on purpose: the value is checked by whoever trusts the key
        self.add_schema("feature_entry", {
            "key": {"type": "string", "min": 1, "max": 256},
            "value": {"type": "any"},
        })

        # read helpers, no writes
        self.add_function("readSnapshot")
        self.add_function("readChatLast")
        self.add_function("readTimer")

        self.add_feature(TIMER_FEATURE, self.on_timer)
        self.set_message_handler(self.on_message)

    async def sync_delivery_lane(self, ctx: ExecutionContext) -> Any:
        status = ctx.value.get("status", "").strip()
        note = ctx.value.get("note", "").strip()
        if status == "" or note == "":
            return Decline("status and note are required")

        lane: Dict[str, Any] = {
            "status": status,
            "note": note,
            "updatedBy": ctx.address,
            "updatedAt": await ctx.get(CURRENT_TIME_KEY),
        }
        if ctx.value.get("op") is not None:
            lane["op"] = ctx.value["op"]

        await ctx.put(LANE_KEY, lane)
        logger.info("delivery lane synced: %s", status)
        return lane

    async def peek_delivery_lane(self, ctx: ExecutionContext) -> Any:
        return safe_clone(await ctx.get(LANE_KEY))

    async def read_snapshot(self, ctx: ExecutionContext) -> Dict[str, Any]:
        msgl = await ctx.get("msgl")
        return {
            "deliveryLaneStatus": safe_clone(await ctx.get(LANE_KEY)),
            "currentTime": await ctx.get(CURRENT_TIME_KEY),
            "msgl": msgl if msgl is not None else 0,
            "msg0": safe_clone(await ctx.get("msg/0")),
            "msg1": safe_clone(await ctx.get("msg/1")),
        }

    async def read_chat_last(self, ctx: ExecutionContext) -> Any:
        return safe_clone(await ctx.get(CHAT_LAST_KEY))

    async def read_timer(self, ctx: ExecutionContext) -> Any:
        return await ctx.get(CURRENT_TIME_KEY)

    async def on_timer(self, ctx: ExecutionContext) -> None:
        if not ctx.validate("feature_entry", ctx.value):
            return
        if ctx.value["key"] != CURRENT_TIME_KEY:
            return
        if await ctx.get(CURRENT_TIME_KEY) is None:
            logger.info("timer started at %s", ctx.value["value"])
        await ctx.put(CURRENT_TIME_KEY, safe_clone(ctx.value["value"]))

    async def on_message(self, ctx: ExecutionContext) -> None:
        # message shapes vary, anything that is not a chat message is ignored
        payload = ctx.value
        if not isinstance(payload, Mapping):
            return
        msg = payload.get("msg")
        if payload.get("type") != "msg" or not isinstance(msg, str):
            return
        await ctx.put(CHAT_LAST_KEY, {
            "msg": msg,
            "address": payload.get("address", ctx.address),
            "at": await ctx.get(CURRENT_TIME_KEY),
        })
