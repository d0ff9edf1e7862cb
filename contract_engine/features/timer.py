"""
Timer feature.

Runs in the host process, outside the deterministic path. It reads a clock and
wraps each reading into a feature operation; once admitted to the ledger, the
value becomes the replicated "currentTime" every contract reads.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from ..core.operation import Operation
from ..logging_config import get_logger

logger = get_logger(__name__)

TIMER_FEATURE = "timer_feature"
CURRENT_TIME_KEY = "currentTime"


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class TimerFeature:
    """
    Emits {"key": "currentTime", "value": <ms>} feature operations.

    Args:
        submit: Coroutine that admits an operation to the ledger
        interval: Seconds between readings
        clock: Millisecond clock, injectable for tests
    """

    def __init__(
        self,
        submit: Callable[[Operation], Awaitable[object]],
        interval: float = 5.0,
        clock: Callable[[], int] = _wall_clock_ms,
        name: str = TIMER_FEATURE,
    ) -> None:
        self.submit = submit
        self.interval = interval
        self.clock = clock
        self.name = name

    def reading(self) -> Operation:
        return Operation.feature(self.name, {"key": CURRENT_TIME_KEY, "value": self.clock()})

    async def tick(self) -> Operation:
        op = self.reading()
        await self.submit(op)
        return op

    async def run(self, ticks: Optional[int] = None) -> int:
        """Emit readings every interval; stop after `ticks` readings if given."""
        emitted = 0
        while ticks is None or emitted < ticks:
            op = await self.tick()
            emitted += 1
            logger.debug("timer emitted %s", op.payload["value"])
            if ticks is None or emitted < ticks:
                await asyncio.sleep(self.interval)
        return emitted
