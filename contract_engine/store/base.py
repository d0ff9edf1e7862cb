"""
KeyValueStore abstract interface.

The store is shared across replicas and never owned by a contract. Ordering
comes from the ledger: puts are applied in the order operations were admitted.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence, Tuple

Write = Tuple[str, Any]


class KeyValueStore(ABC):
    """
    Abstract key-value store.

    All implementations must guarantee:
    - A put is visible to every later get once acknowledged
    - Values round-trip through canonical JSON
    - Transport faults surface as StoreUnavailableError
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """
        Read a value.

        Returns:
            Stored value or None if absent

        Raises:
            StoreUnavailableError: If the store cannot be read
        """
        ...

    @abstractmethod
    async def put(self, key: str, value: Any) -> None:
        """
        Write a value. Durable once this returns.

        Raises:
            StoreUnavailableError: If the store cannot be written
        """
        ...

    async def apply(self, writes: Sequence[Write]) -> None:
        """
        Commit an ordered batch of writes from one operation.

        Implementations may override to make the batch atomic. Default applies
        puts one by one in order.
        """
        for key, value in writes:
            await self.put(key, value)

    @abstractmethod
    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict copy of the full current state."""
        ...
