"""Abstract interface for the stock movement audit trail (read side)."""

from abc import ABC, abstractmethod
from datetime import datetime

from lotledger.core.entities.stock_movement import MovementType, StockMovement


class IMovementStore(ABC):
    """Movements are written only through IBatchStore.commit; this is the query side."""

    @abstractmethod
    async def get_movements(
        self,
        product_id: str,
        movement_type: MovementType | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockMovement]:
        """Movements for a product, newest first."""
        pass

    @abstractmethod
    async def get_batch_movements(
        self, batch_number: str, limit: int = 50
    ) -> list[StockMovement]:
        """Movements tagged with a batch number, newest first."""
        pass
