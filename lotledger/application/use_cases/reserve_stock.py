"""Reserve Stock Use Case: hold and release units on a lot."""

from lotledger.application.dto.requests import ReserveQuantityRequest
from lotledger.application.dto.responses import BatchResponse
from lotledger.core.entities.batch import Batch
from lotledger.core.services.batch_ledger import BatchLedgerService


class ReserveStockUseCase:
    """Reservations shrink a lot's available quantity without touching product stock."""

    def __init__(self, ledger: BatchLedgerService | None = None):
        self._ledger = ledger

    async def _get_ledger(self) -> BatchLedgerService:
        if self._ledger is None:
            from lotledger.application.services import get_batch_ledger_service

            self._ledger = await get_batch_ledger_service()
        return self._ledger

    async def execute(self, batch_id: int, request: ReserveQuantityRequest) -> Batch:
        ledger = await self._get_ledger()
        return await ledger.reserve_quantity(batch_id, request.quantity)

    async def release(self, batch_id: int, request: ReserveQuantityRequest) -> Batch:
        ledger = await self._get_ledger()
        return await ledger.release_reserved_quantity(batch_id, request.quantity)

    def to_response(self, batch: Batch) -> BatchResponse:
        return BatchResponse.from_entity(batch)
