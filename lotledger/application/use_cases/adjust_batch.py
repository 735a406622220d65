"""Adjust Batch Use Case: administrative quantity correction."""

from lotledger.application.dto.requests import AdjustBatchRequest
from lotledger.application.dto.responses import BatchResponse
from lotledger.core.entities.batch import Batch
from lotledger.core.services.batch_ledger import BatchLedgerService


class AdjustBatchUseCase:
    """Apply a signed correction to one lot and record an adjustment movement."""

    def __init__(self, ledger: BatchLedgerService | None = None):
        self._ledger = ledger

    async def _get_ledger(self) -> BatchLedgerService:
        if self._ledger is None:
            from lotledger.application.services import get_batch_ledger_service

            self._ledger = await get_batch_ledger_service()
        return self._ledger

    async def execute(self, batch_id: int, request: AdjustBatchRequest) -> Batch:
        ledger = await self._get_ledger()
        return await ledger.adjust_quantity(
            batch_id, request.delta, reason=request.reason, notes=request.notes
        )

    def to_response(self, batch: Batch) -> BatchResponse:
        return BatchResponse.from_entity(batch)
