"""Change Batch Status Use Case: mark lots damaged, returned, expired or active."""

from lotledger.application.dto.requests import ChangeBatchStatusRequest
from lotledger.application.dto.responses import BatchResponse
from lotledger.core.entities.batch import Batch
from lotledger.core.services.batch_ledger import BatchLedgerService


class ChangeBatchStatusUseCase:
    def __init__(self, ledger: BatchLedgerService | None = None):
        self._ledger = ledger

    async def _get_ledger(self) -> BatchLedgerService:
        if self._ledger is None:
            from lotledger.application.services import get_batch_ledger_service

            self._ledger = await get_batch_ledger_service()
        return self._ledger

    async def execute(self, batch_id: int, request: ChangeBatchStatusRequest) -> Batch:
        ledger = await self._get_ledger()
        return await ledger.set_status(batch_id, request.status, reason=request.reason)

    def to_response(self, batch: Batch) -> BatchResponse:
        return BatchResponse.from_entity(batch)
