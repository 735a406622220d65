"""Create Batch Use Case: receive a single lot outside a purchase order."""

from lotledger.application.dto.requests import CreateBatchRequest
from lotledger.application.dto.responses import BatchResponse
from lotledger.core.entities.batch import Batch
from lotledger.core.entities.ledger import CreateBatchCommand
from lotledger.core.services.batch_ledger import BatchLedgerService


class CreateBatchUseCase:
    def __init__(self, ledger: BatchLedgerService | None = None):
        self._ledger = ledger

    async def _get_ledger(self) -> BatchLedgerService:
        if self._ledger is None:
            from lotledger.application.services import get_batch_ledger_service

            self._ledger = await get_batch_ledger_service()
        return self._ledger

    async def execute(self, request: CreateBatchRequest) -> Batch:
        ledger = await self._get_ledger()
        return await ledger.create_batch(CreateBatchCommand(**request.model_dump()))

    def to_response(self, batch: Batch) -> BatchResponse:
        return BatchResponse.from_entity(batch)
