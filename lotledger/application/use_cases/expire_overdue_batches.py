"""Expire Overdue Batches Use Case: caller-triggered expiry sweep."""

from lotledger.application.dto.responses import (
    ExpiredBatchResponse,
    ExpirySweepErrorResponse,
    ExpirySweepResponse,
)
from lotledger.core.entities.ledger import ExpirySweepResult
from lotledger.core.services.batch_ledger import BatchLedgerService


class ExpireOverdueBatchesUseCase:
    """
    Persist the expired status for lots whose expiry day has passed.

    Allocation already ignores such lots; the sweep makes the status visible
    in storage and removes their units from the product's cached stock.
    """

    def __init__(self, ledger: BatchLedgerService | None = None):
        self._ledger = ledger

    async def _get_ledger(self) -> BatchLedgerService:
        if self._ledger is None:
            from lotledger.application.services import get_batch_ledger_service

            self._ledger = await get_batch_ledger_service()
        return self._ledger

    async def execute(self) -> ExpirySweepResult:
        ledger = await self._get_ledger()
        return await ledger.expire_overdue()

    def to_response(self, result: ExpirySweepResult) -> ExpirySweepResponse:
        return ExpirySweepResponse(
            total_checked=result.total_checked,
            batches_updated=[
                ExpiredBatchResponse(**r.model_dump()) for r in result.batches_updated
            ],
            errors=[ExpirySweepErrorResponse(**e.model_dump()) for e in result.errors],
        )
