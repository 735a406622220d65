"""Reconcile Stock Use Case: repair and audit the cached product stock."""

from lotledger.application.dto.responses import (
    StockConsistencyResponse,
    StockDiscrepancyResponse,
)
from lotledger.core.entities.product import StockDiscrepancy
from lotledger.core.services.batch_ledger import BatchLedgerService


class ReconcileStockUseCase:
    """
    The product's current_stock is a cache of the sum over its active lots.

    execute() resets one product's cache from its lots; check_all() reports
    every product whose cache drifted without changing anything.
    """

    def __init__(self, ledger: BatchLedgerService | None = None):
        self._ledger = ledger

    async def _get_ledger(self) -> BatchLedgerService:
        if self._ledger is None:
            from lotledger.application.services import get_batch_ledger_service

            self._ledger = await get_batch_ledger_service()
        return self._ledger

    async def execute(self, product_id: str) -> StockDiscrepancy:
        ledger = await self._get_ledger()
        return await ledger.reconcile_product_stock(product_id)

    async def check_all(self) -> list[StockDiscrepancy]:
        ledger = await self._get_ledger()
        return await ledger.check_stock_consistency()

    @staticmethod
    def to_response(discrepancy: StockDiscrepancy) -> StockDiscrepancyResponse:
        return StockDiscrepancyResponse(
            product_id=discrepancy.product_id,
            cached_stock=discrepancy.cached_stock,
            batch_stock=discrepancy.batch_stock,
            drift=discrepancy.drift,
        )

    def to_consistency_response(
        self, discrepancies: list[StockDiscrepancy]
    ) -> StockConsistencyResponse:
        return StockConsistencyResponse(
            consistent=not discrepancies,
            discrepancies=[self.to_response(d) for d in discrepancies],
        )
