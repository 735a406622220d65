"""Core domain entities."""

from lotledger.core.entities.batch import SETTABLE_STATUSES, Batch, BatchStatus
from lotledger.core.entities.ledger import (
    BatchDetails,
    BatchFilter,
    BatchWrite,
    CreateBatchCommand,
    ExpiredBatchRecord,
    ExpirySweepError,
    ExpirySweepResult,
    LedgerCommit,
    ProductBatchOverview,
)
from lotledger.core.entities.product import Product, StockDiscrepancy
from lotledger.core.entities.sale import AllocationLine, SaleAllocationResult, SaleLine
from lotledger.core.entities.stock_movement import (
    MovementType,
    ReferenceType,
    StockMovement,
)
from lotledger.core.entities.valuation import (
    ExpiryBucket,
    ExpiryStatistics,
    InventoryValuation,
    ProductValuation,
    ValuationSummary,
)

__all__ = [
    # Batch
    "Batch",
    "BatchStatus",
    "SETTABLE_STATUSES",
    # Ledger
    "BatchDetails",
    "BatchFilter",
    "BatchWrite",
    "CreateBatchCommand",
    "LedgerCommit",
    "ProductBatchOverview",
    "ExpiredBatchRecord",
    "ExpirySweepError",
    "ExpirySweepResult",
    # Product
    "Product",
    "StockDiscrepancy",
    # Sale
    "AllocationLine",
    "SaleLine",
    "SaleAllocationResult",
    # Movements
    "MovementType",
    "ReferenceType",
    "StockMovement",
    # Valuation
    "ExpiryBucket",
    "ExpiryStatistics",
    "InventoryValuation",
    "ProductValuation",
    "ValuationSummary",
]
