"""Ledger write-set and query entities."""

from dataclasses import dataclass, field
from datetime import date, datetime

from pydantic import BaseModel

from lotledger.core.entities.batch import Batch, BatchStatus
from lotledger.core.entities.stock_movement import StockMovement


@dataclass
class BatchWrite:
    """
    A batch state to persist.

    expected_version None means insert; otherwise the stored row must still
    carry that version or the whole commit is rejected.
    """

    batch: Batch
    expected_version: int | None = None

    @property
    def is_insert(self) -> bool:
        return self.expected_version is None


@dataclass
class LedgerCommit:
    """
    Everything one ledger operation changes, applied all-or-nothing.

    The product's cached stock moves by the sum of the movement quantities;
    movement snapshots are taken at commit time in list order.
    """

    product_id: str
    batch_writes: list[BatchWrite] = field(default_factory=list)
    movements: list[StockMovement] = field(default_factory=list)
    product_prices: tuple[float, float] | None = None  # (cost, selling) display defaults

    @property
    def stock_delta(self) -> int:
        return sum(m.quantity for m in self.movements)


class BatchFilter(BaseModel):
    """Filters for batch listing."""

    status: BatchStatus | None = None
    product_id: str | None = None
    batch_number: str | None = None  # substring match
    expiring_in_days: int | None = None


class ProductBatchOverview(BaseModel):
    """Sellable batches of one product with a price range summary."""

    product_id: str
    product_name: str
    barcode: str
    total_batches: int
    total_quantity: int
    total_available: int
    min_cost_price: float | None = None
    max_cost_price: float | None = None
    min_selling_price: float | None = None
    max_selling_price: float | None = None
    batches: list[Batch]


class ExpiredBatchRecord(BaseModel):
    batch_id: int
    batch_number: str
    product_id: str
    quantity_removed: int


class ExpirySweepError(BaseModel):
    batch_id: int
    batch_number: str
    error: str


class ExpirySweepResult(BaseModel):
    """Outcome of an explicit expiry sweep."""

    total_checked: int = 0
    batches_updated: list[ExpiredBatchRecord] = []
    errors: list[ExpirySweepError] = []


class CreateBatchCommand(BaseModel):
    """Input for receiving one lot. Checked by the ledger before any write."""

    product_id: str
    quantity: int
    cost_price: float
    selling_price: float
    expiry_date: date | None = None
    purchase_date: datetime | None = None
    supplier_id: str | None = None
    purchase_order_id: str | None = None
    notes: str | None = None


class BatchDetails(BaseModel):
    """A batch with its most recent movements."""

    batch: Batch
    movements: list[StockMovement]
