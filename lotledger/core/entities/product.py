"""Product reference entity (owned by the catalog, referenced by the ledger)."""

from datetime import datetime

from pydantic import BaseModel, Field


class Product(BaseModel):
    """
    A catalog product as seen by the ledger.

    current_stock is a best-effort cache of the sum of the product's active
    batches; cost_price/selling_price mirror the most recently received batch
    and are display defaults only.
    """

    id: str
    barcode: str
    name: str
    cost_price: float = 0.0
    selling_price: float = 0.0
    current_stock: int = 0
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class StockDiscrepancy(BaseModel):
    """Difference between a product's cached stock and its batches."""

    product_id: str
    cached_stock: int
    batch_stock: int

    @property
    def drift(self) -> int:
        return self.cached_stock - self.batch_stock
