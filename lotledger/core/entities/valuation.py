"""Inventory valuation and expiry report entities."""

from datetime import datetime

from pydantic import BaseModel, Field


class ProductValuation(BaseModel):
    """Valuation of one product's active, in-stock batches."""

    product_id: str
    product_name: str | None = None
    barcode: str | None = None
    total_batches: int = 0
    total_quantity: int = 0
    total_cost_value: float = 0.0
    total_selling_value: float = 0.0
    potential_profit: float = 0.0
    profit_margin: float = 0.0
    weighted_avg_cost_price: float = 0.0
    weighted_avg_selling_price: float = 0.0
    min_cost_price: float | None = None
    max_cost_price: float | None = None
    oldest_purchase_date: datetime | None = None
    newest_purchase_date: datetime | None = None


class ValuationSummary(BaseModel):
    """System-wide totals across all valued products."""

    total_products: int = 0
    total_batches: int = 0
    total_quantity: int = 0
    total_cost_value: float = 0.0
    total_selling_value: float = 0.0
    total_potential_profit: float = 0.0
    weighted_avg_cost_price: float = 0.0


class InventoryValuation(BaseModel):
    summary: ValuationSummary = Field(default_factory=ValuationSummary)
    products: list[ProductValuation] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=datetime.now)


class ExpiryBucket(BaseModel):
    total_batches: int = 0
    total_quantity: int = 0
    total_value: float = 0.0


class ExpiryStatistics(BaseModel):
    """Expired-but-unswept, expiring-soon and all active batch totals."""

    expired: ExpiryBucket = Field(default_factory=ExpiryBucket)
    expiring_soon: ExpiryBucket = Field(default_factory=ExpiryBucket)
    total_active: ExpiryBucket = Field(default_factory=ExpiryBucket)
    expiring_within_days: int = 30
