"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from lotledger.core.entities.batch import Batch
from lotledger.core.entities.stock_movement import StockMovement

# --- Products ---


class ProductResponse(BaseModel):
    id: str
    barcode: str
    name: str
    cost_price: float
    selling_price: float
    current_stock: int
    created_at: datetime
    updated_at: datetime


class StockDiscrepancyResponse(BaseModel):
    product_id: str
    cached_stock: int
    batch_stock: int
    drift: int


class StockConsistencyResponse(BaseModel):
    consistent: bool
    discrepancies: list[StockDiscrepancyResponse]


# --- Batches ---


class BatchResponse(BaseModel):
    """Batch with derived read-only figures."""

    id: int
    batch_number: str
    product_id: str
    supplier_id: str | None = None
    purchase_order_id: str | None = None
    initial_quantity: int
    current_quantity: int
    reserved_quantity: int
    available_quantity: int
    cost_price: float
    selling_price: float
    profit_margin: float
    batch_value: float
    purchase_date: datetime
    expiry_date: date | None = None
    days_until_expiry: int | None = None
    status: str
    effective_status: str
    notes: str | None = None
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, batch: Batch, as_of: datetime | None = None) -> "BatchResponse":
        return cls(
            id=batch.id,  # type: ignore[arg-type]
            batch_number=batch.batch_number,
            product_id=batch.product_id,
            supplier_id=batch.supplier_id,
            purchase_order_id=batch.purchase_order_id,
            initial_quantity=batch.initial_quantity,
            current_quantity=batch.current_quantity,
            reserved_quantity=batch.reserved_quantity,
            available_quantity=batch.available_quantity,
            cost_price=batch.cost_price,
            selling_price=batch.selling_price,
            profit_margin=round(batch.profit_margin, 2),
            batch_value=batch.batch_value,
            purchase_date=batch.purchase_date,
            expiry_date=batch.expiry_date,
            days_until_expiry=batch.days_until_expiry(as_of),
            status=batch.status.value,
            effective_status=batch.effective_status(as_of).value,
            notes=batch.notes,
            version=batch.version,
            created_at=batch.created_at,
            updated_at=batch.updated_at,
        )


class PaginatedResponse(BaseModel):
    """Base for paginated responses."""

    total: int
    limit: int
    offset: int
    has_more: bool


class BatchListResponse(PaginatedResponse):
    items: list[BatchResponse]


class StockMovementResponse(BaseModel):
    id: int
    product_id: str
    batch_id: int | None = None
    batch_number: str | None = None
    movement_type: str
    direction: str
    quantity: int
    previous_stock: int
    new_stock: int
    unit_cost: float | None = None
    total_cost: float | None = None
    reference_type: str | None = None
    reference_number: str | None = None
    reason: str | None = None
    notes: str | None = None
    expiry_date: date | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, movement: StockMovement) -> "StockMovementResponse":
        return cls(
            id=movement.id,  # type: ignore[arg-type]
            product_id=movement.product_id,
            batch_id=movement.batch_id,
            batch_number=movement.batch_number,
            movement_type=movement.movement_type.value,
            direction=movement.direction,
            quantity=movement.quantity,
            previous_stock=movement.previous_stock,
            new_stock=movement.new_stock,
            unit_cost=movement.unit_cost,
            total_cost=movement.total_cost,
            reference_type=movement.resolved_reference_type.value,
            reference_number=movement.reference_number,
            reason=movement.reason,
            notes=movement.notes,
            expiry_date=movement.expiry_date,
            created_at=movement.created_at,
        )


class BatchDetailResponse(BaseModel):
    batch: BatchResponse
    movements: list[StockMovementResponse]


class ProductBatchOverviewResponse(BaseModel):
    """Sellable lots of a product, FIFO order, with price ranges."""

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
    batches: list[BatchResponse]


# --- Sales ---


class SaleLineResponse(BaseModel):
    batch_id: int
    batch_number: str
    quantity: int
    unit_cost: float
    unit_price: float
    total_cost: float
    total_revenue: float


class SaleResultResponse(BaseModel):
    """FIFO allocation result for one product."""

    product_id: str
    quantity_sold: int
    lines: list[SaleLineResponse]
    total_cost: float
    total_revenue: float
    profit: float
    profit_margin: float = Field(..., description="Percent of revenue, 2 decimals")
    average_cost_price: float
    average_selling_price: float
    attempts: int


class ProcessSaleResponse(BaseModel):
    reference_number: str
    sales: list[SaleResultResponse]
    total_cost: float
    total_revenue: float
    profit: float


# --- Expiry ---


class ExpiredBatchResponse(BaseModel):
    batch_id: int
    batch_number: str
    product_id: str
    quantity_removed: int


class ExpirySweepErrorResponse(BaseModel):
    batch_id: int
    batch_number: str
    error: str


class ExpirySweepResponse(BaseModel):
    total_checked: int
    batches_updated: list[ExpiredBatchResponse]
    errors: list[ExpirySweepErrorResponse]


class ExpiringBatchesResponse(BaseModel):
    within_days: int
    critical_days: int
    critical_count: int
    batches: list[BatchResponse]


class ExpiryBucketResponse(BaseModel):
    total_batches: int
    total_quantity: int
    total_value: float


class ExpiryStatsResponse(BaseModel):
    expired: ExpiryBucketResponse
    expiring_soon: ExpiryBucketResponse
    total_active: ExpiryBucketResponse
    expiring_within_days: int


# --- Valuation ---


class ProductValuationResponse(BaseModel):
    product_id: str
    product_name: str | None = None
    barcode: str | None = None
    total_batches: int
    total_quantity: int
    total_cost_value: float
    total_selling_value: float
    potential_profit: float
    profit_margin: float
    weighted_avg_cost_price: float
    weighted_avg_selling_price: float
    min_cost_price: float | None = None
    max_cost_price: float | None = None
    oldest_purchase_date: datetime | None = None
    newest_purchase_date: datetime | None = None


class ValuationSummaryResponse(BaseModel):
    total_products: int
    total_batches: int
    total_quantity: int
    total_cost_value: float
    total_selling_value: float
    total_potential_profit: float
    weighted_avg_cost_price: float


class InventoryValuationResponse(BaseModel):
    summary: ValuationSummaryResponse
    products: list[ProductValuationResponse]
    generated_at: datetime


# --- Receiving ---


class ReceivedBatchResponse(BaseModel):
    batch_id: int
    batch_number: str
    product_id: str
    quantity: int
    expiry_date: date | None = None


class ReceivePurchaseOrderResponse(BaseModel):
    purchase_order_id: str
    batches: list[ReceivedBatchResponse]
    total_quantity: int
    total_cost: float


# --- System ---


class ProviderHealthResponse(BaseModel):
    """Dependency health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INSUFFICIENT_STOCK)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    details: dict[str, Any] = Field(default_factory=dict, description="Structured error context")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
