"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from lotledger.core.entities.batch import BatchStatus


class RegisterProductRequest(BaseModel):
    """Register a product reference the ledger can track lots for."""

    id: str = Field(..., min_length=1, description="Catalog product ID", examples=["P100"])
    barcode: str = Field(..., min_length=1, description="Barcode or SKU")
    name: str = Field(..., min_length=1, description="Product name")
    cost_price: float = Field(default=0.0, ge=0, description="Default cost price")
    selling_price: float = Field(default=0.0, ge=0, description="Default selling price")


class CreateBatchRequest(BaseModel):
    """Receive a single lot."""

    product_id: str = Field(..., description="Product ID")
    quantity: int = Field(..., gt=0, description="Units received")
    cost_price: float = Field(..., ge=0, description="Cost per unit for this lot")
    selling_price: float = Field(..., ge=0, description="Selling price per unit for this lot")
    expiry_date: date | None = Field(default=None, description="Last sellable day")
    purchase_date: datetime | None = Field(
        default=None, description="Receipt timestamp (defaults to now)"
    )
    supplier_id: str | None = Field(default=None, description="Supplier reference")
    purchase_order_id: str | None = Field(default=None, description="Purchase order reference")
    notes: str | None = Field(default=None, description="Additional notes")


class SaleItemRequest(BaseModel):
    product_id: str = Field(..., description="Product ID")
    quantity: int = Field(..., gt=0, description="Units to sell")


class ProcessSaleRequest(BaseModel):
    """Sell one or more products, each allocated FIFO across its lots."""

    items: list[SaleItemRequest] = Field(..., min_length=1)
    reference_number: str | None = Field(
        default=None,
        description="Bill/invoice number (generated when omitted)",
        examples=["BILL-2026-0001"],
    )
    notes: str | None = Field(default=None, description="Additional notes")


class AdjustBatchRequest(BaseModel):
    """Administrative correction of a lot's quantity."""

    delta: int = Field(..., description="Signed quantity change (non-zero)")
    reason: str = Field(default="Manual adjustment", description="Reason for the adjustment")
    notes: str | None = Field(default=None, description="Additional notes")


class ChangeBatchStatusRequest(BaseModel):
    status: BatchStatus = Field(..., description="Target status (depleted is not settable)")
    reason: str | None = Field(default=None, description="Reason for the change")


class ReserveQuantityRequest(BaseModel):
    quantity: int = Field(..., gt=0, description="Units to reserve or release")


class ReceivingLineRequest(BaseModel):
    """One purchase order line. Checked by the receiving use case, all lines first."""

    product_id: str
    quantity: int
    cost_price: float
    selling_price: float
    expiry_date: date | None = None
    notes: str | None = None


class ReceivePurchaseOrderRequest(BaseModel):
    """Turn a received purchase order into lots."""

    purchase_order_id: str | None = Field(
        default=None, description="Purchase order ID (taken from the path when omitted)"
    )
    supplier_id: str | None = Field(default=None, description="Supplier reference")
    received_date: datetime | None = Field(
        default=None, description="Receipt timestamp (defaults to now)"
    )
    lines: list[ReceivingLineRequest] = Field(default_factory=list)
