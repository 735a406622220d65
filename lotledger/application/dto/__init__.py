"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from lotledger.application.dto.requests import (
    AdjustBatchRequest,
    ChangeBatchStatusRequest,
    CreateBatchRequest,
    ProcessSaleRequest,
    ReceivePurchaseOrderRequest,
    ReceivingLineRequest,
    RegisterProductRequest,
    ReserveQuantityRequest,
    SaleItemRequest,
)
from lotledger.application.dto.responses import (
    BatchDetailResponse,
    BatchListResponse,
    BatchResponse,
    ErrorResponse,
    HealthResponse,
    InventoryValuationResponse,
    ProcessSaleResponse,
    ProductResponse,
    ProductValuationResponse,
    ReceivePurchaseOrderResponse,
    StockMovementResponse,
)

__all__ = [
    # Requests
    "AdjustBatchRequest",
    "ChangeBatchStatusRequest",
    "CreateBatchRequest",
    "ProcessSaleRequest",
    "ReceivePurchaseOrderRequest",
    "ReceivingLineRequest",
    "RegisterProductRequest",
    "ReserveQuantityRequest",
    "SaleItemRequest",
    # Responses
    "BatchDetailResponse",
    "BatchListResponse",
    "BatchResponse",
    "ErrorResponse",
    "HealthResponse",
    "InventoryValuationResponse",
    "ProcessSaleResponse",
    "ProductResponse",
    "ProductValuationResponse",
    "ReceivePurchaseOrderResponse",
    "StockMovementResponse",
]
