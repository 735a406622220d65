"""Purchase order receiving endpoint."""

from fastapi import APIRouter, Depends, status

from lotledger.api.dependencies import get_receive_purchase_order_use_case
from lotledger.application.dto.requests import ReceivePurchaseOrderRequest
from lotledger.application.dto.responses import ErrorResponse, ReceivePurchaseOrderResponse
from lotledger.application.use_cases.receive_purchase_order import ReceivePurchaseOrderUseCase

router = APIRouter(prefix="/api/receiving", tags=["receiving"])


@router.post(
    "/purchase-orders/{po_id}/receive",
    response_model=ReceivePurchaseOrderResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def receive_purchase_order(
    po_id: str,
    request: ReceivePurchaseOrderRequest,
    use_case: ReceivePurchaseOrderUseCase = Depends(get_receive_purchase_order_use_case),
) -> ReceivePurchaseOrderResponse:
    """Create one lot per purchase order line."""
    request = request.model_copy(update={"purchase_order_id": po_id})
    result = await use_case.execute(request)
    return use_case.to_response(result)
