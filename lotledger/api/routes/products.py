"""Product reference endpoints: registration, lots, movements and stock reconciliation."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from lotledger.api.dependencies import (
    get_ledger,
    get_products,
    get_reconcile_stock_use_case,
    get_register_product_use_case,
)
from lotledger.application.dto.requests import RegisterProductRequest
from lotledger.application.dto.responses import (
    BatchResponse,
    ErrorResponse,
    ProductBatchOverviewResponse,
    ProductResponse,
    StockConsistencyResponse,
    StockDiscrepancyResponse,
    StockMovementResponse,
)
from lotledger.application.use_cases.reconcile_stock import ReconcileStockUseCase
from lotledger.application.use_cases.register_product import RegisterProductUseCase
from lotledger.core.entities.batch import BatchStatus
from lotledger.core.entities.stock_movement import MovementType
from lotledger.core.exceptions import ProductNotFoundError
from lotledger.core.services import BatchLedgerService
from lotledger.infrastructure.storage.sqlite import SQLiteProductStore

router = APIRouter(prefix="/api/products", tags=["products"])


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
async def register_product(
    request: RegisterProductRequest,
    use_case: RegisterProductUseCase = Depends(get_register_product_use_case),
) -> ProductResponse:
    """Register a product reference so lots can be received for it."""
    product = await use_case.execute(request)
    return use_case.to_response(product)


@router.get("/stock/consistency", response_model=StockConsistencyResponse)
async def check_stock_consistency(
    use_case: ReconcileStockUseCase = Depends(get_reconcile_stock_use_case),
) -> StockConsistencyResponse:
    """List products whose cached stock differs from their active lots."""
    discrepancies = await use_case.check_all()
    return use_case.to_consistency_response(discrepancies)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: str,
    store: SQLiteProductStore = Depends(get_products),
) -> ProductResponse:
    product = await store.get_product(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return ProductResponse(**product.model_dump())


@router.get(
    "/{product_id}/batches",
    response_model=list[BatchResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_product_batches(
    product_id: str,
    status: BatchStatus | None = None,
    ledger: BatchLedgerService = Depends(get_ledger),
) -> list[BatchResponse]:
    """All lots of a product in FIFO order."""
    batches = await ledger.list_product_batches(product_id, status)
    return [BatchResponse.from_entity(b) for b in batches]


@router.get(
    "/{product_id}/overview",
    response_model=ProductBatchOverviewResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product_overview(
    product_id: str,
    ledger: BatchLedgerService = Depends(get_ledger),
) -> ProductBatchOverviewResponse:
    """Sellable lots with available quantity and price ranges."""
    overview = await ledger.get_product_batch_overview(product_id)
    return ProductBatchOverviewResponse(
        **overview.model_dump(exclude={"batches"}),
        batches=[BatchResponse.from_entity(b) for b in overview.batches],
    )


@router.get(
    "/{product_id}/movements",
    response_model=list[StockMovementResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_product_movements(
    product_id: str,
    movement_type: MovementType | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    ledger: BatchLedgerService = Depends(get_ledger),
) -> list[StockMovementResponse]:
    """Stock movement history, newest first."""
    movements = await ledger.get_product_movements(
        product_id,
        movement_type=movement_type,
        start=start,
        end=end,
        limit=limit,
        offset=offset,
    )
    return [StockMovementResponse.from_entity(m) for m in movements]


@router.post(
    "/{product_id}/reconcile",
    response_model=StockDiscrepancyResponse,
    responses={404: {"model": ErrorResponse}},
)
async def reconcile_product_stock(
    product_id: str,
    use_case: ReconcileStockUseCase = Depends(get_reconcile_stock_use_case),
) -> StockDiscrepancyResponse:
    """Reset cached stock from active lots; returns the state found before the fix."""
    discrepancy = await use_case.execute(product_id)
    return use_case.to_response(discrepancy)
