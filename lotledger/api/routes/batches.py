"""Batch (lot) endpoints: receiving, FIFO sales, lifecycle, expiry and valuation."""

from fastapi import APIRouter, Depends, Query, status

from lotledger.api.dependencies import (
    get_adjust_batch_use_case,
    get_change_batch_status_use_case,
    get_check_expiring_batches_use_case,
    get_create_batch_use_case,
    get_expire_overdue_batches_use_case,
    get_ledger,
    get_process_sale_use_case,
    get_reserve_stock_use_case,
    get_valuation,
)
from lotledger.application.dto.requests import (
    AdjustBatchRequest,
    ChangeBatchStatusRequest,
    CreateBatchRequest,
    ProcessSaleRequest,
    ReserveQuantityRequest,
)
from lotledger.application.dto.responses import (
    BatchDetailResponse,
    BatchListResponse,
    BatchResponse,
    ErrorResponse,
    ExpiringBatchesResponse,
    ExpiryStatsResponse,
    ExpirySweepResponse,
    InventoryValuationResponse,
    ProcessSaleResponse,
    ProductValuationResponse,
    StockMovementResponse,
)
from lotledger.application.use_cases import (
    AdjustBatchUseCase,
    ChangeBatchStatusUseCase,
    CheckExpiringBatchesUseCase,
    CreateBatchUseCase,
    ExpireOverdueBatchesUseCase,
    ProcessSaleUseCase,
    ReserveStockUseCase,
)
from lotledger.core.entities.batch import BatchStatus
from lotledger.core.entities.ledger import BatchFilter
from lotledger.core.services import BatchLedgerService, ValuationReporter

router = APIRouter(prefix="/api/batches", tags=["batches"])


@router.get("", response_model=BatchListResponse)
async def list_batches(
    status: BatchStatus | None = None,
    product_id: str | None = None,
    batch_number: str | None = None,
    expiring_in_days: int | None = Query(default=None, ge=0),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    ledger: BatchLedgerService = Depends(get_ledger),
) -> BatchListResponse:
    """List batches, newest first, with optional filters."""
    filters = BatchFilter(
        status=status,
        product_id=product_id,
        batch_number=batch_number,
        expiring_in_days=expiring_in_days,
    )
    batches, total = await ledger.list_batches(filters, limit=limit, offset=offset)
    return BatchListResponse(
        items=[BatchResponse.from_entity(b) for b in batches],
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + len(batches) < total,
    )


@router.post(
    "",
    response_model=BatchResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_batch(
    request: CreateBatchRequest,
    use_case: CreateBatchUseCase = Depends(get_create_batch_use_case),
) -> BatchResponse:
    """Receive a single lot."""
    batch = await use_case.execute(request)
    return use_case.to_response(batch)


@router.get("/expiring", response_model=ExpiringBatchesResponse)
async def get_expiring_batches(
    days: int | None = Query(default=None, ge=0),
    use_case: CheckExpiringBatchesUseCase = Depends(get_check_expiring_batches_use_case),
) -> ExpiringBatchesResponse:
    """Active lots expiring within the look-ahead window, soonest first."""
    result = await use_case.execute(days)
    return use_case.to_response(result)


@router.post("/check-expired", response_model=ExpirySweepResponse)
async def check_expired_batches(
    use_case: ExpireOverdueBatchesUseCase = Depends(get_expire_overdue_batches_use_case),
) -> ExpirySweepResponse:
    """Mark every overdue active lot as expired."""
    result = await use_case.execute()
    return use_case.to_response(result)


@router.get("/expiry-stats", response_model=ExpiryStatsResponse)
async def get_expiry_stats(
    ledger: BatchLedgerService = Depends(get_ledger),
) -> ExpiryStatsResponse:
    stats = await ledger.expiry_statistics()
    return ExpiryStatsResponse(**stats.model_dump())


@router.get("/valuation", response_model=InventoryValuationResponse)
async def get_inventory_valuation(
    reporter: ValuationReporter = Depends(get_valuation),
) -> InventoryValuationResponse:
    """Value of units on hand at their lot's cost and selling prices."""
    valuation = await reporter.inventory_valuation()
    return InventoryValuationResponse(**valuation.model_dump())


@router.get(
    "/valuation/{product_id}",
    response_model=ProductValuationResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product_valuation(
    product_id: str,
    reporter: ValuationReporter = Depends(get_valuation),
) -> ProductValuationResponse:
    valuation = await reporter.product_valuation(product_id)
    return ProductValuationResponse(**valuation.model_dump())


@router.post(
    "/sale",
    response_model=ProcessSaleResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def process_sale(
    request: ProcessSaleRequest,
    use_case: ProcessSaleUseCase = Depends(get_process_sale_use_case),
) -> ProcessSaleResponse:
    """Sell items, each allocated across lots oldest first."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get(
    "/{batch_ref}",
    response_model=BatchDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_batch(
    batch_ref: str,
    ledger: BatchLedgerService = Depends(get_ledger),
) -> BatchDetailResponse:
    """Batch by numeric ID or batch number, with its recent movements."""
    identifier: int | str = int(batch_ref) if batch_ref.isdigit() else batch_ref
    details = await ledger.get_batch_details(identifier)
    return BatchDetailResponse(
        batch=BatchResponse.from_entity(details.batch),
        movements=[StockMovementResponse.from_entity(m) for m in details.movements],
    )


@router.patch(
    "/{batch_id}/status",
    response_model=BatchResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def change_batch_status(
    batch_id: int,
    request: ChangeBatchStatusRequest,
    use_case: ChangeBatchStatusUseCase = Depends(get_change_batch_status_use_case),
) -> BatchResponse:
    batch = await use_case.execute(batch_id, request)
    return use_case.to_response(batch)


@router.patch(
    "/{batch_id}/adjust",
    response_model=BatchResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def adjust_batch(
    batch_id: int,
    request: AdjustBatchRequest,
    use_case: AdjustBatchUseCase = Depends(get_adjust_batch_use_case),
) -> BatchResponse:
    batch = await use_case.execute(batch_id, request)
    return use_case.to_response(batch)


@router.post(
    "/{batch_id}/reserve",
    response_model=BatchResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def reserve_quantity(
    batch_id: int,
    request: ReserveQuantityRequest,
    use_case: ReserveStockUseCase = Depends(get_reserve_stock_use_case),
) -> BatchResponse:
    batch = await use_case.execute(batch_id, request)
    return use_case.to_response(batch)


@router.post(
    "/{batch_id}/release",
    response_model=BatchResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def release_quantity(
    batch_id: int,
    request: ReserveQuantityRequest,
    use_case: ReserveStockUseCase = Depends(get_reserve_stock_use_case),
) -> BatchResponse:
    batch = await use_case.release(batch_id, request)
    return use_case.to_response(batch)
