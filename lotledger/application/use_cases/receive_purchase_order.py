"""
Receive Purchase Order Use Case.

Turns the lines of a received purchase order into lots. All lines are
checked before the first lot is created, and the lots are written in one
transaction, so neither a bad line nor a storage failure leaves a partially
received order behind.
"""

from dataclasses import dataclass, field
from datetime import datetime

from lotledger.application.dto.requests import ReceivePurchaseOrderRequest, ReceivingLineRequest
from lotledger.application.dto.responses import (
    ReceivedBatchResponse,
    ReceivePurchaseOrderResponse,
)
from lotledger.config import get_logger
from lotledger.core.entities.batch import Batch
from lotledger.core.entities.ledger import CreateBatchCommand
from lotledger.core.exceptions import ValidationError
from lotledger.core.interfaces.product_store import IProductStore
from lotledger.core.services.batch_ledger import BatchLedgerService

logger = get_logger(__name__)


@dataclass
class ReceivePurchaseOrderResult:
    purchase_order_id: str
    batches: list[Batch] = field(default_factory=list)


class ReceivePurchaseOrderUseCase:
    """Stateless adapter from purchase order receipt to batch creation."""

    def __init__(
        self,
        ledger: BatchLedgerService | None = None,
        product_store: IProductStore | None = None,
    ):
        self._ledger = ledger
        self._product_store = product_store

    async def _get_ledger(self) -> BatchLedgerService:
        if self._ledger is None:
            from lotledger.application.services import get_batch_ledger_service

            self._ledger = await get_batch_ledger_service()
        return self._ledger

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from lotledger.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def execute(self, request: ReceivePurchaseOrderRequest) -> ReceivePurchaseOrderResult:
        if not request.purchase_order_id:
            raise ValidationError("purchase_order_id", "Purchase order ID is required")
        if not request.lines:
            raise ValidationError("lines", "Purchase order has no lines to receive")

        for index, line in enumerate(request.lines):
            self._validate_line(index, line)

        products = await (await self._get_product_store()).get_products(
            [line.product_id for line in request.lines]
        )
        for index, line in enumerate(request.lines):
            if line.product_id not in products:
                raise ValidationError(
                    f"lines[{index}].product_id", "Unknown product", line.product_id
                )

        logger.info(
            "purchase_order_receiving_started",
            purchase_order_id=request.purchase_order_id,
            lines=len(request.lines),
        )

        ledger = await self._get_ledger()
        received_at = request.received_date or datetime.now()
        batches = await ledger.create_batches(
            [
                CreateBatchCommand(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    cost_price=line.cost_price,
                    selling_price=line.selling_price,
                    expiry_date=line.expiry_date,
                    purchase_date=received_at,
                    supplier_id=request.supplier_id,
                    purchase_order_id=request.purchase_order_id,
                    notes=line.notes,
                )
                for line in request.lines
            ]
        )
        result = ReceivePurchaseOrderResult(
            purchase_order_id=request.purchase_order_id, batches=batches
        )

        logger.info(
            "purchase_order_received",
            purchase_order_id=request.purchase_order_id,
            batches=len(result.batches),
        )
        return result

    @staticmethod
    def _validate_line(index: int, line: ReceivingLineRequest) -> None:
        if not line.product_id:
            raise ValidationError(f"lines[{index}].product_id", "Product is required")
        if line.quantity < 1:
            raise ValidationError(f"lines[{index}].quantity", "Must be at least 1", line.quantity)
        if line.cost_price < 0:
            raise ValidationError(
                f"lines[{index}].cost_price", "Must not be negative", line.cost_price
            )
        if line.selling_price < 0:
            raise ValidationError(
                f"lines[{index}].selling_price", "Must not be negative", line.selling_price
            )

    def to_response(self, result: ReceivePurchaseOrderResult) -> ReceivePurchaseOrderResponse:
        return ReceivePurchaseOrderResponse(
            purchase_order_id=result.purchase_order_id,
            batches=[
                ReceivedBatchResponse(
                    batch_id=b.id,  # type: ignore[arg-type]
                    batch_number=b.batch_number,
                    product_id=b.product_id,
                    quantity=b.initial_quantity,
                    expiry_date=b.expiry_date,
                )
                for b in result.batches
            ],
            total_quantity=sum(b.initial_quantity for b in result.batches),
            total_cost=sum(b.initial_quantity * b.cost_price for b in result.batches),
        )
