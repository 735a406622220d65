"""Process Sale Use Case: FIFO allocation of one or more sale items."""

from dataclasses import dataclass, field
from datetime import date

from lotledger.application.dto.requests import ProcessSaleRequest
from lotledger.application.dto.responses import (
    ProcessSaleResponse,
    SaleLineResponse,
    SaleResultResponse,
)
from lotledger.config import get_logger
from lotledger.core.entities.sale import SaleAllocationResult
from lotledger.core.exceptions import ProductNotFoundError
from lotledger.core.interfaces.product_store import IProductStore
from lotledger.core.interfaces.sequence_store import ISequenceStore
from lotledger.core.services.sale_processor import SaleProcessor

logger = get_logger(__name__)


@dataclass
class ProcessSaleResult:
    reference_number: str
    sales: list[SaleAllocationResult] = field(default_factory=list)

    @property
    def total_cost(self) -> float:
        return sum(s.total_cost for s in self.sales)

    @property
    def total_revenue(self) -> float:
        return sum(s.total_revenue for s in self.sales)


class ProcessSaleUseCase:
    """
    Sell the requested items.

    Every product is checked before anything is sold. The whole bill then
    commits in one transaction: if any item is short, no item is sold.
    """

    def __init__(
        self,
        sale_processor: SaleProcessor | None = None,
        product_store: IProductStore | None = None,
        sequence_store: ISequenceStore | None = None,
    ):
        self._processor = sale_processor
        self._product_store = product_store
        self._sequence_store = sequence_store

    async def _get_processor(self) -> SaleProcessor:
        if self._processor is None:
            from lotledger.application.services import get_sale_processor

            self._processor = await get_sale_processor()
        return self._processor

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from lotledger.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def _get_sequence_store(self) -> ISequenceStore:
        if self._sequence_store is None:
            from lotledger.infrastructure.storage.sqlite import get_sequence_store

            self._sequence_store = await get_sequence_store()
        return self._sequence_store

    async def execute(self, request: ProcessSaleRequest) -> ProcessSaleResult:
        product_ids = [item.product_id for item in request.items]
        products = await (await self._get_product_store()).get_products(product_ids)
        for product_id in product_ids:
            if product_id not in products:
                raise ProductNotFoundError(product_id)

        reference_number = request.reference_number or await self._next_reference()
        processor = await self._get_processor()
        sales = await processor.sell_many(
            [(item.product_id, item.quantity) for item in request.items],
            reference_number,
            notes=request.notes,
        )

        result = ProcessSaleResult(reference_number=reference_number, sales=sales)
        logger.info(
            "sale_processed",
            reference_number=reference_number,
            items=len(sales),
            total_revenue=result.total_revenue,
        )
        return result

    async def _next_reference(self) -> str:
        today = date.today()
        sequence = await (await self._get_sequence_store()).next_value(f"sale:{today:%y%m%d}")
        return f"SALE-{today:%y%m%d}-{sequence:04d}"

    def to_response(self, result: ProcessSaleResult) -> ProcessSaleResponse:
        return ProcessSaleResponse(
            reference_number=result.reference_number,
            sales=[
                SaleResultResponse(
                    product_id=sale.product_id,
                    quantity_sold=sale.quantity_sold,
                    lines=[SaleLineResponse(**line.model_dump()) for line in sale.lines],
                    total_cost=sale.total_cost,
                    total_revenue=sale.total_revenue,
                    profit=sale.profit,
                    profit_margin=sale.profit_margin,
                    average_cost_price=sale.average_cost_price,
                    average_selling_price=sale.average_selling_price,
                    attempts=sale.attempts,
                )
                for sale in result.sales
            ],
            total_cost=result.total_cost,
            total_revenue=result.total_revenue,
            profit=result.total_revenue - result.total_cost,
        )
