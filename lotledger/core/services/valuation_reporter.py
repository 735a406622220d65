"""
Inventory valuation.

Values the units still on hand at the cost and selling price of the lot they
came in with. Only active lots with units count.
"""

from collections import defaultdict
from collections.abc import Iterable

from lotledger.core.entities.batch import Batch, BatchStatus
from lotledger.core.entities.product import Product
from lotledger.core.entities.valuation import (
    InventoryValuation,
    ProductValuation,
    ValuationSummary,
)
from lotledger.core.exceptions import ProductNotFoundError
from lotledger.core.interfaces import IBatchStore, IProductStore


def value_product(
    product_id: str,
    batches: Iterable[Batch],
    product: Product | None = None,
) -> ProductValuation:
    """Aggregate one product's lots. Lots that are not active or are empty are skipped."""
    valued = [
        b for b in batches if b.status == BatchStatus.ACTIVE and b.current_quantity > 0
    ]
    valuation = ProductValuation(
        product_id=product_id,
        product_name=product.name if product else None,
        barcode=product.barcode if product else None,
    )
    if not valued:
        return valuation

    total_quantity = sum(b.current_quantity for b in valued)
    total_cost = sum(b.batch_value for b in valued)
    total_selling = sum(b.potential_revenue for b in valued)
    profit = total_selling - total_cost

    valuation.total_batches = len(valued)
    valuation.total_quantity = total_quantity
    valuation.total_cost_value = total_cost
    valuation.total_selling_value = total_selling
    valuation.potential_profit = profit
    valuation.profit_margin = round(profit / total_selling * 100, 2) if total_selling else 0.0
    valuation.weighted_avg_cost_price = total_cost / total_quantity
    valuation.weighted_avg_selling_price = total_selling / total_quantity
    valuation.min_cost_price = min(b.cost_price for b in valued)
    valuation.max_cost_price = max(b.cost_price for b in valued)
    valuation.oldest_purchase_date = min(b.purchase_date for b in valued)
    valuation.newest_purchase_date = max(b.purchase_date for b in valued)
    return valuation


def summarize_valuation(
    batches: Iterable[Batch],
    products: dict[str, Product],
) -> InventoryValuation:
    """Per-product valuations, highest cost value first, with system totals."""
    by_product: dict[str, list[Batch]] = defaultdict(list)
    for batch in batches:
        by_product[batch.product_id].append(batch)

    valuations = [
        value_product(product_id, product_batches, products.get(product_id))
        for product_id, product_batches in by_product.items()
    ]
    valuations = [v for v in valuations if v.total_quantity > 0]
    valuations.sort(key=lambda v: v.total_cost_value, reverse=True)

    total_quantity = sum(v.total_quantity for v in valuations)
    total_cost = sum(v.total_cost_value for v in valuations)
    total_selling = sum(v.total_selling_value for v in valuations)
    summary = ValuationSummary(
        total_products=len(valuations),
        total_batches=sum(v.total_batches for v in valuations),
        total_quantity=total_quantity,
        total_cost_value=total_cost,
        total_selling_value=total_selling,
        total_potential_profit=total_selling - total_cost,
        weighted_avg_cost_price=total_cost / total_quantity if total_quantity else 0.0,
    )
    return InventoryValuation(summary=summary, products=valuations)


class ValuationReporter:
    """Read-only valuation over the batch store."""

    def __init__(self, batch_store: IBatchStore, product_store: IProductStore):
        self._batches = batch_store
        self._products = product_store

    async def product_valuation(self, product_id: str) -> ProductValuation:
        product = await self._products.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        batches = await self._batches.list_active_in_stock(product_id)
        return value_product(product_id, batches, product)

    async def inventory_valuation(self) -> InventoryValuation:
        batches = await self._batches.list_active_in_stock()
        products = await self._products.get_products(
            sorted({b.product_id for b in batches})
        )
        return summarize_valuation(batches, products)
