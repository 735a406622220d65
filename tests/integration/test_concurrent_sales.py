"""Concurrent sales against the same lots."""

import asyncio
from datetime import datetime

from lotledger.core.entities import BatchStatus
from lotledger.core.exceptions import InsufficientStockError

DAY1 = datetime(2026, 1, 1, 9, 0)
DAY2 = datetime(2026, 1, 2, 9, 0)
AS_OF = datetime(2026, 2, 1, 12, 0)


class TestConcurrentSales:
    async def test_no_oversell(self, ledger, sale_processor, stores, receive):
        small = await receive(8, 10.0, 15.0, DAY1)
        large = await receive(12, 11.0, 16.0, DAY2)

        outcomes = await asyncio.gather(
            *(
                sale_processor.sell("P100", 5, f"SALE-{i}", as_of=AS_OF)
                for i in range(10)
            ),
            return_exceptions=True,
        )

        sold = [o for o in outcomes if not isinstance(o, Exception)]
        failed = [o for o in outcomes if isinstance(o, Exception)]
        assert len(sold) == 4
        assert len(failed) == 6
        assert all(isinstance(e, InsufficientStockError) for e in failed)
        assert sum(r.quantity_sold for r in sold) == 20

        for batch_id in (small.id, large.id):
            batch = await ledger.get_batch(batch_id)
            assert batch.current_quantity == 0
            assert batch.status == BatchStatus.DEPLETED

        assert (await stores["products"].get_product("P100")).current_stock == 0
        assert await ledger.check_stock_consistency() == []

    async def test_cost_of_goods_matches_lots(self, sale_processor, receive):
        await receive(8, 10.0, 15.0, DAY1)
        await receive(12, 11.0, 16.0, DAY2)

        outcomes = await asyncio.gather(
            *(sale_processor.sell("P100", 4, f"SALE-{i}", as_of=AS_OF) for i in range(5))
        )

        assert sum(r.total_cost for r in outcomes) == 8 * 10.0 + 12 * 11.0
        assert sum(r.total_revenue for r in outcomes) == 8 * 15.0 + 12 * 16.0

    async def test_reserved_units_survive_concurrent_sales(
        self, ledger, sale_processor, receive
    ):
        lot = await receive(30, 10.0, 15.0, DAY1)
        await ledger.reserve_quantity(lot.id, 10)

        outcomes = await asyncio.gather(
            *(sale_processor.sell("P100", 5, f"SALE-{i}", as_of=AS_OF) for i in range(6)),
            return_exceptions=True,
        )

        assert sum(1 for o in outcomes if isinstance(o, InsufficientStockError)) == 2
        stored = await ledger.get_batch(lot.id)
        assert stored.current_quantity == 10
        assert stored.reserved_quantity == 10
        assert await ledger.check_stock_consistency() == []
