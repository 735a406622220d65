"""End-to-end ledger flows against a real SQLite database."""

from datetime import date, datetime, timezone
from unittest.mock import patch

import aiosqlite
import pytest

from lotledger.core.entities import BatchStatus, CreateBatchCommand, MovementType, Product
from lotledger.core.exceptions import DatabaseError, InsufficientStockError
from lotledger.infrastructure.storage.sqlite import SQLiteBatchStore
from lotledger.infrastructure.storage.sqlite.migrations import verify_schema_integrity

DAY1 = datetime(2026, 1, 1, 9, 0)
DAY10 = datetime(2026, 1, 10, 9, 0)
AS_OF = datetime(2026, 2, 1, 12, 0)


class TestReceiveAndSell:
    async def test_fifo_sale_across_lots(self, ledger, sale_processor, stores, receive):
        lot_a = await receive(100, 20.0, 25.0, DAY1)
        lot_b = await receive(150, 22.0, 28.0, DAY10)
        assert lot_a.batch_number == "BATCH260101001-P100"
        assert lot_b.batch_number == "BATCH260110001-P100"

        result = await sale_processor.sell("P100", 120, "SALE-260201-0001", as_of=AS_OF)

        assert result.total_cost == 2440.0
        assert result.total_revenue == 3060.0
        assert result.profit == 620.0
        assert result.profit_margin == 20.26

        stored_a = await ledger.get_batch(lot_a.id)
        stored_b = await ledger.get_batch(lot_b.id)
        assert (stored_a.current_quantity, stored_a.status) == (0, BatchStatus.DEPLETED)
        assert (stored_b.current_quantity, stored_b.status) == (130, BatchStatus.ACTIVE)
        assert (await stores["products"].get_product("P100")).current_stock == 130

    async def test_sale_movements_chain_product_stock(self, ledger, sale_processor, receive):
        await receive(100, 20.0, 25.0, DAY1)
        await receive(150, 22.0, 28.0, DAY10)
        await sale_processor.sell("P100", 120, "SALE-1", as_of=AS_OF)

        sales = await ledger.get_product_movements("P100", movement_type=MovementType.SALE)
        sales.sort(key=lambda m: m.id)
        assert [(m.quantity, m.previous_stock, m.new_stock) for m in sales] == [
            (-100, 250, 150),
            (-20, 150, 130),
        ]
        assert [m.unit_cost for m in sales] == [20.0, 22.0]

    async def test_insufficient_stock_changes_nothing(
        self, ledger, sale_processor, stores, receive
    ):
        lot_a = await receive(100, 20.0, 25.0, DAY1)
        lot_b = await receive(150, 22.0, 28.0, DAY10)

        with pytest.raises(InsufficientStockError) as exc_info:
            await sale_processor.sell("P100", 400, "SALE-1", as_of=AS_OF)

        assert exc_info.value.details["available"] == 250
        assert (await ledger.get_batch(lot_a.id)).current_quantity == 100
        assert (await ledger.get_batch(lot_b.id)).current_quantity == 150
        assert (await stores["products"].get_product("P100")).current_stock == 250
        assert await ledger.get_product_movements("P100", movement_type=MovementType.SALE) == []

    async def test_reserved_units_are_not_sold(self, ledger, sale_processor, receive):
        lot_a = await receive(100, 20.0, 25.0, DAY1)
        await receive(150, 22.0, 28.0, DAY10)
        await ledger.reserve_quantity(lot_a.id, 90)

        result = await sale_processor.sell("P100", 30, "SALE-1", as_of=AS_OF)

        assert [(line.batch_id, line.quantity) for line in result.lines] == [
            (lot_a.id, 10),
            (lot_a.id + 1, 20),
        ]
        stored_a = await ledger.get_batch(lot_a.id)
        assert stored_a.current_quantity == 90
        assert stored_a.reserved_quantity == 90

    async def test_ledger_stays_consistent(self, ledger, sale_processor, receive, ledger_db):
        lot_a = await receive(100, 20.0, 25.0, DAY1)
        await receive(150, 22.0, 28.0, DAY10)
        await sale_processor.sell("P100", 120, "SALE-1", as_of=AS_OF)
        await ledger.adjust_quantity(lot_a.id, 5, reason="Found in back room")
        await ledger.set_status(lot_a.id, BatchStatus.DAMAGED, reason="Crushed")

        assert await ledger.check_stock_consistency() == []
        checks = await verify_schema_integrity(ledger_db)
        assert all(c["status"] == "PASS" for c in checks)


class TestLifecycle:
    async def test_damage_and_reactivate(self, ledger, stores, receive):
        lot = await receive(40, 10.0, 12.0, DAY1)

        await ledger.set_status(lot.id, BatchStatus.DAMAGED, reason="Leak")
        assert (await stores["products"].get_product("P100")).current_stock == 0

        reactivated = await ledger.set_status(lot.id, BatchStatus.ACTIVE)
        assert reactivated.current_quantity == 40
        assert (await stores["products"].get_product("P100")).current_stock == 40

    async def test_expiry_sweep(self, ledger, sale_processor, stores, receive):
        expired = await receive(10, 5.0, 8.0, DAY1, expiry_date=date(2026, 1, 20))
        fresh = await receive(10, 5.0, 8.0, DAY10, expiry_date=date(2027, 1, 1))

        # Lazily excluded before any sweep
        with pytest.raises(InsufficientStockError):
            await sale_processor.sell("P100", 15, "SALE-1", as_of=AS_OF)

        result = await ledger.expire_overdue(AS_OF)

        assert [r.batch_id for r in result.batches_updated] == [expired.id]
        assert (await ledger.get_batch(expired.id)).status == BatchStatus.EXPIRED
        assert (await ledger.get_batch(fresh.id)).status == BatchStatus.ACTIVE
        assert (await stores["products"].get_product("P100")).current_stock == 10

        again = await ledger.expire_overdue(AS_OF)
        assert again.total_checked == 0

    async def test_batch_details_include_movements(self, ledger, sale_processor, receive):
        lot = await receive(100, 20.0, 25.0, DAY1)
        await sale_processor.sell("P100", 10, "SALE-1", as_of=AS_OF)

        details = await ledger.get_batch_details(lot.batch_number)

        assert details.batch.current_quantity == 90
        assert [m.movement_type for m in details.movements] == [
            MovementType.SALE,
            MovementType.PURCHASE,
        ]

    async def test_batch_numbers_increment_per_day(self, receive):
        first = await receive(1, 1.0, 1.0, DAY1)
        second = await receive(1, 1.0, 1.0, DAY1)
        other_day = await receive(1, 1.0, 1.0, DAY10)

        assert first.batch_number == "BATCH260101001-P100"
        assert second.batch_number == "BATCH260101002-P100"
        assert other_day.batch_number == "BATCH260110001-P100"


class TestPurchaseDates:
    async def test_utc_and_local_lots_sell_in_fifo_order(
        self, ledger, sale_processor, stores, receive
    ):
        utc_lot = await receive(5, 20.0, 25.0, datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc))
        local_lot = await receive(10, 22.0, 28.0, DAY10)

        result = await sale_processor.sell("P100", 7, "SALE-1", as_of=AS_OF)

        assert [(line.batch_id, line.quantity) for line in result.lines] == [
            (utc_lot.id, 5),
            (local_lot.id, 2),
        ]
        stored = await ledger.get_batch(utc_lot.id)
        assert stored.purchase_date.tzinfo is None
        assert (await stores["products"].get_product("P100")).current_stock == 8

    async def test_overview_with_mixed_purchase_dates(self, ledger, receive):
        await receive(5, 20.0, 25.0, datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc))
        await receive(10, 22.0, 28.0, DAY10)

        overview = await ledger.get_product_batch_overview("P100", as_of=AS_OF)

        assert overview.total_quantity == 15
        assert [b.current_quantity for b in overview.batches] == [5, 10]


class TestBills:
    @pytest.fixture
    async def rice(self, stores) -> Product:
        return await stores["products"].create_product(
            Product(id="P200", barcode="6001234500024", name="Rice 5kg")
        )

    async def receive_rice(self, ledger, quantity: int) -> None:
        await ledger.create_batch(
            CreateBatchCommand(
                product_id="P200",
                quantity=quantity,
                cost_price=8.0,
                selling_price=10.0,
                purchase_date=DAY1,
            )
        )

    async def test_short_item_sells_nothing(self, ledger, sale_processor, stores, receive, rice):
        await receive(10, 20.0, 25.0, DAY1)
        await self.receive_rice(ledger, 1)

        with pytest.raises(InsufficientStockError):
            await sale_processor.sell_many([("P100", 4), ("P200", 5)], "SALE-1")

        assert (await stores["products"].get_product("P100")).current_stock == 10
        assert (await stores["products"].get_product("P200")).current_stock == 1
        assert await ledger.get_product_movements("P100", movement_type=MovementType.SALE) == []

    async def test_bill_commits_every_item(self, ledger, sale_processor, stores, receive, rice):
        await receive(10, 20.0, 25.0, DAY1)
        await self.receive_rice(ledger, 6)

        results = await sale_processor.sell_many(
            [("P100", 4), ("P200", 5), ("P100", 1)], "SALE-1"
        )

        assert [(r.product_id, r.quantity_sold) for r in results] == [("P100", 5), ("P200", 5)]
        assert (await stores["products"].get_product("P100")).current_stock == 5
        assert (await stores["products"].get_product("P200")).current_stock == 1
        assert await ledger.check_stock_consistency() == []


class TestReceipts:
    async def test_storage_failure_leaves_no_lots(self, ledger, stores, olive_oil):
        original = SQLiteBatchStore._insert_movement
        calls = 0

        async def fail_second(conn, movement):
            nonlocal calls
            calls += 1
            if calls == 2:
                raise aiosqlite.OperationalError("disk I/O error")
            await original(conn, movement)

        commands = [
            CreateBatchCommand(
                product_id="P100",
                quantity=quantity,
                cost_price=20.0,
                selling_price=25.0,
                purchase_date=DAY1,
                purchase_order_id="PO-9",
            )
            for quantity in (100, 150)
        ]
        with patch.object(SQLiteBatchStore, "_insert_movement", staticmethod(fail_second)):
            with pytest.raises(DatabaseError):
                await ledger.create_batches(commands)

        assert await ledger.list_product_batches("P100") == []
        assert (await stores["products"].get_product("P100")).current_stock == 0
