"""Tests for FIFO allocation planning."""

from datetime import date, datetime
from unittest.mock import AsyncMock

import pytest

from lotledger.core.entities.batch import BatchStatus
from lotledger.core.exceptions import InsufficientStockError, ValidationError
from lotledger.core.services.fifo_allocator import FifoAllocator, plan_allocation

AS_OF = datetime(2026, 2, 1, 12, 0)


class TestPlanAllocation:
    def test_oldest_lot_first(self, lot_a, lot_b):
        plan = plan_allocation("P100", [lot_b, lot_a], 120, AS_OF)
        assert [(line.batch.id, line.quantity) for line in plan] == [(1, 100), (2, 20)]

    def test_single_lot_covers_request(self, lot_a, lot_b):
        plan = plan_allocation("P100", [lot_a, lot_b], 30, AS_OF)
        assert len(plan) == 1
        assert plan[0].quantity == 30

    def test_insufficient_stock_reports_pool(self, lot_a, lot_b):
        with pytest.raises(InsufficientStockError) as exc_info:
            plan_allocation("P100", [lot_a, lot_b], 400, AS_OF)
        assert exc_info.value.details["available"] == 250
        assert exc_info.value.details["shortfall"] == 150

    def test_exact_pool_is_allocated(self, lot_a, lot_b):
        plan = plan_allocation("P100", [lot_a, lot_b], 250, AS_OF)
        assert sum(line.quantity for line in plan) == 250

    def test_non_positive_request(self, lot_a):
        with pytest.raises(ValidationError):
            plan_allocation("P100", [lot_a], 0, AS_OF)

    def test_reserved_units_are_skipped(self, lot_a, lot_b):
        lot_a.reserved_quantity = 90
        plan = plan_allocation("P100", [lot_a, lot_b], 30, AS_OF)
        assert [(line.batch.id, line.quantity) for line in plan] == [(1, 10), (2, 20)]

    def test_expired_lot_is_skipped(self, lot_a, lot_b):
        lot_a.expiry_date = date(2026, 1, 20)
        plan = plan_allocation("P100", [lot_a, lot_b], 30, AS_OF)
        assert plan[0].batch.id == 2

    def test_inactive_lot_is_skipped(self, lot_a, lot_b):
        lot_a.status = BatchStatus.DAMAGED
        with pytest.raises(InsufficientStockError) as exc_info:
            plan_allocation("P100", [lot_a, lot_b], 200, AS_OF)
        assert exc_info.value.details["available"] == 150

    def test_same_purchase_date_breaks_tie_by_id(self, lot_a, lot_b):
        lot_b.purchase_date = lot_a.purchase_date
        plan = plan_allocation("P100", [lot_b, lot_a], 100, AS_OF)
        assert plan[0].batch.id == 1

    def test_plan_does_not_mutate_lots(self, lot_a, lot_b):
        plan_allocation("P100", [lot_a, lot_b], 120, AS_OF)
        assert lot_a.current_quantity == 100
        assert lot_b.current_quantity == 150


class TestFifoAllocator:
    async def test_plans_over_store_candidates(self, lot_a, lot_b):
        store = AsyncMock()
        store.list_allocatable.return_value = [lot_a, lot_b]
        allocator = FifoAllocator(store)

        plan = await allocator.plan("P100", 120, AS_OF)

        store.list_allocatable.assert_awaited_once_with("P100", AS_OF)
        assert len(plan) == 2

    async def test_rejects_non_positive_before_reading(self):
        store = AsyncMock()
        allocator = FifoAllocator(store)
        with pytest.raises(ValidationError):
            await allocator.plan("P100", -1)
        store.list_allocatable.assert_not_awaited()
