"""Tests for ReceivePurchaseOrderUseCase."""

from datetime import date, datetime
from unittest.mock import AsyncMock

import pytest

from lotledger.application.dto.requests import ReceivePurchaseOrderRequest, ReceivingLineRequest
from lotledger.application.use_cases.receive_purchase_order import ReceivePurchaseOrderUseCase
from lotledger.core.entities.batch import Batch
from lotledger.core.entities.ledger import CreateBatchCommand
from lotledger.core.exceptions import ValidationError


def batch_from_command(command: CreateBatchCommand) -> Batch:
    return Batch(
        id=1,
        batch_number=f"BATCH260301001-{command.product_id}",
        product_id=command.product_id,
        supplier_id=command.supplier_id,
        purchase_order_id=command.purchase_order_id,
        initial_quantity=command.quantity,
        current_quantity=command.quantity,
        cost_price=command.cost_price,
        selling_price=command.selling_price,
        purchase_date=command.purchase_date,
        expiry_date=command.expiry_date,
    )


@pytest.fixture
def mock_ledger():
    ledger = AsyncMock()
    ledger.create_batches.side_effect = lambda commands: [
        batch_from_command(c) for c in commands
    ]
    return ledger


@pytest.fixture
def mock_product_store(sample_product):
    store = AsyncMock()
    store.get_products.return_value = {"P100": sample_product, "P200": sample_product}
    return store


@pytest.fixture
def use_case(mock_ledger, mock_product_store):
    return ReceivePurchaseOrderUseCase(ledger=mock_ledger, product_store=mock_product_store)


def line(**overrides) -> ReceivingLineRequest:
    data = {"product_id": "P100", "quantity": 50, "cost_price": 20.0, "selling_price": 25.0}
    data.update(overrides)
    return ReceivingLineRequest(**data)


class TestReceivePurchaseOrderUseCase:
    async def test_one_lot_per_line(self, use_case, mock_ledger):
        received = datetime(2026, 3, 1, 8, 0)
        request = ReceivePurchaseOrderRequest(
            purchase_order_id="PO-77",
            supplier_id="SUP-1",
            received_date=received,
            lines=[line(), line(product_id="P200", quantity=10, expiry_date=date(2026, 9, 1))],
        )

        result = await use_case.execute(request)

        assert len(result.batches) == 2
        mock_ledger.create_batches.assert_awaited_once()
        commands = mock_ledger.create_batches.call_args.args[0]
        assert {c.purchase_order_id for c in commands} == {"PO-77"}
        assert {c.supplier_id for c in commands} == {"SUP-1"}
        assert {c.purchase_date for c in commands} == {received}
        assert commands[1].expiry_date == date(2026, 9, 1)

        response = use_case.to_response(result)
        assert response.total_quantity == 60
        assert response.total_cost == 50 * 20.0 + 10 * 20.0

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"quantity": 0}, "lines[1].quantity"),
            ({"cost_price": -1.0}, "lines[1].cost_price"),
            ({"selling_price": -1.0}, "lines[1].selling_price"),
            ({"product_id": ""}, "lines[1].product_id"),
        ],
    )
    async def test_bad_line_creates_nothing(self, use_case, mock_ledger, overrides, field):
        request = ReceivePurchaseOrderRequest(
            purchase_order_id="PO-77", lines=[line(), line(**overrides)]
        )

        with pytest.raises(ValidationError) as exc_info:
            await use_case.execute(request)

        assert exc_info.value.details["field"] == field
        mock_ledger.create_batches.assert_not_awaited()

    async def test_unknown_product(self, use_case, mock_ledger):
        request = ReceivePurchaseOrderRequest(
            purchase_order_id="PO-77", lines=[line(product_id="P404")]
        )

        with pytest.raises(ValidationError) as exc_info:
            await use_case.execute(request)

        assert exc_info.value.details["field"] == "lines[0].product_id"
        mock_ledger.create_batches.assert_not_awaited()

    async def test_empty_order(self, use_case):
        with pytest.raises(ValidationError):
            await use_case.execute(ReceivePurchaseOrderRequest(purchase_order_id="PO-77", lines=[]))

    async def test_missing_order_id(self, use_case):
        with pytest.raises(ValidationError):
            await use_case.execute(ReceivePurchaseOrderRequest(lines=[line()]))
