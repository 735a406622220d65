"""API tests for product endpoints."""

import pytest
from httpx import AsyncClient

from lotledger.api.dependencies import (
    get_ledger,
    get_products,
    get_reconcile_stock_use_case,
    get_register_product_use_case,
)
from lotledger.api.main import app
from lotledger.application.use_cases import ReconcileStockUseCase, RegisterProductUseCase
from lotledger.core.entities import MovementType, ProductBatchOverview, StockDiscrepancy
from lotledger.core.exceptions import ProductNotFoundError


@pytest.fixture(autouse=True)
def wire(mock_ledger, mock_product_store):
    app.dependency_overrides[get_ledger] = lambda: mock_ledger
    app.dependency_overrides[get_products] = lambda: mock_product_store
    app.dependency_overrides[get_register_product_use_case] = lambda: RegisterProductUseCase(
        product_store=mock_product_store
    )
    app.dependency_overrides[get_reconcile_stock_use_case] = lambda: ReconcileStockUseCase(
        ledger=mock_ledger
    )


class TestRegisterProduct:
    async def test_returns_201(self, client: AsyncClient, mock_product_store, sample_product):
        mock_product_store.create_product.return_value = sample_product

        response = await client.post(
            "/api/products",
            json={"id": "P100", "barcode": "6001234500017", "name": "Olive Oil 1L"},
        )

        assert response.status_code == 201
        assert response.json()["current_stock"] == 0

    async def test_duplicate_barcode_is_409(
        self, client: AsyncClient, mock_product_store, sample_product
    ):
        mock_product_store.get_by_barcode.return_value = sample_product

        response = await client.post(
            "/api/products",
            json={"id": "P101", "barcode": "6001234500017", "name": "Copy"},
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_PRODUCT"

    async def test_missing_fields_is_422(self, client: AsyncClient):
        response = await client.post("/api/products", json={"id": "P100"})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestProductReads:
    async def test_get_product(self, client: AsyncClient, mock_product_store, sample_product):
        mock_product_store.get_product.return_value = sample_product

        response = await client.get("/api/products/P100")

        assert response.status_code == 200
        assert response.json()["barcode"] == "6001234500017"

    async def test_unknown_product_is_404(self, client: AsyncClient):
        response = await client.get("/api/products/NOPE")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "PRODUCT_NOT_FOUND"
        assert body["hint"]

    async def test_batches_in_fifo_order(self, client: AsyncClient, mock_ledger, lot_a, lot_b):
        mock_ledger.list_product_batches.return_value = [lot_a, lot_b]

        response = await client.get("/api/products/P100/batches")

        assert response.status_code == 200
        assert [b["batch_number"] for b in response.json()] == [
            lot_a.batch_number,
            lot_b.batch_number,
        ]

    async def test_overview(self, client: AsyncClient, mock_ledger, lot_a, lot_b):
        mock_ledger.get_product_batch_overview.return_value = ProductBatchOverview(
            product_id="P100",
            product_name="Olive Oil 1L",
            barcode="6001234500017",
            total_batches=2,
            total_quantity=250,
            total_available=250,
            min_cost_price=20.0,
            max_cost_price=22.0,
            min_selling_price=25.0,
            max_selling_price=28.0,
            batches=[lot_a, lot_b],
        )

        response = await client.get("/api/products/P100/overview")

        assert response.status_code == 200
        body = response.json()
        assert body["total_available"] == 250
        assert len(body["batches"]) == 2

    async def test_movements_forward_filters(self, client: AsyncClient, mock_ledger):
        mock_ledger.get_product_movements.return_value = []

        response = await client.get(
            "/api/products/P100/movements",
            params={"movement_type": "sale", "limit": 10, "offset": 5},
        )

        assert response.status_code == 200
        kwargs = mock_ledger.get_product_movements.call_args.kwargs
        assert kwargs["movement_type"] == MovementType.SALE
        assert (kwargs["limit"], kwargs["offset"]) == (10, 5)

    async def test_movements_limit_is_bounded(self, client: AsyncClient):
        response = await client.get("/api/products/P100/movements", params={"limit": 1000})
        assert response.status_code == 422

    async def test_overview_unknown_product(self, client: AsyncClient, mock_ledger):
        mock_ledger.get_product_batch_overview.side_effect = ProductNotFoundError("NOPE")

        response = await client.get("/api/products/NOPE/overview")

        assert response.status_code == 404


class TestStockReconciliation:
    async def test_consistency_report(self, client: AsyncClient, mock_ledger):
        mock_ledger.check_stock_consistency.return_value = [
            StockDiscrepancy(product_id="P100", cached_stock=90, batch_stock=100)
        ]

        response = await client.get("/api/products/stock/consistency")

        assert response.status_code == 200
        body = response.json()
        assert body["consistent"] is False
        assert body["discrepancies"][0]["drift"] == -10

    async def test_reconcile(self, client: AsyncClient, mock_ledger):
        mock_ledger.reconcile_product_stock.return_value = StockDiscrepancy(
            product_id="P100", cached_stock=90, batch_stock=100
        )

        response = await client.post("/api/products/P100/reconcile")

        assert response.status_code == 200
        assert response.json()["batch_stock"] == 100
        mock_ledger.reconcile_product_stock.assert_awaited_once_with("P100")
