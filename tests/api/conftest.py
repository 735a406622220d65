"""Shared fixtures for API tests."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from lotledger.api.main import app
from lotledger.core.services import BatchLedgerService, ValuationReporter
from lotledger.infrastructure.storage.sqlite import SQLiteProductStore


@pytest.fixture
def mock_ledger():
    ledger = AsyncMock(spec=BatchLedgerService)
    ledger.list_batches.return_value = ([], 0)
    ledger.check_stock_consistency.return_value = []
    return ledger


@pytest.fixture
def mock_reporter():
    return AsyncMock(spec=ValuationReporter)


@pytest.fixture
def mock_product_store():
    store = AsyncMock(spec=SQLiteProductStore)
    store.get_product.return_value = None
    store.get_by_barcode.return_value = None
    return store


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
