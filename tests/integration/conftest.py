"""Fixtures wiring the real SQLite stores into the ledger services."""

from datetime import date, datetime

import pytest

from lotledger.core.entities import Batch, CreateBatchCommand, Product
from lotledger.core.services import (
    BatchLedgerService,
    BatchNumberGenerator,
    FifoAllocator,
    SaleProcessor,
)
from lotledger.infrastructure.storage.sqlite import (
    SQLiteBatchStore,
    SQLiteMovementStore,
    SQLiteProductStore,
    SQLiteSequenceStore,
)


@pytest.fixture
def stores(ledger_db) -> dict:
    return {
        "batches": SQLiteBatchStore(),
        "products": SQLiteProductStore(),
        "movements": SQLiteMovementStore(),
        "sequences": SQLiteSequenceStore(),
    }


@pytest.fixture
def ledger(stores) -> BatchLedgerService:
    return BatchLedgerService(
        batch_store=stores["batches"],
        product_store=stores["products"],
        movement_store=stores["movements"],
        number_generator=BatchNumberGenerator(stores["sequences"]),
    )


@pytest.fixture
def sale_processor(stores) -> SaleProcessor:
    return SaleProcessor(
        batch_store=stores["batches"],
        allocator=FifoAllocator(stores["batches"]),
        max_attempts=50,
        retry_delay=0,
        retry_max_delay=0,
    )


@pytest.fixture
async def olive_oil(stores) -> Product:
    return await stores["products"].create_product(
        Product(id="P100", barcode="6001234500017", name="Olive Oil 1L")
    )


@pytest.fixture
def receive(ledger, olive_oil):
    """Receive a lot of P100."""

    async def _receive(
        quantity: int,
        cost_price: float,
        selling_price: float,
        purchase_date: datetime,
        expiry_date: date | None = None,
    ) -> Batch:
        return await ledger.create_batch(
            CreateBatchCommand(
                product_id="P100",
                quantity=quantity,
                cost_price=cost_price,
                selling_price=selling_price,
                purchase_date=purchase_date,
                expiry_date=expiry_date,
            )
        )

    return _receive
