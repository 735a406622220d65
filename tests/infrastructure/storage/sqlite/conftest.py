"""Pytest fixtures for SQLite storage tests."""

from datetime import date, datetime

import pytest

from lotledger.core.entities import (
    Batch,
    BatchWrite,
    LedgerCommit,
    MovementType,
    Product,
    StockMovement,
)
from lotledger.infrastructure.storage.sqlite import (
    SQLiteBatchStore,
    SQLiteMovementStore,
    SQLiteProductStore,
    SQLiteSequenceStore,
)


@pytest.fixture
def batch_store(ledger_db) -> SQLiteBatchStore:
    return SQLiteBatchStore()


@pytest.fixture
def product_store(ledger_db) -> SQLiteProductStore:
    return SQLiteProductStore()


@pytest.fixture
def movement_store(ledger_db) -> SQLiteMovementStore:
    return SQLiteMovementStore()


@pytest.fixture
def sequence_store(ledger_db) -> SQLiteSequenceStore:
    return SQLiteSequenceStore()


@pytest.fixture
async def product(product_store) -> Product:
    return await product_store.create_product(
        Product(id="P100", barcode="6001234500017", name="Olive Oil 1L")
    )


def _receipt(
    batch_number: str,
    quantity: int,
    cost_price: float = 20.0,
    selling_price: float = 25.0,
    purchase_date: datetime | None = None,
    expiry_date: date | None = None,
    product_id: str = "P100",
) -> LedgerCommit:
    """Commit that inserts one active lot with its purchase movement."""
    batch = Batch(
        batch_number=batch_number,
        product_id=product_id,
        initial_quantity=quantity,
        current_quantity=quantity,
        cost_price=cost_price,
        selling_price=selling_price,
        purchase_date=purchase_date or datetime(2026, 1, 1, 9, 0),
        expiry_date=expiry_date,
    )
    movement = StockMovement(
        product_id=product_id,
        batch_number=batch_number,
        movement_type=MovementType.PURCHASE,
        quantity=quantity,
        unit_cost=cost_price,
        total_cost=quantity * cost_price,
    )
    return LedgerCommit(
        product_id=product_id,
        batch_writes=[BatchWrite(batch=batch)],
        movements=[movement],
        product_prices=(cost_price, selling_price),
    )


@pytest.fixture
def receipt():
    """Factory for single-lot receipt commits."""
    return _receipt
