"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import date, datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from lotledger.core.entities import Batch, BatchStatus, Product


@pytest.fixture
def day1() -> datetime:
    return datetime(2026, 1, 1, 9, 0)


@pytest.fixture
def day10() -> datetime:
    return datetime(2026, 1, 10, 9, 0)


@pytest.fixture
def sample_product() -> Product:
    return Product(id="P100", barcode="6001234500017", name="Olive Oil 1L")


@pytest.fixture
def lot_a(day1: datetime) -> Batch:
    """Oldest lot: 100 units at cost 20, selling 25."""
    return Batch(
        id=1,
        batch_number="BATCH260101001-P100",
        product_id="P100",
        initial_quantity=100,
        current_quantity=100,
        cost_price=20.0,
        selling_price=25.0,
        purchase_date=day1,
        expiry_date=date(2027, 1, 1),
    )


@pytest.fixture
def lot_b(day10: datetime) -> Batch:
    """Newer lot: 150 units at cost 22, selling 28."""
    return Batch(
        id=2,
        batch_number="BATCH260110001-P100",
        product_id="P100",
        initial_quantity=150,
        current_quantity=150,
        cost_price=22.0,
        selling_price=28.0,
        purchase_date=day10,
        expiry_date=date(2027, 6, 1),
        status=BatchStatus.ACTIVE,
    )


@pytest.fixture
async def ledger_db(tmp_path: Path) -> AsyncGenerator[Path, None]:
    """
    Migrated temporary database wired into the global connection pool.

    Stores created inside the test talk to this database.
    """
    import lotledger.infrastructure.storage.sqlite.connection as conn_module
    from lotledger.infrastructure.storage.sqlite.migrations import initialize_database

    db_path = tmp_path / "ledger.db"
    await initialize_database(db_path, create_backup_before=False)

    conn_module._pool = None
    mock_settings = MagicMock()
    mock_settings.storage.db_path = db_path
    mock_settings.storage.pool_size = 5
    mock_settings.storage.busy_timeout = 5000

    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield db_path
        finally:
            await conn_module.close_pool()
