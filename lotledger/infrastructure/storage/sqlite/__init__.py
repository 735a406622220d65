"""SQLite storage implementations."""

from lotledger.infrastructure.storage.sqlite.batch_store import SQLiteBatchStore
from lotledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from lotledger.infrastructure.storage.sqlite.movement_store import SQLiteMovementStore
from lotledger.infrastructure.storage.sqlite.product_store import SQLiteProductStore
from lotledger.infrastructure.storage.sqlite.sequence_store import SQLiteSequenceStore

# Singleton instances
_batch_store: SQLiteBatchStore | None = None
_product_store: SQLiteProductStore | None = None
_movement_store: SQLiteMovementStore | None = None
_sequence_store: SQLiteSequenceStore | None = None


async def get_batch_store() -> SQLiteBatchStore:
    """Get singleton batch store instance."""
    global _batch_store
    if _batch_store is None:
        _batch_store = SQLiteBatchStore()
    return _batch_store


async def get_product_store() -> SQLiteProductStore:
    """Get singleton product store instance."""
    global _product_store
    if _product_store is None:
        _product_store = SQLiteProductStore()
    return _product_store


async def get_movement_store() -> SQLiteMovementStore:
    """Get singleton movement store instance."""
    global _movement_store
    if _movement_store is None:
        _movement_store = SQLiteMovementStore()
    return _movement_store


async def get_sequence_store() -> SQLiteSequenceStore:
    """Get singleton sequence store instance."""
    global _sequence_store
    if _sequence_store is None:
        _sequence_store = SQLiteSequenceStore()
    return _sequence_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteBatchStore",
    "SQLiteMovementStore",
    "SQLiteProductStore",
    "SQLiteSequenceStore",
    # Factory functions
    "get_batch_store",
    "get_movement_store",
    "get_product_store",
    "get_sequence_store",
]
