"""SQLite implementation of named counters."""

import aiosqlite

from lotledger.config import get_logger
from lotledger.core.exceptions import SequenceUnavailableError
from lotledger.core.interfaces.sequence_store import ISequenceStore
from lotledger.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)


class SQLiteSequenceStore(ISequenceStore):
    """Counters incremented by a single upsert statement, so concurrent callers never collide."""

    async def next_value(self, key: str) -> int:
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO sequence_counters (key, value, updated_at)
                    VALUES (?, 1, datetime('now'))
                    ON CONFLICT(key) DO UPDATE SET
                        value = value + 1,
                        updated_at = excluded.updated_at
                    RETURNING value
                    """,
                    (key,),
                )
                row = await cursor.fetchone()
                await cursor.close()
        except aiosqlite.Error as e:
            logger.error("sequence_increment_failed", key=key, error=str(e))
            raise SequenceUnavailableError(key, str(e)) from e

        if row is None:
            raise SequenceUnavailableError(key, "no value returned")
        return row[0]

    async def peek(self, key: str) -> int:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT value FROM sequence_counters WHERE key = ?", (key,)
            )
            row = await cursor.fetchone()
            return row[0] if row else 0
