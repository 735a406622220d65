"""SQLite implementation of stock movement queries."""

from datetime import date, datetime

import aiosqlite

from lotledger.core.entities.stock_movement import (
    MovementType,
    ReferenceType,
    StockMovement,
)
from lotledger.core.interfaces.movement_store import IMovementStore
from lotledger.infrastructure.storage.sqlite.connection import get_connection


class SQLiteMovementStore(IMovementStore):
    """Read side of the audit trail. Rows are inserted by the batch store commit."""

    async def get_movements(
        self,
        product_id: str,
        movement_type: MovementType | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockMovement]:
        conditions = ["product_id = ?"]
        params: list = [product_id]
        if movement_type:
            conditions.append("movement_type = ?")
            params.append(movement_type.value)
        if start:
            conditions.append("created_at >= ?")
            params.append(start.isoformat())
        if end:
            conditions.append("created_at <= ?")
            params.append(end.isoformat())

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM stock_movements
                WHERE {' AND '.join(conditions)}
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    async def get_batch_movements(
        self, batch_number: str, limit: int = 50
    ) -> list[StockMovement]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM stock_movements
                WHERE batch_number = ?
                ORDER BY created_at DESC, id DESC
                LIMIT ?
                """,
                (batch_number, limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        return StockMovement(
            id=row["id"],
            product_id=row["product_id"],
            batch_id=row["batch_id"],
            batch_number=row["batch_number"],
            movement_type=MovementType(row["movement_type"]),
            quantity=row["quantity"],
            previous_stock=row["previous_stock"],
            new_stock=row["new_stock"],
            unit_cost=row["unit_cost"],
            total_cost=row["total_cost"],
            reference_type=ReferenceType(row["reference_type"]) if row["reference_type"] else None,
            reference_number=row["reference_number"],
            reason=row["reason"],
            notes=row["notes"],
            expiry_date=date.fromisoformat(row["expiry_date"]) if row["expiry_date"] else None,
            created_at=datetime.fromisoformat(row["created_at"]),
        )
