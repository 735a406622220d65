"""SQLite implementation of batch storage and the atomic ledger commit."""

from datetime import date, datetime, timedelta

import aiosqlite

from lotledger.config import get_logger
from lotledger.core.entities.batch import Batch, BatchStatus
from lotledger.core.entities.ledger import BatchFilter, BatchWrite, LedgerCommit
from lotledger.core.entities.stock_movement import StockMovement
from lotledger.core.exceptions import (
    ConcurrentModificationError,
    ConservationViolationError,
    DatabaseError,
    ProductNotFoundError,
)
from lotledger.core.interfaces.batch_store import IBatchStore
from lotledger.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)

FIFO_ORDER = "ORDER BY purchase_date ASC, id ASC"


class SQLiteBatchStore(IBatchStore):
    """SQLite implementation of batch storage."""

    async def commit(self, commit: LedgerCommit) -> LedgerCommit:
        await self.commit_many([commit])
        return commit

    async def commit_many(self, commits: list[LedgerCommit]) -> list[LedgerCommit]:
        now = datetime.now()
        try:
            async with get_transaction(immediate=True) as conn:
                for commit in commits:
                    await self._apply_commit(conn, commit, now)
        except aiosqlite.Error as e:
            logger.error(
                "ledger_commit_failed",
                product_ids=[c.product_id for c in commits],
                error=str(e),
            )
            raise DatabaseError("ledger_commit", str(e)) from e

        for commit in commits:
            logger.debug(
                "ledger_committed",
                product_id=commit.product_id,
                batches=len(commit.batch_writes),
                movements=len(commit.movements),
                stock_delta=commit.stock_delta,
            )
        return commits

    async def _apply_commit(
        self, conn: aiosqlite.Connection, commit: LedgerCommit, now: datetime
    ) -> None:
        inserted: dict[str, int] = {}
        contribution_delta = 0
        for write in commit.batch_writes:
            contribution_delta += await self._write_batch(conn, write, now)
            if write.is_insert and write.batch.id is not None:
                inserted[write.batch.batch_number] = write.batch.id

        if commit.movements or commit.product_prices or contribution_delta:
            await self._apply_to_product(conn, commit, inserted, contribution_delta, now)

    async def _write_batch(
        self, conn: aiosqlite.Connection, write: BatchWrite, now: datetime
    ) -> int:
        """Persist one lot and return how much its stock contribution moved."""
        batch = write.batch
        batch.updated_at = now

        if write.is_insert:
            batch.created_at = now
            batch.version = 0
            cursor = await conn.execute(
                """
                INSERT INTO batches (
                    batch_number, product_id, supplier_id, purchase_order_id,
                    initial_quantity, current_quantity, reserved_quantity,
                    cost_price, selling_price, purchase_date, expiry_date,
                    status, notes, version, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    batch.batch_number,
                    batch.product_id,
                    batch.supplier_id,
                    batch.purchase_order_id,
                    batch.initial_quantity,
                    batch.current_quantity,
                    batch.reserved_quantity,
                    batch.cost_price,
                    batch.selling_price,
                    batch.purchase_date.isoformat(),
                    batch.expiry_date.isoformat() if batch.expiry_date else None,
                    batch.status.value,
                    batch.notes,
                    batch.version,
                    batch.created_at.isoformat(),
                    batch.updated_at.isoformat(),
                ),
            )
            batch.id = cursor.lastrowid
            return batch.stock_contribution()

        cursor = await conn.execute(
            "SELECT status, current_quantity FROM batches WHERE id = ?", (batch.id,)
        )
        stored = await cursor.fetchone()
        before = (
            stored["current_quantity"]
            if stored is not None and stored["status"] == BatchStatus.ACTIVE.value
            else 0
        )

        # Compare-and-update: only applies if nobody wrote the row since it was read
        cursor = await conn.execute(
            """
            UPDATE batches SET
                current_quantity = ?,
                reserved_quantity = ?,
                status = ?,
                notes = ?,
                version = version + 1,
                updated_at = ?
            WHERE id = ? AND version = ?
            """,
            (
                batch.current_quantity,
                batch.reserved_quantity,
                batch.status.value,
                batch.notes,
                batch.updated_at.isoformat(),
                batch.id,
                write.expected_version,
            ),
        )
        if cursor.rowcount == 0:
            logger.info(
                "batch_version_conflict",
                batch_id=batch.id,
                expected_version=write.expected_version,
            )
            raise ConcurrentModificationError(batch.id or 0, write.expected_version or 0)
        batch.version = (write.expected_version or 0) + 1
        return batch.stock_contribution() - before

    async def _apply_to_product(
        self,
        conn: aiosqlite.Connection,
        commit: LedgerCommit,
        inserted: dict[str, int],
        contribution_delta: int,
        now: datetime,
    ) -> None:
        """
        Record movements and move the product's cached stock.

        The stock change is taken from the lots actually written, not from the
        movements. Movement quantities must add up to it, and the chained
        snapshots must land on the stock the database ends up holding.
        """
        cursor = await conn.execute(
            "SELECT current_stock FROM products WHERE id = ?", (commit.product_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            raise ProductNotFoundError(commit.product_id)

        start_stock = row["current_stock"]
        if commit.stock_delta != contribution_delta:
            raise ConservationViolationError(
                commit.product_id,
                start_stock,
                commit.stock_delta,
                start_stock + contribution_delta,
            )

        if commit.product_prices is not None:
            cost_price, selling_price = commit.product_prices
            await conn.execute(
                """
                UPDATE products SET current_stock = current_stock + ?, cost_price = ?,
                    selling_price = ?, updated_at = ?
                WHERE id = ?
                """,
                (contribution_delta, cost_price, selling_price, now.isoformat(), commit.product_id),
            )
        else:
            await conn.execute(
                "UPDATE products SET current_stock = current_stock + ?, updated_at = ? "
                "WHERE id = ?",
                (contribution_delta, now.isoformat(), commit.product_id),
            )

        cursor = await conn.execute(
            "SELECT current_stock FROM products WHERE id = ?", (commit.product_id,)
        )
        final_stock = (await cursor.fetchone())["current_stock"]

        stock = start_stock
        for movement in commit.movements:
            if movement.batch_id is None and movement.batch_number in inserted:
                movement.batch_id = inserted[movement.batch_number]
            stock = movement.apply_snapshot(stock)
            await self._insert_movement(conn, movement)

        if stock != final_stock:
            raise ConservationViolationError(
                commit.product_id, start_stock, stock - start_stock, final_stock
            )

    @staticmethod
    async def _insert_movement(conn: aiosqlite.Connection, movement: StockMovement) -> None:
        cursor = await conn.execute(
            """
            INSERT INTO stock_movements (
                product_id, batch_id, batch_number, movement_type, quantity,
                previous_stock, new_stock, unit_cost, total_cost,
                reference_type, reference_number, reason, notes,
                expiry_date, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                movement.product_id,
                movement.batch_id,
                movement.batch_number,
                movement.movement_type.value,
                movement.quantity,
                movement.previous_stock,
                movement.new_stock,
                movement.unit_cost,
                movement.total_cost,
                movement.resolved_reference_type.value,
                movement.reference_number,
                movement.reason,
                movement.notes,
                movement.expiry_date.isoformat() if movement.expiry_date else None,
                movement.created_at.isoformat(),
            ),
        )
        movement.id = cursor.lastrowid

    async def get_batch(self, batch_id: int) -> Batch | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM batches WHERE id = ?", (batch_id,))
            row = await cursor.fetchone()
            return self._row_to_batch(row) if row else None

    async def get_by_number(self, batch_number: str) -> Batch | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM batches WHERE batch_number = ?", (batch_number,)
            )
            row = await cursor.fetchone()
            return self._row_to_batch(row) if row else None

    async def list_allocatable(self, product_id: str, as_of: datetime) -> list[Batch]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM batches
                WHERE product_id = ?
                  AND status = 'active'
                  AND current_quantity - reserved_quantity > 0
                  AND (expiry_date IS NULL OR expiry_date >= ?)
                {FIFO_ORDER}
                """,
                (product_id, as_of.date().isoformat()),
            )
            rows = await cursor.fetchall()
            return [self._row_to_batch(row) for row in rows]

    async def list_by_product(
        self, product_id: str, status: str | None = None
    ) -> list[Batch]:
        query = "SELECT * FROM batches WHERE product_id = ?"
        params: list = [product_id]
        if status:
            query += " AND status = ?"
            params.append(status)
        async with get_connection() as conn:
            cursor = await conn.execute(f"{query} {FIFO_ORDER}", params)
            rows = await cursor.fetchall()
            return [self._row_to_batch(row) for row in rows]

    async def list_batches(
        self,
        filters: BatchFilter,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Batch], int]:
        conditions = []
        params: list = []

        if filters.status:
            conditions.append("status = ?")
            params.append(filters.status.value)
        if filters.product_id:
            conditions.append("product_id = ?")
            params.append(filters.product_id)
        if filters.batch_number:
            conditions.append("batch_number LIKE ?")
            params.append(f"%{filters.batch_number}%")
        if filters.expiring_in_days is not None:
            today = date.today()
            conditions.append("expiry_date BETWEEN ? AND ? AND status = 'active'")
            params.extend(
                [
                    today.isoformat(),
                    (today + timedelta(days=filters.expiring_in_days)).isoformat(),
                ]
            )

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        async with get_connection() as conn:
            cursor = await conn.execute(f"SELECT COUNT(*) FROM batches {where}", params)
            total = (await cursor.fetchone())[0]

            cursor = await conn.execute(
                f"""
                SELECT * FROM batches {where}
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            )
            rows = await cursor.fetchall()
            return [self._row_to_batch(row) for row in rows], total

    async def list_expiring(
        self, start: date, end: date, limit: int = 500
    ) -> list[Batch]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM batches
                WHERE status = 'active'
                  AND current_quantity > 0
                  AND expiry_date BETWEEN ? AND ?
                ORDER BY expiry_date ASC, id ASC
                LIMIT ?
                """,
                (start.isoformat(), end.isoformat(), limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_batch(row) for row in rows]

    async def list_overdue(self, before: date, limit: int = 500) -> list[Batch]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM batches
                WHERE status = 'active'
                  AND current_quantity > 0
                  AND expiry_date < ?
                ORDER BY expiry_date ASC, id ASC
                LIMIT ?
                """,
                (before.isoformat(), limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_batch(row) for row in rows]

    async def list_active_in_stock(self, product_id: str | None = None) -> list[Batch]:
        query = "SELECT * FROM batches WHERE status = 'active' AND current_quantity > 0"
        params: list = []
        if product_id:
            query += " AND product_id = ?"
            params.append(product_id)
        async with get_connection() as conn:
            cursor = await conn.execute(f"{query} {FIFO_ORDER}", params)
            rows = await cursor.fetchall()
            return [self._row_to_batch(row) for row in rows]

    @staticmethod
    def _row_to_batch(row: aiosqlite.Row) -> Batch:
        return Batch(
            id=row["id"],
            batch_number=row["batch_number"],
            product_id=row["product_id"],
            supplier_id=row["supplier_id"],
            purchase_order_id=row["purchase_order_id"],
            initial_quantity=row["initial_quantity"],
            current_quantity=row["current_quantity"],
            reserved_quantity=row["reserved_quantity"],
            cost_price=float(row["cost_price"]),
            selling_price=float(row["selling_price"]),
            purchase_date=datetime.fromisoformat(row["purchase_date"]),
            expiry_date=date.fromisoformat(row["expiry_date"]) if row["expiry_date"] else None,
            status=BatchStatus(row["status"]),
            notes=row["notes"],
            version=row["version"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
