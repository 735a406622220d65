"""SQLite implementation of product reference storage."""

from datetime import datetime

import aiosqlite

from lotledger.config import get_logger
from lotledger.core.entities.product import Product, StockDiscrepancy
from lotledger.core.exceptions import DuplicateProductError, ProductNotFoundError
from lotledger.core.interfaces.product_store import IProductStore
from lotledger.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)

ACTIVE_STOCK_SQL = """
    SELECT COALESCE(SUM(current_quantity), 0) FROM batches
    WHERE product_id = ? AND status = 'active'
"""


class SQLiteProductStore(IProductStore):
    """SQLite implementation of product reference storage."""

    async def create_product(self, product: Product) -> Product:
        now = datetime.now()
        product.created_at = now
        product.updated_at = now
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO products (
                        id, barcode, name, cost_price, selling_price,
                        current_stock, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        product.id,
                        product.barcode,
                        product.name,
                        product.cost_price,
                        product.selling_price,
                        product.current_stock,
                        product.created_at.isoformat(),
                        product.updated_at.isoformat(),
                    ),
                )
        except aiosqlite.IntegrityError as e:
            raise DuplicateProductError(product.id, product.barcode) from e

        logger.info("product_created", product_id=product.id, barcode=product.barcode)
        return product

    async def get_product(self, product_id: str) -> Product | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM products WHERE id = ?", (product_id,))
            row = await cursor.fetchone()
            return self._row_to_product(row) if row else None

    async def get_by_barcode(self, barcode: str) -> Product | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM products WHERE barcode = ?", (barcode,)
            )
            row = await cursor.fetchone()
            return self._row_to_product(row) if row else None

    async def get_products(self, product_ids: list[str]) -> dict[str, Product]:
        if not product_ids:
            return {}
        placeholders = ",".join("?" for _ in product_ids)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM products WHERE id IN ({placeholders})", product_ids
            )
            rows = await cursor.fetchall()
            return {row["id"]: self._row_to_product(row) for row in rows}

    async def reconcile_stock(self, product_id: str) -> StockDiscrepancy:
        async with get_transaction(immediate=True) as conn:
            cursor = await conn.execute(
                "SELECT current_stock FROM products WHERE id = ?", (product_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                raise ProductNotFoundError(product_id)

            cursor = await conn.execute(ACTIVE_STOCK_SQL, (product_id,))
            batch_stock = (await cursor.fetchone())[0]

            discrepancy = StockDiscrepancy(
                product_id=product_id,
                cached_stock=row["current_stock"],
                batch_stock=batch_stock,
            )
            if discrepancy.drift:
                await conn.execute(
                    "UPDATE products SET current_stock = ?, updated_at = ? WHERE id = ?",
                    (batch_stock, datetime.now().isoformat(), product_id),
                )
            return discrepancy

    async def list_stock_discrepancies(self) -> list[StockDiscrepancy]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT p.id AS product_id,
                       p.current_stock AS cached_stock,
                       COALESCE(SUM(b.current_quantity), 0) AS batch_stock
                FROM products p
                LEFT JOIN batches b ON b.product_id = p.id AND b.status = 'active'
                GROUP BY p.id
                HAVING cached_stock != batch_stock
                ORDER BY p.id
                """
            )
            rows = await cursor.fetchall()
            return [
                StockDiscrepancy(
                    product_id=row["product_id"],
                    cached_stock=row["cached_stock"],
                    batch_stock=row["batch_stock"],
                )
                for row in rows
            ]

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        return Product(
            id=row["id"],
            barcode=row["barcode"],
            name=row["name"],
            cost_price=float(row["cost_price"]),
            selling_price=float(row["selling_price"]),
            current_stock=row["current_stock"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
