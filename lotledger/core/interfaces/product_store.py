"""Abstract interface for product reference storage."""

from abc import ABC, abstractmethod

from lotledger.core.entities.product import Product, StockDiscrepancy


class IProductStore(ABC):
    """Interface for the product references the ledger depends on."""

    @abstractmethod
    async def create_product(self, product: Product) -> Product:
        """Register a product reference."""
        pass

    @abstractmethod
    async def get_product(self, product_id: str) -> Product | None:
        """Get product by ID."""
        pass

    @abstractmethod
    async def get_by_barcode(self, barcode: str) -> Product | None:
        """Get product by barcode/SKU."""
        pass

    @abstractmethod
    async def get_products(self, product_ids: list[str]) -> dict[str, Product]:
        """Get several products keyed by ID."""
        pass

    @abstractmethod
    async def reconcile_stock(self, product_id: str) -> StockDiscrepancy:
        """Recompute cached stock from active batches; returns the state before the fix."""
        pass

    @abstractmethod
    async def list_stock_discrepancies(self) -> list[StockDiscrepancy]:
        """Products whose cached stock differs from the sum of their active batches."""
        pass
