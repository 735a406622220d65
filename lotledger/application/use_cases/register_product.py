"""Register Product Use Case: product reference the ledger tracks lots for."""

from lotledger.application.dto.requests import RegisterProductRequest
from lotledger.application.dto.responses import ProductResponse
from lotledger.config import get_logger
from lotledger.core.entities.product import Product
from lotledger.core.exceptions import DuplicateProductError
from lotledger.core.interfaces.product_store import IProductStore

logger = get_logger(__name__)


class RegisterProductUseCase:
    """Create a product reference with zero stock."""

    def __init__(self, product_store: IProductStore | None = None):
        self._product_store = product_store

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from lotledger.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def execute(self, request: RegisterProductRequest) -> Product:
        store = await self._get_product_store()

        existing = await store.get_by_barcode(request.barcode)
        if existing is not None:
            raise DuplicateProductError(request.id, request.barcode)

        product = await store.create_product(
            Product(
                id=request.id,
                barcode=request.barcode,
                name=request.name,
                cost_price=request.cost_price,
                selling_price=request.selling_price,
            )
        )
        logger.info("product_registered", product_id=product.id)
        return product

    @staticmethod
    def to_response(product: Product) -> ProductResponse:
        return ProductResponse(**product.model_dump())
