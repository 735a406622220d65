"""Tests for RegisterProductUseCase."""

from unittest.mock import AsyncMock

import pytest

from lotledger.application.dto.requests import RegisterProductRequest
from lotledger.application.use_cases.register_product import RegisterProductUseCase
from lotledger.core.exceptions import DuplicateProductError


class TestRegisterProductUseCase:
    async def test_registers_with_zero_stock(self):
        store = AsyncMock()
        store.get_by_barcode.return_value = None
        store.create_product.side_effect = lambda product: product
        use_case = RegisterProductUseCase(product_store=store)

        product = await use_case.execute(
            RegisterProductRequest(id="P100", barcode="6001234500017", name="Olive Oil 1L")
        )

        assert product.current_stock == 0
        assert use_case.to_response(product).barcode == "6001234500017"

    async def test_duplicate_barcode(self, sample_product):
        store = AsyncMock()
        store.get_by_barcode.return_value = sample_product
        use_case = RegisterProductUseCase(product_store=store)

        with pytest.raises(DuplicateProductError):
            await use_case.execute(
                RegisterProductRequest(id="P101", barcode=sample_product.barcode, name="Copy")
            )
        store.create_product.assert_not_awaited()
