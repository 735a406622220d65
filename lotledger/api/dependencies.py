"""
Dependency injection container for FastAPI.

Provides service and use case instances to route handlers. Tests replace
these with app.dependency_overrides.
"""

from functools import lru_cache

from lotledger.application.services import (
    get_batch_ledger_service,
    get_valuation_reporter,
)
from lotledger.application.use_cases import (
    AdjustBatchUseCase,
    ChangeBatchStatusUseCase,
    CheckExpiringBatchesUseCase,
    CreateBatchUseCase,
    ExpireOverdueBatchesUseCase,
    ProcessSaleUseCase,
    ReceivePurchaseOrderUseCase,
    ReconcileStockUseCase,
    RegisterProductUseCase,
    ReserveStockUseCase,
)
from lotledger.config import Settings, get_settings
from lotledger.core.services import BatchLedgerService, ValuationReporter
from lotledger.infrastructure.storage.sqlite import SQLiteProductStore, get_product_store


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Service dependencies
async def get_ledger() -> BatchLedgerService:
    return await get_batch_ledger_service()


async def get_valuation() -> ValuationReporter:
    return await get_valuation_reporter()


async def get_products() -> SQLiteProductStore:
    return await get_product_store()


# Use case dependencies
def get_register_product_use_case() -> RegisterProductUseCase:
    return RegisterProductUseCase()


def get_create_batch_use_case() -> CreateBatchUseCase:
    return CreateBatchUseCase()


def get_process_sale_use_case() -> ProcessSaleUseCase:
    return ProcessSaleUseCase()


def get_adjust_batch_use_case() -> AdjustBatchUseCase:
    return AdjustBatchUseCase()


def get_change_batch_status_use_case() -> ChangeBatchStatusUseCase:
    return ChangeBatchStatusUseCase()


def get_reserve_stock_use_case() -> ReserveStockUseCase:
    return ReserveStockUseCase()


def get_check_expiring_batches_use_case() -> CheckExpiringBatchesUseCase:
    return CheckExpiringBatchesUseCase()


def get_expire_overdue_batches_use_case() -> ExpireOverdueBatchesUseCase:
    return ExpireOverdueBatchesUseCase()


def get_reconcile_stock_use_case() -> ReconcileStockUseCase:
    return ReconcileStockUseCase()


def get_receive_purchase_order_use_case() -> ReceivePurchaseOrderUseCase:
    return ReceivePurchaseOrderUseCase()
