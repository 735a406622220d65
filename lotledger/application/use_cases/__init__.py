"""Application use cases."""

from lotledger.application.use_cases.adjust_batch import AdjustBatchUseCase
from lotledger.application.use_cases.change_batch_status import ChangeBatchStatusUseCase
from lotledger.application.use_cases.check_expiring_batches import (
    CheckExpiringBatchesUseCase,
    ExpiringBatchesResult,
)
from lotledger.application.use_cases.create_batch import CreateBatchUseCase
from lotledger.application.use_cases.expire_overdue_batches import ExpireOverdueBatchesUseCase
from lotledger.application.use_cases.process_sale import ProcessSaleResult, ProcessSaleUseCase
from lotledger.application.use_cases.receive_purchase_order import (
    ReceivePurchaseOrderResult,
    ReceivePurchaseOrderUseCase,
)
from lotledger.application.use_cases.reconcile_stock import ReconcileStockUseCase
from lotledger.application.use_cases.register_product import RegisterProductUseCase
from lotledger.application.use_cases.reserve_stock import ReserveStockUseCase

__all__ = [
    "AdjustBatchUseCase",
    "ChangeBatchStatusUseCase",
    "CheckExpiringBatchesUseCase",
    "CreateBatchUseCase",
    "ExpireOverdueBatchesUseCase",
    "ExpiringBatchesResult",
    "ProcessSaleResult",
    "ProcessSaleUseCase",
    "ReceivePurchaseOrderResult",
    "ReceivePurchaseOrderUseCase",
    "ReconcileStockUseCase",
    "RegisterProductUseCase",
    "ReserveStockUseCase",
]
