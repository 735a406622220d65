"""
Core business logic services.

Layer-pure services that depend only on:
- lotledger/core/entities/*
- lotledger/core/interfaces/*
- lotledger/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from lotledger.core.services.batch_ledger import BatchLedgerService
from lotledger.core.services.fifo_allocator import FifoAllocator, plan_allocation
from lotledger.core.services.sale_processor import SaleProcessor
from lotledger.core.services.sequence_generator import (
    BatchNumberGenerator,
    format_batch_number,
)
from lotledger.core.services.valuation_reporter import (
    ValuationReporter,
    summarize_valuation,
    value_product,
)

__all__ = [
    # Ledger
    "BatchLedgerService",
    # Numbering
    "BatchNumberGenerator",
    "format_batch_number",
    # FIFO
    "FifoAllocator",
    "plan_allocation",
    # Sales
    "SaleProcessor",
    # Valuation
    "ValuationReporter",
    "summarize_valuation",
    "value_product",
]
