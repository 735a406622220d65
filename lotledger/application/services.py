"""
Service factory functions for dependency injection.

Wires the SQLite stores and ledger settings into the core services. Use
cases obtain their services from here unless one is injected.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from lotledger.config import get_settings
from lotledger.core.services import (
    BatchLedgerService,
    BatchNumberGenerator,
    FifoAllocator,
    SaleProcessor,
    ValuationReporter,
)

if TYPE_CHECKING:
    from lotledger.core.interfaces import (
        IBatchStore,
        IMovementStore,
        IProductStore,
        ISequenceStore,
    )


# Singleton service instances
_batch_ledger_service: BatchLedgerService | None = None
_sale_processor: SaleProcessor | None = None
_valuation_reporter: ValuationReporter | None = None


async def get_batch_ledger_service(
    batch_store: "IBatchStore | None" = None,
    product_store: "IProductStore | None" = None,
    movement_store: "IMovementStore | None" = None,
    sequence_store: "ISequenceStore | None" = None,
) -> BatchLedgerService:
    """
    Get or create BatchLedgerService.

    Any store passed in replaces the SQLite default; the result is cached
    only when built entirely from defaults.
    """
    global _batch_ledger_service

    overridden = any(
        s is not None for s in (batch_store, product_store, movement_store, sequence_store)
    )
    if _batch_ledger_service is not None and not overridden:
        return _batch_ledger_service

    # Lazy import infrastructure to avoid circular imports
    from lotledger.infrastructure.storage.sqlite import (
        get_batch_store,
        get_movement_store,
        get_product_store,
        get_sequence_store,
    )

    settings = get_settings().ledger
    service = BatchLedgerService(
        batch_store=batch_store or await get_batch_store(),
        product_store=product_store or await get_product_store(),
        movement_store=movement_store or await get_movement_store(),
        number_generator=BatchNumberGenerator(
            sequence_store or await get_sequence_store(),
            prefix=settings.batch_number_prefix,
            width=settings.batch_sequence_width,
        ),
        expiring_soon_days=settings.expiring_soon_days,
        movement_history_limit=settings.movement_history_limit,
    )

    if not overridden:
        _batch_ledger_service = service
    return service


async def get_sale_processor(batch_store: "IBatchStore | None" = None) -> SaleProcessor:
    """Get or create SaleProcessor with retry bounds from settings."""
    global _sale_processor

    if _sale_processor is not None and batch_store is None:
        return _sale_processor

    from lotledger.infrastructure.storage.sqlite import get_batch_store

    store = batch_store or await get_batch_store()
    settings = get_settings().ledger
    processor = SaleProcessor(
        batch_store=store,
        allocator=FifoAllocator(store),
        max_attempts=settings.commit_max_attempts,
        retry_delay=settings.commit_retry_delay,
        retry_max_delay=settings.commit_retry_max_delay,
    )

    if batch_store is None:
        _sale_processor = processor
    return processor


async def get_valuation_reporter(
    batch_store: "IBatchStore | None" = None,
    product_store: "IProductStore | None" = None,
) -> ValuationReporter:
    global _valuation_reporter

    overridden = batch_store is not None or product_store is not None
    if _valuation_reporter is not None and not overridden:
        return _valuation_reporter

    from lotledger.infrastructure.storage.sqlite import get_batch_store, get_product_store

    reporter = ValuationReporter(
        batch_store=batch_store or await get_batch_store(),
        product_store=product_store or await get_product_store(),
    )
    if not overridden:
        _valuation_reporter = reporter
    return reporter


def reset_services() -> None:
    """Reset all singleton services (for testing)."""
    global _batch_ledger_service, _sale_processor, _valuation_reporter
    _batch_ledger_service = None
    _sale_processor = None
    _valuation_reporter = None
