"""
FIFO allocation planning.

Pure planning: decides which lots a sale draws from and how much from each,
oldest purchase first. Nothing is written here.
"""

from collections.abc import Iterable
from datetime import datetime

from lotledger.core.entities.batch import Batch
from lotledger.core.entities.sale import AllocationLine
from lotledger.core.exceptions import InsufficientStockError, ValidationError
from lotledger.core.interfaces.batch_store import IBatchStore


def fifo_key(batch: Batch) -> tuple[datetime, int]:
    """Oldest purchase first; ties go to the earlier-created lot."""
    return (batch.purchase_date, batch.id or 0)


def plan_allocation(
    product_id: str,
    batches: Iterable[Batch],
    requested: int,
    as_of: datetime | None = None,
) -> list[AllocationLine]:
    """
    Plan a FIFO allocation of `requested` units over `batches`.

    Only active, unexpired lots with available units take part. The plan
    covers the full quantity or is not produced at all.

    Raises:
        ValidationError: requested is not positive.
        InsufficientStockError: the eligible pool holds fewer units.
    """
    if requested <= 0:
        raise ValidationError("quantity", "Must be a positive quantity", requested)

    as_of = as_of or datetime.now()
    pool = sorted((b for b in batches if b.is_allocatable(as_of)), key=fifo_key)

    plan: list[AllocationLine] = []
    remaining = requested
    for batch in pool:
        if remaining == 0:
            break
        take = min(batch.available_quantity, remaining)
        plan.append(AllocationLine(batch=batch, quantity=take))
        remaining -= take

    if remaining > 0:
        available = sum(b.available_quantity for b in pool)
        raise InsufficientStockError(product_id, requested, available)

    return plan


class FifoAllocator:
    """Loads a product's candidate lots and plans against them."""

    def __init__(self, batch_store: IBatchStore) -> None:
        self._batch_store = batch_store

    async def plan(
        self,
        product_id: str,
        requested: int,
        as_of: datetime | None = None,
    ) -> list[AllocationLine]:
        if requested <= 0:
            raise ValidationError("quantity", "Must be a positive quantity", requested)
        as_of = as_of or datetime.now()
        candidates = await self._batch_store.list_allocatable(product_id, as_of)
        return plan_allocation(product_id, candidates, requested, as_of)
