"""
FIFO sale processing.

A sale plans its lots, debits each planned lot on a working copy, and
commits every lot write, movement and the product stock decrement in one
transaction guarded by lot versions. A version conflict means another writer
got there first: nothing was applied, so the sale is planned again against
fresh state and retried. A multi-product bill stages every product this way
and commits them together.
"""

from datetime import datetime
from typing import Any

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from lotledger.config import get_logger, ledger_context
from lotledger.core.entities.ledger import BatchWrite, LedgerCommit
from lotledger.core.entities.sale import SaleAllocationResult, SaleLine
from lotledger.core.entities.stock_movement import (
    MovementType,
    ReferenceType,
    StockMovement,
)
from lotledger.core.exceptions import ConcurrentModificationError, ValidationError
from lotledger.core.interfaces.batch_store import IBatchStore
from lotledger.core.services.fifo_allocator import FifoAllocator

logger = get_logger(__name__)


class SaleProcessor:
    """
    Sells product quantities across lots in FIFO order.

    Required interfaces for DI:
    - IBatchStore: the atomic commit
    - FifoAllocator: planning against current lot state
    """

    def __init__(
        self,
        batch_store: IBatchStore,
        allocator: FifoAllocator,
        max_attempts: int = 5,
        retry_delay: float = 0.05,
        retry_max_delay: float = 1.0,
    ):
        self._batches = batch_store
        self._allocator = allocator
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._retry_max_delay = retry_max_delay

    def _get_retry_decorator(self) -> Any:
        """Retry only on version conflicts; every other error surfaces at once."""
        return retry(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(
                multiplier=self._retry_delay,
                min=self._retry_delay,
                max=self._retry_max_delay,
            ),
            retry=retry_if_exception_type(ConcurrentModificationError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "ledger_commit_conflict",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def sell(
        self,
        product_id: str,
        quantity: int,
        reference_number: str,
        notes: str | None = None,
        as_of: datetime | None = None,
    ) -> SaleAllocationResult:
        """
        Sell `quantity` units of a product, oldest lots first.

        Raises:
            ValidationError: quantity is not positive.
            InsufficientStockError: the sellable pool is too small; nothing changes.
            ConcurrentModificationError: conflicts persisted past the last attempt.
        """
        if quantity <= 0:
            raise ValidationError("quantity", "Must be a positive quantity", quantity)

        attempts = 0

        async def attempt() -> SaleAllocationResult:
            nonlocal attempts
            attempts += 1
            return await self._sell_once(product_id, quantity, reference_number, notes, as_of)

        with ledger_context(product_id=product_id, reference_number=reference_number):
            result = await self._get_retry_decorator()(attempt)()
            result.attempts = attempts

            logger.info(
                "sale_committed",
                quantity=result.quantity_sold,
                batches=len(result.lines),
                total_cost=result.total_cost,
                total_revenue=result.total_revenue,
                attempts=attempts,
            )
            return result

    async def sell_many(
        self,
        lines: list[tuple[str, int]],
        reference_number: str,
        notes: str | None = None,
    ) -> list[SaleAllocationResult]:
        """
        Sell several products under one reference, all or nothing.

        Lines naming the same product are merged, keeping first-appearance
        order. Every product is planned, then all lot writes commit in a single
        transaction; a short item or a persistent conflict leaves every
        product untouched. Conflicts re-plan the whole bill.
        """
        if not lines:
            raise ValidationError("items", "At least one item is required")

        merged: dict[str, int] = {}
        for product_id, quantity in lines:
            if quantity <= 0:
                raise ValidationError("quantity", "Must be a positive quantity", quantity)
            merged[product_id] = merged.get(product_id, 0) + quantity

        attempts = 0

        async def attempt() -> list[SaleAllocationResult]:
            nonlocal attempts
            attempts += 1
            commits: list[LedgerCommit] = []
            results: list[SaleAllocationResult] = []
            for product_id, quantity in merged.items():
                commit, result = await self._build_sale(
                    product_id, quantity, reference_number, notes, None
                )
                commits.append(commit)
                results.append(result)
            await self._batches.commit_many(commits)
            return results

        with ledger_context(reference_number=reference_number):
            results = await self._get_retry_decorator()(attempt)()
            for result in results:
                result.attempts = attempts

            logger.info(
                "bill_committed",
                products=len(results),
                total_cost=sum(r.total_cost for r in results),
                total_revenue=sum(r.total_revenue for r in results),
                attempts=attempts,
            )
            return results

    async def _sell_once(
        self,
        product_id: str,
        quantity: int,
        reference_number: str,
        notes: str | None,
        as_of: datetime | None,
    ) -> SaleAllocationResult:
        commit, result = await self._build_sale(
            product_id, quantity, reference_number, notes, as_of
        )
        await self._batches.commit(commit)
        return result

    async def _build_sale(
        self,
        product_id: str,
        quantity: int,
        reference_number: str,
        notes: str | None,
        as_of: datetime | None,
    ) -> tuple[LedgerCommit, SaleAllocationResult]:
        """Plan against current lot state and stage the writes, without committing."""
        plan = await self._allocator.plan(product_id, quantity, as_of)

        writes: list[BatchWrite] = []
        movements: list[StockMovement] = []
        lines: list[SaleLine] = []

        for step in plan:
            snapshot = step.batch
            working = snapshot.model_copy()
            working.reduce_quantity(step.quantity)
            writes.append(BatchWrite(batch=working, expected_version=snapshot.version))

            movements.append(
                StockMovement(
                    product_id=product_id,
                    batch_id=snapshot.id,
                    batch_number=snapshot.batch_number,
                    movement_type=MovementType.SALE,
                    quantity=-step.quantity,
                    unit_cost=snapshot.cost_price,
                    total_cost=step.quantity * snapshot.cost_price,
                    reference_type=ReferenceType.SALE,
                    reference_number=reference_number,
                    notes=notes,
                    expiry_date=snapshot.expiry_date,
                )
            )
            lines.append(
                SaleLine(
                    batch_id=snapshot.id or 0,
                    batch_number=snapshot.batch_number,
                    quantity=step.quantity,
                    unit_cost=snapshot.cost_price,
                    unit_price=snapshot.selling_price,
                )
            )

        commit = LedgerCommit(product_id=product_id, batch_writes=writes, movements=movements)
        result = SaleAllocationResult(
            product_id=product_id,
            reference_number=reference_number,
            lines=lines,
            movements=movements,
        )
        return commit, result
