"""
Batch ledger service.

Owns the lifecycle of lots: receiving, single-lot debits, reservations,
administrative adjustments and status changes, plus the read models built on
them. Every write is expressed as one LedgerCommit so the lot, its movement
and the product's cached stock change together or not at all.

Layer-pure: depends on core entities, interfaces and exceptions only.
"""

from datetime import datetime, timedelta

from lotledger.config import get_logger
from lotledger.core.entities.batch import Batch, BatchStatus, to_local_naive
from lotledger.core.entities.ledger import (
    BatchDetails,
    BatchFilter,
    BatchWrite,
    CreateBatchCommand,
    ExpiredBatchRecord,
    ExpirySweepError,
    ExpirySweepResult,
    LedgerCommit,
    ProductBatchOverview,
)
from lotledger.core.entities.product import Product, StockDiscrepancy
from lotledger.core.entities.stock_movement import (
    MovementType,
    ReferenceType,
    StockMovement,
)
from lotledger.core.entities.valuation import ExpiryBucket, ExpiryStatistics
from lotledger.core.exceptions import (
    BatchNotFoundError,
    LedgerError,
    ProductNotFoundError,
    ValidationError,
)
from lotledger.core.interfaces import IBatchStore, IMovementStore, IProductStore
from lotledger.core.services.sequence_generator import BatchNumberGenerator

logger = get_logger(__name__)

# Movement recorded when a lot leaves (or re-enters) the sellable pool
STATUS_MOVEMENT_TYPES: dict[BatchStatus, MovementType] = {
    BatchStatus.ACTIVE: MovementType.ADJUSTMENT,
    BatchStatus.EXPIRED: MovementType.EXPIRED,
    BatchStatus.DAMAGED: MovementType.DAMAGE,
    BatchStatus.RETURNED: MovementType.RETURN,
}


class BatchLedgerService:
    """
    Lot-level ledger operations.

    Required interfaces for DI:
    - IBatchStore: batch reads and the atomic commit
    - IProductStore: product references and cached stock
    - IMovementStore: audit trail reads
    - BatchNumberGenerator: unique batch numbers
    """

    def __init__(
        self,
        batch_store: IBatchStore,
        product_store: IProductStore,
        movement_store: IMovementStore,
        number_generator: BatchNumberGenerator,
        expiring_soon_days: int = 30,
        movement_history_limit: int = 50,
    ):
        self._batches = batch_store
        self._products = product_store
        self._movements = movement_store
        self._numbers = number_generator
        self._expiring_soon_days = expiring_soon_days
        self._history_limit = movement_history_limit

    # --- Writes ---

    async def create_batch(self, command: CreateBatchCommand) -> Batch:
        """
        Receive a new lot.

        The lot starts active with its full quantity; the product's cached
        stock grows by the same amount and its display prices follow the lot.

        Raises:
            ValidationError: non-positive quantity or negative price.
            ProductNotFoundError: unknown product.
            SequenceUnavailableError: no batch number could be drawn.
        """
        self._validate_create(command)
        await self._require_product(command.product_id)

        commit = await self._prepare_receipt(command)
        await self._batches.commit(commit)

        batch = commit.batch_writes[0].batch
        logger.info(
            "batch_created",
            batch_id=batch.id,
            batch_number=batch.batch_number,
            product_id=command.product_id,
            quantity=command.quantity,
        )
        return batch

    async def create_batches(self, commands: list[CreateBatchCommand]) -> list[Batch]:
        """
        Receive several lots in one transaction.

        Every command is checked before any batch number is drawn; either all
        lots are created or none is.
        """
        if not commands:
            raise ValidationError("lines", "At least one lot is required")
        for command in commands:
            self._validate_create(command)
        for product_id in dict.fromkeys(c.product_id for c in commands):
            await self._require_product(product_id)

        commits = [await self._prepare_receipt(command) for command in commands]
        await self._batches.commit_many(commits)

        batches = [c.batch_writes[0].batch for c in commits]
        logger.info(
            "batches_created",
            count=len(batches),
            batch_numbers=[b.batch_number for b in batches],
        )
        return batches

    async def _prepare_receipt(self, command: CreateBatchCommand) -> LedgerCommit:
        if command.selling_price < command.cost_price:
            logger.warning(
                "selling_price_below_cost",
                product_id=command.product_id,
                cost_price=command.cost_price,
                selling_price=command.selling_price,
            )

        purchase_date = to_local_naive(command.purchase_date or datetime.now())
        batch_number = await self._numbers.next_batch_number(
            command.product_id, purchase_date.date()
        )

        batch = Batch(
            batch_number=batch_number,
            product_id=command.product_id,
            supplier_id=command.supplier_id,
            purchase_order_id=command.purchase_order_id,
            initial_quantity=command.quantity,
            current_quantity=command.quantity,
            cost_price=command.cost_price,
            selling_price=command.selling_price,
            purchase_date=purchase_date,
            expiry_date=command.expiry_date,
            notes=command.notes,
        )
        movement = StockMovement(
            product_id=command.product_id,
            batch_number=batch_number,
            movement_type=MovementType.PURCHASE,
            quantity=command.quantity,
            unit_cost=command.cost_price,
            total_cost=command.quantity * command.cost_price,
            reference_type=ReferenceType.PURCHASE_ORDER if command.purchase_order_id else None,
            reference_number=command.purchase_order_id,
            notes=command.notes,
            expiry_date=command.expiry_date,
        )

        return LedgerCommit(
            product_id=command.product_id,
            batch_writes=[BatchWrite(batch=batch)],
            movements=[movement],
            product_prices=(command.cost_price, command.selling_price),
        )

    async def reduce_quantity(
        self,
        batch_id: int,
        quantity: int,
        reference_number: str | None = None,
    ) -> Batch:
        """Debit units from one specific lot (outside FIFO)."""
        batch = await self.get_batch(batch_id)
        working = batch.model_copy()
        working.reduce_quantity(quantity)

        movement = StockMovement(
            product_id=batch.product_id,
            batch_id=batch.id,
            batch_number=batch.batch_number,
            movement_type=MovementType.SALE,
            quantity=-quantity,
            unit_cost=batch.cost_price,
            total_cost=quantity * batch.cost_price,
            reference_type=ReferenceType.SALE,
            reference_number=reference_number,
            expiry_date=batch.expiry_date,
        )
        await self._batches.commit(
            LedgerCommit(
                product_id=batch.product_id,
                batch_writes=[BatchWrite(batch=working, expected_version=batch.version)],
                movements=[movement],
            )
        )

        logger.info(
            "batch_quantity_reduced",
            batch_number=batch.batch_number,
            quantity=quantity,
            remaining=working.current_quantity,
        )
        return working

    async def reserve_quantity(self, batch_id: int, quantity: int) -> Batch:
        """Hold units against future allocation. Product stock is unchanged."""
        batch = await self.get_batch(batch_id)
        working = batch.model_copy()
        working.reserve_quantity(quantity)
        await self._write_batch_only(batch, working)
        logger.info(
            "batch_quantity_reserved",
            batch_number=batch.batch_number,
            quantity=quantity,
            reserved=working.reserved_quantity,
        )
        return working

    async def release_reserved_quantity(self, batch_id: int, quantity: int) -> Batch:
        batch = await self.get_batch(batch_id)
        working = batch.model_copy()
        working.release_reserved_quantity(quantity)
        await self._write_batch_only(batch, working)
        logger.info(
            "batch_reservation_released",
            batch_number=batch.batch_number,
            quantity=quantity,
            reserved=working.reserved_quantity,
        )
        return working

    async def adjust_quantity(
        self,
        batch_id: int,
        delta: int,
        reason: str = "Manual adjustment",
        notes: str | None = None,
    ) -> Batch:
        """
        Administrative correction of a lot's quantity.

        Raises:
            ValidationError: zero delta, or the result leaves [reserved, initial].
            InvalidStatusTransitionError: the lot is expired, damaged or returned.
        """
        batch = await self.get_batch(batch_id)
        working = batch.model_copy()
        working.adjust_quantity(delta)

        movement = StockMovement(
            product_id=batch.product_id,
            batch_id=batch.id,
            batch_number=batch.batch_number,
            movement_type=MovementType.ADJUSTMENT,
            quantity=working.stock_contribution() - batch.stock_contribution(),
            unit_cost=batch.cost_price,
            total_cost=abs(delta) * batch.cost_price,
            reference_type=ReferenceType.ADJUSTMENT,
            reference_number=f"ADJ-{batch.batch_number}",
            reason=reason,
            notes=notes,
            expiry_date=batch.expiry_date,
        )
        await self._batches.commit(
            LedgerCommit(
                product_id=batch.product_id,
                batch_writes=[BatchWrite(batch=working, expected_version=batch.version)],
                movements=[movement],
            )
        )

        logger.info(
            "batch_quantity_adjusted",
            batch_number=batch.batch_number,
            delta=delta,
            previous_quantity=batch.current_quantity,
            new_quantity=working.current_quantity,
            reason=reason,
        )
        return working

    async def set_status(
        self,
        batch_id: int,
        status: BatchStatus,
        reason: str | None = None,
    ) -> Batch:
        """
        Change a lot's status explicitly.

        Quantities are untouched. Units of a lot leaving active drop out of
        the product's cached stock (and come back on reactivation), each
        recorded as a movement.
        """
        batch = await self.get_batch(batch_id)
        if batch.status == status:
            return batch
        working = batch.model_copy()
        working.change_status(status)
        await self._commit_status_change(batch, working, reason)
        return working

    async def expire_overdue(self, as_of: datetime | None = None) -> ExpirySweepResult:
        """
        Persist the expired status for active lots whose expiry day has passed.

        Caller-triggered only. Each lot is committed on its own; failures are
        collected per lot and the sweep carries on.
        """
        as_of = as_of or datetime.now()
        overdue = await self._batches.list_overdue(as_of.date())
        result = ExpirySweepResult(total_checked=len(overdue))

        for batch in overdue:
            try:
                working = batch.model_copy()
                working.change_status(BatchStatus.EXPIRED)
                await self._commit_status_change(batch, working, "Expired")
            except LedgerError as e:
                logger.error(
                    "batch_expiry_failed",
                    batch_number=batch.batch_number,
                    error=e.message,
                )
                result.errors.append(
                    ExpirySweepError(
                        batch_id=batch.id or 0,
                        batch_number=batch.batch_number,
                        error=e.message,
                    )
                )
                continue

            result.batches_updated.append(
                ExpiredBatchRecord(
                    batch_id=batch.id or 0,
                    batch_number=batch.batch_number,
                    product_id=batch.product_id,
                    quantity_removed=batch.current_quantity,
                )
            )

        logger.info(
            "expiry_sweep_completed",
            total_checked=result.total_checked,
            updated=len(result.batches_updated),
            errors=len(result.errors),
        )
        return result

    async def reconcile_product_stock(self, product_id: str) -> StockDiscrepancy:
        """Reset the product's cached stock to the sum of its active lots."""
        await self._require_product(product_id)
        discrepancy = await self._products.reconcile_stock(product_id)
        if discrepancy.drift:
            logger.warning(
                "product_stock_reconciled",
                product_id=product_id,
                cached_stock=discrepancy.cached_stock,
                batch_stock=discrepancy.batch_stock,
            )
        return discrepancy

    async def check_stock_consistency(self) -> list[StockDiscrepancy]:
        discrepancies = await self._products.list_stock_discrepancies()
        if discrepancies:
            logger.warning("stock_discrepancies_found", count=len(discrepancies))
        return discrepancies

    # --- Reads ---

    async def get_batch(self, batch_id: int) -> Batch:
        batch = await self._batches.get_batch(batch_id)
        if batch is None:
            raise BatchNotFoundError(batch_id)
        return batch

    async def get_batch_details(self, identifier: int | str) -> BatchDetails:
        """Look up by id or batch number; includes the latest movements."""
        if isinstance(identifier, int):
            batch = await self._batches.get_batch(identifier)
        else:
            batch = await self._batches.get_by_number(identifier)
        if batch is None:
            raise BatchNotFoundError(identifier)

        movements = await self._movements.get_batch_movements(
            batch.batch_number, limit=self._history_limit
        )
        return BatchDetails(batch=batch, movements=movements)

    async def list_batches(
        self,
        filters: BatchFilter | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Batch], int]:
        return await self._batches.list_batches(filters or BatchFilter(), limit, offset)

    async def list_product_batches(
        self, product_id: str, status: BatchStatus | None = None
    ) -> list[Batch]:
        """All lots of a product, FIFO order."""
        await self._require_product(product_id)
        return await self._batches.list_by_product(
            product_id, status.value if status else None
        )

    async def get_product_batch_overview(
        self, product_id: str, as_of: datetime | None = None
    ) -> ProductBatchOverview:
        """Sellable lots of a product with quantity and price range summary."""
        product = await self._require_product(product_id)
        batches = await self._batches.list_allocatable(product_id, as_of or datetime.now())

        cost_prices = [b.cost_price for b in batches]
        selling_prices = [b.selling_price for b in batches]
        return ProductBatchOverview(
            product_id=product.id,
            product_name=product.name,
            barcode=product.barcode,
            total_batches=len(batches),
            total_quantity=sum(b.current_quantity for b in batches),
            total_available=sum(b.available_quantity for b in batches),
            min_cost_price=min(cost_prices) if cost_prices else None,
            max_cost_price=max(cost_prices) if cost_prices else None,
            min_selling_price=min(selling_prices) if selling_prices else None,
            max_selling_price=max(selling_prices) if selling_prices else None,
            batches=batches,
        )

    async def list_expiring(
        self,
        within_days: int | None = None,
        as_of: datetime | None = None,
    ) -> list[Batch]:
        """Active in-stock lots expiring between today and today + within_days."""
        days = self._expiring_soon_days if within_days is None else within_days
        if days < 0:
            raise ValidationError("days", "Must not be negative", days)
        today = (as_of or datetime.now()).date()
        return await self._batches.list_expiring(today, today + timedelta(days=days))

    async def expiry_statistics(self, as_of: datetime | None = None) -> ExpiryStatistics:
        as_of = as_of or datetime.now()
        soon_limit = as_of.date() + timedelta(days=self._expiring_soon_days)
        stats = ExpiryStatistics(expiring_within_days=self._expiring_soon_days)

        for batch in await self._batches.list_active_in_stock():
            _add_to_bucket(stats.total_active, batch)
            if batch.is_expired(as_of):
                _add_to_bucket(stats.expired, batch)
            elif batch.expiry_date is not None and batch.expiry_date <= soon_limit:
                _add_to_bucket(stats.expiring_soon, batch)

        return stats

    async def get_product_movements(
        self,
        product_id: str,
        movement_type: MovementType | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[StockMovement]:
        await self._require_product(product_id)
        return await self._movements.get_movements(
            product_id,
            movement_type=movement_type,
            start=start,
            end=end,
            limit=limit or self._history_limit,
            offset=offset,
        )

    # --- Internals ---

    async def _require_product(self, product_id: str) -> Product:
        product = await self._products.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def _write_batch_only(self, before: Batch, after: Batch) -> None:
        await self._batches.commit(
            LedgerCommit(
                product_id=before.product_id,
                batch_writes=[BatchWrite(batch=after, expected_version=before.version)],
            )
        )

    async def _commit_status_change(
        self, before: Batch, after: Batch, reason: str | None
    ) -> None:
        movements: list[StockMovement] = []
        stock_change = after.stock_contribution() - before.stock_contribution()
        if stock_change:
            movements.append(
                StockMovement(
                    product_id=before.product_id,
                    batch_id=before.id,
                    batch_number=before.batch_number,
                    movement_type=STATUS_MOVEMENT_TYPES[after.status],
                    quantity=stock_change,
                    unit_cost=before.cost_price,
                    total_cost=abs(stock_change) * before.cost_price,
                    reason=reason,
                    reference_number=f"STATUS-{before.batch_number}",
                    expiry_date=before.expiry_date,
                )
            )

        await self._batches.commit(
            LedgerCommit(
                product_id=before.product_id,
                batch_writes=[BatchWrite(batch=after, expected_version=before.version)],
                movements=movements,
            )
        )

        logger.info(
            "batch_status_changed",
            batch_number=before.batch_number,
            previous_status=before.status.value,
            new_status=after.status.value,
            stock_change=stock_change,
            reason=reason,
        )

    @staticmethod
    def _validate_create(command: CreateBatchCommand) -> None:
        if command.quantity < 1:
            raise ValidationError("quantity", "Must be at least 1", command.quantity)
        if command.cost_price < 0:
            raise ValidationError("cost_price", "Must not be negative", command.cost_price)
        if command.selling_price < 0:
            raise ValidationError(
                "selling_price", "Must not be negative", command.selling_price
            )


def _add_to_bucket(bucket: ExpiryBucket, batch: Batch) -> None:
    bucket.total_batches += 1
    bucket.total_quantity += batch.current_quantity
    bucket.total_value += batch.batch_value
