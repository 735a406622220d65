"""Abstract interface for batch storage."""

from abc import ABC, abstractmethod
from datetime import date, datetime

from lotledger.core.entities.batch import Batch
from lotledger.core.entities.ledger import BatchFilter, LedgerCommit


class IBatchStore(ABC):
    """Interface for batch persistence and atomic ledger commits."""

    @abstractmethod
    async def commit(self, commit: LedgerCommit) -> LedgerCommit:
        """
        Apply a ledger write-set atomically.

        Inserts new batches, updates existing ones only if their stored
        version still equals the expected version, records movements with
        product stock snapshots, and moves the product's cached stock.

        The product's stock moves by the change in its active lots' quantities;
        the movements must add up to exactly that change.

        Raises:
            ConcurrentModificationError: a batch changed since it was read;
                nothing is applied.
            ConservationViolationError: the movements disagree with the lots
                written; nothing is applied.
        """
        pass

    @abstractmethod
    async def commit_many(self, commits: list[LedgerCommit]) -> list[LedgerCommit]:
        """
        Apply several write-sets in one transaction, in order.

        Either every commit lands or none does; raises as `commit`.
        """
        pass

    @abstractmethod
    async def get_batch(self, batch_id: int) -> Batch | None:
        """Get batch by ID."""
        pass

    @abstractmethod
    async def get_by_number(self, batch_number: str) -> Batch | None:
        """Get batch by its unique batch number."""
        pass

    @abstractmethod
    async def list_allocatable(self, product_id: str, as_of: datetime) -> list[Batch]:
        """Active batches with available units and not expired as of `as_of`, FIFO order."""
        pass

    @abstractmethod
    async def list_by_product(
        self, product_id: str, status: str | None = None
    ) -> list[Batch]:
        """All batches of a product in FIFO order (purchase date, then creation)."""
        pass

    @abstractmethod
    async def list_batches(
        self,
        filters: BatchFilter,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Batch], int]:
        """Filtered, newest-first page of batches plus the total match count."""
        pass

    @abstractmethod
    async def list_expiring(
        self, start: date, end: date, limit: int = 500
    ) -> list[Batch]:
        """Active in-stock batches whose expiry date falls in [start, end], soonest first."""
        pass

    @abstractmethod
    async def list_overdue(self, before: date, limit: int = 500) -> list[Batch]:
        """Active in-stock batches whose expiry date is before `before`."""
        pass

    @abstractmethod
    async def list_active_in_stock(self, product_id: str | None = None) -> list[Batch]:
        """Batches with status active and current quantity > 0."""
        pass
