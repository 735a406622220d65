"""
Check Expiring Batches Use Case.

Lists active lots expiring within a look-ahead window and flags the ones
inside the critical window.
"""

from dataclasses import dataclass, field
from datetime import datetime

from lotledger.application.dto.responses import BatchResponse, ExpiringBatchesResponse
from lotledger.config import get_logger, get_settings
from lotledger.core.entities.batch import Batch
from lotledger.core.services.batch_ledger import BatchLedgerService

logger = get_logger(__name__)


@dataclass
class ExpiringBatchesResult:
    within_days: int
    critical_days: int
    as_of: datetime
    batches: list[Batch] = field(default_factory=list)

    @property
    def critical(self) -> list[Batch]:
        return [
            b
            for b in self.batches
            if (days := b.days_until_expiry(self.as_of)) is not None
            and days <= self.critical_days
        ]


class CheckExpiringBatchesUseCase:
    def __init__(self, ledger: BatchLedgerService | None = None):
        self._ledger = ledger

    async def _get_ledger(self) -> BatchLedgerService:
        if self._ledger is None:
            from lotledger.application.services import get_batch_ledger_service

            self._ledger = await get_batch_ledger_service()
        return self._ledger

    async def execute(self, within_days: int | None = None) -> ExpiringBatchesResult:
        """
        Find lots expiring soon.

        Args:
            within_days: Look-ahead window (defaults to the configured window).
        """
        settings = get_settings().ledger
        days = settings.expiring_soon_days if within_days is None else within_days
        as_of = datetime.now()

        ledger = await self._get_ledger()
        batches = await ledger.list_expiring(days, as_of)
        result = ExpiringBatchesResult(
            within_days=days,
            critical_days=settings.critical_expiry_days,
            as_of=as_of,
            batches=batches,
        )
        if result.critical:
            logger.warning(
                "batches_expiring_critically",
                count=len(result.critical),
                critical_days=settings.critical_expiry_days,
            )
        return result

    def to_response(self, result: ExpiringBatchesResult) -> ExpiringBatchesResponse:
        return ExpiringBatchesResponse(
            within_days=result.within_days,
            critical_days=result.critical_days,
            critical_count=len(result.critical),
            batches=[BatchResponse.from_entity(b, result.as_of) for b in result.batches],
        )
