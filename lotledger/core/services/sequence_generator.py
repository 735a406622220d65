"""
Batch number generation.

Batch numbers are date-coded and drawn from a per-product, per-day counter:
BATCH2601150002-P100 is the second lot of product P100 received on 2026-01-15.
"""

from datetime import date

from lotledger.config import get_logger
from lotledger.core.interfaces.sequence_store import ISequenceStore

logger = get_logger(__name__)


def batch_sequence_key(product_id: str, on_date: date) -> str:
    """Counter key; the date component resets the sequence every day."""
    return f"batch:{product_id}:{on_date:%y%m%d}"


def format_batch_number(
    prefix: str,
    on_date: date,
    sequence: int,
    product_id: str,
    width: int = 3,
) -> str:
    return f"{prefix}{on_date:%y%m%d}{sequence:0{width}d}-{product_id}"


class BatchNumberGenerator:
    """Issues unique batch numbers from an injected counter store."""

    def __init__(
        self,
        sequence_store: ISequenceStore,
        prefix: str = "BATCH",
        width: int = 3,
    ) -> None:
        self._sequences = sequence_store
        self._prefix = prefix
        self._width = width

    async def next_batch_number(self, product_id: str, on_date: date | None = None) -> str:
        """
        Draw the next batch number for a product.

        Raises:
            SequenceUnavailableError: the counter could not be incremented;
                no number is invented in that case.
        """
        on_date = on_date or date.today()
        sequence = await self._sequences.next_value(batch_sequence_key(product_id, on_date))
        batch_number = format_batch_number(
            self._prefix, on_date, sequence, product_id, self._width
        )
        logger.debug("batch_number_issued", product_id=product_id, batch_number=batch_number)
        return batch_number
