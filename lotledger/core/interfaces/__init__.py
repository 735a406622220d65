"""Core interfaces (ports) for dependency injection."""

from lotledger.core.interfaces.batch_store import IBatchStore
from lotledger.core.interfaces.movement_store import IMovementStore
from lotledger.core.interfaces.product_store import IProductStore
from lotledger.core.interfaces.sequence_store import ISequenceStore

__all__ = [
    "IBatchStore",
    "IMovementStore",
    "IProductStore",
    "ISequenceStore",
]
