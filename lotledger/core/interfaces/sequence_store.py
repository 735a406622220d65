"""Abstract interface for named monotonically increasing counters."""

from abc import ABC, abstractmethod


class ISequenceStore(ABC):
    """Atomic counters with create-on-first-use semantics."""

    @abstractmethod
    async def next_value(self, key: str) -> int:
        """
        Atomically increment the named counter and return the new value.

        Counters start at 0, so the first call for a key returns 1. Two calls
        for the same key never return the same value.

        Raises:
            SequenceUnavailableError: the counter store could not be updated.
        """
        pass

    @abstractmethod
    async def peek(self, key: str) -> int:
        """Current value without incrementing (0 if the counter does not exist)."""
        pass
