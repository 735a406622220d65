"""Tests for SQLiteSequenceStore counters."""

import asyncio

from lotledger.core.services.sequence_generator import BatchNumberGenerator


class TestSQLiteSequenceStore:
    async def test_counter_starts_at_one(self, sequence_store):
        assert await sequence_store.peek("batch:P100:260101") == 0
        assert await sequence_store.next_value("batch:P100:260101") == 1
        assert await sequence_store.next_value("batch:P100:260101") == 2
        assert await sequence_store.peek("batch:P100:260101") == 2

    async def test_keys_are_independent(self, sequence_store):
        await sequence_store.next_value("batch:P100:260101")
        assert await sequence_store.next_value("batch:P200:260101") == 1
        assert await sequence_store.next_value("batch:P100:260102") == 1

    async def test_concurrent_callers_get_distinct_values(self, sequence_store):
        values = await asyncio.gather(
            *(sequence_store.next_value("sale:260101") for _ in range(20))
        )
        assert sorted(values) == list(range(1, 21))

    async def test_generator_issues_unique_batch_numbers(self, sequence_store):
        generator = BatchNumberGenerator(sequence_store)
        numbers = await asyncio.gather(*(generator.next_batch_number("P100") for _ in range(10)))
        assert len(set(numbers)) == 10
