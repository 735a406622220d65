"""Tests for CheckExpiringBatchesUseCase."""

from datetime import date, timedelta
from unittest.mock import AsyncMock

from lotledger.application.use_cases.check_expiring_batches import CheckExpiringBatchesUseCase


class TestCheckExpiringBatchesUseCase:
    async def test_defaults_to_configured_window(self):
        ledger = AsyncMock()
        ledger.list_expiring.return_value = []
        use_case = CheckExpiringBatchesUseCase(ledger=ledger)

        result = await use_case.execute()

        assert result.within_days == 30
        assert ledger.list_expiring.call_args[0][0] == 30

    async def test_flags_critical_lots(self, lot_a, lot_b):
        today = date.today()
        lot_a.expiry_date = today + timedelta(days=3)
        lot_b.expiry_date = today + timedelta(days=20)
        ledger = AsyncMock()
        ledger.list_expiring.return_value = [lot_a, lot_b]
        use_case = CheckExpiringBatchesUseCase(ledger=ledger)

        result = await use_case.execute(25)
        response = use_case.to_response(result)

        assert [b.id for b in result.critical] == [lot_a.id]
        assert response.within_days == 25
        assert response.critical_count == 1
        assert response.batches[0].days_until_expiry == 3
