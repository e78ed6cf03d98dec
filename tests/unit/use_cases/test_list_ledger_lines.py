"""Unit tests for ListLedgerLines use case"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from datetime import datetime
from decimal import Decimal

from src.app.use_cases.settlement.list_ledger_lines import ListLedgerLines
from src.domain.ledger_line import LedgerLine, LedgerDirection


class TestListLedgerLines:
    """Test suite for ListLedgerLines use case"""

    @pytest.fixture
    def mock_ledger_repo(self):
        return AsyncMock()

    @pytest.fixture
    def use_case(self, mock_ledger_repo):
        return ListLedgerLines(ledger_repo=mock_ledger_repo)

    def create_mock_line(self, id: int, direction: LedgerDirection, amount: Decimal) -> MagicMock:
        line = MagicMock(spec=LedgerLine)
        line.id = id
        line.direction = direction
        line.credit_amount = amount
        line.resulting_balance = -amount
        line.resulting_limit = Decimal("500")
        line.actor = "cashier_1"
        line.memo = None
        line.payment_method = "Cash"
        line.received_at = datetime(2024, 3, 1, 10)
        line.created_at = datetime(2024, 3, 1, 10, 0, 5)
        return line

    @pytest.mark.asyncio
    async def test_lists_lines_with_pagination(self, use_case, mock_ledger_repo):
        lines = [
            self.create_mock_line(2, LedgerDirection.INWARD, Decimal("200")),
            self.create_mock_line(1, LedgerDirection.OUTWARD, Decimal("75")),
        ]
        mock_ledger_repo.list_by_customer.return_value = (lines, 12)

        result = await use_case.execute(customer_id=42, limit=2, offset=4)

        assert result.is_ok()
        response = result.value
        assert response.total == 12
        assert response.limit == 2
        assert response.offset == 4
        assert [line.id for line in response.lines] == [2, 1]
        assert response.lines[0].direction == "inward"
        assert response.lines[1].direction == "outward"
        mock_ledger_repo.list_by_customer.assert_called_once_with(customer_id=42, limit=2, offset=4)

    @pytest.mark.asyncio
    async def test_empty_ledger(self, use_case, mock_ledger_repo):
        mock_ledger_repo.list_by_customer.return_value = ([], 0)

        result = await use_case.execute(customer_id=42)

        assert result.is_ok()
        assert result.value.lines == []
        assert result.value.total == 0
