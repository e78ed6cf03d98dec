"""Unit tests for CheckEligibility use case"""

import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.settlement.check_eligibility import CheckEligibility
from src.domain.charge import Charge
from src.domain.customer import Customer
from src.domain.customer_account import CustomerAccount


def make_charge(charge_id, completed_at, amount="100"):
    return Charge(id=charge_id, customer_id=3, amount=Decimal(amount), completed_at=completed_at)


@pytest.fixture
def build(fixed_clock):
    def _build(policy, account, charges=()):
        customer_repo = MagicMock()
        customer_repo.get_by_id = AsyncMock(
            return_value=Customer(id=3, name="Eligible Co", billing_policy=policy)
        )
        account_repo = MagicMock()
        account_repo.get_by_customer_id = AsyncMock(return_value=account)
        charge_repo = MagicMock()
        charge_repo.list_unpaid = AsyncMock(return_value=list(charges))
        return CheckEligibility(customer_repo, account_repo, charge_repo, clock=fixed_clock)
    return _build


@pytest.mark.asyncio
class TestCheckEligibility:
    async def test_inactive_account_is_ineligible(self, build):
        use_case = build("postpaid", CustomerAccount(customer_id=3, remaining_credit_limit=Decimal("100"), is_active=False))

        result = await use_case.execute(3)

        assert result.is_ok()
        assert result.value.eligible is False
        assert result.value.requires_payment is True

    async def test_postpaid_with_available_credit(self, build):
        use_case = build("postpaid", CustomerAccount(customer_id=3, remaining_credit_limit=Decimal("100")))

        result = await use_case.execute(3)

        assert result.value.eligible is True

    async def test_prepaid_with_exhausted_credit(self, build):
        use_case = build("prepaid", CustomerAccount(customer_id=3, remaining_credit_limit=Decimal("0")))

        result = await use_case.execute(3)

        assert result.value.eligible is False
        assert "Credit limit exhausted" in result.value.reason

    async def test_day_limit_overdue_is_ineligible(self, build):
        use_case = build(
            "day_limit",
            CustomerAccount(customer_id=3, day_limit=2),
            [make_charge(1, datetime(2024, 3, 1, 9))],
        )

        result = await use_case.execute(3)

        assert result.value.eligible is False
        assert "overdue" in result.value.reason

    async def test_day_limit_under_limit_is_eligible(self, build):
        use_case = build(
            "day_limit",
            CustomerAccount(customer_id=3, day_limit=2),
            [make_charge(1, datetime(2024, 3, 9, 9)), make_charge(2, datetime(2024, 3, 9, 19))],
        )
        # one unpaid day only: still eligible
        assert (await use_case.execute(3)).value.eligible is True

        use_case = build(
            "day_limit",
            CustomerAccount(customer_id=3, day_limit=3),
            [make_charge(1, datetime(2024, 3, 8, 9)), make_charge(2, datetime(2024, 3, 9, 9)),
             make_charge(3, datetime(2024, 3, 9, 10))],
        )
        assert (await use_case.execute(3)).value.eligible is True

        use_case = build(
            "day_limit",
            CustomerAccount(customer_id=3, day_limit=2),
            [make_charge(1, datetime(2024, 3, 9, 9)), make_charge(2, datetime(2024, 3, 9, 9))],
        )
        assert (await use_case.execute(3)).value.unpaid_days == 1

    async def test_day_limit_reached_without_order_today(self, build):
        use_case = build(
            "day_limit",
            CustomerAccount(customer_id=3, day_limit=5),
            [make_charge(i, datetime(2024, 3, 5 + i, 9)) for i in range(0, 5)],
        )

        result = await use_case.execute(3)

        assert result.value.unpaid_days == 5
        assert result.value.eligible is False
        assert result.value.requires_payment is True

    async def test_day_limit_reached_by_distinct_days(self, build):
        use_case = build(
            "day_limit",
            CustomerAccount(customer_id=3, day_limit=2),
            [make_charge(1, datetime(2024, 3, 9, 9)), make_charge(2, datetime(2024, 3, 11, 9))],
        )

        result = await use_case.execute(3)

        assert result.value.unpaid_days == 2
        assert result.value.eligible is False
        assert "Day limit reached" in result.value.reason

    async def test_day_limit_reached_with_order_today_stays_eligible(self, build):
        use_case = build(
            "day_limit",
            CustomerAccount(customer_id=3, day_limit=5),
            [make_charge(i, datetime(2024, 3, 6 + i, 9)) for i in range(0, 5)],
        )

        result = await use_case.execute(3)

        assert result.value.unpaid_days == 5
        assert result.value.eligible is True

    async def test_day_limit_zero_uses_credit_limit(self, build):
        use_case = build(
            "day_limit",
            CustomerAccount(customer_id=3, day_limit=0, remaining_credit_limit=Decimal("100")),
            [make_charge(1, datetime(2024, 1, 1, 9))],
        )

        result = await use_case.execute(3)

        assert result.value.eligible is True

    async def test_day_limit_zero_with_exhausted_credit_is_ineligible(self, build):
        use_case = build("day_limit", CustomerAccount(customer_id=3, day_limit=0))

        result = await use_case.execute(3)

        assert result.value.eligible is False
        assert result.value.reason == "Credit limit exhausted"

    async def test_unknown_customer(self, fixed_clock):
        customer_repo = MagicMock()
        customer_repo.get_by_id = AsyncMock(return_value=None)

        result = await CheckEligibility(customer_repo, MagicMock(), MagicMock(), clock=fixed_clock).execute(3)

        assert result.is_err()
        assert result.error.code == "CUSTOMER_NOT_FOUND"
