"""Unit tests for PreviewPayment use case"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.settlement.preview_payment import PreviewPayment
from src.domain.charge import Charge
from src.domain.customer import Customer
from src.domain.customer_account import CustomerAccount


def make_charge(charge_id, amount, completed_at):
    return Charge(id=charge_id, customer_id=8, amount=Decimal(amount), completed_at=completed_at)


@pytest.fixture
def repos():
    customer_repo = MagicMock()
    account_repo = MagicMock()
    account_repo.update = AsyncMock()
    account_repo.upsert_defaults = AsyncMock()
    charge_repo = MagicMock()
    charge_repo.mark_paid = AsyncMock()
    return customer_repo, account_repo, charge_repo


def given(repos, policy, account, charges):
    customer_repo, account_repo, charge_repo = repos
    customer_repo.get_by_id = AsyncMock(return_value=Customer(id=8, name="Preview Co", billing_policy=policy))
    account_repo.get_by_customer_id = AsyncMock(return_value=account)
    charge_repo.list_unpaid = AsyncMock(return_value=charges)
    return PreviewPayment(customer_repo, account_repo, charge_repo)


@pytest.mark.asyncio
class TestPreviewPayment:
    async def test_day_limit_breakdown_marks_first_unpayable_day(self, repos):
        use_case = given(
            repos,
            "day_limit",
            CustomerAccount(customer_id=8, balance=Decimal("450"), day_limit=3),
            [
                make_charge(1, "100", datetime(2024, 3, 1, 9)),
                make_charge(2, "200", datetime(2024, 3, 1, 18)),
                make_charge(3, "150", datetime(2024, 3, 2, 11)),
            ],
        )

        result = await use_case.execute(8, Decimal("320"))

        assert result.is_ok()
        preview = result.value
        assert preview.days_cleared == 1
        assert preview.charges_payable == 2
        assert preview.amount_payable == Decimal("300")
        assert preview.leftover == Decimal("20")
        assert preview.projected_balance == Decimal("130")
        assert preview.pending_total == Decimal("450")
        assert [(b.day, b.can_pay) for b in preview.day_buckets] == [
            (date(2024, 3, 1), True),
            (date(2024, 3, 2), False),
        ]

    async def test_postpaid_preview(self, repos):
        use_case = given(
            repos,
            "postpaid",
            CustomerAccount(customer_id=8, balance=Decimal("350"), remaining_credit_limit=Decimal("400")),
            [
                make_charge(1, "100", datetime(2024, 3, 1, 9)),
                make_charge(2, "50", datetime(2024, 3, 2, 9)),
                make_charge(3, "200", datetime(2024, 3, 3, 9)),
            ],
        )

        result = await use_case.execute(8, Decimal("140"))

        assert result.is_ok()
        preview = result.value
        assert preview.charges_payable == 1
        assert [c.id for c in preview.payable_charges] == [1]
        assert preview.leftover == Decimal("40")
        assert preview.projected_remaining_credit_limit == Decimal("540")
        assert preview.day_buckets == []

    async def test_prepaid_preview_without_account(self, repos):
        use_case = given(repos, "prepaid", None, [])

        result = await use_case.execute(8, Decimal("200"))

        assert result.is_ok()
        assert result.value.current_balance == Decimal("0")
        assert result.value.projected_balance == Decimal("-200")
        assert result.value.projected_remaining_credit_limit == Decimal("200")

    async def test_preview_never_writes(self, repos):
        _, account_repo, charge_repo = repos
        use_case = given(
            repos,
            "day_limit",
            None,
            [make_charge(1, "100", datetime(2024, 3, 1, 9))],
        )

        await use_case.execute(8, Decimal("500"))

        account_repo.upsert_defaults.assert_not_called()
        account_repo.update.assert_not_called()
        charge_repo.mark_paid.assert_not_called()
        charge_repo.list_unpaid.assert_called_once_with(8)

    async def test_rejects_non_positive_amount(self, repos):
        use_case = given(repos, "prepaid", None, [])

        result = await use_case.execute(8, Decimal("0"))

        assert result.is_err()
        assert result.error.code == "INVALID_AMOUNT"

    async def test_unknown_customer(self, repos):
        customer_repo, account_repo, charge_repo = repos
        customer_repo.get_by_id = AsyncMock(return_value=None)

        result = await PreviewPayment(customer_repo, account_repo, charge_repo).execute(99, Decimal("10"))

        assert result.is_err()
        assert result.error.code == "CUSTOMER_NOT_FOUND"

    async def test_day_limit_zero_previews_as_postpaid(self, repos):
        use_case = given(
            repos,
            "day_limit",
            CustomerAccount(
                customer_id=8, balance=Decimal("100"), day_limit=0, remaining_credit_limit=Decimal("500")
            ),
            [make_charge(1, "100", datetime(2024, 3, 1, 9))],
        )

        result = await use_case.execute(8, Decimal("200"))

        assert result.is_ok()
        preview = result.value
        assert preview.policy == "day_limit"
        assert preview.charges_payable == 1
        assert preview.days_cleared == 0
        assert preview.day_buckets == []
        assert preview.projected_remaining_credit_limit == Decimal("700")
        assert preview.leftover == Decimal("100")
