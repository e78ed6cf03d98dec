"""Unit tests for Customer and CustomerAccount entities"""

from decimal import Decimal

from src.domain.customer import BillingPolicy, Customer
from src.domain.customer_account import CustomerAccount


class TestBillingPolicy:
    def test_parse_known_values(self):
        assert BillingPolicy.parse("prepaid") is BillingPolicy.PREPAID
        assert BillingPolicy.parse("postpaid") is BillingPolicy.POSTPAID
        assert BillingPolicy.parse("day_limit") is BillingPolicy.DAY_LIMIT

    def test_parse_unknown_returns_none(self):
        assert BillingPolicy.parse("weekly") is None
        assert BillingPolicy.parse(None) is None

    def test_customer_policy_property(self):
        customer = Customer(id=1, name="Acme Logistics", billing_policy="postpaid")
        assert customer.policy is BillingPolicy.POSTPAID

    def test_customer_with_corrupt_policy(self):
        customer = Customer(id=1, name="Acme Logistics", billing_policy="")
        assert customer.policy is None


class TestCustomerAccount:
    def test_defaults_are_zeroed_and_active(self):
        account = CustomerAccount(customer_id=7)

        assert account.balance == Decimal("0")
        assert account.total_credit_limit == Decimal("0")
        assert account.remaining_credit_limit == Decimal("0")
        assert account.day_limit == 0
        assert account.total_day_amount == Decimal("0")
        assert account.day_remaining_amount == Decimal("0")
        assert account.is_active is True

    def test_snapshot_uses_plain_values(self):
        account = CustomerAccount(
            customer_id=7,
            balance=Decimal("-200.00"),
            remaining_credit_limit=Decimal("700.00"),
            day_limit=3,
        )

        snapshot = account.snapshot()

        assert snapshot["balance"] == "-200.00"
        assert snapshot["remaining_credit_limit"] == "700.00"
        assert snapshot["day_limit"] == 3
        assert snapshot["is_active"] is True
