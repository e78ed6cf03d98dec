"""Unit tests for the balance sign convention and ledger direction"""

from decimal import Decimal

from src.domain.money import ConsumedCredit
from src.domain.ledger_line import LedgerDirection, LedgerLine


class TestConsumedCredit:
    def test_recharge_moves_balance_down(self):
        assert ConsumedCredit(Decimal("0")).recharge(Decimal("200")).value == Decimal("-200")

    def test_accrue_moves_balance_up(self):
        assert ConsumedCredit(Decimal("-200")).accrue(Decimal("50")).value == Decimal("-150")

    def test_recharge_then_accrue_same_amount_restores_balance(self):
        start = ConsumedCredit(Decimal("123.45"))
        assert start.recharge(Decimal("10.05")).accrue(Decimal("10.05")) == start

    def test_zero(self):
        assert ConsumedCredit.zero().value == Decimal("0")


class TestLedgerDirection:
    def test_inward_is_negative(self):
        assert LedgerDirection.INWARD.signed(Decimal("200")) == Decimal("-200")

    def test_outward_is_positive(self):
        assert LedgerDirection.OUTWARD.signed(Decimal("75")) == Decimal("75")

    def test_ledger_line_signed_amount(self):
        line = LedgerLine(
            customer_id=1,
            direction=LedgerDirection.INWARD,
            credit_amount=Decimal("200.00"),
            resulting_balance=Decimal("-200.00"),
            resulting_limit=Decimal("700.00"),
            actor="system",
        )
        assert line.signed_amount == Decimal("-200.00")
