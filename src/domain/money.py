"""Balance sign convention

A recharge *decreases* the running balance and a charge accrual increases it:
a more negative balance means more funds paid in than consumed. Wrapping the
raw Decimal keeps call sites from flipping the sign by accident.
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ConsumedCredit:
    """Running account balance under the recharge-debits convention"""

    value: Decimal

    @classmethod
    def zero(cls) -> "ConsumedCredit":
        return cls(Decimal("0"))

    def recharge(self, amount: Decimal) -> "ConsumedCredit":
        """Apply a payment: balance moves down by ``amount``"""
        return ConsumedCredit(self.value - amount)

    def accrue(self, amount: Decimal) -> "ConsumedCredit":
        """Apply a completed charge: balance moves up by ``amount``"""
        return ConsumedCredit(self.value + amount)
