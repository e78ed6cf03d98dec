"""Payment allocation planners

Pure functions deciding which unpaid charges a payment settles. They never
touch storage, so AllocatePayment and PreviewPayment share them.

Both planners walk oldest-first and stop at the first unit (a charge, or a
whole calendar day of charges) the funds cannot cover in full. A smaller
later unit is never paid ahead of an older one.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Dict, List, Sequence
from src.domain.charge import Charge

ZERO = Decimal("0")


@dataclass
class DayBucket:
    """Unpaid charges completed on one calendar day"""

    day: date
    charges: List[Charge] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum((c.amount for c in self.charges), ZERO)

    @property
    def charge_ids(self) -> List[int]:
        return [c.id for c in self.charges]


def group_day_buckets(charges: Sequence[Charge]) -> List[DayBucket]:
    """Group charges by the calendar date of completed_at, ascending"""
    buckets: Dict[date, DayBucket] = {}
    for charge in charges:
        day = charge.completed_at.date()
        buckets.setdefault(day, DayBucket(day=day)).charges.append(charge)
    return [buckets[day] for day in sorted(buckets)]


@dataclass
class PostpaidPlan:
    settled: List[Charge]
    pending: List[Charge]
    amount_settled: Decimal
    leftover: Decimal


def plan_postpaid(charges: Sequence[Charge], amount: Decimal) -> PostpaidPlan:
    """
    Settle whole charges oldest-first from the payment amount

    Args:
        charges: Unpaid charges, oldest first
        amount: Payment amount

    Returns:
        PostpaidPlan with settled/pending charges and the unspent leftover
    """
    available = amount
    settled: List[Charge] = []

    for charge in charges:
        if available < charge.amount:
            break
        available -= charge.amount
        settled.append(charge)

    return PostpaidPlan(
        settled=settled,
        pending=list(charges[len(settled):]),
        amount_settled=amount - available,
        leftover=available,
    )


@dataclass
class DayLimitPlan:
    cleared: List[DayBucket]
    pending: List[DayBucket]
    total_day_amount: Decimal
    day_remaining_amount: Decimal
    amount_settled: Decimal

    @property
    def settled_charges(self) -> List[Charge]:
        return [c for bucket in self.cleared for c in bucket.charges]

    @property
    def pending_charges(self) -> List[Charge]:
        return [c for bucket in self.pending for c in bucket.charges]


def plan_day_limit(
    charges: Sequence[Charge],
    amount: Decimal,
    total_day_amount: Decimal,
    day_remaining_amount: Decimal,
) -> DayLimitPlan:
    """
    Clear whole calendar days of charges oldest-first

    The payment is pooled with the leftover carried from earlier settlements.
    A cleared day draws on that carried leftover first; only the part paid
    from new funds reduces the running day total.

    Args:
        charges: Unpaid charges, oldest first
        amount: Payment amount
        total_day_amount: Account total_day_amount before the payment
        day_remaining_amount: Account day_remaining_amount before the payment

    Returns:
        DayLimitPlan with cleared/pending buckets and the new day amounts
    """
    available = amount + day_remaining_amount
    running_day_total = total_day_amount + amount
    used_from_remaining = ZERO
    buckets = group_day_buckets(charges)
    cleared: List[DayBucket] = []

    for bucket in buckets:
        bucket_total = bucket.total
        if available < bucket_total:
            break

        available -= bucket_total
        from_remaining = min(bucket_total, max(ZERO, day_remaining_amount - used_from_remaining))
        used_from_remaining += from_remaining
        running_day_total -= bucket_total - from_remaining
        cleared.append(bucket)

    return DayLimitPlan(
        cleared=cleared,
        pending=buckets[len(cleared):],
        total_day_amount=running_day_total,
        day_remaining_amount=max(ZERO, available),
        amount_settled=sum((b.total for b in cleared), ZERO),
    )
