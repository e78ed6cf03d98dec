"""EvaluateOverdue Use Case

Decides whether a day-limit customer is delinquent: the oldest unpaid charge
has been outstanding for at least day_limit calendar days.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.customer_account_repository import CustomerAccountRepository
from src.app.repositories.charge_repository import ChargeRepository
from src.app.services.clock import Clock, SystemClock
from src.domain.customer import BillingPolicy
from .dtos import OverdueStatusDTO
from .errors import CUSTOMER_NOT_FOUND, UNKNOWN_BILLING_POLICY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverdueAssessment:
    is_overdue: bool
    days_overdue: int
    elapsed_days: int
    day_limit: int
    oldest_unpaid_at: Optional[date] = None

    @property
    def remaining_days(self) -> int:
        if self.day_limit <= 0:
            return 0
        return max(0, self.day_limit - self.elapsed_days)


def evaluate_overdue(
    oldest_completed_at: Optional[datetime], day_limit: int, today: date
) -> OverdueAssessment:
    """
    Overdue rule on civil calendar dates

    Time of day is ignored on both sides. A day_limit of 0 disables the rule.

    Args:
        oldest_completed_at: completed_at of the oldest unpaid charge, or None
        day_limit: Grace days of the account
        today: Current date in the business timezone

    Returns:
        OverdueAssessment
    """
    if oldest_completed_at is None:
        return OverdueAssessment(
            is_overdue=False, days_overdue=0, elapsed_days=0, day_limit=day_limit
        )

    oldest_day = oldest_completed_at.date()
    elapsed_days = max(0, (today - oldest_day).days)
    is_overdue = day_limit > 0 and elapsed_days >= day_limit

    return OverdueAssessment(
        is_overdue=is_overdue,
        days_overdue=elapsed_days - day_limit if is_overdue else 0,
        elapsed_days=elapsed_days,
        day_limit=day_limit,
        oldest_unpaid_at=oldest_day,
    )


class EvaluateOverdue:
    """
    Use Case: Evaluate whether a customer is overdue

    Business Rules:
    1. Only day_limit customers with day_limit > 0 can be overdue
    2. Overdue iff (today - oldest unpaid completion day) >= day_limit
    3. Read-only: a missing account is treated as day_limit = 0, not created
    """

    def __init__(
        self,
        customer_repo: CustomerRepository,
        account_repo: CustomerAccountRepository,
        charge_repo: ChargeRepository,
        clock: Optional[Clock] = None,
    ):
        self.customer_repo = customer_repo
        self.account_repo = account_repo
        self.charge_repo = charge_repo
        self.clock = clock or SystemClock()

    async def execute(self, customer_id: int) -> Result[OverdueStatusDTO]:
        customer = await self.customer_repo.get_by_id(customer_id)
        if not customer:
            return Return.err(
                Error(
                    code=CUSTOMER_NOT_FOUND,
                    message=f"Customer {customer_id} not found",
                )
            )

        policy = customer.policy
        if policy is None:
            return Return.err(
                Error(
                    code=UNKNOWN_BILLING_POLICY,
                    message=f"Unknown billing policy '{customer.billing_policy}'",
                    reason=f"customer_id={customer_id}",
                )
            )

        day_limit = 0
        if policy is BillingPolicy.DAY_LIMIT:
            account = await self.account_repo.get_by_customer_id(customer_id)
            day_limit = account.day_limit if account else 0

        oldest = await self.charge_repo.get_oldest_unpaid(customer_id)
        assessment = evaluate_overdue(
            oldest.completed_at if oldest else None, day_limit, self.clock.today()
        )

        if assessment.is_overdue:
            logger.info(
                f"Customer {customer_id} overdue by {assessment.days_overdue} day(s) "
                f"(oldest unpaid {assessment.oldest_unpaid_at}, day_limit={day_limit})"
            )

        return Return.ok(to_overdue_dto(customer_id, policy, assessment))


def to_overdue_dto(
    customer_id: int, policy: BillingPolicy, assessment: OverdueAssessment
) -> OverdueStatusDTO:
    return OverdueStatusDTO(
        customer_id=customer_id,
        policy=policy.value,
        is_overdue=assessment.is_overdue,
        days_overdue=assessment.days_overdue,
        elapsed_days=assessment.elapsed_days,
        day_limit=assessment.day_limit,
        remaining_days=assessment.remaining_days,
        oldest_unpaid_at=assessment.oldest_unpaid_at,
    )
