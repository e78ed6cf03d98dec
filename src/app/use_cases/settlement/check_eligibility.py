"""Check Eligibility Use Case

Decides whether a customer may place a new order.
"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.customer_account_repository import CustomerAccountRepository
from src.app.repositories.charge_repository import ChargeRepository
from src.app.services.clock import Clock, SystemClock
from src.domain.customer import BillingPolicy
from .allocation import ZERO, group_day_buckets
from .dtos import EligibilityDTO
from .errors import CUSTOMER_NOT_FOUND, UNKNOWN_BILLING_POLICY
from .overdue import evaluate_overdue

logger = logging.getLogger(__name__)


class CheckEligibility:
    """
    Use Case: Check whether a customer can place a new order

    Business Rules:
    1. An inactive account is ineligible until a payment reactivates it
    2. day_limit: ineligible when overdue by fresh evaluation
    3. day_limit: ineligible when unpaid charges already span day_limit
       distinct days and today is not one of them (a new order would open
       another unpaid day)
    4. prepaid/postpaid, and day_limit accounts with day_limit 0:
       remaining_credit_limit must be > 0
    5. Read-only; a missing account is treated as zeroed
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

    async def execute(self, customer_id: int) -> Result[EligibilityDTO]:
        customer = await self.customer_repo.get_by_id(customer_id)
        if not customer:
            return Return.err(
                Error(code=CUSTOMER_NOT_FOUND, message=f"Customer {customer_id} not found")
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

        account = await self.account_repo.get_by_customer_id(customer_id)
        day_limit = account.day_limit if account else 0
        remaining_limit = account.remaining_credit_limit if account else ZERO

        def verdict(eligible: bool, reason: str, requires_payment: bool = False, unpaid_days: int = 0):
            if not eligible:
                logger.info(f"Customer {customer_id} not eligible for new orders: {reason}")
            return Return.ok(
                EligibilityDTO(
                    customer_id=customer_id,
                    policy=policy.value,
                    eligible=eligible,
                    reason=reason,
                    requires_payment=requires_payment,
                    unpaid_days=unpaid_days,
                    day_limit=day_limit,
                    remaining_credit_limit=remaining_limit,
                )
            )

        if account and not account.is_active:
            return verdict(False, "Account is inactive due to overdue payments", requires_payment=True)

        # A day_limit of 0 falls back to the credit-limit check below
        if policy is BillingPolicy.DAY_LIMIT and day_limit > 0:
            charges = await self.charge_repo.list_unpaid(customer_id)
            buckets = group_day_buckets(charges)
            today = self.clock.today()

            assessment = evaluate_overdue(
                charges[0].completed_at if charges else None, day_limit, today
            )
            if assessment.is_overdue:
                return verdict(
                    False,
                    f"Payment overdue by {assessment.days_overdue} day(s)",
                    requires_payment=True,
                    unpaid_days=len(buckets),
                )

            unpaid_days = len(buckets)
            has_order_today = any(bucket.day == today for bucket in buckets)
            if unpaid_days >= day_limit and not has_order_today:
                return verdict(
                    False,
                    f"Day limit reached: {unpaid_days} unpaid day(s) of {day_limit} allowed",
                    requires_payment=True,
                    unpaid_days=unpaid_days,
                )

            return verdict(True, f"{unpaid_days} unpaid day(s) of {day_limit} allowed", unpaid_days=unpaid_days)

        if remaining_limit <= 0:
            return verdict(False, "Credit limit exhausted", requires_payment=True)

        return verdict(True, f"Remaining credit limit {remaining_limit}")
