"""PreviewPayment Use Case

Dry run of payment allocation: shows what a payment would settle without
writing anything.
"""

from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.customer_account_repository import CustomerAccountRepository
from src.app.repositories.charge_repository import ChargeRepository
from src.domain.customer import BillingPolicy
from src.domain.money import ConsumedCredit
from .allocation import ZERO, plan_day_limit, plan_postpaid
from .allocate_payment import to_charge_dtos
from .dtos import DayBucketPreviewDTO, PaymentPreviewDTO
from .errors import CUSTOMER_NOT_FOUND, INVALID_AMOUNT, UNKNOWN_BILLING_POLICY


class PreviewPayment:
    """
    Use Case: Preview a payment allocation

    Business Rules:
    1. Same validation as AllocatePayment, without the idempotency check
    2. No locks taken, no rows written, no account created
    3. Day buckets are listed oldest-first up to and including the first
       bucket the payment cannot clear, each marked can_pay
    """

    def __init__(
        self,
        customer_repo: CustomerRepository,
        account_repo: CustomerAccountRepository,
        charge_repo: ChargeRepository,
    ):
        self.customer_repo = customer_repo
        self.account_repo = account_repo
        self.charge_repo = charge_repo

    async def execute(self, customer_id: int, amount: Decimal) -> Result[PaymentPreviewDTO]:
        if amount <= 0:
            return Return.err(
                Error(
                    code=INVALID_AMOUNT,
                    message="Payment amount must be greater than 0",
                    reason=f"amount={amount}",
                )
            )

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
        balance = account.balance if account else ZERO
        remaining_limit = account.remaining_credit_limit if account else ZERO
        projected_balance = ConsumedCredit(balance).recharge(amount).value

        preview = PaymentPreviewDTO(
            customer_id=customer_id,
            policy=policy.value,
            amount=amount,
            current_balance=balance,
            projected_balance=projected_balance,
        )

        if policy is BillingPolicy.PREPAID:
            preview.projected_remaining_credit_limit = remaining_limit + amount
            preview.leftover = amount
            return Return.ok(preview)

        charges = await self.charge_repo.list_unpaid(customer_id)
        preview.pending_total = sum((c.amount for c in charges), ZERO)

        day_limit = account.day_limit if account else 0

        # A day_limit of 0 switches day-bucket settlement off for the account
        if policy is BillingPolicy.POSTPAID or day_limit <= 0:
            plan = plan_postpaid(charges, amount)
            preview.projected_remaining_credit_limit = remaining_limit + amount
            preview.charges_payable = len(plan.settled)
            preview.amount_payable = plan.amount_settled
            preview.leftover = plan.leftover
            preview.payable_charges = to_charge_dtos(plan.settled)
            return Return.ok(preview)

        day_plan = plan_day_limit(
            charges,
            amount,
            account.total_day_amount if account else ZERO,
            account.day_remaining_amount if account else ZERO,
        )
        buckets = [
            DayBucketPreviewDTO(
                day=bucket.day,
                total=bucket.total,
                charge_count=len(bucket.charges),
                can_pay=True,
                charge_ids=bucket.charge_ids,
            )
            for bucket in day_plan.cleared
        ]
        if day_plan.pending:
            blocked = day_plan.pending[0]
            buckets.append(
                DayBucketPreviewDTO(
                    day=blocked.day,
                    total=blocked.total,
                    charge_count=len(blocked.charges),
                    can_pay=False,
                    charge_ids=blocked.charge_ids,
                )
            )

        preview.days_cleared = len(day_plan.cleared)
        preview.charges_payable = len(day_plan.settled_charges)
        preview.amount_payable = day_plan.amount_settled
        preview.leftover = day_plan.day_remaining_amount
        preview.payable_charges = to_charge_dtos(day_plan.settled_charges)
        preview.day_buckets = buckets
        return Return.ok(preview)
