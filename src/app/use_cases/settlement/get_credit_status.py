"""Get Credit Status Use Case

Read-only view of a customer's account with a fresh overdue evaluation.
"""

from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.customer_account_repository import CustomerAccountRepository
from src.app.repositories.charge_repository import ChargeRepository
from src.app.services.clock import Clock, SystemClock
from src.domain.customer import BillingPolicy
from src.domain.customer_account import CustomerAccount
from .allocation import ZERO
from .dtos import CreditStatusDTO
from .errors import CUSTOMER_NOT_FOUND, UNKNOWN_BILLING_POLICY
from .overdue import evaluate_overdue, to_overdue_dto


class GetCreditStatus:
    """
    Get Credit Status Use Case

    Returns the stored account fields, the unpaid charge count and total, and
    the overdue evaluation as of today. A customer without an account yet is
    reported with zeroed values; no account is created.
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

    async def execute(self, customer_id: int) -> Result[CreditStatusDTO]:
        """
        Errors:
            CUSTOMER_NOT_FOUND: No such customer
            UNKNOWN_BILLING_POLICY: Stored policy not recognised
        """
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
        has_account = account is not None
        if account is None:
            account = CustomerAccount(customer_id=customer_id)

        charges = await self.charge_repo.list_unpaid(customer_id)

        day_limit = account.day_limit if policy is BillingPolicy.DAY_LIMIT else 0
        assessment = evaluate_overdue(
            charges[0].completed_at if charges else None, day_limit, self.clock.today()
        )

        return Return.ok(
            CreditStatusDTO(
                customer_id=customer_id,
                customer_name=customer.name,
                policy=policy.value,
                has_account=has_account,
                balance=account.balance,
                total_credit_limit=account.total_credit_limit,
                remaining_credit_limit=account.remaining_credit_limit,
                day_limit=account.day_limit,
                total_day_amount=account.total_day_amount,
                day_remaining_amount=account.day_remaining_amount,
                is_active=account.is_active,
                pending_charge_count=len(charges),
                pending_amount=sum((c.amount for c in charges), ZERO),
                overdue=to_overdue_dto(customer_id, policy, assessment),
            )
        )
