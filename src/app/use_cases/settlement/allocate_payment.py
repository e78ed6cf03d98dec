"""AllocatePayment Use Case

Applies a customer payment to the account under the customer's billing
policy, settling outstanding charges oldest-first where the policy says so.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional, Set, Tuple
from sqlalchemy.exc import DBAPIError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.audit_recorder import AuditRecorder
from src.app.services.clock import Clock, SystemClock
from src.app.repositories.customer_repository import CustomerRepository
from src.app.repositories.customer_account_repository import CustomerAccountRepository
from src.app.repositories.charge_repository import ChargeRepository
from src.app.repositories.ledger_line_repository import LedgerLineRepository
from src.domain.charge import Charge
from src.domain.customer import BillingPolicy
from src.domain.customer_account import CustomerAccount
from src.domain.ledger_line import LedgerDirection, LedgerLine
from src.domain.money import ConsumedCredit
from .allocation import plan_day_limit, plan_postpaid
from .dtos import ChargeDTO, PaymentCommandDTO, SettlementResultDTO
from .errors import (
    CUSTOMER_NOT_FOUND,
    DUPLICATE_PAYMENT,
    INVALID_AMOUNT,
    SETTLEMENT_FAILED,
    UNKNOWN_BILLING_POLICY,
    classify_storage_error,
)
from .overdue import evaluate_overdue

logger = logging.getLogger(__name__)

Settlement = Tuple[SettlementResultDTO, Dict[str, Any]]

# Strong references so scheduled audit writes are not garbage collected mid-flight
_audit_tasks: Set[asyncio.Task] = set()


class AllocatePayment:
    """
    Use Case: Apply a payment to a customer account

    Business Rules:
    1. amount must be > 0; nothing is written otherwise
    2. Idempotency: a key already recorded on a ledger line is rejected
    3. Pessimistic locking: account and unpaid charges are read FOR UPDATE
    4. Charges are settled strictly oldest-first and only in whole units
       (a charge for postpaid, a calendar day for day_limit). A day_limit
       customer whose account day_limit is 0 is settled as postpaid
    5. Every payment appends exactly one inward ledger line
    6. All writes commit together or not at all
    7. Audit recording runs in the background after commit and never fails
       or delays the payment

    Flow:
    1. Validate amount, customer, policy and idempotency key
    2. Lock the account (create it with zeroed defaults if missing)
    3. Dispatch on billing policy
    4. Commit
    5. Schedule audit entry
    """

    def __init__(
        self,
        uow: UnitOfWork,
        customer_repo: CustomerRepository,
        account_repo: CustomerAccountRepository,
        charge_repo: ChargeRepository,
        ledger_repo: LedgerLineRepository,
        audit_recorder: Optional[AuditRecorder] = None,
        clock: Optional[Clock] = None,
    ):
        self.uow = uow
        self.customer_repo = customer_repo
        self.account_repo = account_repo
        self.charge_repo = charge_repo
        self.ledger_repo = ledger_repo
        self.audit_recorder = audit_recorder
        self.clock = clock or SystemClock()
        self.audit_task: Optional[asyncio.Task] = None

    async def execute(self, command: PaymentCommandDTO) -> Result[SettlementResultDTO]:
        """
        Execute payment allocation

        Args:
            command: PaymentCommandDTO with customer_id, amount, idempotency_key

        Returns:
            Result[SettlementResultDTO]: Settlement summary or error

        Errors:
            INVALID_AMOUNT: amount <= 0
            CUSTOMER_NOT_FOUND: No such customer
            UNKNOWN_BILLING_POLICY: Stored policy not recognised
            DUPLICATE_PAYMENT: idempotency_key already used
            TRANSACTION_CONFLICT: Lock timeout, deadlock or concurrent duplicate
            STORAGE_UNAVAILABLE: Any other database failure
        """
        # Step 1: Validate amount before touching storage
        if command.amount <= 0:
            return Return.err(
                Error(
                    code=INVALID_AMOUNT,
                    message="Payment amount must be greater than 0",
                    reason=f"amount={command.amount}",
                )
            )

        try:
            # Step 2: Resolve customer and policy
            customer = await self.customer_repo.get_by_id(command.customer_id)
            if not customer:
                return Return.err(
                    Error(
                        code=CUSTOMER_NOT_FOUND,
                        message=f"Customer {command.customer_id} not found",
                    )
                )

            policy = customer.policy
            if policy is None:
                return Return.err(
                    Error(
                        code=UNKNOWN_BILLING_POLICY,
                        message=f"Unknown billing policy '{customer.billing_policy}'",
                        reason=f"customer_id={command.customer_id}",
                    )
                )

            # Step 3: Reject a repeated idempotency key
            existing = await self.ledger_repo.get_by_idempotency_key(command.idempotency_key)
            if existing:
                return Return.err(
                    Error(
                        code=DUPLICATE_PAYMENT,
                        message="Payment with this idempotency key was already recorded",
                        reason=f"idempotency_key={command.idempotency_key}, ledger_line_id={existing.id}",
                    )
                )

            # Step 4: Lock account, creating it on first settlement
            account = await self.account_repo.get_by_customer_id(
                command.customer_id, for_update=True
            )
            if not account:
                await self.account_repo.upsert_defaults(command.customer_id)
                account = await self.account_repo.get_by_customer_id(
                    command.customer_id, for_update=True
                )

            before = account.snapshot()

            # Step 5: Dispatch on policy
            # A day_limit of 0 switches day-bucket settlement off for the account
            if policy is BillingPolicy.PREPAID:
                response, fields = await self._settle_prepaid(command, account)
            elif policy is BillingPolicy.POSTPAID or account.day_limit <= 0:
                response, fields = await self._settle_postpaid(command, account, policy)
            else:
                response, fields = await self._settle_day_limit(command, account)

            # Step 6: Commit
            await self.uow.commit()

        except DBAPIError as e:
            await self.uow.rollback()
            error = classify_storage_error(e)
            logger.warning(
                f"Payment for customer {command.customer_id} failed with {error.code}: {error.reason}"
            )
            return Return.err(error)

        except Exception as e:
            await self.uow.rollback()
            logger.exception(f"Payment for customer {command.customer_id} failed")
            return Return.err(
                Error(
                    code=SETTLEMENT_FAILED,
                    message="Failed to apply payment",
                    reason=str(e),
                )
            )

        logger.info(
            f"Applied payment of {command.amount} for customer {command.customer_id} "
            f"({policy.value}): balance {response.previous_balance} -> {response.new_balance}, "
            f"{response.charges_settled} charge(s) settled"
        )

        # Step 7: Audit after commit, off the response path
        after = dict(before)
        after.update({k: str(v) if isinstance(v, Decimal) else v for k, v in fields.items()})
        self._schedule_audit(command, before, after, response.message)

        return Return.ok(response)

    async def _settle_prepaid(
        self, command: PaymentCommandDTO, account: CustomerAccount
    ) -> Settlement:
        previous_balance = account.balance
        new_balance = ConsumedCredit(account.balance).recharge(command.amount).value
        new_limit = account.remaining_credit_limit + command.amount

        fields = {"balance": new_balance, "remaining_credit_limit": new_limit}
        await self.account_repo.update(command.customer_id, fields)

        line = await self._append_inward_line(command, new_balance, new_limit)

        response = SettlementResultDTO(
            customer_id=command.customer_id,
            policy=BillingPolicy.PREPAID.value,
            amount=command.amount,
            previous_balance=previous_balance,
            new_balance=new_balance,
            remaining_credit_limit=new_limit,
            amount_applied=command.amount,
            ledger_line_id=line.id,
            idempotency_key=command.idempotency_key,
            received_at=command.received_at,
            message=f"Recharge of {command.amount} applied.",
        )
        return response, fields

    async def _settle_postpaid(
        self, command: PaymentCommandDTO, account: CustomerAccount, policy: BillingPolicy
    ) -> Settlement:
        previous_balance = account.balance
        new_balance = ConsumedCredit(account.balance).recharge(command.amount).value

        charges = await self.charge_repo.list_unpaid(command.customer_id, for_update=True)
        plan = plan_postpaid(charges, command.amount)

        if plan.settled:
            await self.charge_repo.mark_paid([c.id for c in plan.settled], command.received_at)

        new_limit = account.remaining_credit_limit + command.amount
        fields = {"balance": new_balance, "remaining_credit_limit": new_limit}
        await self.account_repo.update(command.customer_id, fields)

        line = await self._append_inward_line(command, new_balance, new_limit)

        response = SettlementResultDTO(
            customer_id=command.customer_id,
            policy=policy.value,
            amount=command.amount,
            previous_balance=previous_balance,
            new_balance=new_balance,
            remaining_credit_limit=new_limit,
            amount_applied=command.amount,
            charges_settled=len(plan.settled),
            amount_settled=plan.amount_settled,
            leftover_available=plan.leftover,
            ledger_line_id=line.id,
            idempotency_key=command.idempotency_key,
            received_at=command.received_at,
            settled_charges=to_charge_dtos(plan.settled, paid_at=command.received_at),
            pending_charges=to_charge_dtos(plan.pending),
            message=f"Payment processed successfully. {len(plan.settled)} invoice(s) paid.",
        )
        return response, fields

    async def _settle_day_limit(
        self, command: PaymentCommandDTO, account: CustomerAccount
    ) -> Settlement:
        previous_balance = account.balance
        new_balance = ConsumedCredit(account.balance).recharge(command.amount).value

        charges = await self.charge_repo.list_unpaid(command.customer_id, for_update=True)
        plan = plan_day_limit(
            charges,
            command.amount,
            account.total_day_amount,
            account.day_remaining_amount,
        )

        settled = plan.settled_charges
        if settled:
            await self.charge_repo.mark_paid([c.id for c in settled], command.received_at)

        # Re-evaluate against what is still unpaid after this settlement
        oldest = await self.charge_repo.get_oldest_unpaid(command.customer_id)
        assessment = evaluate_overdue(
            oldest.completed_at if oldest else None,
            account.day_limit,
            self.clock.today(),
        )

        fields = {
            "balance": new_balance,
            "total_day_amount": plan.total_day_amount,
            "day_remaining_amount": plan.day_remaining_amount,
            "is_active": not assessment.is_overdue,
        }
        await self.account_repo.update(command.customer_id, fields)

        line = await self._append_inward_line(
            command, new_balance, Decimal(account.day_limit)
        )

        message = f"Payment processed successfully. {len(plan.cleared)} day(s) cleared."
        if assessment.is_overdue:
            message += f" Account remains overdue by {assessment.days_overdue} day(s)."

        response = SettlementResultDTO(
            customer_id=command.customer_id,
            policy=BillingPolicy.DAY_LIMIT.value,
            amount=command.amount,
            previous_balance=previous_balance,
            new_balance=new_balance,
            amount_applied=command.amount,
            charges_settled=len(settled),
            amount_settled=plan.amount_settled,
            days_cleared=len(plan.cleared),
            remaining_day_amount=plan.total_day_amount,
            day_remaining_amount=plan.day_remaining_amount,
            is_overdue=assessment.is_overdue,
            ledger_line_id=line.id,
            idempotency_key=command.idempotency_key,
            received_at=command.received_at,
            settled_charges=to_charge_dtos(settled, paid_at=command.received_at),
            pending_charges=to_charge_dtos(plan.pending_charges),
            message=message,
        )
        return response, fields

    async def _append_inward_line(
        self, command: PaymentCommandDTO, resulting_balance: Decimal, resulting_limit: Decimal
    ) -> LedgerLine:
        return await self.ledger_repo.append(
            customer_id=command.customer_id,
            direction=LedgerDirection.INWARD,
            credit_amount=command.amount,
            resulting_balance=resulting_balance,
            resulting_limit=resulting_limit,
            actor=command.actor,
            memo=command.memo,
            payment_method=command.payment_method,
            idempotency_key=command.idempotency_key,
            received_at=command.received_at,
        )

    def _schedule_audit(
        self,
        command: PaymentCommandDTO,
        before: Dict[str, Any],
        after: Dict[str, Any],
        summary: str,
    ) -> None:
        if self.audit_recorder is None:
            return
        task = asyncio.create_task(self._record_audit(command, before, after, summary))
        _audit_tasks.add(task)
        task.add_done_callback(_audit_tasks.discard)
        self.audit_task = task

    async def _record_audit(
        self,
        command: PaymentCommandDTO,
        before: Dict[str, Any],
        after: Dict[str, Any],
        summary: str,
    ) -> None:
        if self.audit_recorder is None:
            return
        try:
            await self.audit_recorder.record(
                customer_id=command.customer_id,
                before=before,
                after=after,
                summary=summary,
                actor=command.actor,
                amount=command.amount,
            )
        except Exception as e:
            logger.error(f"Failed to record audit entry for customer {command.customer_id}: {e}")


def to_charge_dtos(charges: List[Charge], paid_at=None) -> List[ChargeDTO]:
    return [
        ChargeDTO(
            id=c.id,
            amount=c.amount,
            completed_at=c.completed_at,
            paid_at=paid_at or c.paid_at,
            reference=c.reference,
        )
        for c in charges
    ]
