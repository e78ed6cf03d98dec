"""Settlement API Routes

FastAPI routes for customer payments, overdue status and account ledger.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from libs.result import Error
from src.api.schemas.settlement_request import PaymentRequestSchema, PaymentPreviewRequestSchema
from src.app.use_cases.settlement.dtos import (
    CreditStatusDTO,
    EligibilityDTO,
    ListLedgerLinesResponseDTO,
    OverdueStatusDTO,
    PaymentCommandDTO,
    PaymentPreviewDTO,
    SettlementResultDTO,
)
from src.app.use_cases.settlement import errors
from src.app.use_cases.settlement.allocate_payment import AllocatePayment
from src.app.use_cases.settlement.preview_payment import PreviewPayment
from src.app.use_cases.settlement.overdue import EvaluateOverdue
from src.app.use_cases.settlement.get_credit_status import GetCreditStatus
from src.app.use_cases.settlement.check_eligibility import CheckEligibility
from src.app.use_cases.settlement.list_ledger_lines import ListLedgerLines
from src.app.services.audit_recorder import AuditRecorder
from src.app.services.clock import Clock
from src.adapter.repositories import (
    SqlAlchemyChargeRepository,
    SqlAlchemyCustomerAccountRepository,
    SqlAlchemyCustomerRepository,
    SqlAlchemyLedgerLineRepository,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_audit_recorder, get_clock, get_session
from src.api.error import ClientError

router = APIRouter(prefix="/customers", tags=["Settlement"])

STATUS_BY_CODE = {
    errors.CUSTOMER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    errors.INVALID_AMOUNT: status.HTTP_400_BAD_REQUEST,
    errors.DUPLICATE_PAYMENT: status.HTTP_409_CONFLICT,
    errors.TRANSACTION_CONFLICT: status.HTTP_409_CONFLICT,
    errors.UNKNOWN_BILLING_POLICY: status.HTTP_422_UNPROCESSABLE_ENTITY,
    errors.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    errors.SETTLEMENT_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _raise(error: Error):
    raise ClientError(error, status_code=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST))


def _error_example(description: str, code: str, message: str) -> dict:
    return {
        "description": description,
        "content": {
            "application/json": {
                "example": {"error": {"code": code, "message": message}}
            }
        },
    }


CUSTOMER_NOT_FOUND_RESPONSE = {
    404: _error_example("Customer not found", errors.CUSTOMER_NOT_FOUND, "Customer 42 not found"),
}


@router.post(
    "/{customer_id}/payments",
    response_model=SettlementResultDTO,
    status_code=status.HTTP_200_OK,
    responses={
        **CUSTOMER_NOT_FOUND_RESPONSE,
        400: _error_example("Invalid amount", errors.INVALID_AMOUNT, "Payment amount must be greater than 0"),
        409: _error_example(
            "Duplicate payment or concurrent settlement",
            errors.DUPLICATE_PAYMENT,
            "Payment with this idempotency key was already recorded",
        ),
        422: _error_example(
            "Unknown billing policy", errors.UNKNOWN_BILLING_POLICY, "Unknown billing policy 'weekly'"
        ),
        503: _error_example("Storage unavailable", errors.STORAGE_UNAVAILABLE, "Storage is unavailable"),
    }
)
async def record_payment(
    customer_id: int,
    request: PaymentRequestSchema,
    session: AsyncSession = Depends(get_session),
    audit_recorder: AuditRecorder = Depends(get_audit_recorder),
    clock: Clock = Depends(get_clock),
):
    """
    Record a customer payment and settle outstanding charges.

    How the payment is applied depends on the customer's billing policy:
    - `prepaid`: the account is recharged, no charges are touched
    - `postpaid`: unpaid charges are paid oldest-first while the payment covers them in full
    - `day_limit`: whole calendar days of charges are cleared oldest-first, and the
      account is re-activated once nothing is overdue

    **Request body:**
    - `amount` (required): Payment amount (must be > 0)
    - `payment_type` (required): 1=Cash, 2=RTGS, 3=NEFT, 4=UPI, 5=Cheque
    - `idempotency_key` (required): Unique key; a repeated key is rejected with 409
    - `payment_date` (optional): When the payment was received (defaults to now)
    - `remarks` (optional): Free-form remarks
    - `actor` (optional): Who is recording the payment

    **Returns:**
    - 200: Payment applied
    - 400: Invalid amount
    - 404: Customer not found
    - 409: Duplicate idempotency key or concurrent settlement (retry)
    - 422: Unknown billing policy or invalid request
    - 503: Storage unavailable
    """
    uow = SqlAlchemyUnitOfWork(session)

    command = PaymentCommandDTO(
        customer_id=customer_id,
        amount=request.amount,
        received_at=request.payment_date or clock.now(),
        idempotency_key=request.idempotency_key,
        memo=request.remarks,
        payment_method=request.payment_type.method,
        actor=request.actor,
    )

    use_case = AllocatePayment(
        uow,
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyCustomerAccountRepository(session),
        SqlAlchemyChargeRepository(session),
        SqlAlchemyLedgerLineRepository(session),
        audit_recorder=audit_recorder,
        clock=clock,
    )
    result = await use_case.execute(command)

    if result.is_err():
        _raise(result.error)

    return result.value


@router.post(
    "/{customer_id}/payments/preview",
    response_model=PaymentPreviewDTO,
    status_code=status.HTTP_200_OK,
    responses={
        **CUSTOMER_NOT_FOUND_RESPONSE,
        400: _error_example("Invalid amount", errors.INVALID_AMOUNT, "Payment amount must be greater than 0"),
    }
)
async def preview_payment(
    customer_id: int,
    request: PaymentPreviewRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Show what a payment would settle, without recording it.

    For `day_limit` customers the response lists the unpaid days oldest-first,
    each marked `can_pay`, up to the first day the amount cannot clear.
    """
    use_case = PreviewPayment(
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyCustomerAccountRepository(session),
        SqlAlchemyChargeRepository(session),
    )
    result = await use_case.execute(customer_id, request.amount)

    if result.is_err():
        _raise(result.error)

    return result.value


@router.get(
    "/{customer_id}/overdue",
    response_model=OverdueStatusDTO,
    status_code=status.HTTP_200_OK,
    responses=CUSTOMER_NOT_FOUND_RESPONSE,
)
async def get_overdue_status(
    customer_id: int,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """
    Evaluate whether the customer is overdue today.

    Only `day_limit` customers with a positive day limit can be overdue.
    """
    use_case = EvaluateOverdue(
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyCustomerAccountRepository(session),
        SqlAlchemyChargeRepository(session),
        clock=clock,
    )
    result = await use_case.execute(customer_id)

    if result.is_err():
        _raise(result.error)

    return result.value


@router.get(
    "/{customer_id}/credit-status",
    response_model=CreditStatusDTO,
    status_code=status.HTTP_200_OK,
    responses=CUSTOMER_NOT_FOUND_RESPONSE,
)
async def get_credit_status(
    customer_id: int,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """Account balances, pending charges and overdue status."""
    use_case = GetCreditStatus(
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyCustomerAccountRepository(session),
        SqlAlchemyChargeRepository(session),
        clock=clock,
    )
    result = await use_case.execute(customer_id)

    if result.is_err():
        _raise(result.error)

    return result.value


@router.get(
    "/{customer_id}/eligibility",
    response_model=EligibilityDTO,
    status_code=status.HTTP_200_OK,
    responses=CUSTOMER_NOT_FOUND_RESPONSE,
)
async def check_eligibility(
    customer_id: int,
    session: AsyncSession = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """Whether the customer may place a new order."""
    use_case = CheckEligibility(
        SqlAlchemyCustomerRepository(session),
        SqlAlchemyCustomerAccountRepository(session),
        SqlAlchemyChargeRepository(session),
        clock=clock,
    )
    result = await use_case.execute(customer_id)

    if result.is_err():
        _raise(result.error)

    return result.value


@router.get(
    "/{customer_id}/ledger",
    response_model=ListLedgerLinesResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_ledger(
    customer_id: int,
    limit: int = Query(20, ge=1, le=100, description="Page size"),
    offset: int = Query(0, ge=0, description="Lines to skip"),
    session: AsyncSession = Depends(get_session),
):
    """Account ledger, newest line first."""
    use_case = ListLedgerLines(SqlAlchemyLedgerLineRepository(session))
    result = await use_case.execute(customer_id, limit=limit, offset=offset)

    if result.is_err():
        _raise(result.error)

    return result.value
