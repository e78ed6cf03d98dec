"""Data Transfer Objects for Settlement Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field


class PaymentCommandDTO(BaseModel):
    """
    Command DTO for applying a customer payment

    Used as input to AllocatePayment use case. The amount is not
    range-checked here: the use case rejects non-positive amounts itself.
    """

    customer_id: int = Field(
        ...,
        description="Customer identifier"
    )

    amount: Decimal = Field(
        ...,
        description="Payment amount (must be > 0)"
    )

    received_at: datetime = Field(
        ...,
        description="When the payment was received"
    )

    idempotency_key: str = Field(
        ...,
        min_length=1,
        description="Client-generated key; a repeated key is rejected"
    )

    memo: Optional[str] = Field(
        default=None,
        description="Remarks recorded on the ledger line"
    )

    payment_method: Optional[str] = Field(
        default=None,
        description="Cash, RTGS, NEFT, UPI, Cheque"
    )

    actor: str = Field(
        default="system",
        description="Who recorded the payment"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": 42,
                "amount": "15000.00",
                "received_at": "2024-03-05T11:00:00",
                "idempotency_key": "pay-42-20240305-01",
                "memo": "NEFT from HDFC",
                "payment_method": "NEFT",
                "actor": "cashier_3"
            }
        }


class ChargeDTO(BaseModel):
    """Charge as reported in settlement results"""

    id: int = Field(..., description="Charge ID")
    amount: Decimal = Field(..., description="Charge amount")
    completed_at: datetime = Field(..., description="Completion timestamp")
    paid_at: Optional[datetime] = Field(default=None, description="Settlement timestamp")
    reference: Optional[str] = Field(default=None, description="Order reference")


class SettlementResultDTO(BaseModel):
    """
    Response DTO for payment allocation

    Policy-specific fields are None when they do not apply to the
    customer's billing policy.
    """

    customer_id: int = Field(..., description="Customer identifier")
    policy: str = Field(..., description="Billing policy applied")
    amount: Decimal = Field(..., description="Payment amount")
    previous_balance: Decimal = Field(..., description="Balance before the payment")
    new_balance: Decimal = Field(..., description="Balance after the payment")

    remaining_credit_limit: Optional[Decimal] = Field(
        default=None,
        description="Remaining credit limit after the payment (prepaid, postpaid)"
    )

    amount_applied: Decimal = Field(..., description="Amount credited to the account")

    charges_settled: int = Field(default=0, description="Number of charges marked paid")

    amount_settled: Decimal = Field(
        default=Decimal("0"),
        description="Total amount of the charges marked paid"
    )

    leftover_available: Optional[Decimal] = Field(
        default=None,
        description="Payment left after whole charges were cleared (postpaid)"
    )

    days_cleared: int = Field(default=0, description="Day buckets cleared (day_limit)")

    remaining_day_amount: Optional[Decimal] = Field(
        default=None,
        description="Unspent pooled recharge, new total_day_amount (day_limit)"
    )

    day_remaining_amount: Optional[Decimal] = Field(
        default=None,
        description="Leftover carried to the next settlement (day_limit)"
    )

    is_overdue: bool = Field(default=False, description="Account delinquent after settlement")

    ledger_line_id: int = Field(..., description="Inward ledger line recorded")
    idempotency_key: str = Field(..., description="Idempotency key of the payment")
    received_at: datetime = Field(..., description="When the payment was received")

    settled_charges: List[ChargeDTO] = Field(default_factory=list, description="Charges now paid")
    pending_charges: List[ChargeDTO] = Field(default_factory=list, description="Charges still unpaid")

    message: str = Field(default="", description="Human-readable summary")

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": 42,
                "policy": "postpaid",
                "amount": "140.00",
                "previous_balance": "350.00",
                "new_balance": "210.00",
                "remaining_credit_limit": "540.00",
                "amount_applied": "140.00",
                "charges_settled": 1,
                "amount_settled": "100.00",
                "leftover_available": "40.00",
                "days_cleared": 0,
                "is_overdue": False,
                "ledger_line_id": 91,
                "idempotency_key": "pay-42-20240305-01",
                "received_at": "2024-03-05T11:00:00",
                "settled_charges": [],
                "pending_charges": [],
                "message": "Payment processed successfully. 1 invoice(s) paid."
            }
        }


class OverdueStatusDTO(BaseModel):
    """Response DTO for the overdue evaluation"""

    customer_id: int = Field(..., description="Customer identifier")
    policy: str = Field(..., description="Billing policy")
    is_overdue: bool = Field(..., description="Oldest unpaid charge has reached the day limit")
    days_overdue: int = Field(..., description="Days past the day limit (0 when not overdue)")
    elapsed_days: int = Field(..., description="Age of the oldest unpaid charge in calendar days")
    day_limit: int = Field(..., description="Effective day limit (0 when not enforced)")
    remaining_days: int = Field(..., description="Days left before the account becomes overdue")
    oldest_unpaid_at: Optional[date] = Field(default=None, description="Completion day of the oldest unpaid charge")


class DayBucketPreviewDTO(BaseModel):
    """One calendar day of unpaid charges in a payment preview"""

    day: date = Field(..., description="Completion day")
    total: Decimal = Field(..., description="Sum of the day's charges")
    charge_count: int = Field(..., description="Number of charges that day")
    can_pay: bool = Field(..., description="Whether the payment clears the whole day")
    charge_ids: List[int] = Field(default_factory=list, description="Charges in the bucket")


class PaymentPreviewDTO(BaseModel):
    """Response DTO for a dry-run payment allocation"""

    customer_id: int = Field(..., description="Customer identifier")
    policy: str = Field(..., description="Billing policy")
    amount: Decimal = Field(..., description="Payment amount previewed")
    current_balance: Decimal = Field(..., description="Balance now")
    projected_balance: Decimal = Field(..., description="Balance if the payment were applied")
    projected_remaining_credit_limit: Optional[Decimal] = Field(
        default=None, description="Remaining credit limit if applied (prepaid, postpaid)"
    )
    charges_payable: int = Field(default=0, description="Charges that would be settled")
    amount_payable: Decimal = Field(default=Decimal("0"), description="Amount of those charges")
    leftover: Decimal = Field(default=Decimal("0"), description="Funds left after whole units")
    days_cleared: int = Field(default=0, description="Day buckets that would clear (day_limit)")
    pending_total: Decimal = Field(default=Decimal("0"), description="Total currently outstanding")
    payable_charges: List[ChargeDTO] = Field(default_factory=list, description="Charges that would be settled")
    day_buckets: List[DayBucketPreviewDTO] = Field(
        default_factory=list, description="Day-wise breakdown up to the first unpayable day"
    )


class CreditStatusDTO(BaseModel):
    """Response DTO for a customer's credit status"""

    customer_id: int = Field(..., description="Customer identifier")
    customer_name: str = Field(..., description="Customer name")
    policy: str = Field(..., description="Billing policy")
    has_account: bool = Field(..., description="False if no account has been created yet")
    balance: Decimal = Field(..., description="Current balance")
    total_credit_limit: Decimal = Field(..., description="Credit ceiling")
    remaining_credit_limit: Decimal = Field(..., description="Available credit")
    day_limit: int = Field(..., description="Grace days (day_limit policy)")
    total_day_amount: Decimal = Field(..., description="Unspent pooled recharge")
    day_remaining_amount: Decimal = Field(..., description="Carried-over leftover")
    is_active: bool = Field(..., description="Stored delinquency flag")
    pending_charge_count: int = Field(..., description="Unpaid charges")
    pending_amount: Decimal = Field(..., description="Sum of unpaid charges")
    overdue: OverdueStatusDTO = Field(..., description="Fresh overdue evaluation")


class EligibilityDTO(BaseModel):
    """Response DTO for the new-order eligibility check"""

    customer_id: int = Field(..., description="Customer identifier")
    policy: str = Field(..., description="Billing policy")
    eligible: bool = Field(..., description="Whether a new order may be placed")
    reason: str = Field(..., description="Why")
    requires_payment: bool = Field(default=False, description="A payment would lift the block")
    unpaid_days: int = Field(default=0, description="Distinct calendar days with unpaid charges")
    day_limit: int = Field(default=0, description="Day limit of the account")
    remaining_credit_limit: Optional[Decimal] = Field(default=None, description="Available credit")


class LedgerLineDTO(BaseModel):
    """Ledger line as listed in account history"""

    id: int = Field(..., description="Line ID")
    direction: str = Field(..., description="inward or outward")
    credit_amount: Decimal = Field(..., description="Amount")
    resulting_balance: Decimal = Field(..., description="Balance after the event")
    resulting_limit: Decimal = Field(..., description="Limit after the event")
    actor: str = Field(..., description="Who recorded the event")
    memo: Optional[str] = Field(default=None, description="Remarks")
    payment_method: Optional[str] = Field(default=None, description="Payment method")
    received_at: Optional[datetime] = Field(default=None, description="When the payment was received")
    created_at: datetime = Field(..., description="Line timestamp")


class ListLedgerLinesResponseDTO(BaseModel):
    """Paginated ledger history"""

    lines: List[LedgerLineDTO] = Field(..., description="Lines, newest first")
    total: int = Field(..., description="Total number of lines")
    limit: int = Field(..., description="Page size")
    offset: int = Field(..., description="Page offset")


class LedgerDiscrepancyDTO(BaseModel):
    """An account whose balance does not match its ledger"""

    customer_id: int = Field(..., description="Customer identifier")
    account_id: int = Field(..., description="Account ID")
    account_balance: Decimal = Field(..., description="Balance stored on the account")
    ledger_balance: Decimal = Field(..., description="Balance reproduced from the ledger")
    discrepancy: Decimal = Field(..., description="account_balance - ledger_balance")


class ReconciliationResultDTO(BaseModel):
    """Response DTO for ledger reconciliation"""

    total_accounts_checked: int = Field(..., description="Accounts compared")
    discrepancies_found: int = Field(..., description="Accounts out of balance")
    discrepancies: List[LedgerDiscrepancyDTO] = Field(default_factory=list, description="Details")
    reconciliation_time: datetime = Field(..., description="When reconciliation started")
    execution_time_ms: int = Field(..., description="Duration in milliseconds")
