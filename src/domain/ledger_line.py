"""Ledger Line Domain Entity

Immutable append-only history of every balance-affecting event.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, IdType


class LedgerDirection(str, Enum):
    """Ledger line directions"""
    INWARD = "inward"    # Recharge / payment received
    OUTWARD = "outward"  # Charge accrual (written by order fulfillment)

    def signed(self, amount: Decimal) -> Decimal:
        """Contribution of a line of this direction to the account balance"""
        if self is LedgerDirection.INWARD:
            return -amount
        return amount


class LedgerLine(BaseModel, table=True):
    """
    Ledger Line - Immutable record of a balance-affecting event

    Domain Rules:
    - Lines are never updated or deleted
    - Sum of signed credit_amount per customer equals the account balance
    - resulting_balance / resulting_limit snapshot the account after the event
    - For day-limit settlements resulting_limit holds the account day_limit
    - idempotency_key is unique when present; a repeated key is rejected
    """

    __tablename__ = "ledger_lines"
    __table_args__ = (
        Index('ix_ledger_lines_customer_created', 'customer_id', 'created_at'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique ledger line identifier (auto-increment)"
    )

    customer_id: int = Field(
        sa_column=Column(IdType, ForeignKey("customers.id"), nullable=False),
        description="Customer the line belongs to"
    )

    direction: LedgerDirection = Field(
        description="inward (recharge) or outward (charge accrual)"
    )

    credit_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Unsigned amount of the event"
    )

    resulting_balance: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Account balance after the event"
    )

    resulting_limit: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Remaining credit limit (or day limit) after the event"
    )

    actor: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Who recorded the event"
    )

    memo: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Free-form remarks"
    )

    payment_method: Optional[str] = Field(
        default=None,
        sa_column=Column(String(20), nullable=True),
        description="Cash, RTGS, NEFT, UPI, Cheque"
    )

    idempotency_key: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True, unique=True, index=True),
        description="Client-supplied key that makes a payment submission unique"
    )

    received_at: Optional[datetime] = Field(
        default=None,
        description="When the payment was received"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Line timestamp (immutable)"
    )

    @property
    def signed_amount(self) -> Decimal:
        return self.direction.signed(self.credit_amount)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "customer_id": 42,
                "direction": "inward",
                "credit_amount": "200.00",
                "resulting_balance": "-200.00",
                "resulting_limit": "700.00",
                "actor": "cashier_3",
                "memo": "Counter payment",
                "payment_method": "UPI",
                "idempotency_key": "pay-42-20240301-01",
                "received_at": "2024-03-01T10:00:00",
                "created_at": "2024-03-01T10:00:05Z"
            }
        }
