"""Request schemas for Settlement API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import datetime
from decimal import Decimal
from enum import IntEnum
from typing import Optional
from pydantic import BaseModel, Field


class PaymentType(IntEnum):
    """Payment type codes accepted from the cashier screen"""
    CASH = 1
    RTGS = 2
    NEFT = 3
    UPI = 4
    CHEQUE = 5

    @property
    def method(self) -> str:
        return {
            PaymentType.CASH: "Cash",
            PaymentType.RTGS: "RTGS",
            PaymentType.NEFT: "NEFT",
            PaymentType.UPI: "UPI",
            PaymentType.CHEQUE: "Cheque",
        }[self]


class PaymentRequestSchema(BaseModel):
    """
    Request schema for recording a customer payment

    Used for POST /customers/{customer_id}/payments endpoint. A non-positive
    amount is accepted here and rejected by the use case with INVALID_AMOUNT.
    """

    amount: Decimal = Field(
        ...,
        description="Payment amount (must be > 0)"
    )

    payment_type: PaymentType = Field(
        ...,
        description="1=Cash, 2=RTGS, 3=NEFT, 4=UPI, 5=Cheque"
    )

    idempotency_key: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Unique key for this payment submission (required, non-empty)"
    )

    payment_date: Optional[datetime] = Field(
        default=None,
        description="When the payment was received (defaults to now)"
    )

    remarks: Optional[str] = Field(
        default=None,
        description="Free-form remarks recorded on the ledger"
    )

    actor: str = Field(
        default="system",
        min_length=1,
        max_length=100,
        description="Who is recording the payment"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "amount": "15000.00",
                "payment_type": 3,
                "idempotency_key": "pay-42-20240305-01",
                "payment_date": "2024-03-05T11:00:00",
                "remarks": "NEFT from HDFC",
                "actor": "cashier_3"
            }
        }


class PaymentPreviewRequestSchema(BaseModel):
    """Request schema for POST /customers/{customer_id}/payments/preview"""

    amount: Decimal = Field(
        ...,
        description="Payment amount to preview"
    )

    class Config:
        json_schema_extra = {
            "example": {"amount": "450.00"}
        }
