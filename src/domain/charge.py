"""Charge Domain Entity

A completed, billable fuel order awaiting payment.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, Numeric, String, Boolean
from src.domain.base import BaseModel, IdType


class Charge(BaseModel, table=True):
    """
    Charge - One fulfilled order owed by a customer

    Domain Rules:
    - amount is positive and immutable once created
    - completed_at is civil local time; its calendar date defines the day bucket
    - paid flips to True only through payment allocation, never back
    - Unpaid charges are always settled oldest-first
    """

    __tablename__ = "charges"
    __table_args__ = (
        Index('ix_charges_customer_unpaid', 'customer_id', 'paid', 'completed_at'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique charge identifier (auto-increment)"
    )

    customer_id: int = Field(
        sa_column=Column(IdType, ForeignKey("customers.id"), nullable=False),
        description="Customer owing the charge"
    )

    amount: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Charge amount (precision: 18,2)"
    )

    completed_at: datetime = Field(
        description="When the order was completed (civil local time)"
    )

    paid: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
        description="Whether the charge has been settled"
    )

    paid_at: Optional[datetime] = Field(
        default=None,
        description="When the charge was settled"
    )

    reference: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Order reference (e.g., filling request number)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Row creation timestamp"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 7,
                "customer_id": 42,
                "amount": "12500.00",
                "completed_at": "2024-03-01T14:30:00",
                "paid": False,
                "paid_at": None,
                "reference": "FR-2024-00117"
            }
        }
