"""Customer Account Domain Entity

Running balance and credit-limit state of a customer. One account per customer.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, Integer, Numeric, Boolean
from src.domain.base import BaseModel, IdType


class CustomerAccount(BaseModel, table=True):
    """
    Customer Account - Balance, limit and day-limit state

    Domain Rules:
    - One account per customer (customer_id is unique)
    - Created lazily with zeroed defaults on first settlement
    - balance follows the recharge-debits convention (see ConsumedCredit)
    - remaining_credit_limit may exceed total_credit_limit
    - day_limit == 0 disables day-limit behaviour even for day_limit customers
    - is_active is recomputed after every day-limit settlement
    - Mutated only by payment allocation and charge accrual
    """

    __tablename__ = "customer_accounts"

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique account identifier (auto-increment)"
    )

    customer_id: int = Field(
        sa_column=Column(IdType, ForeignKey("customers.id"), nullable=False, unique=True, index=True),
        description="Owning customer (unique - one account per customer)"
    )

    balance: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Signed running balance (recharge decreases, charges increase)"
    )

    total_credit_limit: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Credit ceiling"
    )

    remaining_credit_limit: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Currently available credit"
    )

    day_limit: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Grace days for day-limit customers (0 = disabled)"
    )

    total_day_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Recharge funds not yet consumed by day settlement"
    )

    day_remaining_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 2), nullable=False, default=0),
        description="Leftover funds carried to the next day settlement"
    )

    is_active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True),
        description="False while the account is delinquent"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Account creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last mutation timestamp"
    )

    def snapshot(self) -> Dict[str, Any]:
        """Plain-value copy of the balance fields, used for audit before/after"""
        return {
            "balance": str(self.balance),
            "total_credit_limit": str(self.total_credit_limit),
            "remaining_credit_limit": str(self.remaining_credit_limit),
            "day_limit": self.day_limit,
            "total_day_amount": str(self.total_day_amount),
            "day_remaining_amount": str(self.day_remaining_amount),
            "is_active": self.is_active,
        }

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "customer_id": 42,
                "balance": "-200.00",
                "total_credit_limit": "500.00",
                "remaining_credit_limit": "700.00",
                "day_limit": 0,
                "total_day_amount": "0.00",
                "day_remaining_amount": "0.00",
                "is_active": True,
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-02T00:00:00Z"
            }
        }
