"""Customer Domain Entity

Identity and billing-policy selector for a credit customer.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import String
from src.domain.base import BaseModel, IdType


class BillingPolicy(str, Enum):
    """Mutually exclusive rule sets governing how a payment is allocated"""
    PREPAID = "prepaid"
    POSTPAID = "postpaid"
    DAY_LIMIT = "day_limit"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["BillingPolicy"]:
        """Return the policy for a stored value, or None if it is not recognised"""
        try:
            return cls(raw)
        except ValueError:
            return None


class Customer(BaseModel, table=True):
    """
    Customer - Owner of exactly one credit account

    Domain Rules:
    - billing_policy selects the settlement branch (prepaid, postpaid, day_limit)
    - billing_policy is stored as plain text so that a corrupt value can be
      detected and rejected instead of failing on load
    - Policy must not change once charge history exists
    """

    __tablename__ = "customers"

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique customer identifier (auto-increment)"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Customer display name"
    )

    billing_policy: str = Field(
        sa_column=Column(String(20), nullable=False),
        description="Billing policy (prepaid, postpaid, day_limit)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Customer creation timestamp"
    )

    @property
    def policy(self) -> Optional[BillingPolicy]:
        return BillingPolicy.parse(self.billing_policy)

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 42,
                "name": "Shree Ganesh Transport",
                "billing_policy": "day_limit",
                "created_at": "2024-01-01T00:00:00Z"
            }
        }
