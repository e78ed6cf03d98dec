"""Audit Entry Domain Entity

Best-effort record of account changes made by settlements.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String, Text
from src.domain.base import BaseModel, IdType


class AuditEntry(BaseModel, table=True):
    """
    Audit Entry - Before/after snapshot of an account change

    Written after the settlement commits; losing an entry never
    invalidates the settlement itself.
    """

    __tablename__ = "customer_audit_log"
    __table_args__ = (
        Index('ix_customer_audit_log_customer_id', 'customer_id'),
        Index('ix_customer_audit_log_created_at', 'created_at'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique audit entry identifier (auto-increment)"
    )

    customer_id: int = Field(description="Customer whose account changed")

    action_type: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Kind of change (e.g., 'payment')"
    )

    actor: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Who made the change"
    )

    summary: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Human-readable summary"
    )

    amount: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 2), nullable=True),
        description="Amount involved"
    )

    before_state: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="JSON snapshot of the account before the change"
    )

    after_state: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="JSON snapshot of the account after the change"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Entry timestamp"
    )
