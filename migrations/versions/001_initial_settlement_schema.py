"""Initial settlement schema: customers, accounts, charges, ledger, audit log

Revision ID: 001_initial_settlement_schema
Revises:
Create Date: 2024-03-01
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial_settlement_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

IdType = sa.BigInteger().with_variant(sa.Integer(), "sqlite")
Money = sa.Numeric(18, 2)


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", IdType, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("billing_policy", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "customer_accounts",
        sa.Column("id", IdType, primary_key=True, autoincrement=True),
        sa.Column("customer_id", IdType, sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("balance", Money, nullable=False, server_default="0"),
        sa.Column("total_credit_limit", Money, nullable=False, server_default="0"),
        sa.Column("remaining_credit_limit", Money, nullable=False, server_default="0"),
        sa.Column("day_limit", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_day_amount", Money, nullable=False, server_default="0"),
        sa.Column("day_remaining_amount", Money, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
    )
    op.create_index(
        "ix_customer_accounts_customer_id", "customer_accounts", ["customer_id"], unique=True
    )

    op.create_table(
        "charges",
        sa.Column("id", IdType, primary_key=True, autoincrement=True),
        sa.Column("customer_id", IdType, sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("amount", Money, nullable=False),
        sa.Column("completed_at", sa.DateTime, nullable=False),
        sa.Column("paid", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("paid_at", sa.DateTime, nullable=True),
        sa.Column("reference", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )
    op.create_index(
        "ix_charges_customer_unpaid", "charges", ["customer_id", "paid", "completed_at"]
    )

    op.create_table(
        "ledger_lines",
        sa.Column("id", IdType, primary_key=True, autoincrement=True),
        sa.Column("customer_id", IdType, sa.ForeignKey("customers.id"), nullable=False),
        sa.Column(
            "direction",
            sa.Enum("INWARD", "OUTWARD", name="ledgerdirection"),
            nullable=False,
        ),
        sa.Column("credit_amount", Money, nullable=False),
        sa.Column("resulting_balance", Money, nullable=False),
        sa.Column("resulting_limit", Money, nullable=False),
        sa.Column("actor", sa.String(100), nullable=False),
        sa.Column("memo", sa.Text, nullable=True),
        sa.Column("payment_method", sa.String(20), nullable=True),
        sa.Column("idempotency_key", sa.String(255), nullable=True),
        sa.Column("received_at", sa.DateTime, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )
    op.create_index(
        "ix_ledger_lines_idempotency_key", "ledger_lines", ["idempotency_key"], unique=True
    )
    op.create_index(
        "ix_ledger_lines_customer_created", "ledger_lines", ["customer_id", "created_at"]
    )

    op.create_table(
        "customer_audit_log",
        sa.Column("id", IdType, primary_key=True, autoincrement=True),
        sa.Column("customer_id", sa.Integer, nullable=False),
        sa.Column("action_type", sa.String(50), nullable=False),
        sa.Column("actor", sa.String(100), nullable=False),
        sa.Column("summary", sa.Text, nullable=False),
        sa.Column("amount", Money, nullable=True),
        sa.Column("before_state", sa.Text, nullable=True),
        sa.Column("after_state", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )
    op.create_index("ix_customer_audit_log_customer_id", "customer_audit_log", ["customer_id"])
    op.create_index("ix_customer_audit_log_created_at", "customer_audit_log", ["created_at"])


def downgrade() -> None:
    op.drop_table("customer_audit_log")
    op.drop_table("ledger_lines")
    op.drop_table("charges")
    op.drop_table("customer_accounts")
    op.drop_table("customers")
    sa.Enum(name="ledgerdirection").drop(op.get_bind(), checkfirst=True)
