"""SQLAlchemy implementation of LedgerLineRepository

Provides the append-only account ledger, with duplicate payments rejected
by the unique constraint on idempotency_key.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.ledger_line_repository import LedgerLineRepository
from src.domain.ledger_line import LedgerLine, LedgerDirection


class SqlAlchemyLedgerLineRepository(LedgerLineRepository):
    """
    SQLAlchemy implementation of LedgerLineRepository

    Features:
    - Idempotency enforcement via unique idempotency_key constraint
    - Immutable append-only lines
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(
        self,
        customer_id: int,
        direction: LedgerDirection,
        credit_amount: Decimal,
        resulting_balance: Decimal,
        resulting_limit: Decimal,
        actor: str,
        memo: Optional[str] = None,
        payment_method: Optional[str] = None,
        idempotency_key: Optional[str] = None,
        received_at: Optional[datetime] = None,
    ) -> LedgerLine:
        """
        Append a ledger line

        Returns:
            Created LedgerLine with generated ID

        Raises:
            IntegrityError: If idempotency_key already exists (concurrent duplicate payment)
        """
        line = LedgerLine(
            customer_id=customer_id,
            direction=direction,
            credit_amount=credit_amount,
            resulting_balance=resulting_balance,
            resulting_limit=resulting_limit,
            actor=actor,
            memo=memo,
            payment_method=payment_method,
            idempotency_key=idempotency_key,
            received_at=received_at,
        )
        self.session.add(line)
        await self.session.flush()
        await self.session.refresh(line)
        return line

    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[LedgerLine]:
        stmt = select(LedgerLine).where(LedgerLine.idempotency_key == idempotency_key)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_customer(
        self, customer_id: int, limit: int = 20, offset: int = 0
    ) -> Tuple[List[LedgerLine], int]:
        """
        Retrieve ledger lines for a customer with pagination

        Args:
            customer_id: Customer identifier
            limit: Maximum number of lines to return
            offset: Number of lines to skip

        Returns:
            Tuple of (list of LedgerLine, total count)
        """
        # Get total count
        count_stmt = select(func.count()).select_from(LedgerLine).where(
            LedgerLine.customer_id == customer_id
        )
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar()

        # Newest first; id breaks ties within the same timestamp
        stmt = (
            select(LedgerLine)
            .where(LedgerLine.customer_id == customer_id)
            .order_by(LedgerLine.created_at.desc(), LedgerLine.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        lines = list(result.scalars().all())

        return lines, total

    async def get_signed_total(self, customer_id: int) -> Decimal:
        """
        Replay the ledger for a customer

        Summed in Python so the result stays an exact Decimal on every backend.
        """
        stmt = select(LedgerLine.direction, LedgerLine.credit_amount).where(
            LedgerLine.customer_id == customer_id
        )
        result = await self.session.execute(stmt)
        return sum(
            (LedgerDirection(direction).signed(Decimal(amount)) for direction, amount in result.all()),
            Decimal("0"),
        )
