"""SQLAlchemy implementation of ChargeRepository

Unpaid charges are always read oldest-first.
"""

from datetime import datetime
from typing import List, Optional, Sequence
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.charge_repository import ChargeRepository
from src.domain.charge import Charge


class SqlAlchemyChargeRepository(ChargeRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _unpaid(self, customer_id: int):
        return (
            select(Charge)
            .where(Charge.customer_id == customer_id)
            .where(Charge.paid == False)  # noqa: E712
            .order_by(Charge.completed_at.asc(), Charge.id.asc())
        )

    async def list_unpaid(self, customer_id: int, for_update: bool = False) -> List[Charge]:
        """
        Retrieve unpaid charges, oldest first

        Args:
            customer_id: Customer identifier
            for_update: If True, locks the rows with SELECT FOR UPDATE

        Returns:
            List of unpaid Charge
        """
        stmt = self._unpaid(customer_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_oldest_unpaid(self, customer_id: int) -> Optional[Charge]:
        result = await self.session.execute(self._unpaid(customer_id).limit(1))
        return result.scalars().first()

    async def mark_paid(self, charge_ids: Sequence[int], paid_at: datetime) -> int:
        """
        Mark charges as paid

        Only charges still unpaid are touched, so the returned count can be
        lower than len(charge_ids).
        """
        if not charge_ids:
            return 0

        stmt = (
            update(Charge)
            .where(Charge.id.in_(list(charge_ids)))
            .where(Charge.paid == False)  # noqa: E712
            .values(paid=True, paid_at=paid_at)
        )
        result = await self.session.execute(stmt)
        return result.rowcount
