"""SQLAlchemy implementation of CustomerAccountRepository

Provides persistence for CustomerAccount entities with pessimistic locking
support so that concurrent settlements for one customer serialise.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.customer_account_repository import CustomerAccountRepository
from src.domain.customer_account import CustomerAccount


class SqlAlchemyCustomerAccountRepository(CustomerAccountRepository):
    """
    SQLAlchemy implementation of CustomerAccountRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Lazy creation with zeroed defaults
    - Partial updates that stamp updated_at
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_customer_id(
        self, customer_id: int, for_update: bool = False
    ) -> Optional[CustomerAccount]:
        """
        Retrieve account by customer ID with optional row-level locking

        Args:
            customer_id: Customer identifier
            for_update: If True, locks the row with SELECT FOR UPDATE (prevents concurrent modifications)

        Returns:
            CustomerAccount if found, None otherwise
        """
        stmt = select(CustomerAccount).where(CustomerAccount.customer_id == customer_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert_defaults(self, customer_id: int) -> CustomerAccount:
        """
        Return the existing account or create a zeroed one

        Raises:
            IntegrityError: If a concurrent transaction created the account first
        """
        account = await self.get_by_customer_id(customer_id)
        if account:
            return account

        account = CustomerAccount(customer_id=customer_id)
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def update(self, customer_id: int, fields: Dict[str, Any]) -> None:
        """
        Apply a partial update and stamp updated_at

        Note:
            Should be called within a transaction with the account already locked
        """
        stmt = (
            update(CustomerAccount)
            .where(CustomerAccount.customer_id == customer_id)
            .values(**fields, updated_at=datetime.utcnow())
        )
        await self.session.execute(stmt)

    async def get_all(self) -> List[CustomerAccount]:
        stmt = select(CustomerAccount).order_by(CustomerAccount.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
