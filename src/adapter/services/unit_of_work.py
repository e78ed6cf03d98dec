from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    Settlement transaction over one AsyncSession

    The repositories of a use case share the session, so row locks taken by
    one (account FOR UPDATE, unpaid charges FOR UPDATE) are held until
    commit or rollback here.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is not None:
            await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        # Nothing to undo once the transaction has ended
        if self.session.in_transaction():
            await self.session.rollback()
