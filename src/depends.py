from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.audit_recorder import create_audit_recorder
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.audit_recorder import AuditRecorder
from src.app.services.clock import Clock, SystemClock

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

_audit_recorder = create_audit_recorder(
    session_factory=AsyncSessionLocal if ApplicationConfig.AUDIT_LOG_TO_DATABASE else None,
    webhook_url=ApplicationConfig.AUDIT_WEBHOOK_URL,
)
_clock = SystemClock(ApplicationConfig.BUSINESS_TIMEZONE)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_audit_recorder() -> AuditRecorder:
    return _audit_recorder


def get_clock() -> Clock:
    return _clock
