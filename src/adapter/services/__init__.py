from .unit_of_work import SqlAlchemyUnitOfWork
from .audit_recorder import (
    LoggingAuditRecorder,
    DatabaseAuditRecorder,
    WebhookAuditRecorder,
    CompositeAuditRecorder,
    create_audit_recorder,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingAuditRecorder",
    "DatabaseAuditRecorder",
    "WebhookAuditRecorder",
    "CompositeAuditRecorder",
    "create_audit_recorder",
]
