from .unit_of_work import UnitOfWork
from .audit_recorder import AuditRecorder
from .clock import Clock, SystemClock, FixedClock

__all__ = [
    "UnitOfWork",
    "AuditRecorder",
    "Clock",
    "SystemClock",
    "FixedClock",
]
