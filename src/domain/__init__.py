from .base import BaseModel, IdType
from .money import ConsumedCredit
from .customer import Customer, BillingPolicy
from .customer_account import CustomerAccount
from .charge import Charge
from .ledger_line import LedgerLine, LedgerDirection
from .audit_entry import AuditEntry

__all__ = [
    "BaseModel",
    "IdType",
    "ConsumedCredit",
    "Customer",
    "BillingPolicy",
    "CustomerAccount",
    "Charge",
    "LedgerLine",
    "LedgerDirection",
    "AuditEntry",
]
