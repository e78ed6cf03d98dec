from .customer_repository import CustomerRepository
from .customer_account_repository import CustomerAccountRepository
from .charge_repository import ChargeRepository
from .ledger_line_repository import LedgerLineRepository

__all__ = [
    "CustomerRepository",
    "CustomerAccountRepository",
    "ChargeRepository",
    "LedgerLineRepository",
]
