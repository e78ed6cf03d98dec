from .customer_repository import SqlAlchemyCustomerRepository
from .customer_account_repository import SqlAlchemyCustomerAccountRepository
from .charge_repository import SqlAlchemyChargeRepository
from .ledger_line_repository import SqlAlchemyLedgerLineRepository

__all__ = [
    "SqlAlchemyCustomerRepository",
    "SqlAlchemyCustomerAccountRepository",
    "SqlAlchemyChargeRepository",
    "SqlAlchemyLedgerLineRepository",
]
