"""Customer Account Repository Interface

Defines the contract for customer account persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from src.domain.customer_account import CustomerAccount


class CustomerAccountRepository(ABC):
    """
    Repository interface for CustomerAccount persistence

    Methods use pessimistic locking (SELECT FOR UPDATE) to serialise
    concurrent settlements for the same customer.
    """

    @abstractmethod
    async def get_by_customer_id(
        self, customer_id: int, for_update: bool = False
    ) -> Optional[CustomerAccount]:
        """
        Retrieve account by customer ID

        Args:
            customer_id: Customer identifier
            for_update: If True, lock the row with SELECT FOR UPDATE (pessimistic lock)

        Returns:
            CustomerAccount if found, None otherwise
        """
        pass

    @abstractmethod
    async def upsert_defaults(self, customer_id: int) -> CustomerAccount:
        """
        Return the customer's account, creating a zeroed one if missing

        Args:
            customer_id: Customer identifier

        Returns:
            Existing or newly created CustomerAccount
        """
        pass

    @abstractmethod
    async def update(self, customer_id: int, fields: Dict[str, Any]) -> None:
        """
        Apply a partial update to the customer's account

        Args:
            customer_id: Customer identifier
            fields: Column name to new value
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[CustomerAccount]:
        """
        Retrieve all accounts

        Used by ledger reconciliation.

        Returns:
            List of all CustomerAccount rows
        """
        pass
