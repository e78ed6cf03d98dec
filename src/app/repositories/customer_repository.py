"""Customer Repository Interface

Defines the contract for customer lookups.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.customer import Customer


class CustomerRepository(ABC):
    """Repository interface for Customer persistence"""

    @abstractmethod
    async def get_by_id(self, customer_id: int) -> Optional[Customer]:
        """
        Retrieve customer by ID

        Args:
            customer_id: Customer identifier

        Returns:
            Customer if found, None otherwise
        """
        pass
