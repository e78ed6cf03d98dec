"""Charge Repository Interface

Defines the contract for outstanding charge access.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence
from src.domain.charge import Charge


class ChargeRepository(ABC):
    """
    Repository interface for Charge persistence

    Unpaid charges are always returned oldest-first (completed_at, then id).
    """

    @abstractmethod
    async def list_unpaid(self, customer_id: int, for_update: bool = False) -> List[Charge]:
        """
        Retrieve unpaid charges for a customer, oldest first

        Args:
            customer_id: Customer identifier
            for_update: If True, lock the rows with SELECT FOR UPDATE

        Returns:
            List of unpaid Charge ordered by completed_at ascending
        """
        pass

    @abstractmethod
    async def get_oldest_unpaid(self, customer_id: int) -> Optional[Charge]:
        """
        Retrieve the unpaid charge with the smallest completed_at

        Args:
            customer_id: Customer identifier

        Returns:
            Charge if any unpaid charge exists, None otherwise
        """
        pass

    @abstractmethod
    async def mark_paid(self, charge_ids: Sequence[int], paid_at: datetime) -> int:
        """
        Mark charges as paid

        Args:
            charge_ids: Charges to settle
            paid_at: Settlement timestamp

        Returns:
            Number of charges updated
        """
        pass
