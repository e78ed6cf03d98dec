"""Ledger Line Repository Interface

Defines the contract for the append-only account ledger.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from src.domain.ledger_line import LedgerLine, LedgerDirection


class LedgerLineRepository(ABC):
    """
    Repository interface for LedgerLine persistence

    Lines are immutable and append-only.
    A repeated idempotency_key violates a unique constraint.
    """

    @abstractmethod
    async def append(
        self,
        customer_id: int,
        direction: LedgerDirection,
        credit_amount: Decimal,
        resulting_balance: Decimal,
        resulting_limit: Decimal,
        actor: str,
        memo: Optional[str] = None,
        payment_method: Optional[str] = None,
        idempotency_key: Optional[str] = None,
        received_at: Optional[datetime] = None,
    ) -> LedgerLine:
        """
        Append a ledger line

        Returns:
            Created LedgerLine with generated ID

        Raises:
            IntegrityError: If idempotency_key already exists
        """
        pass

    @abstractmethod
    async def get_by_idempotency_key(self, idempotency_key: str) -> Optional[LedgerLine]:
        """
        Retrieve the line recorded for an idempotency key

        Args:
            idempotency_key: Client-supplied payment key

        Returns:
            LedgerLine if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_customer(
        self, customer_id: int, limit: int = 20, offset: int = 0
    ) -> Tuple[List[LedgerLine], int]:
        """
        Retrieve ledger lines for a customer, newest first

        Returns:
            Tuple of (lines, total count)
        """
        pass

    @abstractmethod
    async def get_signed_total(self, customer_id: int) -> Decimal:
        """
        Sum of signed line amounts for a customer

        Inward lines count negative, outward lines positive. With no lines
        the total is zero.

        Returns:
            Balance reproduced by replaying the ledger
        """
        pass
