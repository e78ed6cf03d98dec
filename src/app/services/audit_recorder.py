"""Audit Recorder Interface

Defines the contract for recording account changes after a settlement commits.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, Optional


class AuditRecorder(ABC):
    """
    Abstract audit recorder

    Called after the settlement transaction has committed. Implementations
    may fail; callers log the failure and carry on.

    Implementations can record to:
    - Application log
    - Audit table
    - Webhook (HTTP POST)
    """

    @abstractmethod
    async def record(
        self,
        customer_id: int,
        before: Dict[str, Any],
        after: Dict[str, Any],
        summary: str,
        actor: str = "system",
        amount: Optional[Decimal] = None,
    ) -> bool:
        """
        Record an account change

        Args:
            customer_id: Customer whose account changed
            before: Account snapshot before the change
            after: Account snapshot after the change
            summary: Human-readable summary
            actor: Who made the change
            amount: Amount involved

        Returns:
            True if recorded, False otherwise
        """
        pass
