"""
List Ledger Lines Use Case

Retrieves a customer's ledger history with pagination.
"""
from libs.result import Result, Return
from src.app.repositories.ledger_line_repository import LedgerLineRepository
from .dtos import LedgerLineDTO, ListLedgerLinesResponseDTO


class ListLedgerLines:
    """
    Use case: View account ledger

    Lines are ordered by created_at DESC (most recent first).
    """

    def __init__(self, ledger_repo: LedgerLineRepository):
        self.ledger_repo = ledger_repo

    async def execute(
        self, customer_id: int, limit: int = 20, offset: int = 0
    ) -> Result[ListLedgerLinesResponseDTO]:
        """
        List ledger lines for a customer with pagination.

        Args:
            customer_id: Customer identifier
            limit: Maximum number of lines to return (default 20)
            offset: Number of lines to skip (default 0)

        Returns:
            Result[ListLedgerLinesResponseDTO]: Paginated ledger
        """
        lines, total = await self.ledger_repo.list_by_customer(
            customer_id=customer_id,
            limit=limit,
            offset=offset,
        )

        line_dtos = [
            LedgerLineDTO(
                id=line.id,
                direction=line.direction.value if hasattr(line.direction, "value") else line.direction,
                credit_amount=line.credit_amount,
                resulting_balance=line.resulting_balance,
                resulting_limit=line.resulting_limit,
                actor=line.actor,
                memo=line.memo,
                payment_method=line.payment_method,
                received_at=line.received_at,
                created_at=line.created_at,
            )
            for line in lines
        ]

        return Return.ok(
            ListLedgerLinesResponseDTO(
                lines=line_dtos,
                total=total,
                limit=limit,
                offset=offset,
            )
        )
