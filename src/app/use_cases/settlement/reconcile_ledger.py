"""ReconcileLedger Use Case

Compares each account balance against the balance reproduced from its
ledger lines to detect drift.
"""

import logging
import time
from datetime import datetime
from typing import List
from libs.result import Result, Return, Error
from src.app.repositories.customer_account_repository import CustomerAccountRepository
from src.app.repositories.ledger_line_repository import LedgerLineRepository
from .dtos import LedgerDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class ReconcileLedger:
    """
    Use Case: Reconcile account balances against the ledger

    Business Rules:
    1. Expected balance = sum of signed ledger amounts
       (inward lines negative, outward lines positive)
    2. Any account whose balance differs is reported
    3. Does NOT modify any data
    """

    def __init__(
        self,
        account_repo: CustomerAccountRepository,
        ledger_repo: LedgerLineRepository,
    ):
        self.account_repo = account_repo
        self.ledger_repo = ledger_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        """
        Execute ledger reconciliation

        Returns:
            Result[ReconciliationResultDTO]: Reconciliation result with any discrepancies
        """
        start_time = time.time()
        reconciliation_time = datetime.utcnow()

        try:
            logger.info("Starting account ledger reconciliation")

            accounts = await self.account_repo.get_all()
            total_accounts = len(accounts)

            discrepancies: List[LedgerDiscrepancyDTO] = []

            for account in accounts:
                ledger_balance = await self.ledger_repo.get_signed_total(account.customer_id)

                if account.balance != ledger_balance:
                    discrepancy = LedgerDiscrepancyDTO(
                        customer_id=account.customer_id,
                        account_id=account.id,
                        account_balance=account.balance,
                        ledger_balance=ledger_balance,
                        discrepancy=account.balance - ledger_balance,
                    )
                    discrepancies.append(discrepancy)

                    logger.warning(
                        f"Discrepancy found for customer {account.customer_id} "
                        f"(account_id={account.id}): "
                        f"account_balance={account.balance}, "
                        f"ledger_balance={ledger_balance}, "
                        f"discrepancy={discrepancy.discrepancy}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {total_accounts} accounts in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total_accounts} accounts balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(
                ReconciliationResultDTO(
                    total_accounts_checked=total_accounts,
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code="RECONCILIATION_FAILED",
                    message="Failed to reconcile account ledger",
                    reason=str(e),
                )
            )
