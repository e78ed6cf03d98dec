"""Ledger Reconciliation Worker

Replays every customer's ledger and flags accounts whose stored balance has
drifted from it. Meant for cron (``--once``, exit status 1 on drift) or as a
long-running sidecar.

    python -m src.worker.ledger_reconciler --once
    python -m src.worker.ledger_reconciler --interval 3600
"""

import asyncio
import logging
import sys
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.customer_account_repository import SqlAlchemyCustomerAccountRepository
from src.adapter.repositories.ledger_line_repository import SqlAlchemyLedgerLineRepository
from src.app.use_cases.settlement import ReconcileLedger, ReconciliationResultDTO

logger = logging.getLogger(__name__)


def _report(result: ReconciliationResultDTO) -> None:
    if not result.discrepancies_found:
        logger.info(
            f"Ledger balanced for {result.total_accounts_checked} account(s) "
            f"({result.execution_time_ms}ms)"
        )
        return

    logger.error(
        f"Ledger drift on {result.discrepancies_found} of "
        f"{result.total_accounts_checked} account(s)"
    )
    for d in result.discrepancies:
        logger.error(
            f"  customer {d.customer_id}: account {d.account_balance} vs "
            f"ledger {d.ledger_balance} (diff {d.discrepancy})"
        )


class LedgerReconcilerWorker:
    """Runs ReconcileLedger on its own engine, read-only"""

    def __init__(self, db_uri: Optional[str] = None):
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    async def run_once(self) -> ReconciliationResultDTO:
        """
        Reconcile every account once

        Raises:
            RuntimeError: If the reconciliation use case fails
        """
        if not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Ledger reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_accounts_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=datetime.utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            result = await ReconcileLedger(
                account_repo=SqlAlchemyCustomerAccountRepository(session),
                ledger_repo=SqlAlchemyLedgerLineRepository(session),
            ).execute()

        if result.is_err():
            raise RuntimeError(f"Reconciliation failed: {result.error.message}")

        _report(result.value)
        return result.value

    async def run_forever(self, interval_seconds: int):
        """Reconcile every ``interval_seconds``; a failed pass is logged and retried next tick"""
        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Reconciliation pass failed: {e}")
            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        await self.engine.dispose()


async def main(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="Account ledger reconciliation")
    parser.add_argument("--once", action="store_true", help="Run one pass and exit")
    parser.add_argument(
        "--interval",
        type=int,
        default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Seconds between passes",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    worker = LedgerReconcilerWorker()
    try:
        if args.once:
            result = await worker.run_once()
            return 1 if result.discrepancies_found else 0
        await worker.run_forever(interval_seconds=args.interval)
    finally:
        await worker.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
