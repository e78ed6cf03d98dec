"""Audit Recorder Implementations

Concrete recorders for account changes made by settlements.
"""

import json
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional
import httpx
from src.app.services.audit_recorder import AuditRecorder
from src.domain.audit_entry import AuditEntry

logger = logging.getLogger(__name__)


class LoggingAuditRecorder(AuditRecorder):
    """
    Audit recorder that writes to the application log

    Useful for development and testing, or as a fallback.
    """

    async def record(
        self,
        customer_id: int,
        before: Dict[str, Any],
        after: Dict[str, Any],
        summary: str,
        actor: str = "system",
        amount: Optional[Decimal] = None,
    ) -> bool:
        changed = {k: f"{before.get(k)} -> {v}" for k, v in after.items() if before.get(k) != v}
        logger.info(
            f"[AUDIT] Customer: {customer_id}, Actor: {actor}, Amount: {amount}, "
            f"Summary: {summary}, Changes: {changed}"
        )
        return True


class DatabaseAuditRecorder(AuditRecorder):
    """
    Audit recorder that inserts into customer_audit_log

    Uses its own session so the entry is written outside the settlement
    transaction, which has already committed when this runs.
    """

    def __init__(self, session_factory: Callable[[], Any], action_type: str = "payment"):
        """
        Args:
            session_factory: Callable returning an async session context manager
            action_type: Value stored in action_type
        """
        self.session_factory = session_factory
        self.action_type = action_type

    async def record(
        self,
        customer_id: int,
        before: Dict[str, Any],
        after: Dict[str, Any],
        summary: str,
        actor: str = "system",
        amount: Optional[Decimal] = None,
    ) -> bool:
        entry = AuditEntry(
            customer_id=customer_id,
            action_type=self.action_type,
            actor=actor,
            summary=summary,
            amount=amount,
            before_state=json.dumps(before, default=str),
            after_state=json.dumps(after, default=str),
        )
        try:
            async with self.session_factory() as session:
                session.add(entry)
                await session.commit()
            return True
        except Exception as e:
            logger.error(f"Failed to write audit entry for customer {customer_id}: {e}")
            return False


class WebhookAuditRecorder(AuditRecorder):
    """
    Audit recorder that POSTs a JSON payload to a webhook
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def record(
        self,
        customer_id: int,
        before: Dict[str, Any],
        after: Dict[str, Any],
        summary: str,
        actor: str = "system",
        amount: Optional[Decimal] = None,
    ) -> bool:
        payload = {
            "type": "account_change",
            "customer_id": customer_id,
            "actor": actor,
            "amount": str(amount) if amount is not None else None,
            "summary": summary,
            "before": before,
            "after": after,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    content=json.dumps(payload, default=str),
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(f"Audit webhook sent for customer {customer_id} to {self.webhook_url}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send audit webhook for customer {customer_id}: {e}")
            return False


class CompositeAuditRecorder(AuditRecorder):
    """
    Audit recorder that delegates to several recorders

    One failing recorder does not stop the others.
    """

    def __init__(self, recorders: List[AuditRecorder]):
        self.recorders = recorders

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
        Returns:
            True if at least one recorder succeeded, False otherwise
        """
        success = False
        for recorder in self.recorders:
            try:
                if await recorder.record(customer_id, before, after, summary, actor, amount):
                    success = True
            except Exception as e:
                logger.error(f"Audit recorder {type(recorder).__name__} failed: {e}")
        return success


def create_audit_recorder(
    session_factory: Optional[Callable[[], Any]] = None,
    webhook_url: Optional[str] = None,
) -> AuditRecorder:
    """
    Factory function to create the configured audit recorder

    Args:
        session_factory: If provided, entries are also written to customer_audit_log
        webhook_url: If provided, entries are also POSTed to this URL

    Returns:
        LoggingAuditRecorder alone, or a CompositeAuditRecorder around it
    """
    recorders: List[AuditRecorder] = [LoggingAuditRecorder()]

    if session_factory is not None:
        recorders.append(DatabaseAuditRecorder(session_factory))

    if webhook_url:
        recorders.append(WebhookAuditRecorder(webhook_url))

    if len(recorders) == 1:
        return recorders[0]

    return CompositeAuditRecorder(recorders)
