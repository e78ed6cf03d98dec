"""Unit tests for audit recorder implementations"""

import json
import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from src.adapter.services.audit_recorder import (
    CompositeAuditRecorder,
    DatabaseAuditRecorder,
    LoggingAuditRecorder,
    WebhookAuditRecorder,
    create_audit_recorder,
)

BEFORE = {"balance": "0", "remaining_credit_limit": "500"}
AFTER = {"balance": "-200", "remaining_credit_limit": "700"}


def session_factory_with(session):
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session)


@pytest.mark.asyncio
class TestLoggingAuditRecorder:
    async def test_logs_changed_fields(self, caplog):
        recorder = LoggingAuditRecorder()

        with caplog.at_level("INFO"):
            ok = await recorder.record(42, BEFORE, AFTER, "Recharge of 200 applied.", "cashier_3", Decimal("200"))

        assert ok is True
        assert "[AUDIT] Customer: 42" in caplog.text
        assert "balance" in caplog.text


@pytest.mark.asyncio
class TestDatabaseAuditRecorder:
    async def test_writes_entry_in_own_session(self):
        session = MagicMock()
        session.add = MagicMock()
        session.commit = AsyncMock()
        recorder = DatabaseAuditRecorder(session_factory_with(session))

        ok = await recorder.record(42, BEFORE, AFTER, "summary", "cashier_3", Decimal("200"))

        assert ok is True
        entry = session.add.call_args.args[0]
        assert entry.customer_id == 42
        assert entry.action_type == "payment"
        assert entry.actor == "cashier_3"
        assert json.loads(entry.before_state) == BEFORE
        assert json.loads(entry.after_state) == AFTER
        session.commit.assert_called_once()

    async def test_write_failure_returns_false(self):
        session = MagicMock()
        session.commit = AsyncMock(side_effect=Exception("no such table: customer_audit_log"))
        recorder = DatabaseAuditRecorder(session_factory_with(session))

        ok = await recorder.record(42, BEFORE, AFTER, "summary")

        assert ok is False


@pytest.mark.asyncio
class TestWebhookAuditRecorder:
    async def test_posts_payload(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(200)

        transport = httpx.MockTransport(handler)
        real_client = httpx.AsyncClient

        with patch(
            "src.adapter.services.audit_recorder.httpx.AsyncClient",
            side_effect=lambda **kwargs: real_client(transport=transport, **kwargs),
        ):
            recorder = WebhookAuditRecorder("https://hooks.example.com/audit")
            ok = await recorder.record(42, BEFORE, AFTER, "summary", "cashier_3", Decimal("200.00"))

        assert ok is True
        assert captured["url"] == "https://hooks.example.com/audit"
        assert captured["body"]["customer_id"] == 42
        assert captured["body"]["amount"] == "200.00"
        assert captured["body"]["after"] == AFTER

    async def test_http_error_returns_false(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        real_client = httpx.AsyncClient

        with patch(
            "src.adapter.services.audit_recorder.httpx.AsyncClient",
            side_effect=lambda **kwargs: real_client(transport=transport, **kwargs),
        ):
            ok = await WebhookAuditRecorder("https://hooks.example.com/audit").record(42, BEFORE, AFTER, "s")

        assert ok is False


@pytest.mark.asyncio
class TestCompositeAuditRecorder:
    async def test_one_failure_does_not_stop_others(self):
        failing = MagicMock()
        failing.record = AsyncMock(side_effect=RuntimeError("boom"))
        working = MagicMock()
        working.record = AsyncMock(return_value=True)

        ok = await CompositeAuditRecorder([failing, working]).record(42, BEFORE, AFTER, "s")

        assert ok is True
        working.record.assert_called_once()

    async def test_all_failing_returns_false(self):
        failing = MagicMock()
        failing.record = AsyncMock(return_value=False)

        ok = await CompositeAuditRecorder([failing]).record(42, BEFORE, AFTER, "s")

        assert ok is False


class TestCreateAuditRecorder:
    def test_logging_only_by_default(self):
        assert isinstance(create_audit_recorder(), LoggingAuditRecorder)

    def test_composite_with_database_and_webhook(self):
        recorder = create_audit_recorder(
            session_factory=MagicMock(), webhook_url="https://hooks.example.com/audit"
        )

        assert isinstance(recorder, CompositeAuditRecorder)
        assert [type(r) for r in recorder.recorders] == [
            LoggingAuditRecorder,
            DatabaseAuditRecorder,
            WebhookAuditRecorder,
        ]
