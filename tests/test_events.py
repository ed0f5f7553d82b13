"""Tests for the event system, the audit subscriber and the booking lifespan."""

from __future__ import annotations

import logging
import uuid
from unittest.mock import AsyncMock, patch

import pytest

from armora import events
from armora.audit import audit_on_event
from armora.booking.catalog import TierCatalog
from armora.main import booking_lifespan, start_booking_flow
from armora.schemas.events import EventType, SystemEvent

FLOW_ID = uuid.UUID("12345678-1234-5678-1234-567812345678")


class Collector:
    """Async handler that records what it receives."""

    def __init__(self) -> None:
        self.received: list[SystemEvent] = []

    async def __call__(self, event: SystemEvent) -> None:
        self.received.append(event)


class TestDispatch:
    @pytest.mark.asyncio()
    async def test_global_and_typed_subscribers(self):
        everything = Collector()
        payments_only = Collector()
        events.subscribe(everything)
        events.subscribe(payments_only, [EventType.PAYMENT_FAILED])
        try:
            await events.emit_nowait(SystemEvent(event_type=EventType.SUBMISSION_STARTED, flow_id=FLOW_ID))
            await events.emit_nowait(SystemEvent(event_type=EventType.PAYMENT_FAILED, flow_id=FLOW_ID))
        finally:
            events.unsubscribe(everything)
            events.unsubscribe(payments_only)

        assert [e.event_type for e in everything.received] == [
            EventType.SUBMISSION_STARTED,
            EventType.PAYMENT_FAILED,
        ]
        assert [e.event_type for e in payments_only.received] == [EventType.PAYMENT_FAILED]

    @pytest.mark.asyncio()
    async def test_failing_handler_is_isolated(self):
        """One handler raising does not stop the others."""
        good = Collector()

        async def broken(event: SystemEvent) -> None:
            raise RuntimeError("boom")

        events.subscribe(broken)
        events.subscribe(good)
        try:
            await events.emit_nowait(SystemEvent(event_type=EventType.PAYMENT_SUCCEEDED))
        finally:
            events.unsubscribe(broken)
            events.unsubscribe(good)

        assert len(good.received) == 1

    @pytest.mark.asyncio()
    async def test_queued_events_drained_on_stop(self):
        collector = Collector()
        events.subscribe(collector)
        try:
            await events.start_event_system()
            await events.emit(SystemEvent(event_type=EventType.SNAPSHOT_SAVED, flow_id=FLOW_ID))
            await events.stop_event_system()
        finally:
            events.unsubscribe(collector)

        assert [e.flow_id for e in collector.received] == [FLOW_ID]


class TestAudit:
    @pytest.mark.asyncio()
    async def test_audit_line(self, caplog):
        caplog.set_level(logging.INFO, logger="armora.audit")
        event = SystemEvent(
            event_type=EventType.PAYMENT_FAILED,
            flow_id=FLOW_ID,
            data={"reason": "Card declined"},
            source_module="booking.configurator",
        )

        await audit_on_event(event)

        assert "audit event=payment.failed" in caplog.text
        assert str(FLOW_ID) in caplog.text
        assert '"reason": "Card declined"' in caplog.text


class TestLifespan:
    @pytest.mark.asyncio()
    async def test_startup_and_shutdown_events(self):
        collector = Collector()
        events.subscribe(collector)
        try:
            with patch("armora.main.close_redis", new_callable=AsyncMock) as mock_close:
                async with booking_lifespan():
                    pass
        finally:
            events.unsubscribe(collector)

        assert [e.event_type for e in collector.received] == [
            EventType.SYSTEM_STARTUP,
            EventType.SYSTEM_SHUTDOWN,
        ]
        mock_close.assert_awaited_once()
        assert audit_on_event not in events.bus.handlers_for(EventType.SYSTEM_STARTUP)

    @pytest.mark.asyncio()
    async def test_keep_storage_open(self):
        with patch("armora.main.close_redis", new_callable=AsyncMock) as mock_close:
            async with booking_lifespan(close_storage=False):
                pass
        mock_close.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_flow_seeded_from_history(self):
        history = AsyncMock()
        history.recent_destinations = AsyncMock(return_value=["The Shard", "Soho"])

        configurator = await start_booking_flow(history, discount_eligible=True)

        assert configurator.recent_destinations == ["The Shard", "Soho"]
        assert configurator.discount_eligible is True

    @pytest.mark.asyncio()
    async def test_flow_keeps_supplied_empty_catalog(self):
        empty = TierCatalog([])

        configurator = await start_booking_flow(catalog=empty)

        assert configurator.catalog is empty
