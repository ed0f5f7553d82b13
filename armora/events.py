"""In-process event bus for SystemEvents.

Only the asynchronous booking paths publish: submission, payment, snapshot
storage and payment gateway calls. Draft mutations are synchronous and only
log. Subscribers are the audit logger and any presentation-layer listener
(retry banners, confirmation screens).

Usage:
    from armora.events import emit, subscribe

    subscribe(show_retry_banner, [EventType.PAYMENT_FAILED])

    await emit(SystemEvent(
        event_type=EventType.PAYMENT_FAILED,
        flow_id=configurator.flow_id,
        data={"reason": "Card declined"},
    ))
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Coroutine
from typing import Any

from armora.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[SystemEvent], Coroutine[Any, Any, None]]


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or type(handler).__name__


class EventBus:
    """Queues published events and fans them out from one background worker.

    A slow or failing subscriber never blocks or breaks the publisher: each
    handler runs in isolation and its errors are only logged.
    """

    def __init__(self) -> None:
        self._catch_all: list[EventHandler] = []
        self._by_type: defaultdict[EventType, list[EventHandler]] = defaultdict(list)
        self._pending: asyncio.Queue[SystemEvent] | None = None
        self._worker: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def subscribe(self, handler: EventHandler, event_types: list[EventType] | None = None) -> None:
        """Register ``handler`` for ``event_types``, or for every event when None."""
        if event_types is None:
            self._catch_all.append(handler)
            logger.info("Subscribed %s to all events", _handler_name(handler))
            return
        for event_type in event_types:
            self._by_type[event_type].append(handler)
        logger.info("Subscribed %s to %s", _handler_name(handler), [t.value for t in event_types])

    def unsubscribe(self, handler: EventHandler) -> None:
        """Remove every registration of ``handler``. Unknown handlers are ignored."""
        self._catch_all = [h for h in self._catch_all if h is not handler]
        for event_type, handlers in self._by_type.items():
            self._by_type[event_type] = [h for h in handlers if h is not handler]

    def handlers_for(self, event_type: EventType) -> list[EventHandler]:
        """Catch-all handlers first, then the ones registered for this type."""
        return [*self._catch_all, *self._by_type.get(event_type, ())]

    async def publish(self, event: SystemEvent) -> None:
        """Queue an event for the worker, starting it on first use."""
        pending = self._pending
        if pending is None or not self.running:
            pending = self._open()
        await pending.put(event)
        logger.debug("Event queued: %s (flow=%s)", event.event_type.value, event.flow_id)

    async def deliver(self, event: SystemEvent) -> None:
        """Run every matching handler now and wait for all of them."""
        handlers = self.handlers_for(event.event_type)
        if not handlers:
            return
        outcomes = await asyncio.gather(
            *(self._call(handler, event) for handler in handlers),
            return_exceptions=True,
        )
        failed = sum(isinstance(outcome, Exception) for outcome in outcomes)
        if failed:
            logger.error("%d of %d handlers failed for %s", failed, len(handlers), event.event_type.value)

    async def start(self) -> None:
        self._open()
        logger.info(
            "Event bus started: %d catch-all, %d typed subscriptions",
            len(self._catch_all),
            sum(len(v) for v in self._by_type.values()),
        )

    async def stop(self) -> None:
        """Deliver whatever is still queued, then stop the worker."""
        if self._pending is not None and self.running:
            await self._pending.join()
        if self._worker is not None and not self._worker.done():
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
        self._worker = None
        self._pending = None
        logger.info("Event bus stopped")

    def _open(self) -> asyncio.Queue[SystemEvent]:
        self._pending = asyncio.Queue()
        self._worker = asyncio.create_task(self._drain(self._pending))
        return self._pending

    async def _drain(self, pending: asyncio.Queue[SystemEvent]) -> None:
        while True:
            event = await pending.get()
            try:
                await self.deliver(event)
            except Exception:
                logger.exception("Event worker failed on %s", event.event_type.value)
            finally:
                pending.task_done()

    async def _call(self, handler: EventHandler, event: SystemEvent) -> None:
        try:
            await handler(event)
        except Exception:
            logger.exception("Handler %s failed for %s", _handler_name(handler), event.event_type.value)
            raise


# Process-wide bus used by the booking paths
bus = EventBus()


def subscribe(handler: EventHandler, event_types: list[EventType] | None = None) -> None:
    bus.subscribe(handler, event_types)


def unsubscribe(handler: EventHandler) -> None:
    bus.unsubscribe(handler)


async def emit(event: SystemEvent) -> None:
    """Publish an event without waiting for subscribers."""
    await bus.publish(event)


async def emit_nowait(event: SystemEvent) -> None:
    """Deliver an event immediately, bypassing the queue."""
    await bus.deliver(event)


async def start_event_system() -> None:
    """Start the worker. Called from booking_lifespan()."""
    await bus.start()


async def stop_event_system() -> None:
    await bus.stop()
