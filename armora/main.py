"""Entry point — logging setup, event system lifecycle, booking flow wiring.

Usage:
    python -m armora.main

Runs a sample booking in payment bypass mode and logs every derived state.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog

from armora.audit import audit_on_event
from armora.booking.catalog import TierCatalog, default_catalog
from armora.booking.configurator import BookingConfigurator
from armora.config import settings
from armora.events import emit, start_event_system, stop_event_system, subscribe, unsubscribe
from armora.integrations.payments.client import payment_client
from armora.models.enums import DisclosureQuestionId, ServiceTierId, TimingChoice
from armora.risk.questionnaire import RiskQuestionnaire
from armora.schemas.events import EventType, SystemEvent
from armora.schemas.risk import RiskAssessment
from armora.storage.connection import close_redis
from armora.storage.history import RedisAssignmentHistory

logger = logging.getLogger(__name__)


# ── Logging setup ────────────────────────────────────────────────────


def configure_logging() -> None:
    """Configure stdlib logging and structlog from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        stream=sys.stdout,
    )
    renderer = (
        structlog.processors.JSONRenderer() if settings.is_production else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


# ── Lifespan ─────────────────────────────────────────────────────────


@asynccontextmanager
async def booking_lifespan(close_storage: bool = True) -> AsyncGenerator[None, None]:
    """Start the event system with the audit subscriber; tear down on exit."""
    logger.info("Starting Armora booking engine (env=%s)", settings.environment)
    subscribe(audit_on_event)
    await start_event_system()
    await emit(SystemEvent(event_type=EventType.SYSTEM_STARTUP, source_module="main"))
    try:
        yield
    finally:
        await emit(SystemEvent(event_type=EventType.SYSTEM_SHUTDOWN, source_module="main"))
        await stop_event_system()
        unsubscribe(audit_on_event)
        if close_storage:
            await close_redis()
        logger.info("Armora booking engine stopped")


async def start_booking_flow(
    history: RedisAssignmentHistory | None = None,
    *,
    catalog: TierCatalog | None = None,
    discount_eligible: bool = False,
    assessment: RiskAssessment | None = None,
) -> BookingConfigurator:
    """Create a configurator seeded with previously used destinations."""
    recent = await history.recent_destinations() if history is not None else []
    return BookingConfigurator(
        catalog if catalog is not None else default_catalog,
        discount_eligible=discount_eligible,
        assessment=assessment,
        recent_destinations=recent,
    )


async def run_demo() -> None:
    """Walk one booking from disclosures to confirmation."""
    questionnaire = RiskQuestionnaire()
    for question_id in DisclosureQuestionId:
        questionnaire.answer(question_id, question_id == DisclosureQuestionId.HAS_PUBLIC_PROFILE)
    assessment = questionnaire.finalize()

    async with booking_lifespan(close_storage=False):
        configurator = await start_booking_flow(assessment=assessment)
        logger.info("Next: %s", configurator.state.guidance_message)

        configurator.set_origin("123 Main St")
        configurator.set_destination("Heathrow Airport")
        logger.info("Next: %s", configurator.select_tier(ServiceTierId.EXECUTIVE).guidance_message)
        logger.info("Next: %s", configurator.set_timing(TimingChoice.IMMEDIATE).guidance_message)
        logger.info("Next: %s", configurator.accept_all_terms().guidance_message)

        result = await configurator.submit(payment_client)
        detail = result.assignment.payment_token if result.assignment else result.failure_reason
        logger.info("Submission %s: %s", result.status.value, detail)


if __name__ == "__main__":
    configure_logging()
    asyncio.run(run_demo())
