"""Audit log subscriber — records every SystemEvent on the ``armora.audit`` logger.

Registered as a global subscriber (receives ALL events) by booking_lifespan().
A failure to format or write an audit line is logged and dropped so the
event bus keeps delivering.
"""

from __future__ import annotations

import json
import logging

from armora.schemas.events import SystemEvent

logger = logging.getLogger(__name__)


async def audit_on_event(event: SystemEvent) -> None:
    """Write a SystemEvent to the audit log.

    One line per event: type, flow, source module and the JSON payload.
    """
    try:
        logger.info(
            "audit event=%s flow=%s source=%s data=%s",
            event.event_type.value,
            event.flow_id,
            event.source_module,
            json.dumps(event.data, default=str, sort_keys=True),
        )
    except Exception:
        logger.exception(
            "Failed to record audit event: %s (flow=%s)",
            event.event_type.value,
            event.flow_id,
        )
