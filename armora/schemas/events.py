"""SystemEvent schema — the event type emitted by the asynchronous booking paths.

Submission, payment, storage and integration calls emit a SystemEvent.
Subscribers (the audit logger, any presentation-layer listener) consume
these events asynchronously.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """All event types emitted by the system."""

    # Submission lifecycle
    SUBMISSION_STARTED = "submission.started"
    SUBMISSION_REJECTED = "submission.rejected"
    SUBMISSION_CANCELLED = "submission.cancelled"

    # Payment
    PAYMENT_SUCCEEDED = "payment.succeeded"
    PAYMENT_FAILED = "payment.failed"

    # Assignment
    ASSIGNMENT_CONFIRMED = "assignment.confirmed"

    # Snapshots
    SNAPSHOT_SAVED = "snapshot.saved"
    SNAPSHOT_LOADED = "snapshot.loaded"
    SNAPSHOT_DELETED = "snapshot.deleted"

    # External integrations
    EXTERNAL_API_CALL = "external.api_call"
    EXTERNAL_API_RESPONSE = "external.api_response"

    # System
    SYSTEM_STARTUP = "system.startup"
    SYSTEM_SHUTDOWN = "system.shutdown"


class SystemEvent(BaseModel):
    """Core event that flows through the booking system.

    Immutable once created. Consumed by:
    - audit_on_event → writes to the audit log
    - presentation-layer subscribers → retry messaging, confirmations
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Unset for events outside a booking flow
    flow_id: uuid.UUID | None = None

    # Flexible payload
    data: dict[str, Any] = Field(default_factory=dict)

    # Metadata
    source_module: str | None = Field(default=None, description="Module that emitted this event")

    model_config = {"frozen": True}
