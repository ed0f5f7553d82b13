"""Pydantic schemas for the booking configurator.

Catalog entries (tiers, scenarios, terms), the mutable draft, and the
derived quote/state objects recomputed after every draft change.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from armora.models.enums import (
    BookingStep,
    ScenarioId,
    ServiceTierId,
    SubmissionStatus,
    TermsId,
    TimingChoice,
)
from armora.schemas.risk import RiskAssessment

# ── Catalog entries ──────────────────────────────────────────────────


class ServiceTier(BaseModel):
    """A protection service offering. Catalog data, not user data."""

    model_config = ConfigDict(frozen=True)

    id: ServiceTierId
    display_name: str
    hourly_rate: Decimal
    minimum_billable_hours: int = 2
    description: str = ""
    response_time: str = ""        # e.g. "2-4 min"
    features: tuple[str, ...] = ()


class Scenario(BaseModel):
    """A journey type mapped to the tier it usually calls for."""

    model_config = ConfigDict(frozen=True)

    id: ScenarioId
    label: str
    description: str = ""
    recommended_tier: ServiceTierId


class TermsAcknowledgement(BaseModel):
    """One independently toggleable acknowledgement."""

    model_config = ConfigDict(frozen=True)

    id: TermsId
    label: str


# ── Draft ────────────────────────────────────────────────────────────


class BookingDraft(BaseModel):
    """The in-progress protection request.

    Mutated only through BookingConfigurator; every field may be partial.
    ``origin_location`` starts as the requester's live position label and
    can be overridden.
    """

    scenario: ScenarioId | None = None
    selected_tier_id: ServiceTierId | None = None
    origin_location: str = "Current location"
    destination_location: str = ""
    timing_choice: TimingChoice | None = None
    scheduled_at: datetime | None = None
    terms_accepted: dict[TermsId, bool] = Field(
        default_factory=lambda: {t: False for t in TermsId}
    )


class PriceQuote(BaseModel):
    """Price for a tier at its minimum billable duration."""

    model_config = ConfigDict(frozen=True)

    tier_id: ServiceTierId
    hourly_rate: Decimal
    billable_hours: int
    base_fee: Decimal
    discount_applied: bool
    discount_amount: Decimal
    final_fee: Decimal
    currency: str = "GBP"


class DraftState(BaseModel):
    """Authoritative derived view of a draft. Recomputed on every mutation."""

    model_config = ConfigDict(frozen=True)

    first_incomplete_step: BookingStep | None
    incomplete_steps: tuple[BookingStep, ...] = ()
    quote: PriceQuote | None = None
    is_submittable: bool
    guidance_message: str
    scenario_skipped: bool = False
    recommended_tier_id: ServiceTierId | None = None
    deployment_info: str = ""


# ── Hand-off records ─────────────────────────────────────────────────


class DraftSnapshot(BaseModel):
    """Serializable export of a draft and the last assessment.

    Produced on demand for an external persistence collaborator; the core
    never writes it anywhere itself.
    """

    draft: BookingDraft
    assessment: RiskAssessment | None = None
    recent_destinations: list[str] = Field(default_factory=list)
    discount_eligible: bool = False
    exported_at: datetime


class PaymentOutcome(BaseModel):
    """Result returned by the payment collaborator."""

    model_config = ConfigDict(frozen=True)

    success: bool
    token: str | None = None           # opaque success token
    failure_reason: str | None = None


class ConfirmedAssignment(BaseModel):
    """Read-only record handed to the history collaborator after payment."""

    model_config = ConfigDict(frozen=True)

    draft: BookingDraft
    quote: PriceQuote
    payment_token: str
    summary: dict[str, Any] = Field(default_factory=dict)
    assessment: RiskAssessment | None = None
    confirmed_at: datetime


class SubmissionResult(BaseModel):
    """What a submit attempt produced, for user-facing messaging."""

    status: SubmissionStatus
    state: DraftState
    assignment: ConfirmedAssignment | None = None
    failure_reason: str | None = None
