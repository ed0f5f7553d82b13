"""Booking step derivation — the authoritative view of a draft.

Steps are checked in a fixed priority order and the first unmet one is
reported, whatever order the requester filled things in:

  1. LOCATIONS     origin and destination non-empty
  2. SCENARIO      optional, flagged as skipped when unset (never blocks)
  3. SERVICE_TIER  a tier is selected (a recommendation is only surfaced)
  4. TIMING        commencement chosen; scheduled times must be ahead
  5. TERMS         every acknowledgement accepted

Pure Python, no I/O. The caller decides what to do with the next step.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from armora.booking.catalog import TierCatalog, get_scenario
from armora.booking.guards import (
    as_utc,
    location_problem,
    require_scheduled_at,
    terms_problem,
    timing_problem,
)
from armora.calculators.pricing import compute_quote
from armora.config import settings
from armora.models.enums import BookingStep, ServiceTierId, TimingChoice
from armora.schemas.booking import BookingDraft, DraftState, PriceQuote, ServiceTier
from armora.schemas.risk import RiskAssessment

STEP_ORDER: tuple[BookingStep, ...] = (
    BookingStep.LOCATIONS,
    BookingStep.SCENARIO,
    BookingStep.SERVICE_TIER,
    BookingStep.TIMING,
    BookingStep.TERMS,
)

# Steps that never block submission
OPTIONAL_STEPS: frozenset[BookingStep] = frozenset({BookingStep.SCENARIO})

READY_MESSAGE = "Ready to request protection"


def resolve_recommendation(
    draft: BookingDraft,
    catalog: TierCatalog,
    hint: RiskAssessment | ServiceTierId | None = None,
) -> ServiceTierId | None:
    """Pick the advisory tier to surface.

    The risk assessment hint wins; otherwise the selected scenario's tier.
    Recommendations outside the catalog are dropped rather than raised.
    """
    recommended: ServiceTierId | None = None
    if isinstance(hint, RiskAssessment):
        recommended = hint.recommended_tier
    elif hint is not None:
        recommended = ServiceTierId(hint)
    elif draft.scenario is not None:
        recommended = get_scenario(draft.scenario).recommended_tier

    if recommended is not None and recommended not in catalog:
        return None
    return recommended


def deployment_info(draft: BookingDraft, tier: ServiceTier | None) -> str:
    """Human-readable commencement line for the selected timing."""
    if tier is None or draft.timing_choice is None:
        return ""
    if draft.timing_choice == TimingChoice.IMMEDIATE:
        return f"CPO deployment: {tier.response_time}" if tier.response_time else "CPO deploys now"
    if draft.timing_choice == TimingChoice.PLUS_30_MIN:
        return "Protection commences in 30 minutes"
    if draft.timing_choice == TimingChoice.PLUS_1_HOUR:
        return "Protection commences in 1 hour"
    if draft.scheduled_at is None:
        return "Select date and time"
    return f"Protection commences: {as_utc(draft.scheduled_at).strftime('%d/%m/%Y, %H:%M:%S')}"


def _tier_message(catalog: TierCatalog, recommended: ServiceTierId | None) -> str:
    if recommended is None:
        return "Select a protection service"
    return f"Select a protection service. Recommended for you: {catalog.get(recommended).display_name}"


def derive_state(
    draft: BookingDraft,
    catalog: TierCatalog,
    *,
    discount_eligible: bool = False,
    recommendation: RiskAssessment | ServiceTierId | None = None,
    now: datetime | None = None,
    min_lead_minutes: int | None = None,
) -> DraftState:
    """Derive next step, quote and submittability from a draft.

    Calling it twice on an unchanged draft (with the same ``now``) returns
    equal results.

    Args:
        draft: The booking draft to evaluate.
        catalog: Tier catalog the draft's tier id must belong to.
        discount_eligible: Member discount eligibility, supplied upstream.
        recommendation: Risk assessment or tier id to surface as advice.
        now: Reference time for scheduled bookings (defaults to current UTC).
        min_lead_minutes: Override for the configured scheduling lead time.

    Returns:
        DraftState with first incomplete step, quote and guidance.

    Raises:
        InvalidReferenceError: Unknown tier/scenario/terms id, or a
            SCHEDULED timing without a date-time.
    """
    reference = now or datetime.now(timezone.utc)
    lead = settings.booking.scheduled_min_lead_minutes if min_lead_minutes is None else min_lead_minutes

    tier = catalog.get(draft.selected_tier_id) if draft.selected_tier_id is not None else None
    if draft.scenario is not None:
        get_scenario(draft.scenario)
    if draft.timing_choice == TimingChoice.SCHEDULED:
        require_scheduled_at(draft)

    quote: PriceQuote | None = compute_quote(tier, discount_eligible) if tier is not None else None
    recommended = resolve_recommendation(draft, catalog, recommendation)

    problems: dict[BookingStep, str] = {}
    if (msg := location_problem(draft)) is not None:
        problems[BookingStep.LOCATIONS] = msg
    if tier is None:
        problems[BookingStep.SERVICE_TIER] = _tier_message(catalog, recommended)
    if (msg := timing_problem(draft, reference, lead)) is not None:
        problems[BookingStep.TIMING] = msg
    if (msg := terms_problem(draft)) is not None:
        problems[BookingStep.TERMS] = msg

    incomplete = tuple(step for step in STEP_ORDER if step in problems)
    first = incomplete[0] if incomplete else None

    if first is None:
        guidance = READY_MESSAGE
        if quote is not None:
            guidance = f"{READY_MESSAGE}: £{quote.final_fee}"
    else:
        guidance = problems[first]

    return DraftState(
        first_incomplete_step=first,
        incomplete_steps=incomplete,
        quote=quote,
        is_submittable=first is None,
        guidance_message=guidance,
        scenario_skipped=draft.scenario is None,
        recommended_tier_id=recommended,
        deployment_info=deployment_info(draft, tier),
    )


def draft_summary(draft: BookingDraft, catalog: TierCatalog, quote: PriceQuote) -> dict[str, Any]:
    """Summary handed to the payment collaborator alongside the final fee."""
    tier = catalog.get(quote.tier_id)
    scheduled = None
    if draft.timing_choice == TimingChoice.SCHEDULED and draft.scheduled_at is not None:
        scheduled = as_utc(draft.scheduled_at).isoformat()

    return {
        "selected_service": tier.id.value,
        "service_name": tier.display_name,
        "service_rate": f"£{quote.hourly_rate}/hr",
        "commencement_location": draft.origin_location.strip(),
        "secure_destination": draft.destination_location.strip(),
        "scenario": draft.scenario.value if draft.scenario else None,
        "commencement_time": draft.timing_choice.value if draft.timing_choice else None,
        "scheduled_date_time": scheduled,
        "is_immediate": draft.timing_choice == TimingChoice.IMMEDIATE,
        "estimated_service_fee": str(quote.final_fee),
        "original_service_fee": str(quote.base_fee),
        "discount_applied": quote.discount_applied,
        "discount_amount": str(quote.discount_amount),
        "currency": quote.currency,
    }
