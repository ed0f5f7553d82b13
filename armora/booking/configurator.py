"""Booking configurator — owns one protection request draft.

Every mutation goes through a single path that re-runs derive_state(), so
the derived state is never stale. Submission hands the final fee to the
payment collaborator; the draft is read-only while that call is
outstanding and stays exactly as it was if the call fails or is cancelled.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from decimal import Decimal

from armora.booking.catalog import TierCatalog, default_catalog, get_scenario, get_terms
from armora.booking.collaborators import HistoryCollaborator, PaymentCollaborator
from armora.booking.errors import DraftLockedError, InvalidReferenceError, SubmissionInProgressError
from armora.booking.recent import RecentDestinations
from armora.booking.steps import derive_state, draft_summary
from armora.config import settings
from armora.events import emit
from armora.models.enums import ScenarioId, ServiceTierId, SubmissionStatus, TermsId, TimingChoice
from armora.schemas.booking import (
    BookingDraft,
    ConfirmedAssignment,
    DraftSnapshot,
    DraftState,
    PaymentOutcome,
    SubmissionResult,
)
from armora.schemas.events import EventType, SystemEvent
from armora.schemas.risk import RiskAssessment

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BookingConfigurator:
    """Manages the draft, derived state and submission for a single booking flow."""

    def __init__(
        self,
        catalog: TierCatalog | None = None,
        *,
        discount_eligible: bool = False,
        assessment: RiskAssessment | None = None,
        recent_destinations: Iterable[str] = (),
        draft: BookingDraft | None = None,
        flow_id: uuid.UUID | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.flow_id = flow_id or uuid.uuid4()
        self._catalog = catalog if catalog is not None else default_catalog
        self._discount_eligible = discount_eligible
        self._assessment = assessment
        self._recent = RecentDestinations(recent_destinations)
        self._clock = clock or _utc_now
        self._draft = (
            draft.model_copy(deep=True)
            if draft is not None
            else BookingDraft(origin_location=settings.booking.default_origin_label)
        )
        self._submitting = False
        self._consumed = False
        self._state = self._recompute()

    # ── Read side ────────────────────────────────────────────────────

    @property
    def draft(self) -> BookingDraft:
        """A copy of the current draft. Mutate through the configurator only."""
        return self._draft.model_copy(deep=True)

    @property
    def state(self) -> DraftState:
        return self._state

    @property
    def catalog(self) -> TierCatalog:
        return self._catalog

    @property
    def assessment(self) -> RiskAssessment | None:
        return self._assessment

    @property
    def discount_eligible(self) -> bool:
        return self._discount_eligible

    @property
    def recent_destinations(self) -> list[str]:
        return self._recent.items

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def is_consumed(self) -> bool:
        return self._consumed

    # ── Mutations ────────────────────────────────────────────────────

    def set_origin(self, location: str) -> DraftState:
        """Set the commencement location (free text)."""
        self._check_writable()
        self._draft.origin_location = location
        return self._commit("origin")

    def set_destination(self, location: str) -> DraftState:
        """Set the secure destination (free text)."""
        self._check_writable()
        self._draft.destination_location = location
        return self._commit("destination")

    def select_scenario(self, scenario_id: ScenarioId | str | None) -> DraftState:
        """Pick a journey type, or None to skip. Never changes the selected tier."""
        self._check_writable()
        self._draft.scenario = get_scenario(scenario_id).id if scenario_id is not None else None
        return self._commit("scenario")

    def select_tier(self, tier_id: ServiceTierId | str | None) -> DraftState:
        """Select a service tier explicitly.

        Raises:
            InvalidReferenceError: If the tier is not in this configurator's catalog.
        """
        self._check_writable()
        self._draft.selected_tier_id = self._catalog.get(tier_id).id if tier_id is not None else None
        return self._commit("tier")

    def set_timing(self, choice: TimingChoice | str | None, scheduled_at: datetime | None = None) -> DraftState:
        """Choose when protection commences.

        A scheduled date-time is kept only for SCHEDULED and cleared otherwise.

        Raises:
            InvalidReferenceError: If SCHEDULED is chosen without a date-time.
        """
        self._check_writable()
        timing = TimingChoice(choice) if choice is not None else None
        if timing == TimingChoice.SCHEDULED and scheduled_at is None:
            msg = "SCHEDULED timing requires a scheduled date-time"
            raise InvalidReferenceError(msg)

        self._draft.timing_choice = timing
        self._draft.scheduled_at = scheduled_at if timing == TimingChoice.SCHEDULED else None
        return self._commit("timing")

    def set_acknowledgement(self, terms_id: TermsId | str, accepted: bool) -> DraftState:
        """Toggle one acknowledgement."""
        self._check_writable()
        self._draft.terms_accepted[get_terms(terms_id).id] = accepted
        return self._commit("terms")

    def accept_all_terms(self) -> DraftState:
        self._check_writable()
        for terms_id in TermsId:
            self._draft.terms_accepted[terms_id] = True
        return self._commit("terms")

    def set_discount_eligibility(self, eligible: bool) -> DraftState:
        """Update the externally decided member discount eligibility."""
        self._check_writable()
        self._discount_eligible = eligible
        return self._commit("discount")

    def apply_assessment(self, assessment: RiskAssessment | None) -> DraftState:
        """Attach (or clear) the advisory risk assessment. Never selects a tier."""
        self._check_writable()
        self._assessment = assessment
        return self._commit("assessment")

    def refresh(self) -> DraftState:
        """Re-derive state without changes, e.g. after time has passed."""
        self._state = self._recompute()
        return self._state

    # ── Snapshot export ──────────────────────────────────────────────

    def export_snapshot(self) -> DraftSnapshot:
        """Serializable copy of the draft and last assessment."""
        return DraftSnapshot(
            draft=self.draft,
            assessment=self._assessment,
            recent_destinations=self._recent.items,
            discount_eligible=self._discount_eligible,
            exported_at=self._clock(),
        )

    @classmethod
    def from_snapshot(
        cls,
        snapshot: DraftSnapshot,
        catalog: TierCatalog | None = None,
        *,
        flow_id: uuid.UUID | None = None,
        clock: Clock | None = None,
    ) -> BookingConfigurator:
        """Rebuild a configurator from an exported snapshot.

        Raises:
            InvalidReferenceError: If the snapshot references tiers or
                scenarios missing from the catalog.
        """
        return cls(
            catalog,
            discount_eligible=snapshot.discount_eligible,
            assessment=snapshot.assessment,
            recent_destinations=snapshot.recent_destinations,
            draft=snapshot.draft,
            flow_id=flow_id,
            clock=clock,
        )

    # ── Submission ───────────────────────────────────────────────────

    async def submit(
        self,
        payment: PaymentCollaborator,
        history: HistoryCollaborator | None = None,
    ) -> SubmissionResult:
        """Charge the final fee and, on success, hand off the confirmed assignment.

        The draft cannot be mutated while the payment call is outstanding.
        A failed payment leaves the draft untouched and returns the reason
        for retry messaging. Cancelling the awaiting task releases the lock
        and leaves the draft as it was before the call.

        Raises:
            SubmissionInProgressError: If another submission is outstanding.
            DraftLockedError: If the draft was already confirmed.
        """
        if self._submitting:
            msg = f"Submission already in progress (flow={self.flow_id})"
            raise SubmissionInProgressError(msg)
        if self._consumed:
            msg = f"Draft already confirmed (flow={self.flow_id})"
            raise DraftLockedError(msg)

        state = self.refresh()
        if not state.is_submittable or state.quote is None:
            await emit(SystemEvent(
                event_type=EventType.SUBMISSION_REJECTED,
                flow_id=self.flow_id,
                data={
                    "first_incomplete_step": state.first_incomplete_step.value if state.first_incomplete_step else None,
                },
                source_module="booking.configurator",
            ))
            return SubmissionResult(
                status=SubmissionStatus.NOT_SUBMITTABLE,
                state=state,
                failure_reason=state.guidance_message,
            )

        # Tier, terms and destination are all satisfied once the request is accepted
        self._recent.record(self._draft.destination_location)

        quote = state.quote
        summary = draft_summary(self._draft, self._catalog, quote)

        self._submitting = True
        try:
            await emit(SystemEvent(
                event_type=EventType.SUBMISSION_STARTED,
                flow_id=self.flow_id,
                data={"tier": quote.tier_id.value, "final_fee": str(quote.final_fee)},
                source_module="booking.configurator",
            ))
            outcome = await self._charge(payment, quote.final_fee, summary)
        except asyncio.CancelledError:
            logger.info("Submission cancelled, draft preserved (flow=%s)", self.flow_id)
            await emit(SystemEvent(
                event_type=EventType.SUBMISSION_CANCELLED,
                flow_id=self.flow_id,
                source_module="booking.configurator",
            ))
            raise
        finally:
            self._submitting = False

        if not outcome.success or not outcome.token:
            reason = outcome.failure_reason or "Payment was not completed"
            logger.warning("Payment failed (flow=%s): %s", self.flow_id, reason)
            await emit(SystemEvent(
                event_type=EventType.PAYMENT_FAILED,
                flow_id=self.flow_id,
                data={"reason": reason, "final_fee": str(quote.final_fee)},
                source_module="booking.configurator",
            ))
            return SubmissionResult(
                status=SubmissionStatus.PAYMENT_FAILED,
                state=self.refresh(),
                failure_reason=reason,
            )

        self._consumed = True
        assignment = ConfirmedAssignment(
            draft=self.draft,
            quote=quote,
            payment_token=outcome.token,
            summary=summary,
            assessment=self._assessment,
            confirmed_at=self._clock(),
        )
        await emit(SystemEvent(
            event_type=EventType.PAYMENT_SUCCEEDED,
            flow_id=self.flow_id,
            data={"final_fee": str(quote.final_fee), "discount_applied": quote.discount_applied},
            source_module="booking.configurator",
        ))

        if history is not None:
            await history.record(assignment)

        await emit(SystemEvent(
            event_type=EventType.ASSIGNMENT_CONFIRMED,
            flow_id=self.flow_id,
            data={"tier": quote.tier_id.value, "destination": summary["secure_destination"]},
            source_module="booking.configurator",
        ))
        logger.info(
            "Assignment confirmed: flow=%s tier=%s fee=%s",
            self.flow_id,
            quote.tier_id.value,
            quote.final_fee,
        )
        return SubmissionResult(
            status=SubmissionStatus.CONFIRMED,
            state=self._state,
            assignment=assignment,
        )

    async def _charge(
        self,
        payment: PaymentCollaborator,
        amount: Decimal,
        summary: dict[str, object],
    ) -> PaymentOutcome:
        """Call the payment collaborator; any raised error counts as a failed payment."""
        try:
            return await payment.charge(amount, summary)
        except Exception as exc:
            logger.exception("Payment collaborator raised (flow=%s)", self.flow_id)
            return PaymentOutcome(success=False, failure_reason=f"Payment could not be processed: {exc}")

    # ── Internals ────────────────────────────────────────────────────

    def _check_writable(self) -> None:
        if self._submitting:
            msg = f"Draft is read-only while a submission is outstanding (flow={self.flow_id})"
            raise DraftLockedError(msg)
        if self._consumed:
            msg = f"Draft already confirmed (flow={self.flow_id})"
            raise DraftLockedError(msg)

    def _recompute(self) -> DraftState:
        state = derive_state(
            self._draft,
            self._catalog,
            discount_eligible=self._discount_eligible,
            recommendation=self._assessment,
            now=self._clock(),
        )
        return state

    def _commit(self, field: str) -> DraftState:
        self._state = self._recompute()
        logger.debug(
            "Draft updated: %s (flow=%s, next=%s, submittable=%s)",
            field,
            self.flow_id,
            self._state.first_incomplete_step.value if self._state.first_incomplete_step else None,
            self._state.is_submittable,
        )
        return self._state
