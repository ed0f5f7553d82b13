"""Validation helpers shared by step derivation and the configurator.

Each helper answers one question about a draft. Helpers return None (or an
empty list) when the condition is met and a user-facing message otherwise.
Only out-of-model references raise.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from armora.booking.catalog import TERMS, TERMS_BY_ID
from armora.booking.errors import InvalidReferenceError
from armora.models.enums import TermsId, TimingChoice
from armora.schemas.booking import BookingDraft


def is_blank(value: str | None) -> bool:
    """True for None, empty, or whitespace-only text."""
    return value is None or not value.strip()


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def location_problem(draft: BookingDraft) -> str | None:
    """Check both ends of the journey are filled in."""
    if is_blank(draft.destination_location):
        return "Enter your secure destination"
    if is_blank(draft.origin_location):
        return "Enter your commencement location"
    return None


def require_scheduled_at(draft: BookingDraft) -> datetime:
    """Return the scheduled commencement of a SCHEDULED draft.

    Raises:
        InvalidReferenceError: If timing is SCHEDULED but no date-time is set.
    """
    if draft.scheduled_at is None:
        msg = "Timing is SCHEDULED but no scheduled date-time is set"
        raise InvalidReferenceError(msg)
    return draft.scheduled_at


def timing_problem(draft: BookingDraft, now: datetime, min_lead_minutes: int = 0) -> str | None:
    """Check a commencement time is chosen and, if scheduled, still ahead.

    Args:
        draft: Draft to check.
        now: Reference time for the "not in the past" rule.
        min_lead_minutes: Minimum advance notice for scheduled bookings.

    Raises:
        InvalidReferenceError: If timing is SCHEDULED without a date-time.
    """
    if draft.timing_choice is None:
        return "Choose when protection should commence"

    if draft.timing_choice != TimingChoice.SCHEDULED:
        return None

    scheduled = as_utc(require_scheduled_at(draft))
    reference = as_utc(now)
    if scheduled < reference:
        return "Scheduled time is in the past, please choose a future date and time"
    if min_lead_minutes > 0 and scheduled < reference + timedelta(minutes=min_lead_minutes):
        return _lead_time_message(min_lead_minutes)
    return None


def _lead_time_message(minutes: int) -> str:
    if minutes % 60 == 0:
        hours = minutes // 60
        unit = "hour" if hours == 1 else "hours"
        return f"Minimum {hours} {unit} advance booking required"
    return f"Minimum {minutes} minutes advance booking required"


def pending_terms(draft: BookingDraft) -> list[TermsId]:
    """Acknowledgements not yet accepted, in catalog order.

    Missing entries count as not accepted.

    Raises:
        InvalidReferenceError: If the draft carries an unknown acknowledgement.
    """
    for key in draft.terms_accepted:
        if key not in TERMS_BY_ID:
            msg = f"Unknown terms acknowledgement: {key}"
            raise InvalidReferenceError(msg)
    return [t.id for t in TERMS if not draft.terms_accepted.get(t.id, False)]


def terms_problem(draft: BookingDraft) -> str | None:
    """Describe which acknowledgements are still outstanding."""
    pending = pending_terms(draft)
    if not pending:
        return None
    labels = [TERMS_BY_ID[t].label for t in pending]
    if len(labels) == 1:
        joined = labels[0]
    else:
        joined = ", ".join(labels[:-1]) + " and " + labels[-1]
    return f"Please accept the {joined} to continue"
