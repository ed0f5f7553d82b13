"""Booking configurator — draft state machine, step derivation and submission."""

from armora.booking.catalog import SCENARIOS, SERVICE_TIERS, TERMS, TierCatalog, default_catalog
from armora.booking.configurator import BookingConfigurator
from armora.booking.errors import DraftLockedError, InvalidReferenceError, SubmissionInProgressError
from armora.booking.recent import RecentDestinations
from armora.booking.steps import derive_state, draft_summary
from armora.schemas.booking import BookingDraft, DraftSnapshot, DraftState, PriceQuote, ServiceTier

__all__ = [
    "BookingConfigurator",
    "derive_state",
    "draft_summary",
    "RecentDestinations",
    "TierCatalog",
    "default_catalog",
    "SERVICE_TIERS",
    "SCENARIOS",
    "TERMS",
    "InvalidReferenceError",
    "DraftLockedError",
    "SubmissionInProgressError",
    "BookingDraft",
    "DraftSnapshot",
    "DraftState",
    "PriceQuote",
    "ServiceTier",
]
