"""Domain enums used across the risk engine, booking configurator and schemas.

All enums use str mixin so snapshots and event payloads serialize to plain strings.
"""

from __future__ import annotations

from enum import Enum


class DisclosureQuestionId(str, Enum):
    """The 7 threat-indicator disclosures, in the order they are asked."""

    HAS_RECEIVED_THREATS = "has_received_threats"
    HAS_LEGAL_PROCEEDINGS = "has_legal_proceedings"
    HAS_PREVIOUS_INCIDENTS = "has_previous_incidents"
    HAS_PUBLIC_PROFILE = "has_public_profile"
    REQUIRES_INTERNATIONAL_PROTECTION = "requires_international_protection"
    HAS_CONTROVERSIAL_WORK = "has_controversial_work"
    HAS_HIGH_VALUE_ASSETS = "has_high_value_assets"


class RiskLevel(str, Enum):
    """Coarse bucketing of the weighted disclosure score."""

    GREEN = "GREEN"      # 0–4
    YELLOW = "YELLOW"    # 5–9
    ORANGE = "ORANGE"    # 10–16
    RED = "RED"          # 17+


class AssessmentPath(str, Enum):
    """Follow-up assessment depth implied by the risk level."""

    STANDARD = "standard"
    ENHANCED = "enhanced"
    SIGNIFICANT = "significant"
    CRITICAL = "critical"


class ServiceTierId(str, Enum):
    """Protection service offerings."""

    ESSENTIAL = "essential"
    EXECUTIVE = "executive"
    SHADOW = "shadow"
    CLIENT_VEHICLE = "client-vehicle"


class ScenarioId(str, Enum):
    """Journey types the requester may pick to narrow the recommendation."""

    MEDICAL = "medical"
    BUSINESS = "business"
    EVENT = "event"
    TRAVEL = "travel"
    GENERAL = "general"


class TimingChoice(str, Enum):
    """When protection should commence."""

    IMMEDIATE = "now"
    PLUS_30_MIN = "30min"
    PLUS_1_HOUR = "1hour"
    SCHEDULED = "schedule"


class TermsId(str, Enum):
    """Acknowledgements the requester must accept before submitting."""

    TERMS_OF_SERVICE = "terms_of_service"
    PRIVACY_POLICY = "privacy_policy"
    CANCELLATION_POLICY = "cancellation_policy"


class BookingStep(str, Enum):
    """Booking flow steps, in priority order."""

    LOCATIONS = "locations"
    SCENARIO = "scenario"
    SERVICE_TIER = "service_tier"
    TIMING = "timing"
    TERMS = "terms"


class SubmissionStatus(str, Enum):
    """Outcome of a single submission attempt."""

    CONFIRMED = "confirmed"
    PAYMENT_FAILED = "payment_failed"
    NOT_SUBMITTABLE = "not_submittable"
