"""Domain enums for the protection request engine."""

from __future__ import annotations

from armora.models.enums import (
    AssessmentPath,
    BookingStep,
    DisclosureQuestionId,
    RiskLevel,
    ScenarioId,
    ServiceTierId,
    SubmissionStatus,
    TermsId,
    TimingChoice,
)

__all__ = [
    "AssessmentPath",
    "BookingStep",
    "DisclosureQuestionId",
    "RiskLevel",
    "ScenarioId",
    "ServiceTierId",
    "SubmissionStatus",
    "TermsId",
    "TimingChoice",
]
