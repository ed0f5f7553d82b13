"""Pydantic schemas for the threat-indicator questionnaire and risk engine.

Pure data classes with no business logic. Used as inputs/outputs for the
deterministic scoring pipeline.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from armora.models.enums import AssessmentPath, DisclosureQuestionId, RiskLevel, ServiceTierId


class DisclosureQuestion(BaseModel):
    """One fixed yes/no disclosure with its catalog weight."""

    model_config = ConfigDict(frozen=True)

    id: DisclosureQuestionId
    question: str
    description: str
    risk_weight: int = Field(ge=2, le=5)


class DisclosureAnswer(BaseModel):
    """The requester's answer to one disclosure.

    ``risk_weight`` is filled from the question catalog, never from user input.
    """

    model_config = ConfigDict(frozen=True)

    question_id: DisclosureQuestionId
    answer: bool
    risk_weight: int = Field(ge=2, le=5)


class RiskAssessment(BaseModel):
    """Derived risk profile. Recomputed from answers, never stored on its own."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0)
    level: RiskLevel
    recommended_tier: ServiceTierId
    description: str
    recommended_protection: str
    assessment_path: AssessmentPath
    answered_count: int = 0        # distinct questions answered
    is_complete: bool = False      # all 7 questions answered
