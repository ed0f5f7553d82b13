"""Threat-indicator question catalog and per-level risk profiles."""

from __future__ import annotations

from armora.models.enums import AssessmentPath, DisclosureQuestionId, RiskLevel, ServiceTierId
from armora.schemas.risk import DisclosureQuestion

# Asked in this order; weights are fixed per question.
THREAT_QUESTIONS: tuple[DisclosureQuestion, ...] = (
    DisclosureQuestion(
        id=DisclosureQuestionId.HAS_RECEIVED_THREATS,
        question="Have you received any threats in the past 12 months?",
        description=(
            "This includes verbal, written, digital threats, or any concerning communications "
            "directed at you personally or professionally."
        ),
        risk_weight=5,
    ),
    DisclosureQuestion(
        id=DisclosureQuestionId.HAS_LEGAL_PROCEEDINGS,
        question="Are you involved in any legal proceedings?",
        description=(
            "Current litigation, court cases, disputes, or legal matters that could affect "
            "your security profile."
        ),
        risk_weight=4,
    ),
    DisclosureQuestion(
        id=DisclosureQuestionId.HAS_PREVIOUS_INCIDENTS,
        question="Have you experienced security incidents before?",
        description=(
            "Any previous security breaches, stalking, harassment, or situations requiring "
            "security intervention."
        ),
        risk_weight=4,
    ),
    DisclosureQuestion(
        id=DisclosureQuestionId.HAS_PUBLIC_PROFILE,
        question="Do you have a public profile (media, social, professional)?",
        description=(
            "Public visibility through media appearances, social media presence, professional "
            "recognition, or industry prominence."
        ),
        risk_weight=3,
    ),
    DisclosureQuestion(
        id=DisclosureQuestionId.REQUIRES_INTERNATIONAL_PROTECTION,
        question="Do you travel internationally for work?",
        description=(
            "Regular international business travel, particularly to regions with varying "
            "security considerations."
        ),
        risk_weight=3,
    ),
    DisclosureQuestion(
        id=DisclosureQuestionId.HAS_CONTROVERSIAL_WORK,
        question="Does your work involve controversial decisions?",
        description=(
            "Professional responsibilities involving public policy, judicial decisions, corporate "
            "restructuring, or contentious business matters."
        ),
        risk_weight=3,
    ),
    DisclosureQuestion(
        id=DisclosureQuestionId.HAS_HIGH_VALUE_ASSETS,
        question="Do you manage high-value assets or information?",
        description=(
            "Responsibility for significant financial assets, confidential information, or "
            "high-value intellectual property."
        ),
        risk_weight=2,
    ),
)

QUESTIONS_BY_ID: dict[DisclosureQuestionId, DisclosureQuestion] = {q.id: q for q in THREAT_QUESTIONS}

MAX_SCORE: int = sum(q.risk_weight for q in THREAT_QUESTIONS)

# Upper bound (inclusive) of each level; RED has no upper bound.
LEVEL_UPPER_BOUNDS: tuple[tuple[int, RiskLevel], ...] = (
    (4, RiskLevel.GREEN),
    (9, RiskLevel.YELLOW),
    (16, RiskLevel.ORANGE),
)

LEVEL_TIERS: dict[RiskLevel, ServiceTierId] = {
    RiskLevel.GREEN: ServiceTierId.ESSENTIAL,
    RiskLevel.YELLOW: ServiceTierId.EXECUTIVE,
    RiskLevel.ORANGE: ServiceTierId.SHADOW,
    RiskLevel.RED: ServiceTierId.SHADOW,
}

LEVEL_PATHS: dict[RiskLevel, AssessmentPath] = {
    RiskLevel.GREEN: AssessmentPath.STANDARD,
    RiskLevel.YELLOW: AssessmentPath.ENHANCED,
    RiskLevel.ORANGE: AssessmentPath.SIGNIFICANT,
    RiskLevel.RED: AssessmentPath.CRITICAL,
}

# (description, recommended protection) per level
LEVEL_PROFILES: dict[RiskLevel, tuple[str, str]] = {
    RiskLevel.GREEN: (
        "Low-Moderate Risk Profile - Standard assessment with basic security measures",
        "Essential Protection Service with enhanced awareness",
    ),
    RiskLevel.YELLOW: (
        "Moderate Risk Profile - Enhanced assessment and security protocols recommended",
        "Executive Shield Protection Service",
    ),
    RiskLevel.ORANGE: (
        "Significant Risk Profile - Comprehensive security assessment and elevated protection protocols",
        "Shadow Protocol Protection Service",
    ),
    RiskLevel.RED: (
        "Critical Risk Profile - Immediate comprehensive assessment and maximum security protocols",
        "Shadow Protocol with specialized security team",
    ),
}

# Score 0 is still GREEN but reads differently from 1–4.
ZERO_SCORE_PROFILE: tuple[str, str] = (
    "Low Risk Profile - Standard security protocols appropriate",
    "Essential Protection Service",
)


def get_question(question_id: DisclosureQuestionId | str) -> DisclosureQuestion:
    """Look up a question by id.

    Raises:
        ValueError: If the id is not part of the fixed question set.
    """
    try:
        return QUESTIONS_BY_ID[DisclosureQuestionId(question_id)]
    except (KeyError, ValueError):
        msg = f"Unknown disclosure question: {question_id}"
        raise ValueError(msg) from None
