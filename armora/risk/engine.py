"""Risk assessment engine — weighted threat-indicator scoring.

Pure Python. Implements:
- Score: sum of catalog weights over every disclosure answered "yes"
- Level classification (boundaries inclusive on the lower level)
- Recommended service tier per level

Thresholds:
  0–4   → GREEN   (essential)
  5–9   → YELLOW  (executive)
  10–16 → ORANGE  (shadow)
  17+   → RED     (shadow, specialised team)

Callable after every single answer for a running indicator; partial and
empty answer sets are valid. No state is kept between calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from armora.models.enums import DisclosureQuestionId, RiskLevel
from armora.risk.questions import (
    LEVEL_PATHS,
    LEVEL_PROFILES,
    LEVEL_TIERS,
    LEVEL_UPPER_BOUNDS,
    THREAT_QUESTIONS,
    ZERO_SCORE_PROFILE,
    get_question,
)
from armora.schemas.risk import DisclosureAnswer, RiskAssessment


def classify_score(score: int) -> RiskLevel:
    """Classify a disclosure score into a risk level."""
    for upper, level in LEVEL_UPPER_BOUNDS:
        if score <= upper:
            return level
    return RiskLevel.RED


def make_answer(question_id: DisclosureQuestionId | str, answer: bool) -> DisclosureAnswer:
    """Build a DisclosureAnswer carrying the catalog weight for its question."""
    question = get_question(question_id)
    return DisclosureAnswer(question_id=question.id, answer=answer, risk_weight=question.risk_weight)


def answers_from_mapping(data: Mapping[DisclosureQuestionId | str, bool]) -> list[DisclosureAnswer]:
    """Convert ``{question_id: bool}`` into answers in catalog order."""
    normalized = {get_question(k).id: bool(v) for k, v in data.items()}
    return [make_answer(q.id, normalized[q.id]) for q in THREAT_QUESTIONS if q.id in normalized]


def evaluate(answers: Iterable[DisclosureAnswer]) -> RiskAssessment:
    """Evaluate a (possibly partial) set of disclosure answers.

    Weights are always taken from the question catalog. If the same question
    appears more than once, the last answer wins, matching a user revisiting
    and flipping an earlier answer.

    Args:
        answers: Any prefix or subset of the fixed question set.

    Returns:
        RiskAssessment with score, level, recommended tier and profile text.
    """
    latest: dict[DisclosureQuestionId, bool] = {}
    for a in answers:
        latest[a.question_id] = a.answer

    score = sum(get_question(qid).risk_weight for qid, yes in latest.items() if yes)
    level = classify_score(score)

    if score == 0:
        description, recommended_protection = ZERO_SCORE_PROFILE
    else:
        description, recommended_protection = LEVEL_PROFILES[level]

    return RiskAssessment(
        score=score,
        level=level,
        recommended_tier=LEVEL_TIERS[level],
        description=description,
        recommended_protection=recommended_protection,
        assessment_path=LEVEL_PATHS[level],
        answered_count=len(latest),
        is_complete=len(latest) == len(THREAT_QUESTIONS),
    )
