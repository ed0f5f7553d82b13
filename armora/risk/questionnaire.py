"""Incremental threat-indicator questionnaire.

Holds the answers given so far and the current question position. The
running assessment is re-evaluated from the full answer set on every read,
so flipping an earlier answer is reflected immediately.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from armora.models.enums import DisclosureQuestionId
from armora.risk.engine import evaluate, make_answer
from armora.risk.questions import THREAT_QUESTIONS, get_question
from armora.schemas.risk import DisclosureAnswer, DisclosureQuestion, RiskAssessment

logger = logging.getLogger(__name__)


class AssessmentIncompleteError(ValueError):
    """Raised when finalizing before every disclosure has an answer."""


class RiskQuestionnaire:
    """Walks the requester through the 7 disclosures, one at a time."""

    def __init__(self, initial_answers: Mapping[DisclosureQuestionId | str, bool] | None = None) -> None:
        self._answers: dict[DisclosureQuestionId, bool] = {}
        for question_id, value in (initial_answers or {}).items():
            self._answers[get_question(question_id).id] = bool(value)
        self._index = 0
        self._finalized: RiskAssessment | None = None

    @property
    def current_question(self) -> DisclosureQuestion:
        return THREAT_QUESTIONS[self._index]

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def is_last_question(self) -> bool:
        return self._index == len(THREAT_QUESTIONS) - 1

    @property
    def is_complete(self) -> bool:
        """True once every question in the fixed set has an answer."""
        return all(q.id in self._answers for q in THREAT_QUESTIONS)

    @property
    def answers(self) -> list[DisclosureAnswer]:
        """Answers given so far, in catalog order."""
        return [make_answer(q.id, self._answers[q.id]) for q in THREAT_QUESTIONS if q.id in self._answers]

    @property
    def current_assessment(self) -> RiskAssessment:
        """Running indicator for the answers given so far."""
        return evaluate(self.answers)

    @property
    def finalized(self) -> RiskAssessment | None:
        return self._finalized

    def answer(self, question_id: DisclosureQuestionId | str, value: bool) -> RiskAssessment:
        """Record (or change) an answer and advance past the current question.

        Answering a question other than the current one is allowed; the
        position only advances when the current question is answered.
        A finalized questionnaire is reopened by any change.
        """
        question = get_question(question_id)
        self._answers[question.id] = bool(value)
        self._finalized = None

        if question.id == self.current_question.id and not self.is_last_question:
            self._index += 1

        assessment = self.current_assessment
        logger.debug(
            "Disclosure answered: %s=%s (score=%d, level=%s)",
            question.id.value,
            value,
            assessment.score,
            assessment.level.value,
        )
        return assessment

    def previous(self) -> DisclosureQuestion:
        """Step back one question. Answers are kept."""
        if self._index > 0:
            self._index -= 1
        return self.current_question

    def go_to(self, question_id: DisclosureQuestionId | str) -> DisclosureQuestion:
        """Jump to a specific question to revisit it."""
        target = get_question(question_id)
        self._index = next(i for i, q in enumerate(THREAT_QUESTIONS) if q.id == target.id)
        return self.current_question

    def finalize(self) -> RiskAssessment:
        """Return the final assessment once every question is answered.

        Raises:
            AssessmentIncompleteError: If any question is still unanswered.
        """
        missing = [q.id.value for q in THREAT_QUESTIONS if q.id not in self._answers]
        if missing:
            msg = f"Cannot finalize risk assessment, unanswered: {missing}"
            raise AssessmentIncompleteError(msg)

        self._finalized = self.current_assessment
        logger.info(
            "Risk assessment finalized: score=%d level=%s recommended=%s",
            self._finalized.score,
            self._finalized.level.value,
            self._finalized.recommended_tier.value,
        )
        return self._finalized
