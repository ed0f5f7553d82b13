"""Tests for the threat-indicator risk engine.

Tests cover:
- Weighted scoring with catalog weights
- Level boundaries (4/5, 9/10, 16/17)
- Recommended tier and profile text per level
- Determinism and monotonicity over every answer subset
- Partial, empty and revised answer sets
"""

from __future__ import annotations

from itertools import product

import pytest

from armora.models.enums import AssessmentPath, DisclosureQuestionId, RiskLevel, ServiceTierId
from armora.risk import THREAT_QUESTIONS, answers_from_mapping, classify_score, evaluate, make_answer
from armora.risk.questions import MAX_SCORE, get_question
from armora.schemas.risk import DisclosureAnswer

Q = DisclosureQuestionId


def _yes(*question_ids: DisclosureQuestionId) -> list[DisclosureAnswer]:
    """Answer "yes" to the given questions and "no" to the rest."""
    return [make_answer(q.id, q.id in question_ids) for q in THREAT_QUESTIONS]


class TestQuestionCatalog:
    """The fixed question set."""

    def test_seven_questions_in_order(self) -> None:
        assert [q.id for q in THREAT_QUESTIONS] == [
            Q.HAS_RECEIVED_THREATS,
            Q.HAS_LEGAL_PROCEEDINGS,
            Q.HAS_PREVIOUS_INCIDENTS,
            Q.HAS_PUBLIC_PROFILE,
            Q.REQUIRES_INTERNATIONAL_PROTECTION,
            Q.HAS_CONTROVERSIAL_WORK,
            Q.HAS_HIGH_VALUE_ASSETS,
        ]

    def test_weights(self) -> None:
        assert [q.risk_weight for q in THREAT_QUESTIONS] == [5, 4, 4, 3, 3, 3, 2]
        assert MAX_SCORE == 24

    def test_unknown_question_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown disclosure question"):
            get_question("has_pets")

    def test_make_answer_uses_catalog_weight(self) -> None:
        answer = make_answer("has_received_threats", True)
        assert answer.question_id == Q.HAS_RECEIVED_THREATS
        assert answer.risk_weight == 5


class TestScoring:
    """Score is the sum of weights over "yes" answers."""

    def test_empty_answers(self) -> None:
        """No answers → score 0, GREEN, essential."""
        result = evaluate([])
        assert result.score == 0
        assert result.level == RiskLevel.GREEN
        assert result.recommended_tier == ServiceTierId.ESSENTIAL
        assert result.answered_count == 0
        assert result.is_complete is False

    def test_all_no(self) -> None:
        result = evaluate(_yes())
        assert result.score == 0
        assert result.is_complete is True
        assert result.description.startswith("Low Risk Profile")

    def test_all_yes(self) -> None:
        result = evaluate(_yes(*[q.id for q in THREAT_QUESTIONS]))
        assert result.score == 24
        assert result.level == RiskLevel.RED

    def test_partial_prefix(self) -> None:
        """A prefix of the question set is a valid input."""
        answers = [make_answer(Q.HAS_RECEIVED_THREATS, True), make_answer(Q.HAS_LEGAL_PROCEEDINGS, False)]
        result = evaluate(answers)
        assert result.score == 5
        assert result.answered_count == 2
        assert result.is_complete is False

    def test_supplied_weight_is_ignored(self) -> None:
        """Weights always come from the catalog, never from the answer."""
        tampered = DisclosureAnswer(question_id=Q.HAS_RECEIVED_THREATS, answer=True, risk_weight=2)
        assert evaluate([tampered]).score == 5

    def test_last_answer_wins(self) -> None:
        """Revisiting and flipping a question uses the latest answer."""
        answers = [
            make_answer(Q.HAS_RECEIVED_THREATS, True),
            make_answer(Q.HAS_PUBLIC_PROFILE, True),
            make_answer(Q.HAS_RECEIVED_THREATS, False),
        ]
        result = evaluate(answers)
        assert result.score == 3
        assert result.answered_count == 2

    def test_answers_from_mapping(self) -> None:
        answers = answers_from_mapping({"has_high_value_assets": True, Q.HAS_RECEIVED_THREATS: False})
        assert [a.question_id for a in answers] == [Q.HAS_RECEIVED_THREATS, Q.HAS_HIGH_VALUE_ASSETS]
        assert evaluate(answers).score == 2


class TestLevelBoundaries:
    """Boundaries are inclusive on the lower level."""

    def test_exactly_4_is_green(self) -> None:
        result = evaluate(_yes(Q.HAS_LEGAL_PROCEEDINGS))
        assert result.score == 4
        assert result.level == RiskLevel.GREEN
        assert result.description.startswith("Low-Moderate Risk Profile")

    def test_exactly_5_is_yellow(self) -> None:
        result = evaluate(_yes(Q.HAS_RECEIVED_THREATS))
        assert result.score == 5
        assert result.level == RiskLevel.YELLOW
        assert result.recommended_tier == ServiceTierId.EXECUTIVE
        assert result.assessment_path == AssessmentPath.ENHANCED

    def test_exactly_9_is_yellow(self) -> None:
        result = evaluate(_yes(Q.HAS_RECEIVED_THREATS, Q.HAS_LEGAL_PROCEEDINGS))
        assert result.score == 9
        assert result.level == RiskLevel.YELLOW

    def test_exactly_10_is_orange(self) -> None:
        result = evaluate(_yes(Q.HAS_RECEIVED_THREATS, Q.HAS_PUBLIC_PROFILE, Q.HAS_HIGH_VALUE_ASSETS))
        assert result.score == 10
        assert result.level == RiskLevel.ORANGE
        assert result.recommended_tier == ServiceTierId.SHADOW

    def test_exactly_16_is_orange(self) -> None:
        result = evaluate(_yes(
            Q.HAS_RECEIVED_THREATS, Q.HAS_LEGAL_PROCEEDINGS, Q.HAS_PREVIOUS_INCIDENTS, Q.HAS_PUBLIC_PROFILE,
        ))
        assert result.score == 16
        assert result.level == RiskLevel.ORANGE

    def test_exactly_17_is_red(self) -> None:
        result = evaluate(_yes(
            Q.HAS_RECEIVED_THREATS,
            Q.HAS_LEGAL_PROCEEDINGS,
            Q.HAS_PUBLIC_PROFILE,
            Q.HAS_CONTROVERSIAL_WORK,
            Q.HAS_HIGH_VALUE_ASSETS,
        ))
        assert result.score == 17
        assert result.level == RiskLevel.RED
        assert result.recommended_tier == ServiceTierId.SHADOW
        assert result.recommended_protection == "Shadow Protocol with specialized security team"
        assert result.assessment_path == AssessmentPath.CRITICAL

    @pytest.mark.parametrize(
        ("score", "level"),
        [
            (0, RiskLevel.GREEN),
            (4, RiskLevel.GREEN),
            (5, RiskLevel.YELLOW),
            (9, RiskLevel.YELLOW),
            (10, RiskLevel.ORANGE),
            (16, RiskLevel.ORANGE),
            (17, RiskLevel.RED),
            (26, RiskLevel.RED),
        ],
    )
    def test_classify_score(self, score: int, level: RiskLevel) -> None:
        assert classify_score(score) == level


class TestProperties:
    """Determinism and monotonicity across all 128 answer combinations."""

    def test_deterministic(self) -> None:
        for flags in product([False, True], repeat=len(THREAT_QUESTIONS)):
            answers = [make_answer(q.id, f) for q, f in zip(THREAT_QUESTIONS, flags)]
            assert evaluate(answers) == evaluate(list(answers))

    def test_flipping_no_to_yes_never_decreases_score(self) -> None:
        for flags in product([False, True], repeat=len(THREAT_QUESTIONS)):
            base = evaluate([make_answer(q.id, f) for q, f in zip(THREAT_QUESTIONS, flags)])
            for i, flag in enumerate(flags):
                if flag:
                    continue
                flipped = list(flags)
                flipped[i] = True
                after = evaluate([make_answer(q.id, f) for q, f in zip(THREAT_QUESTIONS, flipped)])
                assert after.score == base.score + THREAT_QUESTIONS[i].risk_weight
                assert list(RiskLevel).index(after.level) >= list(RiskLevel).index(base.level)
