"""Risk assessment engine — weighted threat-indicator scoring."""

from armora.risk.engine import answers_from_mapping, classify_score, evaluate, make_answer
from armora.risk.questionnaire import AssessmentIncompleteError, RiskQuestionnaire
from armora.risk.questions import THREAT_QUESTIONS
from armora.schemas.risk import DisclosureAnswer, DisclosureQuestion, RiskAssessment

__all__ = [
    "evaluate",
    "classify_score",
    "make_answer",
    "answers_from_mapping",
    "RiskQuestionnaire",
    "AssessmentIncompleteError",
    "THREAT_QUESTIONS",
    "DisclosureAnswer",
    "DisclosureQuestion",
    "RiskAssessment",
]
