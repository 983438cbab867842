"""Phase progress scoring, roadmap suggestions and optional review."""

from .phases import suggest_phases
from .review import PhaseReviewer, extract_keywords, parse_review_reply
from .rubrics import RUBRIC_REGISTRY, Check, Rubric, RubricEntry, ScoringContext, select_rubric
from .scorer import PhaseProgressScorer, clamp_score, status_for_score

__all__ = [
    "Check",
    "PhaseProgressScorer",
    "PhaseReviewer",
    "RUBRIC_REGISTRY",
    "Rubric",
    "RubricEntry",
    "ScoringContext",
    "clamp_score",
    "extract_keywords",
    "parse_review_reply",
    "select_rubric",
    "status_for_score",
    "suggest_phases",
]
