"""Phase progress scoring."""

from __future__ import annotations

from typing import List, Tuple

from ..logging import get_logger
from ..models import PhaseProgressResult, PhaseStatus
from .rubrics import GENERIC_RUBRIC, RUBRIC_REGISTRY, Rubric, RubricEntry, ScoringContext, select_rubric

# Lower bounds, checked from the most complete status down.
STATUS_THRESHOLDS: Tuple[Tuple[int, PhaseStatus], ...] = (
    (90, "done"),
    (60, "review"),
    (20, "doing"),
    (1, "todo"),
)

logger = get_logger("progress")


def clamp_score(value: float) -> int:
    return max(0, min(100, int(round(value))))


def status_for_score(score: int) -> PhaseStatus:
    """Bucket a 0-100 score into a lifecycle status."""
    for threshold, status in STATUS_THRESHOLDS:
        if score >= threshold:
            return status
    return "backlog"


class PhaseProgressScorer:
    """Scores a phase title against workspace facts.

    The scorer holds no state beyond its registry: the same title and context
    always produce the same result, and nothing is persisted.
    """

    def __init__(
        self,
        registry: Tuple[RubricEntry, ...] = RUBRIC_REGISTRY,
        generic: Rubric = GENERIC_RUBRIC,
    ) -> None:
        self.registry = registry
        self.generic = generic

    def rubric_for(self, title: str) -> Rubric:
        return select_rubric(title, self.registry, self.generic)

    def score(self, title: str, context: ScoringContext) -> PhaseProgressResult:
        rubric = self.rubric_for(title)
        total = 0
        evidence: List[str] = []
        missing: List[str] = []
        for check in rubric.checks:
            if check.passes(context):
                total += check.points
                evidence.append(check.describe(context))
            else:
                missing.append(check.missing)

        if rubric.cap is not None:
            total = min(total, rubric.cap(context))

        score = clamp_score(total)
        status = status_for_score(score)
        logger.debug("Phase %r scored %d (%s) with rubric %s", title, score, status, rubric.name)
        return PhaseProgressResult(
            score=score,
            status=status,
            evidence=tuple(evidence),
            missing=tuple(missing),
        )


__all__ = ["PhaseProgressScorer", "STATUS_THRESHOLDS", "clamp_score", "status_for_score"]
