"""Optional model-assisted review of a phase's progress.

The reviewer is a best-effort addition on top of the factual scorer. It
collects a small code context around the phase, asks an injected runner for
a JSON verdict, and returns a separate result. Any failure yields ``None``.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Protocol, Sequence

from ..logging import get_logger
from ..models import PhaseProgressResult
from .scorer import clamp_score, status_for_score

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..graph.builder import DependencyGraph

MAX_CONTEXT_FILES = 10
MAX_CONTEXT_CHARS = 1000
_STOPWORDS = frozenset({"with", "from", "that", "this", "pour", "avec", "dans", "des", "les"})
_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)

PROMPT_TEMPLATE = """You are an expert project auditor.
Analyse the phase below and the related code excerpts to determine its ACTUAL progress.

PHASE: "{title}"
DESCRIPTION: "{description}"

RELATED CODE (excerpts):
{context}

Reply only with this JSON:
{{
  "progress": number between 0 and 100,
  "evidence": ["..."],
  "missing": ["..."]
}}"""

logger = get_logger("review")


class PromptRunner(Protocol):
    """Anything with the ``run(prompt) -> str`` shape of a local model runner."""

    def run(self, prompt: str) -> str:  # pragma: no cover - protocol
        ...


def extract_keywords(text: str) -> List[str]:
    """Lowercased alphanumeric words longer than three characters, minus stopwords."""
    words: Dict[str, None] = {}
    for raw in text.split():
        word = re.sub(r"[^a-zA-Z0-9]", "", raw).lower()
        if len(word) > 3 and word not in _STOPWORDS:
            words.setdefault(word, None)
    return list(words)


def parse_review_reply(reply: str) -> PhaseProgressResult:
    """Parse a fenced or bare JSON verdict. Raises ``ValueError`` when unusable."""
    payload = json.loads(_FENCE.sub("", reply).strip())
    if not isinstance(payload, dict):
        raise ValueError("Review reply is not a JSON object")
    progress = payload.get("progress")
    if isinstance(progress, bool) or not isinstance(progress, (int, float)):
        raise ValueError("Review reply has no numeric progress")
    if not 0 <= progress <= 100:
        raise ValueError(f"Review progress out of range: {progress}")
    score = clamp_score(progress)
    return PhaseProgressResult(
        score=score,
        status=status_for_score(score),
        evidence=_string_tuple(payload.get("evidence")),
        missing=_string_tuple(payload.get("missing")),
    )


def _string_tuple(value: object) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(item) for item in value if str(item).strip())


class PhaseReviewer:
    """Re-scores a phase through a local generation service."""

    def __init__(self, runner: PromptRunner, *, cluster_depth: Optional[int] = None) -> None:
        self.runner = runner
        self.cluster_depth = cluster_depth

    def collect_files(self, graph: "DependencyGraph", title: str, description: str = "") -> List[str]:
        """Files matching the phase keywords, expanded by their import clusters."""
        seeds: Dict[str, None] = {}
        for keyword in extract_keywords(f"{title} {description}"):
            for path in graph.find_files_by_keyword(keyword):
                seeds.setdefault(path, None)

        collected: Dict[str, None] = {}
        for seed in seeds:
            for path in graph.get_cluster(seed, self.cluster_depth):
                collected.setdefault(path, None)
                if len(collected) >= MAX_CONTEXT_FILES:
                    return list(collected)
        return list(collected)

    def build_prompt(self, root: Path, files: Sequence[str], title: str, description: str = "") -> str:
        chunks = []
        for rel_path in files:
            try:
                text = (root / rel_path).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.debug("Skipping unreadable file %s: %s", rel_path, exc)
                continue
            chunks.append(f"--- {rel_path} ---\n{text[:MAX_CONTEXT_CHARS]}")
        return PROMPT_TEMPLATE.format(
            title=title,
            description=description,
            context="\n".join(chunks) or "(no related files)",
        )

    def review(
        self,
        graph: "DependencyGraph",
        title: str,
        description: str = "",
    ) -> Optional[PhaseProgressResult]:
        if graph.root is None:
            return None
        files = self.collect_files(graph, title, description)
        if not files:
            logger.debug("No files related to phase %r; skipping review", title)
            return None
        prompt = self.build_prompt(graph.root, files, title, description)
        try:
            reply = self.runner.run(prompt)
            return parse_review_reply(reply)
        except (RuntimeError, OSError, ValueError) as exc:
            logger.warning("Review of phase %r failed: %s", title, exc)
            return None


__all__ = [
    "MAX_CONTEXT_CHARS",
    "MAX_CONTEXT_FILES",
    "PhaseReviewer",
    "PromptRunner",
    "extract_keywords",
    "parse_review_reply",
]
