"""Risk hotspot search over the import graph and an optional model-assisted audit."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from ..logging import get_logger
from ..models import SecurityIssue
from ..progress.review import PromptRunner

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..graph.builder import DependencyGraph

RISK_KEYWORDS = (
    "auth",
    "login",
    "security",
    "api",
    "db",
    "database",
    "sql",
    "query",
    "secret",
    "token",
    "admin",
)
MAX_AUDITED_FILES = 10
MAX_AUDIT_CHARS = 3000

_SEVERITIES = frozenset({"critical", "high", "medium", "low"})
_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)

AUDIT_PROMPT_TEMPLATE = """You are an application security expert (OWASP).
Analyse this sensitive file for vulnerabilities (injection, XSS, auth bypass, hardcoded secrets).

FILE: {path}
CONTEXT: Imports: {imports}

CODE:
```
{code}
```

Reply only with this JSON:
[
  {{
    "severity": "critical" | "high" | "medium" | "low",
    "type": "Kind of flaw",
    "line": number,
    "description": "Short explanation",
    "recommendation": "Suggested fix"
  }}
]
Reply [] when nothing is found."""

logger = get_logger("security")


def find_risk_hotspots(graph: "DependencyGraph", keywords: Sequence[str] = RISK_KEYWORDS) -> List[str]:
    """Union of keyword path matches, ordered by keyword then discovery order."""
    hotspots: Dict[str, None] = {}
    for keyword in keywords:
        for path in graph.find_files_by_keyword(keyword):
            hotspots.setdefault(path, None)
    return list(hotspots)


def parse_audit_reply(reply: str, path: str) -> List[SecurityIssue]:
    """Parse a fenced or bare JSON issue list. Raises ``ValueError`` when unusable."""
    payload = json.loads(_FENCE.sub("", reply).strip())
    if not isinstance(payload, list):
        raise ValueError("Audit reply is not a JSON array")

    issues: List[SecurityIssue] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        severity = str(item.get("severity", "")).lower()
        if severity not in _SEVERITIES:
            severity = "low"
        line = item.get("line")
        issues.append(
            SecurityIssue(
                severity=severity,  # type: ignore[arg-type]
                type=str(item.get("type", "")),
                file=path,
                description=str(item.get("description", "")),
                recommendation=str(item.get("recommendation", "")),
                line=line if isinstance(line, int) and not isinstance(line, bool) else None,
            )
        )
    return issues


class SecurityAuditor:
    """Audits the riskiest files one by one through an injected runner."""

    def __init__(self, runner: PromptRunner, *, max_files: int = MAX_AUDITED_FILES) -> None:
        self.runner = runner
        self.max_files = max_files

    def build_prompt(self, graph: "DependencyGraph", path: str) -> Optional[str]:
        if graph.root is None:
            return None
        try:
            code = (graph.root / path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable file %s: %s", path, exc)
            return None
        return AUDIT_PROMPT_TEMPLATE.format(
            path=path,
            imports=", ".join(graph.get_dependencies(path)),
            code=code[:MAX_AUDIT_CHARS],
        )

    def audit_file(self, graph: "DependencyGraph", path: str) -> List[SecurityIssue]:
        prompt = self.build_prompt(graph, path)
        if prompt is None:
            return []
        try:
            return parse_audit_reply(self.runner.run(prompt), path)
        except (RuntimeError, OSError, ValueError) as exc:
            logger.warning("Security audit of %s failed: %s", path, exc)
            return []

    def audit(self, graph: "DependencyGraph") -> List[SecurityIssue]:
        issues: List[SecurityIssue] = []
        for path in find_risk_hotspots(graph)[: self.max_files]:
            issues.extend(self.audit_file(graph, path))
        return issues


__all__ = [
    "MAX_AUDITED_FILES",
    "RISK_KEYWORDS",
    "SecurityAuditor",
    "find_risk_hotspots",
    "parse_audit_reply",
]
