"""Lightweight code metrics derived from source text."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Sequence

from ..logging import get_logger
from ..models import CodeMetrics
from ..workspace_scanner import SOURCE_EXTENSIONS, classify_file

_CLASS = re.compile(r"(?:export\s+)?(?:abstract\s+)?class\s+\w+")
_FUNCTION = re.compile(
    r"(?:export\s+)?(?:async\s+)?function\s+\w+|const\s+\w+\s*=\s*(?:async\s+)?\([^)]*\)\s*(?:=>|\{)"
)
_INTERFACE = re.compile(r"(?:export\s+)?(?:interface|type)\s+\w+")
_HOOK_DEFINITION = re.compile(r"(?:function|const)\s+use[A-Z]\w*")
_COMPONENT_EXPORT = re.compile(
    r"export\s+(?:default\s+)?(?:function|const)\s+[A-Z]\w*[\s\S]{0,2000}?return\s*\(?\s*<"
)
_COMPONENT_API = re.compile(r"React\.FC|React\.Component|useState|useEffect")
_EXPRESS_ROUTE = re.compile(r"(?:app|router)\.(get|post|put|patch|delete)\s*\(\s*['\"`]([^'\"`]+)['\"`]", re.I)
_ROUTE_HANDLER = re.compile(r"export\s+(?:async\s+)?function\s+(GET|POST|PUT|PATCH|DELETE|OPTIONS)\b")
_TODO = re.compile(r"(?:TODO|FIXME|HACK|XXX):\s*(.+)")

_MAX_ENDPOINTS = 20
_MAX_TODOS = 10
_TODOS_PER_FILE = 3

logger = get_logger("metrics")


class CodeMetricsAnalyzer:
    """Counts classes, functions, components and endpoints across source files."""

    def __init__(self, *, max_files: int = 200) -> None:
        self.max_files = max_files

    def analyze(self, root: Path, paths: Sequence[str]) -> CodeMetrics:
        sources = [
            path
            for path in paths
            if path.lower().endswith(SOURCE_EXTENSIONS) and classify_file(path) == "source"
        ][: self.max_files]

        classes = functions = interfaces = components = hooks = analysed = 0
        endpoints: List[str] = []
        todos: List[str] = []

        for rel_path in sources:
            text = self._read(root / rel_path)
            if text is None:
                continue
            analysed += 1
            classes += len(_CLASS.findall(text))
            functions += len(_FUNCTION.findall(text))
            interfaces += len(_INTERFACE.findall(text))
            hooks += len(_HOOK_DEFINITION.findall(text))
            if _COMPONENT_EXPORT.search(text) or _COMPONENT_API.search(text):
                components += 1
            endpoints.extend(self._endpoints(rel_path, text))
            todos.extend(match.strip() for match in _TODO.findall(text)[:_TODOS_PER_FILE])

        return CodeMetrics(
            files_analyzed=analysed,
            total_classes=classes,
            total_functions=functions,
            total_interfaces=interfaces,
            total_components=components,
            total_hooks=hooks,
            api_endpoints=tuple(_unique(endpoints)[:_MAX_ENDPOINTS]),
            todos=tuple(todos[:_MAX_TODOS]),
            complexity=_complexity(classes + functions),
        )

    @staticmethod
    def _endpoints(rel_path: str, text: str) -> Iterable[str]:
        for method, route in _EXPRESS_ROUTE.findall(text):
            yield f"{method.upper()} {route}"
        if "/api/" in f"/{rel_path}":
            handler = _ROUTE_HANDLER.search(text)
            if handler:
                route = "/api/" + f"/{rel_path}".split("/api/", 1)[1]
                route = re.sub(r"/route\.(ts|js)$", "", route)
                yield f"{handler.group(1)} {route}"

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable file %s: %s", path, exc)
            return None


def _complexity(symbols: int) -> str:
    if symbols < 50:
        return "low"
    if symbols < 250:
        return "medium"
    return "high"


def _unique(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


__all__ = ["CodeMetricsAnalyzer"]
