"""Path alias loading from the nearest tsconfig.json / jsconfig.json."""

from __future__ import annotations

import json
import posixpath
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Iterator, List, Optional, Sequence, Tuple

from ..logging import get_logger

COMPILER_CONFIG_NAMES = ("tsconfig.json", "jsconfig.json")

# Strings are matched first so comment markers inside them survive.
_JSONC_TOKENS = re.compile(
    r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/|,(?=\s*[}\]])',
    re.DOTALL,
)

logger = get_logger("graph.aliases")


@dataclass(frozen=True)
class AliasRule:
    """One ``compilerOptions.paths`` entry, expressed relative to the workspace root."""

    pattern: str
    prefix: str
    wildcard: bool
    targets: Tuple[str, ...]

    def matches(self, specifier: str) -> bool:
        if self.wildcard:
            return specifier.startswith(self.prefix)
        return specifier == self.prefix

    def expand(self, specifier: str) -> Iterator[str]:
        remainder = specifier[len(self.prefix):] if self.wildcard else ""
        for target in self.targets:
            yield f"{target}{remainder}"


@dataclass(frozen=True)
class AliasTable:
    """Ordered alias rules loaded once per graph build."""

    rules: Tuple[AliasRule, ...] = ()
    source: Optional[str] = None

    def __bool__(self) -> bool:
        return bool(self.rules)

    def matches(self, specifier: str) -> bool:
        return any(rule.matches(specifier) for rule in self.rules)

    def expand(self, specifier: str) -> Iterator[str]:
        """Yield candidate root-relative paths for every matching rule, in order."""
        for rule in self.rules:
            if rule.matches(specifier):
                yield from rule.expand(specifier)


def find_compiler_config(files: Sequence[str]) -> Optional[str]:
    """Return the shallowest tsconfig.json (or jsconfig.json) in a listing."""
    for name in COMPILER_CONFIG_NAMES:
        candidates = [path for path in files if PurePosixPath(path).name == name]
        if candidates:
            return min(candidates, key=lambda path: (len(PurePosixPath(path).parts), path))
    return None


def load_alias_table(root: Path, config_path: Optional[str]) -> AliasTable:
    """Parse ``compilerOptions.paths`` from a compiler config.

    Read or parse failures yield an empty table; they are never raised.
    """
    if config_path is None:
        return AliasTable()

    try:
        text = (root / config_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Unable to read %s: %s", config_path, exc)
        return AliasTable()

    try:
        data = json.loads(strip_json_comments(text))
    except ValueError as exc:
        logger.warning("Failed to parse alias config %s: %s", config_path, exc)
        return AliasTable()

    if not isinstance(data, dict):
        return AliasTable()
    options = data.get("compilerOptions")
    if not isinstance(options, dict):
        return AliasTable(source=config_path)
    paths = options.get("paths")
    if not isinstance(paths, dict):
        return AliasTable(source=config_path)

    base_url = options.get("baseUrl")
    config_dir = posixpath.dirname(config_path)
    base_dir = _join(config_dir, base_url if isinstance(base_url, str) else ".")

    rules: List[AliasRule] = []
    for pattern, raw_targets in paths.items():
        if not isinstance(pattern, str) or not isinstance(raw_targets, list):
            continue
        wildcard = pattern.endswith("*")
        prefix = pattern[:-1] if wildcard else pattern
        if not prefix:
            # A bare "*" would capture every package specifier.
            continue
        targets = tuple(
            _target_prefix(base_dir, target, wildcard)
            for target in raw_targets
            if isinstance(target, str)
        )
        if targets:
            rules.append(AliasRule(pattern=pattern, prefix=prefix, wildcard=wildcard, targets=targets))

    return AliasTable(rules=tuple(rules), source=config_path)


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments and trailing commas from JSONC text."""

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        return token if token.startswith('"') else ""

    return _JSONC_TOKENS.sub(_replace, text)


def _target_prefix(base_dir: str, target: str, wildcard: bool) -> str:
    if wildcard and target.endswith("*"):
        stem = target[:-1]
        joined = _join(base_dir, stem)
        if stem.endswith("/") or not stem:
            return f"{joined}/" if joined else ""
        return joined
    return _join(base_dir, target)


def _join(*parts: str) -> str:
    joined = posixpath.normpath(posixpath.join(".", *(part for part in parts if part)))
    return "" if joined == "." else joined


__all__ = [
    "AliasRule",
    "AliasTable",
    "find_compiler_config",
    "load_alias_table",
    "strip_json_comments",
]
