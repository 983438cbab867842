"""Workspace discovery, file classification and file statistics."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Iterator, List, Sequence

from .config import DEFAULT_MAX_FILES
from .logging import get_logger
from .models import FileKind, FileStats

# Vendor, build and tooling trees never analysed.
EXCLUDED_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "bower_components",
        "dist",
        "build",
        "out",
        "coverage",
        ".next",
        ".nuxt",
        ".svelte-kit",
        ".turbo",
        ".cache",
        ".venv",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".idea",
    }
)

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}

SOURCE_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".vue", ".svelte")
STYLE_EXTENSIONS = (".css", ".scss", ".sass", ".less")
ASSET_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp")

# Files that become nodes of the dependency graph.
GRAPH_EXTENSIONS = SOURCE_EXTENSIONS + STYLE_EXTENSIONS + ASSET_EXTENSIONS + (".json",)

_TEST_MARKERS = (".test.", ".spec.", "__tests__/")
_CONFIG_SUFFIXES = (".config.js", ".config.ts", ".config.mjs", ".config.cjs", ".json")

_CODE_EXTENSIONS = {
    ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".vue", ".svelte",
    ".py", ".java", ".cs", ".go", ".rs", ".rb", ".php", ".swift", ".kt",
}
_COMPONENT_EXTENSIONS = {".tsx", ".jsx", ".vue", ".svelte"}
_CONFIG_EXTENSIONS = {".json", ".yaml", ".yml", ".toml", ".ini", ".env"}
_DOC_EXTENSIONS = {".md", ".mdx", ".txt", ".rst", ".adoc"}
_STATS_STYLE_EXTENSIONS = {".css", ".scss", ".sass", ".less", ".styl", ".pcss"}

logger = get_logger("scanner")


def classify_file(path: str) -> FileKind:
    """Return the kind of a workspace-relative path.

    Rules are checked in a fixed order: test markers, then configuration,
    then stylesheets, assets and finally source code.
    """
    normalised = path.replace("\\", "/")
    lowered = normalised.lower()
    if any(marker in f"/{lowered}" for marker in _TEST_MARKERS):
        return "test"
    if lowered.endswith(_CONFIG_SUFFIXES):
        return "config"
    if lowered.endswith(STYLE_EXTENSIONS):
        return "style"
    if lowered.endswith(ASSET_EXTENSIONS):
        return "asset"
    if lowered.endswith(SOURCE_EXTENSIONS):
        return "source"
    return "other"


@dataclass
class IgnoreRule:
    """Represents a gitignore-style exclusion pattern from configuration."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern or pattern.startswith("#"):
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


@dataclass
class WorkspaceListing:
    """Relative posix paths of every discovered file, in discovery order."""

    root: Path
    files: List[str] = field(default_factory=list)
    truncated: bool = False

    def graph_files(self) -> List[str]:
        """Return the subset of files that participate in the import graph."""
        return [path for path in self.files if path.lower().endswith(GRAPH_EXTENSIONS)]

    def absolute(self, rel_path: str) -> Path:
        return self.root / rel_path


class WorkspaceScanner:
    """Walks the workspace to produce a deterministic, capped file listing."""

    def __init__(
        self,
        *,
        max_files: int = DEFAULT_MAX_FILES,
        exclude_paths: Sequence[str] = (),
    ) -> None:
        self.max_files = max_files
        self._rules = [
            rule for rule in (build_ignore_rule(p) for p in exclude_paths) if rule is not None
        ]

    def scan(self, root: str | Path) -> WorkspaceListing:
        """Return every non-excluded file under root.

        Files beyond ``max_files`` are silently dropped. Only a missing or
        non-directory root is reported as an error.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Workspace path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Workspace path is not a directory: {root}")

        listing = WorkspaceListing(root=root_path)
        for rel_path in self._iter_files(root_path):
            if len(listing.files) >= self.max_files:
                listing.truncated = True
                logger.debug("Discovery capped at %d files under %s", self.max_files, root_path)
                break
            listing.files.append(rel_path)
        return listing

    def _iter_files(self, root: Path) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._on_walk_error):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept_dirs = []
            for name in sorted(dirnames):
                if name in EXCLUDED_DIRS:
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if self._is_ignored(rel_path, True):
                    continue
                kept_dirs.append(name)
            dirnames[:] = kept_dirs

            for filename in sorted(filenames):
                if filename in _EXCLUDED_FILES:
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if self._is_ignored(rel_path, False):
                    continue
                yield rel_path

    def _is_ignored(self, rel_path: str, is_dir: bool) -> bool:
        return any(rule.matches(rel_path, is_dir) for rule in self._rules)

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.debug("Skipping unreadable directory: %s", error)


def compute_file_stats(listing: WorkspaceListing) -> FileStats:
    """Count files per category over a workspace listing."""
    code = tests = components = configs = docs = styles = 0
    directories: set[str] = set()

    for rel_path in listing.files:
        posix = PurePosixPath(rel_path)
        suffix = posix.suffix.lower()
        parents = posix.parts[:-1]
        directories.update(part.lower() for part in parents)

        if suffix in _CODE_EXTENSIONS:
            code += 1
            if classify_file(rel_path) == "test":
                tests += 1
        if suffix in _COMPONENT_EXTENSIONS and "components" in parents:
            components += 1
        if suffix in _CONFIG_EXTENSIONS or posix.name.startswith(".env"):
            configs += 1
        if suffix in _DOC_EXTENSIONS:
            docs += 1
        if suffix in _STATS_STYLE_EXTENSIONS:
            styles += 1

    return FileStats(
        total_files=len(listing.files),
        code_files=code,
        test_files=tests,
        component_files=components,
        config_files=configs,
        documentation_files=docs,
        style_files=styles,
        directories=frozenset(directories),
    )


__all__ = [
    "EXCLUDED_DIRS",
    "GRAPH_EXTENSIONS",
    "WorkspaceListing",
    "WorkspaceScanner",
    "classify_file",
    "compute_file_stats",
]
