"""Intra-workspace file dependency graph."""

from __future__ import annotations

import posixpath
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path
from typing import Container, Dict, Iterator, List, Optional, Tuple

from ..logging import get_logger
from ..models import FileNode
from ..workspace_scanner import WorkspaceListing, classify_file
from .aliases import AliasTable, find_compiler_config, load_alias_table
from .imports import extract_import_targets

RESOLUTION_EXTENSIONS = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".vue",
    ".svelte",
    ".css",
    ".scss",
    ".less",
    ".json",
)
INDEX_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".vue", ".svelte")

# Kinds whose text is parsed for imports.
_PARSED_KINDS = {"source", "test", "style"}

logger = get_logger("graph")


def probe_candidate(candidate: str, known: Container[str]) -> Optional[str]:
    """Return the first known path for a candidate: verbatim, with an extension, or as an index."""
    if candidate.startswith("./"):
        candidate = candidate[2:]
    candidate = candidate.rstrip("/")
    if candidate in ("", "."):
        candidate = ""

    if candidate and candidate in known:
        return candidate
    if candidate:
        for extension in RESOLUTION_EXTENSIONS:
            with_extension = f"{candidate}{extension}"
            if with_extension in known:
                return with_extension
    directory = f"{candidate}/" if candidate else ""
    for extension in INDEX_EXTENSIONS:
        index_path = f"{directory}index{extension}"
        if index_path in known:
            return index_path
    return None


def resolve_import(
    source_path: str,
    specifier: str,
    known: Container[str],
    aliases: AliasTable,
) -> Optional[str]:
    """Resolve one raw specifier to a known workspace path.

    Order: external short-circuit, alias substitution, relative resolution,
    with extension probing applied to every candidate. Aliases are tried
    before relative resolution even when both could apply.
    """
    specifier = specifier.split("?", 1)[0].split("#", 1)[0]
    if not specifier:
        return None

    is_relative = specifier.startswith(".")
    is_absolute = specifier.startswith("/")
    if not (is_relative or is_absolute or aliases.matches(specifier)):
        return None

    for candidate in aliases.expand(specifier):
        resolved = probe_candidate(_normalise(candidate), known)
        if resolved is not None:
            return resolved

    if is_relative:
        source_dir = posixpath.dirname(source_path)
        resolved = probe_candidate(_normalise(posixpath.join(source_dir, specifier)), known)
        if resolved is not None:
            return resolved

    if is_absolute:
        # Root-relative, as served by dev servers.
        resolved = probe_candidate(_normalise(specifier.lstrip("/")), known)
        if resolved is not None:
            return resolved

    return None


def _normalise(path: str) -> str:
    normalised = posixpath.normpath(path) if path else ""
    return "" if normalised == "." else normalised


class DependencyGraph:
    """File-level import graph with dependency, dependent and cluster queries.

    ``build_graph`` assembles a new node table privately and swaps it in only
    once every file has been processed, so queries never observe a
    half-built graph.
    """

    def __init__(self, *, max_workers: int = 8, cluster_depth: int = 1) -> None:
        self.max_workers = max_workers
        self.cluster_depth = cluster_depth
        self.root: Optional[Path] = None
        self.aliases = AliasTable()
        self._nodes: Dict[str, FileNode] = {}

    def build_graph(self, listing: WorkspaceListing) -> None:
        """Rebuild the whole graph from a workspace listing."""
        root = listing.root
        nodes: Dict[str, FileNode] = {}
        for rel_path in listing.graph_files():
            nodes[rel_path] = FileNode(
                path=rel_path,
                absolute_path=str(listing.absolute(rel_path)),
                kind=classify_file(rel_path),
            )

        aliases = load_alias_table(root, find_compiler_config(listing.files))

        parsed = [node for node in nodes.values() if node.kind in _PARSED_KINDS]
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            texts = list(pool.map(lambda node: _read_text(Path(node.absolute_path)), parsed))

        for node, text in zip(parsed, texts):
            if text is None:
                continue
            for specifier in extract_import_targets(text):
                target = resolve_import(node.path, specifier, nodes, aliases)
                if target is None or target == node.path:
                    continue
                _link(node, nodes[target])

        self._nodes = nodes
        self.aliases = aliases
        self.root = root
        logger.info("Built graph with %d nodes", len(nodes))

    # ------------------------------------------------------------------
    # Queries

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    @property
    def paths(self) -> List[str]:
        return list(self._nodes)

    def get_node(self, path: str) -> Optional[FileNode]:
        node = self._nodes.get(path)
        if node is None:
            return None
        return replace(node, imports=list(node.imports), imported_by=list(node.imported_by))

    def get_dependencies(self, path: str) -> List[str]:
        node = self._nodes.get(path)
        return list(node.imports) if node else []

    def get_dependents(self, path: str) -> List[str]:
        node = self._nodes.get(path)
        return list(node.imported_by) if node else []

    def edges(self) -> Iterator[Tuple[str, str]]:
        for node in self._nodes.values():
            for target in node.imports:
                yield node.path, target

    def edge_count(self) -> int:
        return sum(len(node.imports) for node in self._nodes.values())

    def find_files_by_keyword(self, keyword: str) -> List[str]:
        """Case-insensitive substring search over paths, in discovery order."""
        needle = keyword.lower()
        return [path for path in self._nodes if needle in path.lower()]

    def get_cluster(self, path: str, depth: Optional[int] = None) -> List[str]:
        """Breadth-first neighbourhood over imports and dependents, up to ``depth`` hops."""
        if depth is None:
            depth = self.cluster_depth
        cluster: Dict[str, None] = {}
        queue: deque[Tuple[str, int]] = deque([(path, 0)])
        while queue:
            current, distance = queue.popleft()
            if current in cluster:
                continue
            cluster[current] = None
            if distance >= depth:
                continue
            node = self._nodes.get(current)
            if node is None:
                continue
            for neighbour in (*node.imports, *node.imported_by):
                if neighbour not in cluster:
                    queue.append((neighbour, distance + 1))
        return list(cluster)


def _link(source: FileNode, target: FileNode) -> None:
    if target.path not in source.imports:
        source.imports.append(target.path)
    if source.path not in target.imported_by:
        target.imported_by.append(source.path)


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping unreadable file %s: %s", path, exc)
        return None


__all__ = ["DependencyGraph", "probe_candidate", "resolve_import"]
