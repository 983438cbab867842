"""Entry point tying discovery, graph building, detection and scoring together."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from .analyzers import (
    CodeMetricsAnalyzer,
    SecurityAuditor,
    StackDetector,
    collect_assets,
    detect_markers,
    detect_project_type,
    generate_commands,
    load_env_variables,
    load_package_info,
    read_readme_description,
)
from .config import AnalysisConfig, ConfigError, load_config
from .graph import DependencyGraph
from .logging import get_logger
from .models import PhaseProgressResult, SecurityIssue, WorkspaceSnapshot
from .progress import PhaseProgressScorer, PhaseReviewer, ScoringContext, suggest_phases
from .stores import AnalysisCache
from .workspace_scanner import WorkspaceScanner, compute_file_stats

logger = get_logger("workspace")


class WorkspaceAnalyzer:
    """Analyzes a workspace into a snapshot and scores phases against it.

    Snapshots are cached per workspace for the cache TTL. A hit returns the
    cached snapshot without touching the filesystem, a miss reruns the whole
    pipeline.
    """

    def __init__(
        self,
        *,
        cache: Optional[AnalysisCache] = None,
        config: Optional[AnalysisConfig] = None,
        scorer: Optional[PhaseProgressScorer] = None,
        reviewer: Optional[PhaseReviewer] = None,
        auditor: Optional[SecurityAuditor] = None,
        max_workers: int = 8,
    ) -> None:
        self._owns_cache = cache is None
        if cache is None:
            ttl = config.cache.ttl_seconds if config is not None else None
            cache = AnalysisCache() if ttl is None else AnalysisCache(ttl)
        self.cache = cache
        self._config = config
        self.scorer = scorer or PhaseProgressScorer()
        self.reviewer = reviewer
        self.auditor = auditor
        self.max_workers = max_workers
        self.stack_detector = StackDetector()

    def analyze(self, root: str | Path) -> WorkspaceSnapshot:
        """Return the snapshot for ``root``, from cache when still fresh.

        Raises ``FileNotFoundError`` or ``NotADirectoryError`` when the root
        cannot be enumerated; every other problem degrades to empty results.
        """
        root_path = Path(root).expanduser().resolve()
        identity = str(root_path)
        cached = self.cache.get(identity)
        if cached is not None:
            return cached
        snapshot = self._build_snapshot(root_path)
        self.cache.store(identity, snapshot)
        return snapshot

    def invalidate(self) -> None:
        self.cache.invalidate()

    def score_phase(self, snapshot: WorkspaceSnapshot, title: str) -> PhaseProgressResult:
        return self.scorer.score(title, self.scoring_context(snapshot))

    def analyze_progress(self, root: str | Path, titles: Sequence[str]) -> List[PhaseProgressResult]:
        """Score every phase title against one snapshot, in input order."""
        snapshot = self.analyze(root)
        context = self.scoring_context(snapshot)
        return [self.scorer.score(title, context) for title in titles]

    def review_phase(
        self,
        snapshot: WorkspaceSnapshot,
        title: str,
        description: str = "",
    ) -> Optional[PhaseProgressResult]:
        """Optional model-assisted estimate, independent of ``score_phase``."""
        if self.reviewer is None:
            return None
        return self.reviewer.review(snapshot.graph, title, description)

    def audit_security(self, snapshot: WorkspaceSnapshot) -> List[SecurityIssue]:
        """Optional model-assisted audit of the risk hotspots. Empty without an auditor."""
        if self.auditor is None:
            return []
        return self.auditor.audit(snapshot.graph)

    @staticmethod
    def scoring_context(snapshot: WorkspaceSnapshot) -> ScoringContext:
        return ScoringContext(
            signals=snapshot.signals,
            markers=snapshot.markers,
            stats=snapshot.stats,
            package=snapshot.package,
            metrics=snapshot.metrics,
            graph=snapshot.graph,
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _load_config(self, root: Path) -> AnalysisConfig:
        if self._config is not None:
            return self._config
        if not root.is_dir():
            return AnalysisConfig(root=root)
        try:
            config = load_config(root)
        except ConfigError as exc:
            logger.warning("Ignoring invalid configuration in %s: %s", root, exc)
            return AnalysisConfig(root=root)
        if self._owns_cache:
            self.cache.ttl_seconds = config.cache.ttl_seconds
        return config

    def _build_snapshot(self, root: Path) -> WorkspaceSnapshot:
        config = self._load_config(root)
        scanner = WorkspaceScanner(
            max_files=config.scan.max_files,
            exclude_paths=config.scan.exclude_paths,
        )
        listing = scanner.scan(root)

        package = load_package_info(listing.root)
        markers = detect_markers(listing.root, listing.files)
        signals = self.stack_detector.detect(package, markers)
        project_type = detect_project_type(markers)
        stats = compute_file_stats(listing)

        metrics = None
        if config.metrics.enabled:
            metrics = CodeMetricsAnalyzer(max_files=config.metrics.max_files).analyze(
                listing.root, listing.files
            )

        graph = DependencyGraph(max_workers=self.max_workers, cluster_depth=config.graph.cluster_depth)
        graph.build_graph(listing)

        name = package.name if package and package.name else listing.root.name
        concept = read_readme_description(listing.root) or (package.description if package else "")
        logger.debug(
            "Analyzed %s: %d files, %d graph nodes, %d edges",
            name,
            stats.total_files,
            len(graph),
            graph.edge_count(),
        )
        return WorkspaceSnapshot(
            root=str(listing.root),
            name=name,
            project_type=project_type,
            package=package,
            markers=markers,
            signals=signals,
            stats=stats,
            graph=graph,
            metrics=metrics,
            suggested_phases=suggest_phases(project_type, signals, markers, package),
            concept=concept,
            variables=load_env_variables(listing.root),
            commands=generate_commands(package, markers, listing.files),
            assets=collect_assets(listing.files),
        )


__all__ = ["WorkspaceAnalyzer"]
