"""Workspace static analysis: import graph, stack detection and phase progress."""

from .config import AnalysisConfig, ConfigError, load_config
from .graph import DependencyGraph
from .logging import configure_logging, get_logger
from .models import (
    CodeMetrics,
    DetectedAsset,
    DetectedSignals,
    EnvVariable,
    FileNode,
    FileStats,
    MarkerFiles,
    PackageInfo,
    PhaseProgressResult,
    PhaseSuggestion,
    ProjectCommand,
    SecurityIssue,
    WorkspaceSnapshot,
)
from .progress import PhaseProgressScorer, PhaseReviewer, ScoringContext, status_for_score
from .stores import AnalysisCache
from .workspace import WorkspaceAnalyzer

__all__ = [
    "AnalysisCache",
    "AnalysisConfig",
    "CodeMetrics",
    "ConfigError",
    "DependencyGraph",
    "DetectedAsset",
    "DetectedSignals",
    "EnvVariable",
    "FileNode",
    "FileStats",
    "MarkerFiles",
    "PackageInfo",
    "PhaseProgressResult",
    "PhaseProgressScorer",
    "PhaseReviewer",
    "PhaseSuggestion",
    "ProjectCommand",
    "ScoringContext",
    "SecurityIssue",
    "WorkspaceAnalyzer",
    "WorkspaceSnapshot",
    "configure_logging",
    "get_logger",
    "load_config",
    "status_for_score",
]
