"""Configuration loading for devarchitect (.devarchitect.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".devarchitect.yml"

DEFAULT_CACHE_TTL_SECONDS = 30.0
DEFAULT_MAX_FILES = 5000
DEFAULT_CLUSTER_DEPTH = 1
DEFAULT_METRICS_MAX_FILES = 200


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CacheConfig:
    """Analysis cache settings."""

    ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS


@dataclass
class ScanConfig:
    """Workspace discovery limits and exclusions."""

    max_files: int = DEFAULT_MAX_FILES
    exclude_paths: List[str] = field(default_factory=list)


@dataclass
class GraphConfig:
    """Dependency graph query defaults."""

    cluster_depth: int = DEFAULT_CLUSTER_DEPTH


@dataclass
class MetricsConfig:
    """Optional code metrics collection."""

    enabled: bool = True
    max_files: int = DEFAULT_METRICS_MAX_FILES


@dataclass
class AnalysisConfig:
    """Represents the settings defined in .devarchitect.yml."""

    root: Path
    cache: CacheConfig = field(default_factory=CacheConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)


def load_config(config_path: Path) -> AnalysisConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return AnalysisConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    cache = CacheConfig()
    cache_data = _as_dict(data.get("cache"))
    ttl = _as_float(cache_data.get("ttl_seconds"))
    if ttl is not None and ttl >= 0:
        cache.ttl_seconds = ttl

    scan = ScanConfig()
    scan_data = _as_dict(data.get("scan"))
    max_files = _as_int(scan_data.get("max_files"))
    if max_files is not None and max_files > 0:
        scan.max_files = max_files
    scan.exclude_paths = _as_str_list(scan_data.get("exclude_paths"))

    graph = GraphConfig()
    graph_data = _as_dict(data.get("graph"))
    depth = _as_int(graph_data.get("cluster_depth"))
    if depth is not None and depth >= 0:
        graph.cluster_depth = depth

    metrics = MetricsConfig()
    metrics_data = _as_dict(data.get("metrics"))
    enabled = _as_bool(metrics_data.get("enabled"))
    if enabled is not None:
        metrics.enabled = enabled
    metrics_max = _as_int(metrics_data.get("max_files"))
    if metrics_max is not None and metrics_max > 0:
        metrics.max_files = metrics_max

    return AnalysisConfig(root=root, cache=cache, scan=scan, graph=graph, metrics=metrics)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
