"""Workspace analyzers: manifest, marker files, stack detection, code metrics and project facts."""

from .assets import collect_assets
from .commands import generate_commands
from .markers import detect_markers
from .metrics import CodeMetricsAnalyzer
from .project_files import load_env_variables, read_readme_description
from .security import SecurityAuditor, find_risk_hotspots
from .stack import StackDetector, detect_project_type, detect_stack
from .utils import load_package_info

__all__ = [
    "CodeMetricsAnalyzer",
    "SecurityAuditor",
    "StackDetector",
    "collect_assets",
    "detect_markers",
    "detect_project_type",
    "detect_stack",
    "find_risk_hotspots",
    "generate_commands",
    "load_env_variables",
    "load_package_info",
    "read_readme_description",
]
