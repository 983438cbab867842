"""Core data models shared across devarchitect components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, FrozenSet, List, Literal, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .graph.builder import DependencyGraph

FileKind = Literal["source", "test", "config", "style", "asset", "other"]
PhaseStatus = Literal["backlog", "todo", "doing", "review", "done"]
ProjectType = Literal["WEB_MOBILE", "GAME_2D"]
AssetCategory = Literal[
    "Sprite",
    "Background",
    "UI_Element",
    "Icon",
    "Texture",
    "Font",
    "Audio_SFX",
    "Audio_Music",
    "Video",
    "Model3D",
]
Severity = Literal["critical", "high", "medium", "low"]

# Ordered from least to most complete.
PHASE_STATUSES: Tuple[PhaseStatus, ...] = ("backlog", "todo", "doing", "review", "done")


@dataclass
class FileNode:
    """A workspace file and its resolved import edges."""

    path: str
    absolute_path: str
    kind: FileKind
    imports: List[str] = field(default_factory=list)
    imported_by: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PackageInfo:
    """Fields of interest from the root package manifest."""

    name: str = ""
    description: str = ""
    version: Optional[str] = None
    license: Optional[str] = None
    author: Optional[str] = None
    keywords: Tuple[str, ...] = ()
    scripts: Dict[str, str] = field(default_factory=dict)
    dependencies: Tuple[str, ...] = ()
    dev_dependencies: Tuple[str, ...] = ()

    @property
    def all_dependencies(self) -> Tuple[str, ...]:
        return self.dependencies + self.dev_dependencies


@dataclass(frozen=True)
class MarkerFiles:
    """Presence of well-known configuration and project files."""

    has_package_json: bool = False
    has_dockerfile: bool = False
    has_readme: bool = False
    has_tsconfig: bool = False
    has_unity_project: bool = False
    has_godot_project: bool = False
    has_prisma: bool = False
    has_graphql: bool = False
    has_tailwind: bool = False
    has_tests: bool = False
    has_cicd: bool = False
    has_editor_extension: bool = False
    has_monorepo: bool = False
    has_storybook: bool = False
    has_openapi: bool = False
    has_i18n: bool = False
    has_pwa: bool = False
    has_ssr: bool = False
    has_webpack: bool = False
    has_vite: bool = False
    has_eslint: bool = False
    has_prettier: bool = False
    has_husky: bool = False
    has_changesets: bool = False
    has_env_example: bool = False
    has_license: bool = False
    has_contributing: bool = False
    has_changelog: bool = False
    has_gitignore: bool = False


@dataclass(frozen=True)
class DetectedSignals:
    """Technology stack classification for one analysis run."""

    frontend_framework: Optional[str] = None
    backend_framework: Optional[str] = None
    css_framework: Optional[str] = None
    state_management: Optional[str] = None
    orm: Optional[str] = None
    testing_framework: Optional[str] = None
    bundler: Optional[str] = None
    runtime_environment: Optional[str] = None
    api_style: Optional[str] = None
    authentication: Optional[str] = None
    game_engine: Optional[str] = None
    deployment_target: Optional[str] = None
    pwa_support: bool = False
    offline_ready: bool = False


@dataclass(frozen=True)
class FileStats:
    """File counts by category over the workspace listing."""

    total_files: int = 0
    code_files: int = 0
    test_files: int = 0
    component_files: int = 0
    config_files: int = 0
    documentation_files: int = 0
    style_files: int = 0
    directories: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class CodeMetrics:
    """Regex-derived counts over a sample of source files."""

    files_analyzed: int = 0
    total_classes: int = 0
    total_functions: int = 0
    total_interfaces: int = 0
    total_components: int = 0
    total_hooks: int = 0
    api_endpoints: Tuple[str, ...] = ()
    todos: Tuple[str, ...] = ()
    complexity: Literal["low", "medium", "high"] = "low"


@dataclass(frozen=True)
class PhaseProgressResult:
    """Evidence-weighted completion estimate for a single phase."""

    score: int
    status: PhaseStatus
    evidence: Tuple[str, ...] = ()
    missing: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PhaseSuggestion:
    """A roadmap phase proposed from the detected stack."""

    title: str
    description: str
    priority: str
    status: PhaseStatus = "todo"


@dataclass(frozen=True)
class EnvVariable:
    """A variable declared in one of the workspace ``.env*`` files."""

    key: str
    value: str
    source: str
    description: Optional[str] = None


@dataclass(frozen=True)
class ProjectCommand:
    label: str
    command: str
    category: str
    description: str = ""


@dataclass(frozen=True)
class DetectedAsset:
    """A media file found in the workspace listing."""

    name: str
    category: AssetCategory
    path: str
    extension: str


@dataclass(frozen=True)
class SecurityIssue:
    severity: Severity
    type: str
    file: str
    description: str
    recommendation: str = ""
    line: Optional[int] = None


@dataclass
class WorkspaceSnapshot:
    """Complete output of one analysis run over a workspace."""

    root: str
    name: str
    project_type: ProjectType
    package: Optional[PackageInfo]
    markers: MarkerFiles
    signals: DetectedSignals
    stats: FileStats
    graph: "DependencyGraph"
    metrics: Optional[CodeMetrics] = None
    suggested_phases: List[PhaseSuggestion] = field(default_factory=list)
    # README summary, falling back to the manifest description.
    concept: str = ""
    variables: List[EnvVariable] = field(default_factory=list)
    commands: List[ProjectCommand] = field(default_factory=list)
    assets: List[DetectedAsset] = field(default_factory=list)
