"""Weighted evidence rubrics for each phase category.

Each rubric is an ordered tuple of checks. A passing check contributes its
points and an evidence line; a failing one contributes a missing-item line.
Rubrics are selected by an ordered registry of title keywords, the first
matching entry wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, FrozenSet, Mapping, Optional, Tuple, Union

from ..models import CodeMetrics, DetectedSignals, FileStats, MarkerFiles, PackageInfo

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..graph.builder import DependencyGraph

# npm init writes this placeholder into the default test script.
_PLACEHOLDER_TEST_SCRIPT = "no test specified"

ARCHITECTURE_LAYERS = frozenset(
    {
        "api",
        "components",
        "controllers",
        "features",
        "hooks",
        "lib",
        "models",
        "modules",
        "pages",
        "providers",
        "routes",
        "services",
        "store",
        "stores",
        "types",
        "utils",
        "views",
    }
)
_BACKEND_DIRS = frozenset({"api", "routes", "controllers", "server", "handlers"})
_E2E_DEPENDENCIES = frozenset({"@playwright/test", "playwright", "cypress"})


@dataclass(frozen=True)
class ScoringContext:
    """Everything a rubric check may look at."""

    signals: DetectedSignals = field(default_factory=DetectedSignals)
    markers: MarkerFiles = field(default_factory=MarkerFiles)
    stats: FileStats = field(default_factory=FileStats)
    package: Optional[PackageInfo] = None
    metrics: Optional[CodeMetrics] = None
    graph: Optional["DependencyGraph"] = None

    @property
    def scripts(self) -> Mapping[str, str]:
        return self.package.scripts if self.package else {}

    @property
    def dependencies(self) -> FrozenSet[str]:
        return frozenset(self.package.all_dependencies) if self.package else frozenset()

    def has_script(self, *fragments: str) -> bool:
        """True when a script name contains any fragment and is not the npm placeholder."""
        for name, command in self.scripts.items():
            lowered = name.lower()
            if any(fragment in lowered for fragment in fragments):
                if _PLACEHOLDER_TEST_SCRIPT not in command:
                    return True
        return False

    def has_directory(self, names: FrozenSet[str]) -> bool:
        return bool(self.stats.directories & names)

    def files_matching(self, *keywords: str) -> Tuple[str, ...]:
        if self.graph is None:
            return ()
        found: dict[str, None] = {}
        for keyword in keywords:
            for path in self.graph.find_files_by_keyword(keyword):
                found.setdefault(path, None)
        return tuple(found)

    @property
    def test_ratio(self) -> float:
        if self.stats.code_files == 0:
            return 0.0
        return self.stats.test_files / self.stats.code_files


Describe = Union[str, Callable[[ScoringContext], str]]


@dataclass(frozen=True)
class Check:
    """One weighted, independently evaluated rubric item."""

    points: int
    predicate: Callable[[ScoringContext], bool]
    evidence: Describe
    missing: str

    def passes(self, context: ScoringContext) -> bool:
        return bool(self.predicate(context))

    def describe(self, context: ScoringContext) -> str:
        if callable(self.evidence):
            return self.evidence(context)
        return self.evidence


@dataclass(frozen=True)
class Rubric:
    """Ordered checks for one phase category, with an optional score cap."""

    name: str
    checks: Tuple[Check, ...]
    cap: Optional[Callable[[ScoringContext], int]] = None

    @property
    def max_points(self) -> int:
        return sum(check.points for check in self.checks)


@dataclass(frozen=True)
class RubricEntry:
    """Registry entry pairing a title predicate with a rubric."""

    keywords: Tuple[str, ...]
    rubric: Rubric

    def matches(self, title: str) -> bool:
        padded = f" {title.lower()} "
        return any(keyword in padded for keyword in self.keywords)


# ----------------------------------------------------------------------
# Shared predicates


def _signal(name: str) -> Callable[[ScoringContext], bool]:
    return lambda ctx: getattr(ctx.signals, name) is not None


def _signal_evidence(label: str, name: str) -> Callable[[ScoringContext], str]:
    return lambda ctx: f"{label}: {getattr(ctx.signals, name)}"


def _marker(name: str) -> Callable[[ScoringContext], bool]:
    return lambda ctx: bool(getattr(ctx.markers, name))


def _has_e2e_tooling(ctx: ScoringContext) -> bool:
    # E2E tooling only counts on top of a detected framework or real test files.
    if ctx.signals.testing_framework is None and ctx.stats.test_files == 0:
        return False
    return bool(ctx.dependencies & _E2E_DEPENDENCIES)


def _graph_edges(ctx: ScoringContext) -> int:
    return ctx.graph.edge_count() if ctx.graph is not None else 0


def _connected_ratio(ctx: ScoringContext) -> float:
    if ctx.graph is None:
        return 0.0
    sources = [
        path
        for path in ctx.graph.paths
        if (node := ctx.graph.get_node(path)) is not None and node.kind == "source"
    ]
    if not sources:
        return 0.0
    connected = sum(
        1
        for path in sources
        if ctx.graph.get_dependencies(path) or ctx.graph.get_dependents(path)
    )
    return connected / len(sources)


def _layers(ctx: ScoringContext) -> int:
    return len(ctx.stats.directories & ARCHITECTURE_LAYERS)


def _has_aliases(ctx: ScoringContext) -> bool:
    return ctx.graph is not None and bool(ctx.graph.aliases)


def _endpoints(ctx: ScoringContext) -> int:
    return len(ctx.metrics.api_endpoints) if ctx.metrics else 0


def _imported_db_files(ctx: ScoringContext) -> Tuple[str, ...]:
    if ctx.graph is None:
        return ()
    return tuple(
        path
        for path in ctx.files_matching("db", "database", "prisma")
        if ctx.graph.get_dependents(path)
    )


# ----------------------------------------------------------------------
# Rubrics

SETUP_RUBRIC = Rubric(
    name="setup",
    checks=(
        Check(20, _marker("has_package_json"), "package.json present", "No package.json manifest"),
        Check(10, _marker("has_readme"), "README present", "No README"),
        Check(10, _marker("has_tsconfig"), "tsconfig.json configured", "No tsconfig.json"),
        Check(10, _marker("has_eslint"), "ESLint configured", "No ESLint configuration"),
        Check(10, _marker("has_prettier"), "Prettier configured", "No Prettier configuration"),
        Check(
            10,
            lambda ctx: ctx.has_script("dev", "start"),
            "dev/start script defined",
            "No dev or start script",
        ),
        Check(10, lambda ctx: ctx.has_script("build"), "build script defined", "No build script"),
        Check(10, _marker("has_gitignore"), ".gitignore present", "No .gitignore"),
        Check(5, _marker("has_env_example"), ".env.example documents variables", "No .env.example"),
        Check(5, _marker("has_husky"), "Git hooks (Husky) configured", "No Git hooks (Husky)"),
    ),
)

ARCHITECTURE_RUBRIC = Rubric(
    name="architecture",
    checks=(
        Check(
            15,
            lambda ctx: ctx.stats.code_files >= 10,
            lambda ctx: f"{ctx.stats.code_files} code files",
            "Fewer than 10 code files",
        ),
        Check(
            10,
            lambda ctx: _layers(ctx) >= 2,
            lambda ctx: f"{_layers(ctx)} architectural layer directories",
            "Fewer than 2 layer directories (components, services, ...)",
        ),
        Check(
            10,
            lambda ctx: _layers(ctx) >= 4,
            "Layered structure with 4+ layer directories",
            "Fewer than 4 layer directories",
        ),
        Check(
            15,
            lambda ctx: _graph_edges(ctx) > 0,
            lambda ctx: f"{_graph_edges(ctx)} internal import edges",
            "No internal imports between workspace files",
        ),
        Check(
            15,
            lambda ctx: _connected_ratio(ctx) >= 0.5,
            lambda ctx: f"{round(_connected_ratio(ctx) * 100)}% of source files connected",
            "Less than half of source files are connected in the import graph",
        ),
        Check(10, _marker("has_tsconfig"), "TypeScript configuration", "No tsconfig.json"),
        Check(10, _has_aliases, "Path aliases configured", "No path aliases configured"),
        Check(
            15,
            lambda ctx: ctx.metrics is not None and ctx.metrics.total_interfaces > 0,
            lambda ctx: f"{ctx.metrics.total_interfaces} interfaces/types declared",
            "No interfaces or type declarations found",
        ),
    ),
)

DESIGN_RUBRIC = Rubric(
    name="design",
    checks=(
        Check(
            20,
            _signal("frontend_framework"),
            _signal_evidence("Frontend framework", "frontend_framework"),
            "No frontend framework detected",
        ),
        Check(
            20,
            _signal("css_framework"),
            _signal_evidence("CSS framework", "css_framework"),
            "No CSS framework detected",
        ),
        Check(
            15,
            lambda ctx: ctx.stats.component_files >= 1,
            lambda ctx: f"{ctx.stats.component_files} component files",
            "No component files under components/",
        ),
        Check(
            10,
            lambda ctx: ctx.stats.component_files >= 10,
            "10+ component files",
            "Fewer than 10 component files",
        ),
        Check(
            10,
            lambda ctx: ctx.stats.style_files >= 1,
            lambda ctx: f"{ctx.stats.style_files} stylesheet files",
            "No stylesheet files",
        ),
        Check(10, _marker("has_storybook"), "Storybook configured", "No Storybook"),
        Check(
            10,
            lambda ctx: bool(ctx.files_matching("theme", "tokens")),
            lambda ctx: f"Theme files: {', '.join(ctx.files_matching('theme', 'tokens')[:3])}",
            "No theme or design-token files",
        ),
        Check(5, _marker("has_i18n"), "Internationalisation resources", "No i18n/locales directory"),
    ),
)

BACKEND_RUBRIC = Rubric(
    name="backend",
    checks=(
        Check(
            25,
            _signal("backend_framework"),
            _signal_evidence("Backend framework", "backend_framework"),
            "No backend framework detected",
        ),
        Check(15, _signal("api_style"), _signal_evidence("API style", "api_style"), "No API style detected"),
        Check(
            20,
            lambda ctx: _endpoints(ctx) > 0,
            lambda ctx: f"{_endpoints(ctx)} API endpoints implemented",
            "No API endpoints found in source",
        ),
        Check(
            15,
            lambda ctx: ctx.has_directory(_BACKEND_DIRS),
            "API/route directories present",
            "No api/, routes/ or controllers/ directory",
        ),
        Check(10, _marker("has_openapi"), "OpenAPI specification", "No OpenAPI/Swagger specification"),
        Check(
            10,
            _signal("authentication"),
            _signal_evidence("Authentication", "authentication"),
            "No authentication library detected",
        ),
        Check(5, _marker("has_env_example"), ".env.example documents variables", "No .env.example"),
    ),
)

DATABASE_RUBRIC = Rubric(
    name="database",
    checks=(
        Check(30, _signal("orm"), _signal_evidence("ORM", "orm"), "No ORM or database client detected"),
        Check(
            20,
            lambda ctx: ctx.markers.has_prisma or ctx.has_directory(frozenset({"migrations"})),
            "Schema or migrations present",
            "No schema file or migrations directory",
        ),
        Check(
            20,
            lambda ctx: bool(ctx.files_matching("model", "entity", "schema"))
            or ctx.has_directory(frozenset({"models", "entities"})),
            "Data model files present",
            "No model/entity/schema files",
        ),
        Check(
            10,
            lambda ctx: bool(ctx.files_matching("seed")),
            "Seed data scripts present",
            "No seed files",
        ),
        Check(10, _marker("has_env_example"), ".env.example documents connection settings", "No .env.example"),
        Check(
            10,
            lambda ctx: bool(_imported_db_files(ctx)),
            lambda ctx: f"Database module used by the app: {_imported_db_files(ctx)[0]}",
            "No database module imported by other files",
        ),
    ),
)

TESTS_RUBRIC = Rubric(
    name="tests",
    checks=(
        Check(
            25,
            _signal("testing_framework"),
            _signal_evidence("Test framework", "testing_framework"),
            "No test framework dependency",
        ),
        Check(
            25,
            lambda ctx: ctx.stats.test_files > 0,
            lambda ctx: f"{ctx.stats.test_files} test files",
            "No test files (*.test.* / *.spec.*)",
        ),
        Check(
            15,
            lambda ctx: ctx.test_ratio >= 0.1,
            lambda ctx: f"Test/code ratio {ctx.test_ratio:.0%}",
            "Test/code ratio below 10%",
        ),
        Check(
            10,
            lambda ctx: ctx.test_ratio >= 0.3,
            "Test/code ratio of at least 30%",
            "Test/code ratio below 30%",
        ),
        Check(
            6,
            _has_e2e_tooling,
            "End-to-end test tooling",
            "No end-to-end test tooling (Playwright/Cypress)",
        ),
        Check(8, lambda ctx: ctx.has_script("test"), "test script defined", "No test script"),
        Check(6, _marker("has_eslint"), "ESLint configured", "No ESLint configuration"),
        Check(5, _marker("has_prettier"), "Prettier configured", "No Prettier configuration"),
    ),
)

CICD_RUBRIC = Rubric(
    name="cicd",
    checks=(
        Check(40, _marker("has_cicd"), "CI pipeline configured", "No CI configuration"),
        Check(15, _marker("has_dockerfile"), "Docker configuration", "No Dockerfile or compose file"),
        Check(10, lambda ctx: ctx.has_script("lint"), "lint script defined", "No lint script"),
        Check(10, lambda ctx: ctx.has_script("test"), "test script defined", "No test script"),
        Check(10, lambda ctx: ctx.has_script("build"), "build script defined", "No build script"),
        Check(5, _marker("has_husky"), "Git hooks (Husky) configured", "No Git hooks (Husky)"),
        Check(5, _marker("has_changesets"), "Changesets release workflow", "No Changesets"),
        Check(5, _marker("has_eslint"), "ESLint configured", "No ESLint configuration"),
    ),
)

DOCUMENTATION_RUBRIC = Rubric(
    name="documentation",
    checks=(
        Check(30, _marker("has_readme"), "README present", "No README"),
        Check(15, _marker("has_contributing"), "CONTRIBUTING guide", "No CONTRIBUTING guide"),
        Check(15, _marker("has_license"), "LICENSE present", "No LICENSE"),
        Check(
            15,
            lambda ctx: ctx.stats.documentation_files >= 3,
            lambda ctx: f"{ctx.stats.documentation_files} documentation files",
            "Fewer than 3 documentation files",
        ),
        Check(15, _marker("has_changelog"), "CHANGELOG maintained", "No CHANGELOG"),
        Check(10, _marker("has_openapi"), "API documented with OpenAPI", "No OpenAPI documentation"),
    ),
)

DEPLOYMENT_RUBRIC = Rubric(
    name="deployment",
    checks=(
        Check(
            30,
            _signal("deployment_target"),
            _signal_evidence("Deployment target", "deployment_target"),
            "No deployment target detected",
        ),
        Check(20, _marker("has_dockerfile"), "Docker configuration", "No Dockerfile or compose file"),
        Check(20, _marker("has_cicd"), "CI pipeline configured", "No CI configuration"),
        Check(15, lambda ctx: ctx.has_script("build"), "build script defined", "No build script"),
        Check(10, _marker("has_env_example"), ".env.example documents variables", "No .env.example"),
        Check(5, lambda ctx: ctx.has_script("start"), "start script defined", "No start script"),
    ),
)

GENERIC_CAP_PER_CODE_FILE = 5

GENERIC_RUBRIC = Rubric(
    name="generic",
    checks=(
        Check(
            30,
            lambda ctx: ctx.stats.code_files > 0,
            lambda ctx: f"{ctx.stats.code_files} code files",
            "No code files",
        ),
        Check(
            20,
            lambda ctx: ctx.stats.test_files > 0,
            lambda ctx: f"{ctx.stats.test_files} test files",
            "No test files",
        ),
        Check(15, _marker("has_readme"), "README present", "No README"),
        Check(15, lambda ctx: ctx.has_script("build"), "build script defined", "No build script"),
        Check(
            20,
            lambda ctx: _graph_edges(ctx) > 0,
            lambda ctx: f"{_graph_edges(ctx)} internal import edges",
            "No internal imports between workspace files",
        ),
    ),
    cap=lambda ctx: ctx.stats.code_files * GENERIC_CAP_PER_CODE_FILE,
)

RUBRIC_REGISTRY: Tuple[RubricEntry, ...] = (
    RubricEntry(("setup", "configuration", "initiali", "installation", "bootstrap"), SETUP_RUBRIC),
    RubricEntry(("architecture", "structure"), ARCHITECTURE_RUBRIC),
    RubricEntry(
        (
            "design",
            " ui ",
            " ui/",
            "/ui ",
            " ux ",
            "interface",
            "frontend",
            "front-end",
            "dashboard",
            "composant",
            "component",
        ),
        DESIGN_RUBRIC,
    ),
    RubricEntry((" api", "backend", "back-end", "endpoint", "server", "serveur"), BACKEND_RUBRIC),
    RubricEntry(
        (
            "database",
            "base de données",
            "base de donnees",
            "données",
            "donnees",
            " db ",
            "schema",
            "migration",
            "persistence",
            "persistance",
            "stockage",
        ),
        DATABASE_RUBRIC,
    ),
    RubricEntry(("test", "qualité", "qualite", "quality", " qa "), TESTS_RUBRIC),
    RubricEntry(
        ("ci/cd", " ci ", "devops", "pipeline", "continuous", "intégration continue"),
        CICD_RUBRIC,
    ),
    RubricEntry(("documentation", " docs", " doc ", "readme", "guide"), DOCUMENTATION_RUBRIC),
    RubricEntry(
        ("deploy", "déploiement", "deploiement", "release", "production", "hosting", "launch"),
        DEPLOYMENT_RUBRIC,
    ),
)


def select_rubric(
    title: str,
    registry: Tuple[RubricEntry, ...] = RUBRIC_REGISTRY,
    default: Rubric = GENERIC_RUBRIC,
) -> Rubric:
    """Return the rubric of the first registry entry matching ``title``."""
    for entry in registry:
        if entry.matches(title):
            return entry.rubric
    return default


__all__ = [
    "Check",
    "GENERIC_RUBRIC",
    "RUBRIC_REGISTRY",
    "Rubric",
    "RubricEntry",
    "ScoringContext",
    "select_rubric",
]
