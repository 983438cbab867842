"""End-to-end tests for WorkspaceAnalyzer."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from devarchitect import AnalysisCache, WorkspaceAnalyzer
from devarchitect.analyzers import SecurityAuditor
from devarchitect.progress import PhaseReviewer


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class StaticRunner:
    def __init__(self, reply: str) -> None:
        self.reply = reply

    def run(self, prompt: str) -> str:
        return self.reply


def _react_app(workspace) -> None:
    workspace.package_json(
        scripts={"dev": "vite", "build": "vite build", "test": "vitest run"},
        dependencies={"react": "^18.2.0", "react-dom": "^18.2.0"},
        devDependencies={"vite": "^5.0.0", "vitest": "^1.0.0"},
    )
    workspace.write(
        {
            "tailwind.config.js": "module.exports = {};\n",
            "README.md": "# Fixture\n",
            "src/main.tsx": "import App from './App';\nimport './index.css';\n",
            "src/App.tsx": """
            import { Header } from './components/Header';
            export default function App() {
              return <Header />;
            }
            """,
            "src/components/Header.tsx": "export const Header = () => null;\n",
            "src/components/Header.test.tsx": "import { Header } from './Header';\n",
            "src/index.css": "@tailwind base;\n",
        }
    )


def test_analyze_builds_complete_snapshot(workspace) -> None:
    _react_app(workspace)

    snapshot = WorkspaceAnalyzer().analyze(workspace.path())

    assert snapshot.root == str(workspace.path().resolve())
    assert snapshot.name == "fixture-app"
    assert snapshot.project_type == "WEB_MOBILE"
    assert snapshot.signals.frontend_framework == "React"
    assert snapshot.signals.bundler == "Vite"
    assert snapshot.signals.css_framework == "Tailwind CSS"
    assert snapshot.signals.testing_framework == "Vitest"
    assert snapshot.markers.has_tailwind
    assert snapshot.markers.has_tests
    assert snapshot.stats.test_files == 1
    assert snapshot.metrics is not None
    assert snapshot.metrics.total_components >= 1
    assert snapshot.graph.get_dependencies("src/main.tsx") == ["src/App.tsx", "src/index.css"]
    assert snapshot.graph.get_dependents("src/components/Header.tsx") == [
        "src/App.tsx",
        "src/components/Header.test.tsx",
    ]
    assert snapshot.suggested_phases[0].title == "Setup & Configuration"


def test_cached_snapshot_is_reused_within_ttl(workspace) -> None:
    _react_app(workspace)
    clock = FakeClock()
    analyzer = WorkspaceAnalyzer(cache=AnalysisCache(30, clock=clock))

    first = analyzer.analyze(workspace.path())
    workspace.write({"src/extra.ts": "export {};\n"})
    clock.now = 10
    second = analyzer.analyze(workspace.path())

    assert second is first
    assert "src/extra.ts" not in second.graph

    clock.now = 31
    third = analyzer.analyze(workspace.path())

    assert third is not first
    assert "src/extra.ts" in third.graph


def test_invalidate_forces_recomputation(workspace) -> None:
    _react_app(workspace)
    analyzer = WorkspaceAnalyzer()

    first = analyzer.analyze(workspace.path())
    analyzer.invalidate()

    assert analyzer.analyze(workspace.path()) is not first


def test_different_workspace_misses_cache(tmp_path: Path, workspace) -> None:
    _react_app(workspace)
    other = tmp_path / "other"
    (other / "src").mkdir(parents=True)
    (other / "src" / "index.ts").write_text("export {};\n", encoding="utf-8")
    analyzer = WorkspaceAnalyzer()

    first = analyzer.analyze(workspace.path())
    second = analyzer.analyze(other)

    assert second is not first
    assert second.name == "other"
    assert second.package is None


def test_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        WorkspaceAnalyzer().analyze(tmp_path / "missing")


def test_invalid_config_falls_back_to_defaults(workspace, caplog) -> None:
    _react_app(workspace)
    workspace.write({".devarchitect.yml": "scan: [broken\n"})

    with caplog.at_level(logging.WARNING, logger="devarchitect"):
        snapshot = WorkspaceAnalyzer().analyze(workspace.path())

    assert "Ignoring invalid configuration" in caplog.text
    assert snapshot.metrics is not None
    assert "src/main.tsx" in snapshot.graph


def test_config_controls_scan_and_metrics(workspace) -> None:
    _react_app(workspace)
    workspace.write(
        {
            ".devarchitect.yml": """
            scan:
              exclude_paths: ["src/components/"]
            graph:
              cluster_depth: 2
            metrics:
              enabled: false
            cache:
              ttl_seconds: 5
            """,
        }
    )
    analyzer = WorkspaceAnalyzer()

    snapshot = analyzer.analyze(workspace.path())

    assert snapshot.metrics is None
    assert "src/components/Header.tsx" not in snapshot.graph
    assert snapshot.graph.cluster_depth == 2
    assert analyzer.cache.ttl_seconds == 5


def test_analyze_progress_scores_titles_in_order(workspace) -> None:
    _react_app(workspace)
    titles = ["Tests & Qualité", "Design System & UI", "Fonctionnalités Core"]

    results = WorkspaceAnalyzer().analyze_progress(workspace.path(), titles)

    assert len(results) == 3
    tests_result, design_result, _ = results
    assert "Test framework: Vitest" in tests_result.evidence
    assert "Frontend framework: React" in design_result.evidence
    assert all(0 <= result.score <= 100 for result in results)


def test_tests_phase_for_untested_workspace(workspace) -> None:
    workspace.package_json(scripts={"test": 'echo "Error: no test specified" && exit 1'})
    workspace.write({"src/index.js": "module.exports = {};\n"})
    analyzer = WorkspaceAnalyzer()

    result = analyzer.score_phase(analyzer.analyze(workspace.path()), "Tests & Qualité")

    assert result.score < 20
    assert result.status in {"backlog", "todo"}


def test_review_phase_is_optional_and_separate(workspace) -> None:
    _react_app(workspace)
    plain = WorkspaceAnalyzer()
    snapshot = plain.analyze(workspace.path())

    assert plain.review_phase(snapshot, "Header component") is None

    reviewed = WorkspaceAnalyzer(reviewer=PhaseReviewer(StaticRunner('{"progress": 95}')))
    factual = reviewed.score_phase(snapshot, "Header component")
    review = reviewed.review_phase(snapshot, "Header component")

    assert review is not None
    assert review.status == "done"
    assert reviewed.score_phase(snapshot, "Header component") == factual


def test_snapshot_carries_project_facts(workspace) -> None:
    _react_app(workspace)
    workspace.write(
        {
            "README.md": "# Fixture\nA tiny storefront.\n## Usage\nRun it.\n",
            ".env": "# Backend base URL\nVITE_BACKEND_URL=http://localhost:4000\nAUTH_SECRET=abc\n",
            "public/favicon.ico": "",
            "src/assets/hero-background.png": "",
            "yarn.lock": "",
        }
    )

    snapshot = WorkspaceAnalyzer().analyze(workspace.path())

    assert snapshot.concept == "A tiny storefront."
    assert [(var.key, var.value) for var in snapshot.variables] == [
        ("VITE_BACKEND_URL", "http://localhost:4000"),
        ("AUTH_SECRET", "***masked***"),
    ]
    assert snapshot.variables[0].description == "Backend base URL"
    assert [command.command for command in snapshot.commands[:3]] == ["yarn dev", "yarn build", "yarn test"]
    assert snapshot.commands[3].category == "Git"
    assert [(asset.category, asset.path) for asset in snapshot.assets] == [
        ("Background", "src/assets/hero-background.png"),
        ("Icon", "public/favicon.ico"),
    ]


def test_concept_falls_back_to_manifest_description(workspace) -> None:
    workspace.package_json(description="Inventory tracker")
    workspace.write({"src/index.ts": "export {};\n"})

    snapshot = WorkspaceAnalyzer().analyze(workspace.path())

    assert snapshot.concept == "Inventory tracker"
    assert snapshot.variables == []
    assert snapshot.assets == []


def test_audit_security_is_optional(workspace) -> None:
    workspace.write(
        {
            "src/auth/session.ts": "export const session = 1;\n",
            "src/components/Card.tsx": "export const Card = () => null;\n",
        }
    )
    snapshot = WorkspaceAnalyzer().analyze(workspace.path())

    assert WorkspaceAnalyzer().audit_security(snapshot) == []

    runner = StaticRunner('[{"severity": "critical", "type": "Auth bypass", "description": "no check"}]')
    issues = WorkspaceAnalyzer(auditor=SecurityAuditor(runner)).audit_security(snapshot)

    assert [(issue.file, issue.severity) for issue in issues] == [("src/auth/session.ts", "critical")]
