"""Tests for devarchitect.workspace_scanner."""

from __future__ import annotations

from pathlib import Path

import pytest

from devarchitect.workspace_scanner import WorkspaceScanner, classify_file, compute_file_stats


@pytest.mark.parametrize(
    ("path", "kind"),
    [
        ("src/app.ts", "source"),
        ("src/App.vue", "source"),
        ("src/app.test.ts", "test"),
        ("src/Button.spec.tsx", "test"),
        ("src/__tests__/helpers.ts", "test"),
        ("vite.config.ts", "config"),
        ("tsconfig.json", "config"),
        ("src/styles/main.scss", "style"),
        ("public/logo.svg", "asset"),
        ("README.md", "other"),
        # Test markers win over configuration suffixes.
        ("fixtures/data.test.json", "test"),
    ],
)
def test_classify_file(path: str, kind: str) -> None:
    assert classify_file(path) == kind


def test_scan_lists_files_in_deterministic_order(workspace) -> None:
    workspace.touch(
        [
            "src/b.ts",
            "src/a.ts",
            "package.json",
            "node_modules/react/index.js",
            "dist/bundle.js",
            ".git/HEAD",
        ]
    )

    listing = WorkspaceScanner().scan(workspace.path())

    assert listing.root == workspace.path().resolve()
    assert listing.files == ["package.json", "src/a.ts", "src/b.ts"]
    assert listing.truncated is False


def test_scan_honours_exclude_patterns(workspace) -> None:
    workspace.touch(["src/app.ts", "fixtures/sample.ts", "src/api.generated.ts"])

    scanner = WorkspaceScanner(exclude_paths=["fixtures/", "*.generated.ts"])
    listing = scanner.scan(workspace.path())

    assert listing.files == ["src/app.ts"]


def test_scan_caps_file_count(workspace) -> None:
    workspace.touch([f"src/file{index}.ts" for index in range(5)])

    listing = WorkspaceScanner(max_files=3).scan(workspace.path())

    assert len(listing.files) == 3
    assert listing.truncated is True


def test_scan_rejects_missing_directory(tmp_path: Path) -> None:
    missing = tmp_path / "missing"

    with pytest.raises(FileNotFoundError) as excinfo:
        WorkspaceScanner().scan(missing)

    assert str(missing) in str(excinfo.value)


def test_scan_rejects_file_root(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("content", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        WorkspaceScanner().scan(target)


def test_graph_files_exclude_documents(workspace) -> None:
    workspace.touch(["src/app.ts", "src/app.css", "README.md", "assets/logo.png", "data.json"])

    listing = workspace.listing()

    assert listing.graph_files() == ["data.json", "assets/logo.png", "src/app.css", "src/app.ts"]


def test_compute_file_stats_counts_categories(workspace) -> None:
    workspace.touch(
        [
            "src/components/Button.tsx",
            "src/components/Card.tsx",
            "src/services/api.ts",
            "src/services/api.test.ts",
            "src/styles/theme.css",
            "docs/guide.md",
            "README.md",
            "package.json",
            "server/main.py",
        ]
    )

    stats = compute_file_stats(workspace.listing())

    assert stats.total_files == 9
    assert stats.code_files == 5
    assert stats.test_files == 1
    assert stats.component_files == 2
    assert stats.config_files == 1
    assert stats.documentation_files == 2
    assert stats.style_files == 1
    assert {"src", "components", "services", "styles", "docs", "server"} <= stats.directories
