"""Tests for package manifest loading."""

from __future__ import annotations

from devarchitect.analyzers.utils import load_package_info, load_package_json


def test_load_package_info_extracts_fields(workspace) -> None:
    workspace.package_json(
        description="Planning dashboard",
        license="MIT",
        author={"name": "Ada", "email": "ada@example.com"},
        keywords=["planning", 3, "vscode"],
        scripts={"dev": "vite", "build": "vite build", "broken": 42},
        dependencies={"react": "^18.2.0", "zustand": "^4.0.0"},
        devDependencies={"vitest": "^1.0.0"},
    )

    info = load_package_info(workspace.path())

    assert info is not None
    assert info.name == "fixture-app"
    assert info.version == "1.0.0"
    assert info.description == "Planning dashboard"
    assert info.license == "MIT"
    assert info.author == "Ada"
    assert info.keywords == ("planning", "vscode")
    assert info.scripts == {"dev": "vite", "build": "vite build"}
    assert info.dependencies == ("react", "zustand")
    assert info.dev_dependencies == ("vitest",)
    assert info.all_dependencies == ("react", "zustand", "vitest")


def test_author_may_be_a_string(workspace) -> None:
    workspace.package_json(author="Grace Hopper")

    info = load_package_info(workspace.path())

    assert info is not None
    assert info.author == "Grace Hopper"


def test_missing_or_malformed_manifest(workspace) -> None:
    assert load_package_info(workspace.path()) is None

    workspace.write({"package.json": "{ not json"})
    assert load_package_json(workspace.path()) == {}
    assert load_package_info(workspace.path()) is None

    workspace.write({"package.json": "[1, 2]"})
    assert load_package_info(workspace.path()) is None
