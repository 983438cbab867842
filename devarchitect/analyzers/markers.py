"""Marker-file detection for well-known project configuration."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Dict, Sequence, Tuple

from ..models import MarkerFiles

# Candidate grammar:
#   "**/<glob>"  any listed file whose trailing components match <glob>
#   "<dir>/"     a directory directly under the workspace root
#   "<path>"     a file at that root-relative path
MARKER_RULES: Dict[str, Tuple[str, ...]] = {
    "has_package_json": ("package.json",),
    "has_dockerfile": ("Dockerfile", "docker-compose.yml", "docker-compose.yaml", "compose.yaml"),
    "has_readme": ("README.md", "readme.md", "Readme.md", "README"),
    "has_tsconfig": ("tsconfig.json",),
    "has_unity_project": ("**/*.unity", "ProjectSettings/ProjectSettings.asset"),
    "has_godot_project": ("**/*.godot", "project.godot"),
    "has_prisma": ("prisma/schema.prisma", "**/schema.prisma"),
    "has_graphql": ("**/*.graphql", "**/*.gql"),
    "has_tailwind": (
        "tailwind.config.js",
        "tailwind.config.ts",
        "tailwind.config.cjs",
        "tailwind.config.mjs",
    ),
    "has_tests": ("**/*.test.[jt]s", "**/*.test.[jt]sx", "**/*.spec.[jt]s", "**/*.spec.[jt]sx"),
    "has_cicd": (".github/workflows/", ".gitlab-ci.yml", "azure-pipelines.yml", ".circleci/"),
    "has_editor_extension": ("extension/package.json", "**/extension.ts"),
    "has_monorepo": ("lerna.json", "pnpm-workspace.yaml", "nx.json", "turbo.json"),
    "has_storybook": (".storybook/",),
    "has_openapi": ("openapi.yaml", "openapi.yml", "openapi.json", "swagger.json", "swagger.yaml"),
    "has_i18n": ("i18n/", "locales/"),
    "has_pwa": ("manifest.json", "public/manifest.json", "**/service-worker.js", "**/service-worker.ts"),
    "has_ssr": ("next.config.js", "next.config.mjs", "next.config.ts", "nuxt.config.ts", "nuxt.config.js"),
    "has_webpack": ("webpack.config.js", "webpack.config.ts"),
    "has_vite": ("vite.config.ts", "vite.config.js", "vite.config.mjs"),
    "has_eslint": (
        ".eslintrc",
        ".eslintrc.json",
        ".eslintrc.js",
        ".eslintrc.cjs",
        "eslint.config.js",
        "eslint.config.mjs",
    ),
    "has_prettier": (".prettierrc", ".prettierrc.json", "prettier.config.js"),
    "has_husky": (".husky/",),
    "has_changesets": (".changeset/",),
    "has_env_example": (".env.example",),
    "has_license": ("LICENSE", "LICENSE.md", "LICENSE.txt"),
    "has_contributing": ("CONTRIBUTING.md", "CONTRIBUTING.en.md"),
    "has_changelog": ("CHANGELOG.md",),
    "has_gitignore": (".gitignore",),
}


def detect_markers(root: Path, files: Sequence[str]) -> MarkerFiles:
    """Evaluate every marker rule against the root and a workspace listing."""
    listed = [PurePosixPath(path) for path in files]
    values = {
        name: any(_candidate_present(root, listed, candidate) for candidate in candidates)
        for name, candidates in MARKER_RULES.items()
    }
    return MarkerFiles(**values)


def _candidate_present(root: Path, listed: Sequence[PurePosixPath], candidate: str) -> bool:
    if candidate.startswith("**/"):
        pattern = candidate[3:]
        return any(path.match(pattern) for path in listed)
    if candidate.endswith("/"):
        return _stat_is_dir(root / candidate.rstrip("/"))
    return _stat_is_file(root / candidate)


def _stat_is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError:
        return False


def _stat_is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


__all__ = ["MARKER_RULES", "detect_markers"]
