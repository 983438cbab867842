"""Developer commands derived from package scripts and marker files."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from ..models import MarkerFiles, PackageInfo, ProjectCommand

# Checked in order against the lowercased script name; the first fragment wins.
SCRIPT_CATEGORIES: Tuple[Tuple[str, str], ...] = (
    ("dev", "Build"),
    ("start", "Build"),
    ("build", "Build"),
    ("test", "Test"),
    ("lint", "Test"),
    ("deploy", "Deploy"),
    ("docker", "Docker"),
)

GIT_COMMANDS: Tuple[ProjectCommand, ...] = (
    ProjectCommand("Git Status", "git status", "Git", "Show the working tree status"),
    ProjectCommand("Git Pull", "git pull", "Git", "Fetch and merge remote changes"),
    ProjectCommand("Git Push", "git push", "Git", "Push local commits"),
)

DOCKER_COMMANDS: Tuple[ProjectCommand, ...] = (
    ProjectCommand("Docker Build", "docker build -t app .", "Docker", "Build the image"),
    ProjectCommand("Docker Run", "docker run -p 3000:3000 app", "Docker", "Run the container"),
)


def detect_node_package_manager(files: Iterable[str]) -> str:
    """Infer the preferred Node package manager from root lockfiles."""
    names = set(files)
    if "pnpm-lock.yaml" in names:
        return "pnpm"
    if "yarn.lock" in names:
        return "yarn"
    return "npm"


def build_node_script_command(script: str, manager: str) -> str:
    if manager == "pnpm":
        return f"pnpm {script}"
    if manager == "yarn":
        return f"yarn {script}"
    if script == "start":
        return "npm start"
    return f"npm run {script}"


def categorize_script(name: str) -> str:
    lowered = name.lower()
    for fragment, category in SCRIPT_CATEGORIES:
        if fragment in lowered:
            return category
    return "Other"


def generate_commands(
    package: Optional[PackageInfo],
    markers: MarkerFiles,
    files: Iterable[str] = (),
) -> List[ProjectCommand]:
    """Scripts first in manifest order, then Git, then Docker when configured."""
    commands: List[ProjectCommand] = []
    if package is not None:
        manager = detect_node_package_manager(files)
        for name, script in package.scripts.items():
            commands.append(
                ProjectCommand(
                    label=name,
                    command=build_node_script_command(name, manager),
                    category=categorize_script(name),
                    description=f"Script: {script}",
                )
            )
    commands.extend(GIT_COMMANDS)
    if markers.has_dockerfile:
        commands.extend(DOCKER_COMMANDS)
    return commands


__all__ = [
    "SCRIPT_CATEGORIES",
    "build_node_script_command",
    "categorize_script",
    "detect_node_package_manager",
    "generate_commands",
]
