"""Tests for roadmap phase suggestions."""

from __future__ import annotations

from devarchitect.models import DetectedSignals, MarkerFiles, PackageInfo
from devarchitect.progress.phases import GAME_ROADMAP, suggest_phases
from devarchitect.progress.rubrics import GENERIC_RUBRIC, select_rubric


def _titles(phases) -> list[str]:
    return [phase.title for phase in phases]


def test_game_projects_get_game_roadmap() -> None:
    phases = suggest_phases("GAME_2D", DetectedSignals(game_engine="Godot"), MarkerFiles(has_godot_project=True))

    assert phases == list(GAME_ROADMAP)
    assert phases[0].title == "Game Design Document"
    assert all(phase.status == "todo" for phase in phases)


def test_minimal_web_roadmap() -> None:
    phases = suggest_phases("WEB_MOBILE", DetectedSignals(), MarkerFiles())

    assert _titles(phases) == [
        "Setup & Configuration",
        "Architecture & Structure",
        "Design System & UI",
        "Fonctionnalités Core",
        "Tests & Qualité",
        "Documentation",
        "CI/CD & DevOps",
        "Déploiement Production",
    ]


def test_stack_dependent_phases_are_added() -> None:
    package = PackageInfo(
        name="shop",
        dependencies=("react", "express", "mongoose", "next-auth", "zustand"),
        dev_dependencies=("playwright",),
    )
    signals = DetectedSignals(frontend_framework="React", backend_framework="Express.js", deployment_target="Vercel")
    markers = MarkerFiles(has_tailwind=True, has_dockerfile=True)

    phases = suggest_phases("WEB_MOBILE", signals, markers, package)
    by_title = {phase.title: phase for phase in phases}

    assert _titles(phases)[3:7] == ["Backend API", "Base de données", "Authentification", "Gestion d'état"]
    assert "React" in by_title["Setup & Configuration"].description
    assert "Tailwind CSS" in by_title["Design System & UI"].description
    assert "Express.js" in by_title["Backend API"].description
    assert "E2E" in by_title["Tests & Qualité"].description
    assert "Docker" in by_title["CI/CD & DevOps"].description
    assert "Vercel" in by_title["Déploiement Production"].description
    assert by_title["Authentification"].priority == "Critique"


def test_editor_extension_roadmap_mentions_ui_stack() -> None:
    package = PackageInfo(name="ext", dev_dependencies=("react", "vite"))

    phases = suggest_phases("WEB_MOBILE", DetectedSignals(), MarkerFiles(has_editor_extension=True), package)

    assert len(phases) == 6
    assert phases[0].title == "Contrats Webview ↔ Extension"
    assert "Stack détectée: React + Vite." in phases[2].description


def test_suggested_web_phases_map_to_rubrics() -> None:
    phases = suggest_phases("WEB_MOBILE", DetectedSignals(), MarkerFiles())

    generic = [phase.title for phase in phases if select_rubric(phase.title) is GENERIC_RUBRIC]

    assert generic == ["Fonctionnalités Core"]
