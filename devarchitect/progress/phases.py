"""Roadmap phase suggestions derived from the detected stack."""

from __future__ import annotations

import re
from typing import List, Mapping, Optional, Sequence

from ..models import DetectedSignals, MarkerFiles, PackageInfo, PhaseSuggestion, ProjectType

_BACKEND_DEPS = re.compile(r"express|fastify|nest|koa|hono")
_DATABASE_DEPS = re.compile(r"prisma|typeorm|mongoose|sequelize|drizzle")
_AUTH_DEPS = re.compile(r"next-auth|passport|auth0|clerk|supabase|firebase")
_STATE_DEPS = re.compile(r"zustand|redux|recoil|jotai|mobx|pinia|vuex")
_E2E_DEPS = re.compile(r"cypress|playwright")

GAME_ROADMAP = (
    PhaseSuggestion("Game Design Document", "Définition des mécaniques, règles et progression", "Critique"),
    PhaseSuggestion("Prototype Core Loop", "Implémentation de la boucle de gameplay principale", "Haute"),
    PhaseSuggestion("Art & Assets", "Création des sprites, animations et effets visuels", "Haute"),
    PhaseSuggestion("Audio & SFX", "Musique et effets sonores", "Moyenne"),
    PhaseSuggestion("Polish & Juice", "Animations, particules, feedback visuel", "Moyenne"),
    PhaseSuggestion("Testing & QA", "Tests de gameplay, équilibrage, bugs", "Haute"),
    PhaseSuggestion("Release", "Publication sur stores/plateformes", "Critique"),
)


def suggest_phases(
    project_type: ProjectType,
    signals: DetectedSignals,
    markers: MarkerFiles,
    package: Optional[PackageInfo] = None,
) -> List[PhaseSuggestion]:
    """Propose an ordered roadmap for the workspace.

    Game projects get the fixed game roadmap, editor extensions the extension
    roadmap, and everything else the web roadmap with optional phases for the
    backend, database, authentication and state-management stacks found.
    """
    if project_type == "GAME_2D":
        return list(GAME_ROADMAP)

    dependencies = package.all_dependencies if package else ()
    scripts = package.scripts if package else {}

    def uses(pattern: re.Pattern[str]) -> bool:
        return any(pattern.search(name) for name in dependencies)

    if markers.has_editor_extension:
        return _extension_roadmap(dependencies, scripts, markers)

    phases = [
        PhaseSuggestion(
            "Setup & Configuration",
            "Initialisation du projet"
            + (f" {signals.frontend_framework}" if signals.frontend_framework else "")
            + ", configuration linting/prettier, hooks, scripts build/test, et CI de base.",
            "Critique",
        ),
        PhaseSuggestion(
            "Architecture & Structure",
            "Définition de l'architecture, structure des dossiers, patterns (composants, services, stores)",
            "Critique",
        ),
        PhaseSuggestion(
            "Design System & UI",
            "Composants UI de base"
            + (" avec Tailwind CSS" if markers.has_tailwind else "")
            + ", thème, couleurs, typographie",
            "Haute",
        ),
    ]

    if signals.backend_framework or uses(_BACKEND_DEPS):
        phases.append(
            PhaseSuggestion(
                "Backend API",
                f"Développement des endpoints API {signals.backend_framework or 'REST'}, validation, erreurs",
                "Haute",
            )
        )
    if markers.has_prisma or uses(_DATABASE_DEPS):
        phases.append(
            PhaseSuggestion("Base de données", "Modèles de données, migrations, seeds, relations", "Haute")
        )
    if uses(_AUTH_DEPS):
        phases.append(
            PhaseSuggestion("Authentification", "Système de connexion, sessions, JWT, OAuth providers", "Critique")
        )
    if uses(_STATE_DEPS):
        phases.append(
            PhaseSuggestion("Gestion d'état", "Stores, actions, synchronisation état global/local", "Moyenne")
        )

    phases.extend(
        [
            PhaseSuggestion(
                "Fonctionnalités Core",
                "Développement des fonctionnalités principales de l'application",
                "Haute",
            ),
            PhaseSuggestion(
                "Tests & Qualité",
                "Tests unitaires" + (", E2E" if uses(_E2E_DEPS) else "") + ", couverture code, linting",
                "Haute",
            ),
            PhaseSuggestion("Documentation", "README, API docs, guides utilisateur, commentaires code", "Moyenne"),
            PhaseSuggestion(
                "CI/CD & DevOps",
                "Pipeline CI/CD" + (", Docker" if markers.has_dockerfile else "") + ", déploiement automatisé",
                "Haute",
            ),
            PhaseSuggestion(
                "Déploiement Production",
                f"Mise en production {signals.deployment_target or ''}".rstrip() + ", monitoring, logs",
                "Critique",
            ),
        ]
    )
    return phases


def _extension_roadmap(
    dependencies: Sequence[str],
    scripts: Mapping[str, str],
    markers: MarkerFiles,
) -> List[PhaseSuggestion]:
    uses_vite = any("vite" in name for name in dependencies) or any(
        "vite" in command for command in scripts.values()
    )
    uses_react = any("react" in name for name in dependencies)
    ui_stack = " + ".join(
        label
        for label, present in (("React", uses_react), ("Vite", uses_vite), ("Tailwind", markers.has_tailwind))
        if present
    )
    return [
        PhaseSuggestion(
            "Contrats Webview ↔ Extension",
            "Définir/valider les types de messages, versionner le protocole, "
            "et garantir la compatibilité sidebar/panel.",
            "Critique",
        ),
        PhaseSuggestion(
            "Stockage & Synchronisation",
            "Unifier la persistance, éviter les boucles de mise à jour, "
            "et fiabiliser la synchronisation complète.",
            "Critique",
        ),
        PhaseSuggestion(
            "UI Webview (Dashboard)",
            "Édition complète des champs, roadmap détaillée et vues de suivi. "
            f"Stack détectée: {ui_stack or 'N/A'}.",
            "Haute",
        ),
        PhaseSuggestion(
            "Intégration IA Locale",
            "Commandes de l'assistant couvrant la synchronisation, la planification et l'ajout de phases.",
            "Haute",
        ),
        PhaseSuggestion(
            "Analyse Workspace (Qualité du signal)",
            "Détection de stack multi-module, génération de roadmap plus fine, "
            "progression basée sur stats/tests/CI.",
            "Moyenne",
        ),
        PhaseSuggestion(
            "Qualité, Packaging & Release",
            "Tests et lint, build de la webview, packaging et préparation de la publication.",
            "Haute",
        ),
    ]


__all__ = ["GAME_ROADMAP", "suggest_phases"]
