"""Technology stack detection from manifest dependencies and marker files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from ..models import DetectedSignals, MarkerFiles, PackageInfo, ProjectType


@dataclass(frozen=True)
class StackRule:
    """One classification rule within a stack category.

    A rule without ``family`` is generic and only applies while the category
    is still unclassified. A rule with ``family`` refines an earlier match of
    that family and overwrites it.
    """

    label: str
    dependencies: Tuple[str, ...] = ()
    markers: Tuple[str, ...] = ()
    dependency_fragments: Tuple[str, ...] = ()
    scripts: Tuple[Tuple[str, str], ...] = ()
    family: Optional[str] = None
    always: bool = False

    def applies(
        self,
        dependencies: frozenset[str],
        scripts: Mapping[str, str],
        markers: MarkerFiles,
    ) -> bool:
        if self.always:
            return True
        if any(name in dependencies for name in self.dependencies):
            return True
        if any(getattr(markers, marker, False) for marker in self.markers):
            return True
        if any(fragment in dep for fragment in self.dependency_fragments for dep in dependencies):
            return True
        return any(fragment in scripts.get(name, "") for name, fragment in self.scripts)


def _rule(label: str, *dependencies: str, **kwargs) -> StackRule:
    return StackRule(label=label, dependencies=tuple(dependencies), **kwargs)


STACK_RULES: Dict[str, Tuple[StackRule, ...]] = {
    "frontend_framework": (
        _rule("React", "react", "react-dom"),
        _rule("Next.js", "next", family="React"),
        _rule("Gatsby", "gatsby", family="React"),
        _rule("Remix", "remix", family="React"),
        _rule("Vue.js", "vue"),
        _rule("Nuxt.js", "nuxt", family="Vue.js"),
        _rule("Angular", "@angular/core"),
        _rule("Svelte", "svelte"),
        _rule("SvelteKit", "@sveltejs/kit", family="Svelte"),
        _rule("SolidJS", "solid-js"),
        _rule("Astro", "astro"),
        _rule("Qwik", "qwik", "@builder.io/qwik"),
    ),
    "backend_framework": (
        _rule("Express.js", "express"),
        _rule("Fastify", "fastify"),
        _rule("NestJS", "nestjs", "@nestjs/core"),
        _rule("Hono", "hono"),
        _rule("Koa", "koa"),
        _rule("tRPC", "@trpc/server"),
        _rule("Elysia", "elysia"),
    ),
    "css_framework": (
        _rule("Tailwind CSS", "tailwindcss", markers=("has_tailwind",)),
        _rule("Styled Components", "styled-components"),
        _rule("Emotion", "@emotion/react", "@emotion/styled"),
        _rule("Sass/SCSS", "sass", "node-sass"),
        _rule("Chakra UI", "@chakra-ui/react"),
        _rule("Material UI", "@mui/material", "@material-ui/core"),
        _rule("Ant Design", "antd"),
        _rule("Bootstrap", "bootstrap"),
        _rule("Radix UI / shadcn", "shadcn", dependency_fragments=("radix-ui",)),
    ),
    "state_management": (
        _rule("Zustand", "zustand"),
        _rule("Redux", "@reduxjs/toolkit", "redux"),
        _rule("Recoil", "recoil"),
        _rule("Jotai", "jotai"),
        _rule("MobX", "mobx"),
        _rule("Pinia", "pinia"),
        _rule("Vuex", "vuex"),
        _rule("XState", "xstate"),
    ),
    "orm": (
        _rule("Prisma", "@prisma/client", "prisma", markers=("has_prisma",)),
        _rule("TypeORM", "typeorm"),
        _rule("Sequelize", "sequelize"),
        _rule("Mongoose", "mongoose"),
        _rule("Drizzle", "drizzle-orm"),
        _rule("Knex", "knex"),
        _rule("Supabase", "@supabase/supabase-js"),
    ),
    "testing_framework": (
        _rule("Vitest", "vitest"),
        _rule("Jest", "jest"),
        _rule("Mocha", "mocha"),
        _rule("Playwright", "@playwright/test", "playwright"),
        _rule("Cypress", "cypress"),
    ),
    "bundler": (
        _rule("Vite", "vite", markers=("has_vite",)),
        _rule("Webpack", "webpack", markers=("has_webpack",)),
        _rule("esbuild", "esbuild"),
        _rule("Turbopack", "turbopack"),
        _rule("Rollup", "rollup"),
        _rule("Parcel", "parcel"),
    ),
    "runtime_environment": (
        _rule("Bun", "bun"),
        _rule("Deno", "deno"),
        _rule("Node.js", always=True),
    ),
    "api_style": (
        _rule("GraphQL", "graphql", "@apollo/server", markers=("has_graphql",)),
        _rule("tRPC", "@trpc/server"),
        _rule("REST (OpenAPI)", markers=("has_openapi",)),
        _rule("REST", "express", "fastify", "hono"),
    ),
    "authentication": (
        _rule("NextAuth.js", "next-auth", "@auth/core"),
        _rule("Passport.js", "passport"),
        _rule("Auth0", "@auth0/auth0-react", "auth0"),
        _rule("Clerk", "@clerk/clerk-sdk-node", "@clerk/nextjs"),
        _rule("Firebase Auth", "firebase", "firebase-admin"),
        _rule("Supabase Auth", "@supabase/supabase-js"),
    ),
    "game_engine": (
        _rule("Phaser", "phaser"),
        _rule("PixiJS", "pixi.js", "pixijs"),
        _rule("Three.js", "three"),
        _rule("Babylon.js", "@babylonjs/core"),
        _rule("Kaboom.js", "kaboom"),
        _rule("Excalibur", "excalibur"),
    ),
    "deployment_target": (
        _rule("Vercel", "vercel", scripts=(("deploy", "vercel"),)),
        _rule("Netlify", "netlify-cli"),
        _rule("Azure Functions", "@azure/functions"),
        _rule("AWS", "aws-sdk", "@aws-sdk/client-lambda"),
        _rule("Firebase", "firebase-functions"),
        _rule("Docker", markers=("has_dockerfile",)),
    ),
}

_OFFLINE_DEPENDENCIES = ("workbox", "workbox-webpack-plugin")


def classify_category(
    rules: Iterable[StackRule],
    dependencies: frozenset[str],
    scripts: Mapping[str, str],
    markers: MarkerFiles,
) -> Optional[str]:
    """Evaluate one category's rules top to bottom."""
    label: Optional[str] = None
    family: Optional[str] = None
    for rule in rules:
        if rule.family is None:
            if label is None and rule.applies(dependencies, scripts, markers):
                label = family = rule.label
        elif family == rule.family and rule.applies(dependencies, scripts, markers):
            label = rule.label
    return label


def detect_stack(
    dependencies: Sequence[str],
    scripts: Mapping[str, str],
    markers: MarkerFiles,
) -> DetectedSignals:
    """Classify every stack category from dependency names, scripts and markers."""
    names = frozenset(dependencies)
    fields = {
        category: classify_category(rules, names, scripts, markers)
        for category, rules in STACK_RULES.items()
    }
    return DetectedSignals(
        **fields,
        pwa_support=markers.has_pwa,
        offline_ready=any(name in names for name in _OFFLINE_DEPENDENCIES),
    )


def detect_project_type(markers: MarkerFiles) -> ProjectType:
    if markers.has_unity_project or markers.has_godot_project:
        return "GAME_2D"
    return "WEB_MOBILE"


class StackDetector:
    """Detects the technology stack of a workspace."""

    def detect(self, package: Optional[PackageInfo], markers: MarkerFiles) -> DetectedSignals:
        # Without a manifest only engine project files carry any signal.
        if package is None:
            if markers.has_unity_project:
                return DetectedSignals(game_engine="Unity")
            if markers.has_godot_project:
                return DetectedSignals(game_engine="Godot")
            return DetectedSignals()
        return detect_stack(package.all_dependencies, package.scripts, markers)


__all__ = [
    "STACK_RULES",
    "StackDetector",
    "StackRule",
    "classify_category",
    "detect_project_type",
    "detect_stack",
]
