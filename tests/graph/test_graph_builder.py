"""Tests for the dependency graph builder and its queries."""

from __future__ import annotations

from devarchitect.graph import AliasTable, DependencyGraph, resolve_import
from devarchitect.graph.aliases import AliasRule
from devarchitect.graph.builder import probe_candidate


def _build(workspace) -> DependencyGraph:
    graph = DependencyGraph(max_workers=2)
    graph.build_graph(workspace.listing())
    return graph


def _edge_set(graph: DependencyGraph) -> set[tuple[str, str]]:
    return set(graph.edges())


def test_service_layer_dependencies_and_dependents(workspace) -> None:
    workspace.write(
        {
            "src/services/AuthService.ts": """
            import { connect } from './db/connection';
            export const login = () => connect();
            """,
            "src/services/db/connection.ts": "export const connect = () => null;\n",
            "src/routes/login.ts": "import { login } from '../services/AuthService';\n",
        }
    )

    graph = _build(workspace)

    assert graph.get_dependencies("src/services/AuthService.ts") == ["src/services/db/connection.ts"]
    assert graph.get_dependents("src/services/db/connection.ts") == ["src/services/AuthService.ts"]
    assert graph.get_dependents("src/services/AuthService.ts") == ["src/routes/login.ts"]


def test_package_specifiers_never_create_edges(workspace) -> None:
    workspace.write(
        {
            "src/app.ts": "import _ from 'lodash';\nimport React from 'react';\n",
            "src/lodash.ts": "export default {};\n",
            "lodash/index.ts": "export default {};\n",
            "react.ts": "export default {};\n",
        }
    )

    graph = _build(workspace)

    assert graph.get_dependencies("src/app.ts") == []
    assert graph.edge_count() == 0


def test_resolution_probes_extensions_and_index_files(workspace) -> None:
    workspace.write(
        {
            "src/main.tsx": """
            import App from './App';
            import { Button } from './components';
            import './styles/main.scss';
            import data from '../data/seed.json';
            """,
            "src/App.tsx": "export default function App() { return null; }\n",
            "src/components/index.ts": "export * from './Button';\n",
            "src/components/Button.tsx": "export const Button = () => null;\n",
            "src/styles/main.scss": "@import './variables';\n",
            "src/styles/variables.scss": "$primary: blue;\n",
            "data/seed.json": "{}\n",
        }
    )

    graph = _build(workspace)

    assert graph.get_dependencies("src/main.tsx") == [
        "src/App.tsx",
        "src/components/index.ts",
        "src/styles/main.scss",
        "data/seed.json",
    ]
    assert graph.get_dependencies("src/components/index.ts") == ["src/components/Button.tsx"]
    assert graph.get_dependencies("src/styles/main.scss") == ["src/styles/variables.scss"]


def test_alias_specifiers_resolve_through_tsconfig(workspace) -> None:
    workspace.write(
        {
            "tsconfig.json": '{"compilerOptions": {"baseUrl": ".", "paths": {"@/*": ["src/*"]}}}',
            "src/pages/index.tsx": "import { useAuth } from '@/hooks/useAuth';\nimport Box from '@mui/material/Box';\n",
            "src/hooks/useAuth.ts": "export function useAuth() {}\n",
        }
    )

    graph = _build(workspace)

    assert graph.get_dependencies("src/pages/index.tsx") == ["src/hooks/useAuth.ts"]
    assert graph.aliases.source == "tsconfig.json"


def test_malformed_tsconfig_still_builds_relative_edges(workspace) -> None:
    workspace.write(
        {
            "tsconfig.json": "{ this is not json",
            "src/a.ts": "import './b';\n",
            "src/b.ts": "export {};\n",
        }
    )

    graph = _build(workspace)

    assert not graph.aliases
    assert graph.get_dependencies("src/a.ts") == ["src/b.ts"]


def test_edges_are_symmetric_and_deduplicated(workspace) -> None:
    workspace.write(
        {
            "src/a.ts": "import { b } from './b';\nimport './b.ts';\nimport './a';\n",
            "src/b.ts": "import { c } from './c';\n",
            "src/c.ts": "import { a } from './a';\n",
        }
    )

    graph = _build(workspace)

    assert graph.get_dependencies("src/a.ts") == ["src/b.ts"]
    for path in graph.paths:
        for target in graph.get_dependencies(path):
            assert path in graph.get_dependents(target)
        for source in graph.get_dependents(path):
            assert path in graph.get_dependencies(source)


def test_rebuild_is_idempotent(workspace) -> None:
    workspace.write(
        {
            "src/index.ts": "import './app';\nimport './util';\n",
            "src/app.ts": "import './util';\n",
            "src/util.ts": "export {};\n",
        }
    )
    graph = DependencyGraph()
    listing = workspace.listing()

    graph.build_graph(listing)
    first_nodes, first_edges = set(graph.paths), _edge_set(graph)
    graph.build_graph(listing)

    assert set(graph.paths) == first_nodes
    assert _edge_set(graph) == first_edges
    assert len(first_edges) == 3


def test_queries_before_build_are_empty() -> None:
    graph = DependencyGraph()

    assert len(graph) == 0
    assert graph.get_node("src/app.ts") is None
    assert graph.get_dependencies("src/app.ts") == []
    assert graph.get_dependents("src/app.ts") == []
    assert graph.find_files_by_keyword("app") == []


def test_get_node_returns_detached_copy(workspace) -> None:
    workspace.write({"src/a.ts": "import './b';\n", "src/b.ts": "export {};\n"})
    graph = _build(workspace)

    node = graph.get_node("src/a.ts")
    assert node is not None
    assert node.kind == "source"
    assert node.absolute_path.endswith("a.ts")
    node.imports.append("src/other.ts")

    assert graph.get_dependencies("src/a.ts") == ["src/b.ts"]


def test_find_files_by_keyword_matches_path_substrings(workspace) -> None:
    workspace.touch(["src/auth/login.ts", "src/components/Button.tsx"])
    graph = _build(workspace)

    assert graph.find_files_by_keyword("auth") == ["src/auth/login.ts"]
    assert graph.find_files_by_keyword("BUTTON") == ["src/components/Button.tsx"]


def test_get_cluster_expands_in_both_directions(workspace) -> None:
    workspace.write(
        {
            "src/page.ts": "import './service';\n",
            "src/service.ts": "import './repository';\n",
            "src/repository.ts": "import './db';\n",
            "src/db.ts": "export {};\n",
            "src/unrelated.ts": "export {};\n",
        }
    )
    graph = _build(workspace)

    assert graph.get_cluster("src/service.ts") == [
        "src/service.ts",
        "src/repository.ts",
        "src/page.ts",
    ]
    assert set(graph.get_cluster("src/service.ts", depth=2)) == {
        "src/service.ts",
        "src/repository.ts",
        "src/page.ts",
        "src/db.ts",
    }
    assert graph.get_cluster("src/service.ts", depth=0) == ["src/service.ts"]
    assert graph.get_cluster("src/missing.ts") == ["src/missing.ts"]


def test_resolve_import_is_deterministic() -> None:
    known = {"src/utils/index.ts", "src/utils.ts"}
    aliases = AliasTable()

    outcomes = {resolve_import("src/app.ts", "./utils", known, aliases) for _ in range(5)}

    # The file with an extension wins over the directory index.
    assert outcomes == {"src/utils.ts"}


def test_resolve_import_strips_query_and_handles_root_relative() -> None:
    known = {"src/logo.svg", "src/main.ts"}
    aliases = AliasTable()

    assert resolve_import("src/main.ts", "./logo.svg?url", known, aliases) == "src/logo.svg"
    assert resolve_import("index.html", "/src/main.ts", known, aliases) == "src/main.ts"
    assert resolve_import("src/main.ts", "./missing", known, aliases) is None


def test_probe_candidate_order() -> None:
    known = {"lib/format", "lib/format.ts", "lib/index.js"}

    assert probe_candidate("lib/format", known) == "lib/format"
    assert probe_candidate("./lib/format.ts", known) == "lib/format.ts"
    assert probe_candidate("lib/", known) == "lib/index.js"
    assert probe_candidate("lib/missing", known) is None


def test_alias_substitution_runs_before_relative_resolution() -> None:
    known = {"shadow/util.ts", "src/util.ts"}
    aliases = AliasTable(rules=(AliasRule(pattern="./*", prefix="./", wildcard=True, targets=("shadow/",)),))

    assert resolve_import("src/app.ts", "./util", known, aliases) == "shadow/util.ts"
    # An alias target that does not exist falls through to the relative path.
    assert resolve_import("src/app.ts", "./util", {"src/util.ts"}, aliases) == "src/util.ts"


def test_node_absolute_paths_come_from_the_listing(workspace) -> None:
    workspace.write({"src/a.ts": "export {};\n"})
    listing = workspace.listing()
    graph = DependencyGraph()
    graph.build_graph(listing)

    node = graph.get_node("src/a.ts")

    assert node is not None
    assert node.absolute_path == str(listing.absolute("src/a.ts"))
