"""
Shared fixtures for the architecture and impact analysis tests.
"""

import sys
from pathlib import Path

import pytest

# Add backend to path
backend_path = Path(__file__).parent.parent / "apps" / "backend"
sys.path.insert(0, str(backend_path))

from archimpact.models.graph_models import (  # noqa: E402
    DependencyGraph,
    GraphEdge,
    GraphNode,
    LineageGraph,
)
from archimpact.models.parsed_file import (  # noqa: E402
    ClassDefinition,
    ExportInfo,
    ParsedFile,
)


def make_dependency_graph(files: list[str], imports: list[tuple[str, str]]) -> DependencyGraph:
    """Build a dependency graph where each node id equals its file path."""
    return DependencyGraph(
        nodes=tuple(GraphNode(id=f, file=f) for f in files),
        edges=tuple(GraphEdge(from_id=a, to_id=b, edge_type="import") for a, b in imports),
    )


def make_class(name: str, method_count: int) -> ClassDefinition:
    return ClassDefinition(name=name, methods=[f"method_{i}" for i in range(method_count)])


def make_file(path: str, methods: int = 0, exports: int = 0, loc: int = 100) -> ParsedFile:
    """Parsed file with one class of ``methods`` methods (if > 0)."""
    return ParsedFile(
        path=path,
        language="typescript",
        exports=[ExportInfo(name=f"export_{i}") for i in range(exports)],
        classes=[make_class("Widget", methods)] if methods else [],
        lines_of_code=loc,
    )


@pytest.fixture
def empty_graph():
    """Graph with no nodes and no edges."""
    return DependencyGraph()


@pytest.fixture
def isolated_graph():
    """Three nodes and no edges."""
    return make_dependency_graph(["a.ts", "b.ts", "c.ts"], [])


@pytest.fixture
def triangle_graph():
    """A -> B -> C -> A."""
    return make_dependency_graph(
        ["a.ts", "b.ts", "c.ts"],
        [("a.ts", "b.ts"), ("b.ts", "c.ts"), ("c.ts", "a.ts")],
    )


@pytest.fixture
def consumer_graph():
    """
    Layered consumers of ``core.ts``:

        api.ts -> service.ts -> core.ts
        ui.ts  -> api.ts
        util.ts (isolated)
    """
    return make_dependency_graph(
        ["core.ts", "service.ts", "api.ts", "ui.ts", "util.ts"],
        [
            ("service.ts", "core.ts"),
            ("api.ts", "service.ts"),
            ("ui.ts", "api.ts"),
        ],
    )


@pytest.fixture
def lineage_graph():
    """Frontend component querying the database directly, and via the backend."""
    return LineageGraph(
        nodes=(
            GraphNode(id="comp", file="src/UserList.tsx", layer="frontend", node_type="component"),
            GraphNode(id="endpoint", file="api/users.py", layer="backend", node_type="api-endpoint"),
            GraphNode(id="users", file="", layer="database", node_type="database-table"),
        ),
        edges=(
            GraphEdge(from_id="comp", to_id="endpoint", edge_type="api-call"),
            GraphEdge(from_id="endpoint", to_id="users", edge_type="database-query"),
            GraphEdge(from_id="comp", to_id="users", edge_type="database-query"),
        ),
    )


@pytest.fixture
def layered_files():
    """Files following controller/service/repository naming."""
    return [
        make_file("src/controllers/user_controller.ts"),
        make_file("src/services/user_service.ts"),
        make_file("src/repositories/user_repository.ts"),
        make_file("src/models/user_model.ts"),
    ]
