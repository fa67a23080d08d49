"""
Data Models for Dependency and Lineage Graphs
=============================================

Typed node and edge containers for the two graphs the engine consumes:
dependency graphs (import relationships between files) and lineage graphs
(coarse data flow across frontend, backend and database layers).

Graphs are frozen. They are validated once on construction and never
mutated afterwards, so every detector can share a single instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors import MalformedGraphError


class EdgeType(Enum):
    """Types of edges between graph nodes."""

    # Dependency graph
    IMPORT = "import"
    CALL = "call"
    EXTENDS = "extends"
    USES = "uses"

    # Lineage graph
    API_CALL = "api-call"
    DATABASE_QUERY = "database-query"
    DATA_FLOW = "data-flow"
    NAVIGATION = "navigation"
    DEPENDENCY = "dependency"


class Layer(Enum):
    """Architectural tiers a lineage node can belong to."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    DATABASE = "database"


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


@dataclass(frozen=True)
class GraphNode:
    """A single node (file, component, endpoint, table...) in a graph."""

    id: str
    file: str = ""
    layer: str | None = None
    node_type: str = "file"
    name: str = ""
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "layer", _enum_value(self.layer))

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "file": self.file,
            "layer": self.layer,
            "type": self.node_type,
            "name": self.name,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GraphNode":
        """Load from dict."""
        return cls(
            id=data["id"],
            file=data.get("file") or "",
            layer=data.get("layer"),
            node_type=data.get("type", data.get("node_type", "file")),
            name=data.get("name", data.get("label", "")),
            metadata=data.get("metadata", data.get("data", {})) or {},
        )


@dataclass(frozen=True)
class GraphEdge:
    """A directed edge between two nodes."""

    from_id: str
    to_id: str
    edge_type: str = EdgeType.IMPORT.value
    id: str = ""
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "edge_type", _enum_value(self.edge_type))
        if not self.id:
            object.__setattr__(self, "id", f"{self.from_id}->{self.to_id}:{self.edge_type}")

    @property
    def is_self_loop(self) -> bool:
        return self.from_id == self.to_id

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "from": self.from_id,
            "to": self.to_id,
            "type": self.edge_type,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GraphEdge":
        """Load from dict. Accepts both ``from``/``to`` and ``from_id``/``to_id``."""
        return cls(
            from_id=data.get("from", data.get("from_id", "")),
            to_id=data.get("to", data.get("to_id", "")),
            edge_type=data.get("type", data.get("edge_type", EdgeType.IMPORT.value)),
            id=data.get("id", ""),
            metadata=data.get("metadata", data.get("data", {})) or {},
        )


@dataclass(frozen=True)
class _Graph:
    """Shared validation and lookups for dependency and lineage graphs."""

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()

    _nodes_by_id: dict[str, GraphNode] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _outgoing: dict[str, tuple[GraphEdge, ...]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _incoming: dict[str, tuple[GraphEdge, ...]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

        nodes_by_id: dict[str, GraphNode] = {}
        for node in self.nodes:
            if node.id in nodes_by_id:
                raise MalformedGraphError(
                    f"Duplicate node id '{node.id}'", {"node_id": node.id}
                )
            nodes_by_id[node.id] = node

        outgoing: dict[str, list[GraphEdge]] = {}
        incoming: dict[str, list[GraphEdge]] = {}
        for edge in self.edges:
            for endpoint in (edge.from_id, edge.to_id):
                if endpoint not in nodes_by_id:
                    raise MalformedGraphError(
                        f"Edge '{edge.id}' references unknown node '{endpoint}'",
                        {"edge_id": edge.id, "node_id": endpoint},
                    )
            outgoing.setdefault(edge.from_id, []).append(edge)
            incoming.setdefault(edge.to_id, []).append(edge)

        object.__setattr__(self, "_nodes_by_id", nodes_by_id)
        object.__setattr__(self, "_outgoing", {k: tuple(v) for k, v in outgoing.items()})
        object.__setattr__(self, "_incoming", {k: tuple(v) for k, v in incoming.items()})

    def get_node(self, node_id: str) -> GraphNode | None:
        """Get a node by its id."""
        return self._nodes_by_id.get(node_id)

    def file_of(self, node_id: str) -> str:
        """File path of a node, or an empty string when unknown."""
        node = self._nodes_by_id.get(node_id)
        return node.file if node else ""

    def outgoing(self, node_id: str, edge_type: str | EdgeType | None = None) -> tuple[GraphEdge, ...]:
        """Outgoing edges of a node in listing order, optionally filtered by type."""
        edges = self._outgoing.get(node_id, ())
        if edge_type is None:
            return edges
        wanted = _enum_value(edge_type)
        return tuple(edge for edge in edges if edge.edge_type == wanted)

    def incoming(self, node_id: str, edge_type: str | EdgeType | None = None) -> tuple[GraphEdge, ...]:
        """Incoming edges of a node in listing order, optionally filtered by type."""
        edges = self._incoming.get(node_id, ())
        if edge_type is None:
            return edges
        wanted = _enum_value(edge_type)
        return tuple(edge for edge in edges if edge.edge_type == wanted)

    def edges_of_type(self, edge_type: str | EdgeType) -> list[GraphEdge]:
        wanted = _enum_value(edge_type)
        return [edge for edge in self.edges if edge.edge_type == wanted]

    def nodes_for_file(self, file_path: str) -> list[GraphNode]:
        return [node for node in self.nodes if node.file == file_path]

    def with_edges(self, edges: list[GraphEdge]):
        """Build a new graph of the same kind with additional edges."""
        return type(self)(nodes=self.nodes, edges=self.edges + tuple(edges))

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: dict):
        """
        Load from dict.

        Raises:
            MalformedGraphError: If an edge references an unknown node id
        """
        return cls(
            nodes=tuple(GraphNode.from_dict(n) for n in data.get("nodes", [])),
            edges=tuple(GraphEdge.from_dict(e) for e in data.get("edges", [])),
        )


@dataclass(frozen=True)
class DependencyGraph(_Graph):
    """Directed graph of import relationships between source files."""


@dataclass(frozen=True)
class LineageGraph(_Graph):
    """Directed graph approximating data flow across architectural layers."""

    def layers(self) -> dict[str, list[GraphNode]]:
        """Group nodes by layer. Nodes without a layer are omitted."""
        grouped: dict[str, list[GraphNode]] = {layer.value: [] for layer in Layer}
        for node in self.nodes:
            if node.layer:
                grouped.setdefault(node.layer, []).append(node)
        return grouped
