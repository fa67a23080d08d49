"""
Circular Dependency Detector
============================

Finds import cycles in a dependency graph with a depth-first search over
``import`` edges and reports each one as a circular-dependency issue.

One cycle is reported per back-edge. Overlapping cycles inside the same
strongly-connected region are not merged, so a region with several
back-edges produces several issues.
"""

from __future__ import annotations

import logging

from ..errors import TraversalBudgetExceeded
from ..models.architecture_models import ArchitectureIssue, IssueType, Severity
from ..models.graph_models import DependencyGraph, EdgeType

logger = logging.getLogger(__name__)


def find_cycles(graph: DependencyGraph, max_steps: int | None = None) -> list[list[str]]:
    """
    Detect cycles using DFS with a recursion-stack set.

    Nodes are visited in graph listing order and edges in listing order.
    When an edge points at a node currently on the recursion stack, the
    stack slice from that node through the closing edge is recorded, so
    each cycle starts and ends with the same id. A self-loop yields
    ``[node, node]``.

    Args:
        graph: Dependency graph to search
        max_steps: Optional cap on edges examined

    Returns:
        List of cycles as ordered node-id lists

    Raises:
        TraversalBudgetExceeded: If more than ``max_steps`` edges are examined
    """
    cycles: list[list[str]] = []
    visited: set[str] = set()
    on_stack: set[str] = set()
    steps = 0

    for root in graph.nodes:
        if root.id in visited:
            continue

        visited.add(root.id)
        on_stack.add(root.id)
        path = [root.id]
        frames = [iter(graph.outgoing(root.id, EdgeType.IMPORT))]

        while frames:
            edge = next(frames[-1], None)
            if edge is None:
                frames.pop()
                on_stack.discard(path.pop())
                continue

            steps += 1
            if max_steps is not None and steps > max_steps:
                raise TraversalBudgetExceeded("cycle detection", max_steps)

            target = edge.to_id
            if target in on_stack:
                # Back-edge: found a cycle
                cycle_start = path.index(target)
                cycles.append(path[cycle_start:] + [target])
            elif target not in visited:
                visited.add(target)
                on_stack.add(target)
                path.append(target)
                frames.append(iter(graph.outgoing(target, EdgeType.IMPORT)))

    logger.debug("Examined %d import edges, found %d cycles", steps, len(cycles))
    return cycles


def cycle_files(graph: DependencyGraph, cycle: list[str]) -> list[str]:
    """
    Map a cycle to the files of its members, in cycle order.

    The closing repeat of the first node is omitted. Nodes with no
    resolvable file are dropped.
    """
    members = cycle[:-1] if len(cycle) > 1 and cycle[0] == cycle[-1] else cycle
    return [f for f in (graph.file_of(node_id) for node_id in members) if f]


def detect_circular_dependencies(
    graph: DependencyGraph, max_steps: int | None = None
) -> list[ArchitectureIssue]:
    """Report one high-severity issue per cycle found in the graph."""
    issues = []

    for cycle in find_cycles(graph, max_steps=max_steps):
        files = cycle_files(graph, cycle)
        if not files:
            continue

        issues.append(
            ArchitectureIssue(
                id=f"circular-{files[0]}",
                type=IssueType.CIRCULAR_DEPENDENCY,
                severity=Severity.HIGH,
                title="Circular Dependency Detected",
                description=(
                    f"Circular dependency between {len(files)} files: "
                    f"{' -> '.join(files + [files[0]])}"
                ),
                affected_files=files,
                recommendation=(
                    "Refactor to break circular dependency, "
                    "use dependency injection or event system"
                ),
            )
        )

    return issues
