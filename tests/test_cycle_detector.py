"""
Tests for circular dependency detection.
"""

import pytest
from conftest import make_dependency_graph

from archimpact.dependency.cycle_detector import (
    cycle_files,
    detect_circular_dependencies,
    find_cycles,
)
from archimpact.errors import TraversalBudgetExceeded
from archimpact.models.graph_models import DependencyGraph, GraphEdge, GraphNode


class TestFindCycles:
    """Test raw cycle enumeration."""

    def test_no_edges_no_cycles(self, empty_graph, isolated_graph):
        """Test graphs without edges have no cycles."""
        assert find_cycles(empty_graph) == []
        assert find_cycles(isolated_graph) == []

    def test_triangle(self, triangle_graph):
        """Test A -> B -> C -> A yields one closed cycle."""
        assert find_cycles(triangle_graph) == [["a.ts", "b.ts", "c.ts", "a.ts"]]

    def test_self_loop(self):
        """Test a self-import is a cycle of length one."""
        graph = make_dependency_graph(["a.ts"], [("a.ts", "a.ts")])
        assert find_cycles(graph) == [["a.ts", "a.ts"]]

    def test_dag_has_no_cycles(self):
        """Test a diamond-shaped DAG is acyclic."""
        graph = make_dependency_graph(
            ["a", "b", "c", "d"],
            [("a", "b"), ("a", "c"), ("b", "d"), ("c", "d")],
        )
        assert find_cycles(graph) == []

    def test_only_import_edges_count(self):
        """Test non-import edges never close a cycle."""
        graph = DependencyGraph(
            nodes=(GraphNode(id="a"), GraphNode(id="b")),
            edges=(
                GraphEdge(from_id="a", to_id="b", edge_type="import"),
                GraphEdge(from_id="b", to_id="a", edge_type="call"),
            ),
        )
        assert find_cycles(graph) == []

    def test_disjoint_cycles(self):
        """Test two separate cycles are both found."""
        graph = make_dependency_graph(
            ["a", "b", "c", "d"],
            [("a", "b"), ("b", "a"), ("c", "d"), ("d", "c")],
        )
        assert find_cycles(graph) == [["a", "b", "a"], ["c", "d", "c"]]

    def test_deep_chain_does_not_recurse(self):
        """Test a very long chain is handled without recursion limits."""
        files = [f"m{i}" for i in range(5000)]
        imports = [(files[i], files[i + 1]) for i in range(len(files) - 1)]
        imports.append((files[-1], files[0]))
        cycles = find_cycles(make_dependency_graph(files, imports))
        assert len(cycles) == 1
        assert len(cycles[0]) == 5001

    def test_budget_exceeded(self, triangle_graph):
        """Test the step budget aborts the search."""
        with pytest.raises(TraversalBudgetExceeded) as exc_info:
            find_cycles(triangle_graph, max_steps=1)
        assert exc_info.value.budget == 1

    def test_budget_large_enough(self, triangle_graph):
        """Test a sufficient budget does not interfere."""
        assert len(find_cycles(triangle_graph, max_steps=3)) == 1


class TestCircularDependencyIssues:
    """Test issues derived from cycles."""

    def test_triangle_issue(self, triangle_graph):
        """Test the issue lists each member once in cycle order."""
        issues = detect_circular_dependencies(triangle_graph)
        assert len(issues) == 1
        issue = issues[0]
        assert issue.id == "circular-a.ts"
        assert issue.type == "circular-dependency"
        assert issue.severity == "high"
        assert issue.affected_files == ["a.ts", "b.ts", "c.ts"]
        assert "a.ts -> b.ts -> c.ts -> a.ts" in issue.description
        assert "3 files" in issue.description

    def test_self_loop_issue(self):
        """Test a self-loop reports a single file."""
        graph = make_dependency_graph(["a.ts"], [("a.ts", "a.ts")])
        issues = detect_circular_dependencies(graph)
        assert [i.affected_files for i in issues] == [["a.ts"]]

    def test_acyclic_graph_has_no_issues(self, consumer_graph):
        """Test no issues for an acyclic graph."""
        assert detect_circular_dependencies(consumer_graph) == []

    def test_cycle_files_skips_fileless_nodes(self):
        """Test members without a file are dropped from affected files."""
        graph = DependencyGraph(
            nodes=(GraphNode(id="a", file="a.ts"), GraphNode(id="b")),
            edges=(GraphEdge(from_id="a", to_id="b"), GraphEdge(from_id="b", to_id="a")),
        )
        assert cycle_files(graph, ["a", "b", "a"]) == ["a.ts"]
