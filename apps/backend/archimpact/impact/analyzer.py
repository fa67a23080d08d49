"""
Change Impact Analyzer
======================

Projects the blast radius of a change request over a dependency graph.

Starting from the nodes the request targets, import edges are followed
backwards (from imported file to importing file) to find every consumer
that depends on a target directly or transitively. The result lists the
affected nodes and files, one dependency path per discovered consumer,
candidate breaking changes, templated recommendations and a complexity
estimate.

A request whose targets are not in the graph yields an empty analysis
with "low" complexity. That is a valid no-impact result, not an error.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime

from ..config import ArchitecturePolicy, ComplexityThresholds
from ..errors import TraversalBudgetExceeded
from ..models.graph_models import DependencyGraph, EdgeType, GraphNode
from ..models.impact_models import (
    AffectedNode,
    BreakingChange,
    ChangeRequest,
    ChangeType,
    Complexity,
    DependencyChain,
    DependencyPath,
    ImpactAnalysis,
    ImpactSeverity,
    ImpactSummary,
    Recommendation,
)
from .test_coverage import TestFile, find_affected_tests

logger = logging.getLogger(__name__)

HOURS_PER_AFFECTED_FILE = 2
HOURS_PER_BREAKING_CHANGE = 4
LARGE_IMPACT_NODE_COUNT = 30

REMOVAL_TYPES = {ChangeType.REMOVE.value, ChangeType.REMOVE_FEATURE.value}
SIGNATURE_SENSITIVE_TYPES = {
    ChangeType.MODIFY.value,
    ChangeType.MODIFY_FEATURE.value,
    ChangeType.REFACTOR.value,
}

# Named target kind -> (node types, node id prefix)
NAMED_TARGET_KINDS: dict[str, tuple[frozenset[str], str]] = {
    "endpoint": (frozenset({"endpoint", "api-endpoint"}), "endpoint:"),
    "table": (frozenset({"table", "database-table"}), "table:"),
    "component": (frozenset({"component"}), "component:"),
}


@dataclass
class _Traversal:
    """Working state of one reverse traversal. Local to a single analyze() call."""

    chains: list[DependencyPath] = field(default_factory=list)
    depths: dict[str, int] = field(default_factory=dict)  # consumer -> min depth
    order: list[str] = field(default_factory=list)  # consumers in discovery order
    consumers_of: dict[str, list[str]] = field(default_factory=dict)  # target -> consumers
    nearest_target: dict[str, str] = field(default_factory=dict)  # consumer -> target
    steps: int = 0


def normalize_path(path: str) -> str:
    """Normalize a path for target matching: forward slashes, no leading './'."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def estimate_complexity(
    affected_files: int,
    breaking_changes: int,
    thresholds: ComplexityThresholds | None = None,
) -> Complexity:
    """
    Estimate how hard a change will be to carry out.

    - no breaking changes and few affected files: low
    - any breaking change, or more than ``files_medium`` files: medium
    - a large affected set or many breaking changes: high
    - both a large affected set and many breaking changes: critical
    """
    thresholds = thresholds or ComplexityThresholds()
    large_file_set = affected_files > thresholds.files_high
    many_breaking = breaking_changes >= thresholds.breaking_high

    if large_file_set and many_breaking:
        return Complexity.CRITICAL
    if large_file_set or many_breaking:
        return Complexity.HIGH
    if breaking_changes > 0 or affected_files > thresholds.files_medium:
        return Complexity.MEDIUM
    return Complexity.LOW


class ImpactAnalyzer:
    """Computes the impact of a change request on a dependency graph."""

    def __init__(self, policy: ArchitecturePolicy | None = None):
        """
        Initialize the analyzer.

        Args:
            policy: Complexity thresholds and traversal budget to apply
        """
        self.policy = policy or ArchitecturePolicy()

    def analyze(
        self,
        dependency_graph: DependencyGraph,
        change_request: ChangeRequest,
        repository: str = "",
        test_files: list[TestFile] | None = None,
        now: datetime | None = None,
    ) -> ImpactAnalysis:
        """
        Analyze the impact of a change request.

        Args:
            dependency_graph: Graph of import relationships
            change_request: The proposed change
            repository: Repository name recorded on the result
            test_files: Optional test files used to find affected tests
            now: Optional timestamp override

        Returns:
            ImpactAnalysis for the request

        Raises:
            TraversalBudgetExceeded: If the policy sets ``max_traversal_steps``
                and the traversal needs more
        """
        targets = self.resolve_targets(dependency_graph, change_request)
        traversal = self._traverse_consumers(dependency_graph, targets)

        breaking_changes = self._detect_breaking_changes(
            dependency_graph, change_request, targets, traversal
        )
        breaking_targets = {bc.affected_node for bc in breaking_changes}

        affected_nodes = self._build_affected_nodes(
            dependency_graph, traversal, breaking_targets
        )
        affected_files = _unique([node.file for node in affected_nodes if node.file])

        affected_tests: list[str] = []
        if test_files:
            changed_files = _unique([t.file for t in targets if t.file] + affected_files)
            affected_tests = find_affected_tests(
                changed_files,
                test_files,
                source_files=[node.file for node in dependency_graph.nodes if node.file],
            )

        dependency_chain = DependencyChain(
            chains=traversal.chains,
            max_depth=max((len(chain) for chain in traversal.chains), default=0),
            total_affected=len(affected_nodes),
        )

        summary = self._build_summary(affected_files, affected_nodes, breaking_changes)

        recommendations = self._generate_recommendations(
            change_request,
            targets,
            affected_nodes,
            affected_files,
            breaking_changes,
            affected_tests,
        )

        logger.info(
            "Change %s (%s): %d targets, %d affected nodes, %d breaking, complexity %s",
            change_request.id,
            change_request.type,
            len(targets),
            len(affected_nodes),
            len(breaking_changes),
            summary.estimated_complexity,
        )

        return ImpactAnalysis(
            repository=repository,
            timestamp=(now or datetime.now()).isoformat(),
            change_request=change_request,
            affected_nodes=affected_nodes,
            affected_files=affected_files,
            dependency_chain=dependency_chain,
            breaking_changes=breaking_changes,
            recommendations=recommendations,
            affected_tests=affected_tests,
            summary=summary,
        )

    def resolve_targets(
        self, dependency_graph: DependencyGraph, change_request: ChangeRequest
    ) -> list[GraphNode]:
        """
        Nodes the request targets, in graph listing order.

        A node is a target when its file or id equals one of the request's
        target files, or when it is an endpoint, table or component node
        whose name or file contains one of the matching named targets
        (case-insensitive).
        """
        wanted = {normalize_path(path) for path in change_request.target_files}
        named = [
            (kind, [pattern.lower() for pattern in patterns])
            for kind, patterns in (
                (NAMED_TARGET_KINDS["endpoint"], change_request.target_endpoints),
                (NAMED_TARGET_KINDS["table"], change_request.target_tables),
                (NAMED_TARGET_KINDS["component"], change_request.target_components),
            )
            if patterns
        ]
        if not wanted and not named:
            return []

        targets = []
        for node in dependency_graph.nodes:
            if normalize_path(node.file) in wanted or normalize_path(node.id) in wanted:
                targets.append(node)
            elif any(
                _is_kind(node, kind) and _mentions(node, patterns) for kind, patterns in named
            ):
                targets.append(node)
        return targets

    def _traverse_consumers(
        self, dependency_graph: DependencyGraph, targets: list[GraphNode]
    ) -> _Traversal:
        """Breadth-first search over reversed import edges from every target."""
        traversal = _Traversal()
        budget = self.policy.max_traversal_steps

        for target in targets:
            parents: dict[str, tuple[str, str]] = {}  # node -> (parent, edge id)
            depth = {target.id: 0}
            queue = deque([target.id])
            consumers = traversal.consumers_of.setdefault(target.id, [])

            while queue:
                current = queue.popleft()
                for edge in dependency_graph.incoming(current, EdgeType.IMPORT):
                    traversal.steps += 1
                    if budget is not None and traversal.steps > budget:
                        raise TraversalBudgetExceeded("impact analysis", budget)

                    consumer = edge.from_id
                    if consumer in depth:
                        continue

                    depth[consumer] = depth[current] + 1
                    parents[consumer] = (current, edge.id)
                    queue.append(consumer)
                    consumers.append(consumer)
                    traversal.chains.append(_chain_to(target.id, consumer, parents))

                    known = traversal.depths.get(consumer)
                    if known is None:
                        traversal.order.append(consumer)
                    if known is None or depth[consumer] < known:
                        traversal.depths[consumer] = depth[consumer]
                        traversal.nearest_target[consumer] = target.id

        logger.debug(
            "Reverse traversal examined %d edges, reached %d consumers",
            traversal.steps,
            len(traversal.order),
        )
        return traversal

    def _detect_breaking_changes(
        self,
        dependency_graph: DependencyGraph,
        change_request: ChangeRequest,
        targets: list[GraphNode],
        traversal: _Traversal,
    ) -> list[BreakingChange]:
        """One breaking change per target that has consumers and an incompatible change."""
        kind = _breaking_kind(change_request)
        if kind is None:
            return []

        breaking_type, severity, impact, migration = kind
        breaking_changes = []

        for target in targets:
            consumers = traversal.consumers_of.get(target.id, [])
            if not consumers:
                continue

            direct = [
                edge.from_id for edge in dependency_graph.incoming(target.id, EdgeType.IMPORT)
            ]
            breaking_changes.append(
                BreakingChange(
                    id=f"breaking-{breaking_type}-{target.id}",
                    type=breaking_type,
                    severity=severity,
                    description=(
                        f"{change_request.type} of {target.file or target.id} affects "
                        f"{len(consumers)} consumer(s), {len(_unique(direct))} direct"
                    ),
                    affected_node=target.id,
                    file=target.file,
                    impact=impact,
                    migration_path=migration,
                    consumers=[dependency_graph.file_of(c) or c for c in consumers],
                )
            )

        return breaking_changes

    def _build_affected_nodes(
        self,
        dependency_graph: DependencyGraph,
        traversal: _Traversal,
        breaking_targets: set[str],
    ) -> list[AffectedNode]:
        affected = []

        for node_id in traversal.order:
            node = dependency_graph.get_node(node_id)
            depth = traversal.depths[node_id]
            target_id = traversal.nearest_target[node_id]
            target_label = dependency_graph.file_of(target_id) or target_id

            if depth == 1:
                severity = (
                    ImpactSeverity.CRITICAL if target_id in breaking_targets else ImpactSeverity.HIGH
                )
                reason = f"Directly imports {target_label}"
            elif depth == 2:
                severity = ImpactSeverity.MEDIUM
                reason = f"Imports {target_label} through 1 intermediate module"
            else:
                severity = ImpactSeverity.LOW
                reason = f"Imports {target_label} through {depth - 1} intermediate modules"

            affected.append(
                AffectedNode(
                    node_id=node_id,
                    node_type=node.node_type if node else "",
                    file=node.file if node else "",
                    layer=node.layer if node else None,
                    impact_type="direct" if depth == 1 else "indirect",
                    impact_reason=reason,
                    severity=severity.value,
                    depth=depth,
                )
            )

        return affected

    def _build_summary(
        self,
        affected_files: list[str],
        affected_nodes: list[AffectedNode],
        breaking_changes: list[BreakingChange],
    ) -> ImpactSummary:
        counts = {severity.value: 0 for severity in ImpactSeverity}
        for node in affected_nodes:
            counts[node.severity] = counts.get(node.severity, 0) + 1

        complexity = estimate_complexity(
            len(affected_files), len(breaking_changes), self.policy.complexity
        )

        return ImpactSummary(
            total_affected_files=len(affected_files),
            total_affected_nodes=len(affected_nodes),
            critical_impact=counts[ImpactSeverity.CRITICAL.value],
            high_impact=counts[ImpactSeverity.HIGH.value],
            medium_impact=counts[ImpactSeverity.MEDIUM.value],
            low_impact=counts[ImpactSeverity.LOW.value],
            breaking_changes_count=len(breaking_changes),
            estimated_complexity=complexity.value,
            estimated_hours=float(
                len(affected_files) * HOURS_PER_AFFECTED_FILE
                + len(breaking_changes) * HOURS_PER_BREAKING_CHANGE
            ),
        )

    def _generate_recommendations(
        self,
        change_request: ChangeRequest,
        targets: list[GraphNode],
        affected_nodes: list[AffectedNode],
        affected_files: list[str],
        breaking_changes: list[BreakingChange],
        affected_tests: list[str],
    ) -> list[Recommendation]:
        """Templated recommendations, the dominant category first."""
        recommendations: dict[str, Recommendation] = {}

        def add(rec: Recommendation) -> None:
            recommendations.setdefault(rec.id, rec)

        category = dominant_category(
            len(affected_files), len(breaking_changes), self.policy.complexity
        )

        if category == "breaking-changes":
            add(
                Recommendation(
                    id="breaking-changes-review",
                    type="review-required",
                    priority="high",
                    title="Review Breaking Changes",
                    description=(
                        f"{len(breaking_changes)} breaking change(s) detected. Ensure backward "
                        "compatibility or version APIs appropriately."
                    ),
                    affected_files=_unique([bc.file for bc in breaking_changes if bc.file]),
                )
            )
            add(
                Recommendation(
                    id="migration-plan",
                    type="migration",
                    priority="high",
                    title="Create Migration Plan",
                    description="Plan migration strategy for affected systems and clients.",
                    affected_files=list(affected_files),
                )
            )
        elif category == "wide-impact":
            add(_large_impact_recommendation(len(affected_files), "files"))
        elif category == "isolated":
            if targets:
                description = (
                    "No other module imports the changed files; the change is isolated."
                )
            else:
                description = (
                    "Target files were not found in the dependency graph; "
                    "verify the paths before relying on this analysis."
                )
            add(
                Recommendation(
                    id="no-dependents",
                    type="review-required",
                    priority="low",
                    title="No Dependent Modules",
                    description=description,
                    affected_files=[t.file for t in targets if t.file],
                )
            )

        if affected_files:
            add(
                Recommendation(
                    id="update-dependents",
                    type="code-change",
                    priority="high" if breaking_changes else "medium",
                    title="Update Dependent Modules",
                    description=(
                        f"Update {len(affected_files)} dependent module(s) before merging."
                    ),
                    affected_files=list(affected_files),
                )
            )

        if len(affected_nodes) > LARGE_IMPACT_NODE_COUNT:
            add(_large_impact_recommendation(len(affected_nodes), "nodes"))

        if change_request.type == ChangeType.MODIFY_SCHEMA.value:
            add(
                Recommendation(
                    id="backup-database",
                    type="migration",
                    priority="high",
                    title="Database Backup Required",
                    description="Ensure database backup is created before schema changes.",
                )
            )

        if affected_tests:
            shown = ", ".join(affected_tests[:3])
            more = "..." if len(affected_tests) > 3 else ""
            add(
                Recommendation(
                    id="update-tests",
                    type="test-update",
                    priority="high",
                    title="Update Affected Tests",
                    description=(
                        f"{len(affected_tests)} test file(s) may need updates due to code "
                        f"changes: {shown}{more}"
                    ),
                    affected_files=list(affected_tests),
                )
            )

        return list(recommendations.values())


def dominant_category(
    affected_files: int,
    breaking_changes: int,
    thresholds: ComplexityThresholds | None = None,
) -> str:
    """Pick the category that leads the recommendations."""
    thresholds = thresholds or ComplexityThresholds()
    if breaking_changes:
        return "breaking-changes"
    if affected_files > thresholds.files_high:
        return "wide-impact"
    if affected_files:
        return "dependents"
    return "isolated"


def _breaking_kind(change_request: ChangeRequest) -> tuple[str, str, str, str] | None:
    """(type, severity, impact, migration path) for an incompatible change, else None."""
    change_type = change_request.type

    if change_type in REMOVAL_TYPES:
        return (
            "export-removed",
            ImpactSeverity.CRITICAL.value,
            "Modules importing the removed code will fail to resolve it",
            "Remove or replace every import of the removed module before deleting it",
        )
    if change_request.removed_exports:
        return (
            "export-removed",
            ImpactSeverity.HIGH.value,
            f"Removed exports: {', '.join(change_request.removed_exports)}",
            "Update importers to stop using the removed exports",
        )
    if change_type == ChangeType.MODIFY_API.value:
        return (
            "api-response-changed",
            ImpactSeverity.HIGH.value,
            "Clients may break if the request/response format changes",
            "Update API clients to match the new endpoint signature",
        )
    if change_type == ChangeType.MODIFY_SCHEMA.value:
        return (
            "schema-column-removed",
            ImpactSeverity.HIGH.value,
            "Database migrations required, queries may need updates",
            "Create a migration script and update all affected queries",
        )
    if change_type in SIGNATURE_SENSITIVE_TYPES and change_request.changed_signatures:
        return (
            "type-incompatibility",
            ImpactSeverity.HIGH.value,
            f"Changed signatures: {', '.join(change_request.changed_signatures)}",
            "Update all call sites to match the new signatures",
        )
    return None


def _large_impact_recommendation(count: int, unit: str) -> Recommendation:
    return Recommendation(
        id="large-impact-warning",
        type="refactor",
        priority="medium",
        title="Large Impact Change",
        description=f"This change affects {count} {unit}. Consider breaking into smaller changes.",
    )


def _chain_to(
    target_id: str, consumer: str, parents: dict[str, tuple[str, str]]
) -> DependencyPath:
    nodes = [consumer]
    edges = []
    current = consumer
    while current != target_id:
        parent, edge_id = parents[current]
        edges.append(edge_id)
        nodes.append(parent)
        current = parent
    nodes.reverse()
    edges.reverse()
    return DependencyPath(
        from_id=target_id, to_id=consumer, nodes=nodes, edges=edges, direction="backward"
    )


def _is_kind(node: GraphNode, kind: tuple[frozenset[str], str]) -> bool:
    node_types, id_prefix = kind
    return node.node_type in node_types or node.id.startswith(id_prefix)


def _mentions(node: GraphNode, patterns: list[str]) -> bool:
    name = node.name.lower()
    file = node.file.lower()
    return any(pattern in name or pattern in file for pattern in patterns)


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))
