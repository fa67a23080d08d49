"""
Data Models for Change Impact Analysis
======================================

Change requests and the impact analysis computed for them: affected
nodes, dependency chains, breaking changes, recommendations and summary.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum


class ChangeType(str, Enum):
    """Kinds of change a request can describe."""

    ADD_FEATURE = "add-feature"
    MODIFY = "modify"
    MODIFY_FEATURE = "modify-feature"
    MODIFY_API = "modify-api"
    MODIFY_SCHEMA = "modify-schema"
    REMOVE = "remove"
    REMOVE_FEATURE = "remove-feature"
    REFACTOR = "refactor"
    BUG_FIX = "bug-fix"
    OTHER = "other"


class ImpactSeverity(str, Enum):
    """How strongly an affected node is impacted."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Complexity(str, Enum):
    """Estimated complexity of carrying out a change."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def _value(value):
    return value.value if isinstance(value, Enum) else value


@dataclass(frozen=True)
class ChangeRequest:
    """
    A proposed modification to analyze. Immutable once created.

    Attributes:
        id: Change identifier
        description: Free-text description
        type: ChangeType value
        target_files: Files (or node ids) being changed
        target_components: Component names mentioned by the request
        target_endpoints: Endpoint paths mentioned by the request
        target_tables: Database tables mentioned by the request
        removed_exports: Exported symbols the change removes
        changed_signatures: Symbols whose signature changes incompatibly
    """

    id: str
    description: str = ""
    type: str = ChangeType.MODIFY.value
    target_files: tuple[str, ...] = ()
    target_components: tuple[str, ...] = ()
    target_endpoints: tuple[str, ...] = ()
    target_tables: tuple[str, ...] = ()
    removed_exports: tuple[str, ...] = ()
    changed_signatures: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "type", _value(self.type))
        for name in (
            "target_files",
            "target_components",
            "target_endpoints",
            "target_tables",
            "removed_exports",
            "changed_signatures",
        ):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "description": self.description,
            "type": self.type,
            "target_files": list(self.target_files),
            "target_components": list(self.target_components),
            "target_endpoints": list(self.target_endpoints),
            "target_tables": list(self.target_tables),
            "removed_exports": list(self.removed_exports),
            "changed_signatures": list(self.changed_signatures),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChangeRequest":
        """Load from dict. Accepts camelCase keys from the API layer."""
        return cls(
            id=data.get("id", ""),
            description=data.get("description", ""),
            type=data.get("type", ChangeType.MODIFY.value),
            target_files=tuple(data.get("target_files", data.get("targetFiles", ()))),
            target_components=tuple(
                data.get("target_components", data.get("targetComponents", ()))
            ),
            target_endpoints=tuple(
                data.get("target_endpoints", data.get("targetEndpoints", ()))
            ),
            target_tables=tuple(data.get("target_tables", data.get("targetTables", ()))),
            removed_exports=tuple(
                data.get("removed_exports", data.get("removedExports", ()))
            ),
            changed_signatures=tuple(
                data.get("changed_signatures", data.get("changedSignatures", ()))
            ),
        )


@dataclass
class AffectedNode:
    """A graph node reached by the impact traversal."""

    node_id: str = ""
    node_type: str = ""
    file: str = ""
    layer: str | None = None
    impact_type: str = "indirect"  # direct, indirect
    impact_reason: str = ""
    severity: str = ImpactSeverity.MEDIUM.value
    depth: int = 0  # hops from the changed node

    def to_dict(self) -> dict:
        return {
            "node_id": self.node_id,
            "node_type": self.node_type,
            "file": self.file,
            "layer": self.layer,
            "impact_type": self.impact_type,
            "impact_reason": self.impact_reason,
            "severity": self.severity,
            "depth": self.depth,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AffectedNode":
        return cls(
            node_id=data.get("node_id", ""),
            node_type=data.get("node_type", ""),
            file=data.get("file", ""),
            layer=data.get("layer"),
            impact_type=data.get("impact_type", "indirect"),
            impact_reason=data.get("impact_reason", ""),
            severity=data.get("severity", ImpactSeverity.MEDIUM.value),
            depth=data.get("depth", 0),
        )


@dataclass
class DependencyPath:
    """One path from a changed node to a consumer."""

    from_id: str = ""
    to_id: str = ""
    nodes: list[str] = field(default_factory=list)
    edges: list[str] = field(default_factory=list)
    direction: str = "backward"  # backward = consumers of the change

    def __len__(self) -> int:
        return len(self.nodes)

    def to_dict(self) -> dict:
        return {
            "from": self.from_id,
            "to": self.to_id,
            "nodes": list(self.nodes),
            "edges": list(self.edges),
            "direction": self.direction,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DependencyPath":
        return cls(
            from_id=data.get("from", ""),
            to_id=data.get("to", ""),
            nodes=list(data.get("nodes", [])),
            edges=list(data.get("edges", [])),
            direction=data.get("direction", "backward"),
        )


@dataclass
class DependencyChain:
    """All discovered paths plus their aggregate depth and reach."""

    chains: list[DependencyPath] = field(default_factory=list)
    max_depth: int = 0
    total_affected: int = 0

    def to_dict(self) -> dict:
        return {
            "chains": [chain.to_dict() for chain in self.chains],
            "max_depth": self.max_depth,
            "total_affected": self.total_affected,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DependencyChain":
        return cls(
            chains=[DependencyPath.from_dict(c) for c in data.get("chains", [])],
            max_depth=data.get("max_depth", 0),
            total_affected=data.get("total_affected", 0),
        )


@dataclass
class BreakingChange:
    """A change that removes or incompatibly alters something in use."""

    id: str = ""
    type: str = "other"
    severity: str = ImpactSeverity.HIGH.value
    description: str = ""
    affected_node: str = ""
    file: str = ""
    impact: str = ""
    migration_path: str = ""
    consumers: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "severity": self.severity,
            "description": self.description,
            "affected_node": self.affected_node,
            "file": self.file,
            "impact": self.impact,
            "migration_path": self.migration_path,
            "consumers": list(self.consumers),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BreakingChange":
        return cls(
            id=data.get("id", ""),
            type=data.get("type", "other"),
            severity=data.get("severity", ImpactSeverity.HIGH.value),
            description=data.get("description", ""),
            affected_node=data.get("affected_node", ""),
            file=data.get("file", ""),
            impact=data.get("impact", ""),
            migration_path=data.get("migration_path", ""),
            consumers=list(data.get("consumers", [])),
        )


@dataclass
class Recommendation:
    """A suggested follow-up action for a change."""

    id: str = ""
    type: str = "review-required"
    priority: str = "medium"  # high, medium, low
    title: str = ""
    description: str = ""
    affected_files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "priority": self.priority,
            "title": self.title,
            "description": self.description,
            "affected_files": list(self.affected_files),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Recommendation":
        return cls(
            id=data.get("id", ""),
            type=data.get("type", "review-required"),
            priority=data.get("priority", "medium"),
            title=data.get("title", ""),
            description=data.get("description", ""),
            affected_files=list(data.get("affected_files", [])),
        )


@dataclass
class ImpactSummary:
    """Counts and estimates for an impact analysis."""

    total_affected_files: int = 0
    total_affected_nodes: int = 0
    critical_impact: int = 0
    high_impact: int = 0
    medium_impact: int = 0
    low_impact: int = 0
    breaking_changes_count: int = 0
    estimated_complexity: str = Complexity.LOW.value
    estimated_hours: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_affected_files": self.total_affected_files,
            "total_affected_nodes": self.total_affected_nodes,
            "critical_impact": self.critical_impact,
            "high_impact": self.high_impact,
            "medium_impact": self.medium_impact,
            "low_impact": self.low_impact,
            "breaking_changes_count": self.breaking_changes_count,
            "estimated_complexity": self.estimated_complexity,
            "estimated_hours": self.estimated_hours,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ImpactSummary":
        return cls(
            total_affected_files=data.get("total_affected_files", 0),
            total_affected_nodes=data.get("total_affected_nodes", 0),
            critical_impact=data.get("critical_impact", 0),
            high_impact=data.get("high_impact", 0),
            medium_impact=data.get("medium_impact", 0),
            low_impact=data.get("low_impact", 0),
            breaking_changes_count=data.get("breaking_changes_count", 0),
            estimated_complexity=data.get("estimated_complexity", Complexity.LOW.value),
            estimated_hours=data.get("estimated_hours", 0.0),
        )


@dataclass
class ImpactAnalysis:
    """Projected blast radius of a change request."""

    repository: str = ""
    timestamp: str = ""
    change_request: ChangeRequest | None = None
    affected_nodes: list[AffectedNode] = field(default_factory=list)
    affected_files: list[str] = field(default_factory=list)
    dependency_chain: DependencyChain = field(default_factory=DependencyChain)
    breaking_changes: list[BreakingChange] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    affected_tests: list[str] = field(default_factory=list)
    summary: ImpactSummary = field(default_factory=ImpactSummary)

    @property
    def has_impact(self) -> bool:
        return bool(self.affected_nodes)

    def affected_node_ids(self) -> list[str]:
        return [node.node_id for node in self.affected_nodes]

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "repository": self.repository,
            "timestamp": self.timestamp,
            "change_request": self.change_request.to_dict() if self.change_request else None,
            "affected_nodes": [node.to_dict() for node in self.affected_nodes],
            "affected_files": list(self.affected_files),
            "dependency_chain": self.dependency_chain.to_dict(),
            "breaking_changes": [bc.to_dict() for bc in self.breaking_changes],
            "recommendations": [rec.to_dict() for rec in self.recommendations],
            "affected_tests": list(self.affected_tests),
            "summary": self.summary.to_dict(),
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> "ImpactAnalysis":
        """Load from dict."""
        change_data = data.get("change_request")
        return cls(
            repository=data.get("repository", ""),
            timestamp=data.get("timestamp", ""),
            change_request=ChangeRequest.from_dict(change_data) if change_data else None,
            affected_nodes=[AffectedNode.from_dict(n) for n in data.get("affected_nodes", [])],
            affected_files=list(data.get("affected_files", [])),
            dependency_chain=DependencyChain.from_dict(data.get("dependency_chain", {})),
            breaking_changes=[
                BreakingChange.from_dict(b) for b in data.get("breaking_changes", [])
            ],
            recommendations=[
                Recommendation.from_dict(r) for r in data.get("recommendations", [])
            ],
            affected_tests=list(data.get("affected_tests", [])),
            summary=ImpactSummary.from_dict(data.get("summary", {})),
        )

    @classmethod
    def from_json(cls, json_str: str) -> "ImpactAnalysis":
        """Load from JSON string."""
        return cls.from_dict(json.loads(json_str))

    def save_to_file(self, file_path: str) -> None:
        """Save analysis to a JSON file."""
        with open(file_path, "w") as f:
            f.write(self.to_json())
