"""
Structural Issue Detectors
==========================

Independent, side-effect-free scanners over parsed files and graphs:

- god objects (classes with too many methods)
- files with too many exports
- very large files
- tight coupling (too many outgoing imports)
- layer violations (frontend querying the database directly)

Each detector returns a fresh list of issues. Results are concatenated by
the caller; no detector suppresses another's findings.
"""

from __future__ import annotations

from ..models.architecture_models import AntiPattern, ArchitectureIssue, IssueType, Severity
from ..models.graph_models import DependencyGraph, EdgeType, Layer, LineageGraph
from ..models.parsed_file import ParsedFile

# Policy thresholds. An issue is raised only when a count is strictly greater.
GOD_OBJECT_METHOD_THRESHOLD = 20
EXCESS_EXPORT_THRESHOLD = 15
LARGE_FILE_LINE_THRESHOLD = 1000
TIGHT_COUPLING_THRESHOLD = 10

GOD_OBJECT_NAME = "God Object"


def detect_god_objects(
    parsed_files: list[ParsedFile],
    threshold: int = GOD_OBJECT_METHOD_THRESHOLD,
) -> list[ArchitectureIssue]:
    """Flag every class with more than ``threshold`` methods."""
    issues = []

    for file in parsed_files:
        for cls in file.classes or []:
            if cls.method_count > threshold:
                issues.append(
                    ArchitectureIssue(
                        id=f"god-object-{file.path}-{cls.name}",
                        type=IssueType.GOD_OBJECT,
                        severity=Severity.HIGH,
                        title="God Object Detected",
                        description=(
                            f"Class {cls.name} has {cls.method_count} methods, "
                            "indicating too many responsibilities"
                        ),
                        affected_files=[file.path],
                        recommendation=(
                            "Apply Single Responsibility Principle, split into smaller classes"
                        ),
                    )
                )

    return issues


def detect_excess_exports(
    parsed_files: list[ParsedFile],
    threshold: int = EXCESS_EXPORT_THRESHOLD,
) -> list[ArchitectureIssue]:
    """Flag every file exporting more than ``threshold`` symbols."""
    issues = []

    for file in parsed_files:
        export_count = len(file.exports)
        if export_count > threshold:
            issues.append(
                ArchitectureIssue(
                    id=f"large-file-{file.path}",
                    type=IssueType.LARGE_FILE,
                    severity=Severity.MEDIUM,
                    title="File with Too Many Exports",
                    description=(
                        f"File exports {export_count} items, may have too many responsibilities"
                    ),
                    affected_files=[file.path],
                    recommendation="Split file into smaller, focused modules",
                )
            )

    return issues


def detect_large_files(
    parsed_files: list[ParsedFile],
    threshold: int = LARGE_FILE_LINE_THRESHOLD,
) -> list[ArchitectureIssue]:
    """Flag every file with more than ``threshold`` lines of code."""
    issues = []

    for file in parsed_files:
        if file.lines_of_code > threshold:
            issues.append(
                ArchitectureIssue(
                    id=f"large-file-loc-{file.path}",
                    type=IssueType.LARGE_FILE,
                    severity=Severity.MEDIUM,
                    title="Very Large File",
                    description=(
                        f"File has {file.lines_of_code} lines of code, difficult to maintain"
                    ),
                    affected_files=[file.path],
                    recommendation="Split into smaller modules (recommended: < 500 lines)",
                )
            )

    return issues


def detect_tight_coupling(
    graph: DependencyGraph,
    threshold: int = TIGHT_COUPLING_THRESHOLD,
) -> list[ArchitectureIssue]:
    """
    Flag files with more than ``threshold`` outgoing import edges.

    Edges are grouped by the file of their source node, so several nodes
    in one file add up. Edges whose source has no file are ignored.
    """
    issues = []
    file_dependencies: dict[str, int] = {}

    for edge in graph.edges_of_type(EdgeType.IMPORT):
        from_file = graph.file_of(edge.from_id)
        if from_file:
            file_dependencies[from_file] = file_dependencies.get(from_file, 0) + 1

    for file, dep_count in file_dependencies.items():
        if dep_count > threshold:
            issues.append(
                ArchitectureIssue(
                    id=f"tight-coupling-{file}",
                    type=IssueType.TIGHT_COUPLING,
                    severity=Severity.MEDIUM,
                    title="High Coupling Detected",
                    description=(
                        f"File has {dep_count} direct dependencies, indicating tight coupling"
                    ),
                    affected_files=[file],
                    recommendation="Reduce dependencies by introducing abstraction layers",
                )
            )

    return issues


def detect_layer_violations(lineage_graph: LineageGraph) -> list[ArchitectureIssue]:
    """Flag every database query issued directly from a frontend node."""
    issues = []

    for edge in lineage_graph.edges_of_type(EdgeType.DATABASE_QUERY):
        from_node = lineage_graph.get_node(edge.from_id)
        if from_node is not None and from_node.layer == Layer.FRONTEND.value:
            issues.append(
                ArchitectureIssue(
                    id=f"layer-violation-{edge.id}",
                    type=IssueType.LAYER_VIOLATION,
                    severity=Severity.HIGH,
                    title="Layer Violation: Direct Database Access",
                    description=(
                        f"Frontend code in {from_node.file or from_node.id} appears to directly "
                        "access database"
                    ),
                    affected_files=[from_node.file] if from_node.file else [],
                    recommendation="Access database only through backend API endpoints",
                )
            )

    return issues


def god_object_anti_patterns(issues: list[ArchitectureIssue]) -> list[AntiPattern]:
    """Promote god-object issues to named anti-patterns."""
    return [
        AntiPattern(
            name=GOD_OBJECT_NAME,
            severity=Severity.HIGH,
            files=list(issue.affected_files),
            description=issue.description,
            recommendation=issue.recommendation,
        )
        for issue in issues
        if issue.type == IssueType.GOD_OBJECT.value
    ]
