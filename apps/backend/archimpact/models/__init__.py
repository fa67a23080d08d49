"""
Architecture and Impact Models
==============================

Data models for dependency and lineage graphs, parsed file records,
architecture assessments and change impact analyses.
"""

from .architecture_models import (
    AntiPattern,
    ArchitectureAssessment,
    ArchitectureIssue,
    IssueType,
    Pattern,
    Severity,
)
from .graph_models import (
    DependencyGraph,
    EdgeType,
    GraphEdge,
    GraphNode,
    Layer,
    LineageGraph,
)
from .impact_models import (
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
from .parsed_file import (
    ClassDefinition,
    ExportInfo,
    FunctionDefinition,
    ImportInfo,
    ParsedFile,
)

__all__ = [
    # Graph models
    "GraphNode",
    "GraphEdge",
    "DependencyGraph",
    "LineageGraph",
    "EdgeType",
    "Layer",
    # Parsed files
    "ParsedFile",
    "ClassDefinition",
    "FunctionDefinition",
    "ImportInfo",
    "ExportInfo",
    # Architecture models
    "ArchitectureIssue",
    "ArchitectureAssessment",
    "Pattern",
    "AntiPattern",
    "IssueType",
    "Severity",
    # Impact models
    "ChangeRequest",
    "ChangeType",
    "AffectedNode",
    "DependencyPath",
    "DependencyChain",
    "BreakingChange",
    "Recommendation",
    "ImpactSummary",
    "ImpactAnalysis",
    "ImpactSeverity",
    "Complexity",
]
