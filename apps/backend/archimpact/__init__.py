"""
Architecture & Impact Analysis Engine
=====================================

Assesses a repository's architecture (cycles, god objects, oversized
files, tight coupling, layer violations, recognized patterns, score) and
projects the impact of proposed changes over its dependency graph.

Usage:
    from archimpact import ArchitectureAssessor, ImpactAnalyzer, parse_change_request

    assessment = ArchitectureAssessor().assess(parsed_files, dependency_graph)
    analysis = ImpactAnalyzer().analyze(dependency_graph, parse_change_request(text))
"""

import logging

from .assessment import ArchitectureAssessor, assess_architecture
from .config import ArchitecturePolicy, ComplexityThresholds, PolicyConfigLoader, load_policy
from .errors import (
    ArchImpactError,
    InvalidChangeRequestError,
    MalformedGraphError,
    PolicyConfigError,
    TraversalBudgetExceeded,
)
from .impact import ImpactAnalyzer, parse_change_request
from .models import (
    ArchitectureAssessment,
    ChangeRequest,
    DependencyGraph,
    GraphEdge,
    GraphNode,
    ImpactAnalysis,
    LineageGraph,
    ParsedFile,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"

__all__ = [
    "ArchitectureAssessor",
    "assess_architecture",
    "ImpactAnalyzer",
    "parse_change_request",
    "ArchitecturePolicy",
    "ComplexityThresholds",
    "PolicyConfigLoader",
    "load_policy",
    "ArchImpactError",
    "MalformedGraphError",
    "TraversalBudgetExceeded",
    "InvalidChangeRequestError",
    "PolicyConfigError",
    "ArchitectureAssessment",
    "ImpactAnalysis",
    "ChangeRequest",
    "DependencyGraph",
    "LineageGraph",
    "GraphNode",
    "GraphEdge",
    "ParsedFile",
]
