"""
Architecture Pattern Detector Module
====================================

Recognizes architectural patterns (MVC, layered architecture) from file
path conventions. Matching is a case-insensitive substring test on each
path; no AST inspection.

Keyword sets live in ``PatternRule`` definitions so they can be swapped
without touching the matching logic. A pattern is reported only when
every required role matches at least one file; partial matches are
dropped, never reported with lower confidence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..models.architecture_models import Pattern
from ..models.graph_models import DependencyGraph
from ..models.parsed_file import ParsedFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternRole:
    """One role in a pattern (e.g. controllers) and the path keywords that identify it."""

    name: str
    keywords: tuple[str, ...]
    required: bool = True

    def matches(self, path: str) -> bool:
        lowered = path.lower()
        return any(keyword in lowered for keyword in self.keywords)


@dataclass(frozen=True)
class PatternRule:
    """
    Heuristic definition of an architectural pattern.

    Attributes:
        name: Reported pattern name
        confidence: Confidence assigned when the rule matches (0.0 to 1.0)
        description: Reported description
        roles: Roles in the order their files are reported
    """

    name: str
    confidence: float
    description: str
    roles: tuple[PatternRole, ...]


MVC_RULE = PatternRule(
    name="MVC (Model-View-Controller)",
    confidence=0.7,
    description="MVC pattern detected based on file structure",
    roles=(
        PatternRole("controller", ("controller",)),
        PatternRole("model", ("model",)),
        PatternRole("view", ("view",), required=False),
    ),
)

LAYERED_RULE = PatternRule(
    name="Layered Architecture",
    confidence=0.8,
    description="Layered architecture detected (Controller → Service → Repository)",
    roles=(
        PatternRole("controller", ("controller",)),
        PatternRole("service", ("service",)),
        PatternRole("repository", ("repository", "repo")),
    ),
)

DEFAULT_RULES = (MVC_RULE, LAYERED_RULE)


def match_rule(rule: PatternRule, paths: list[str]) -> Pattern | None:
    """
    Evaluate one rule against a list of file paths.

    Returns:
        Pattern covering every matched file in role order, or None if any
        required role has no match
    """
    files: list[str] = []
    seen: set[str] = set()

    for role in rule.roles:
        role_files = [path for path in paths if role.matches(path)]
        if role.required and not role_files:
            return None
        for path in role_files:
            if path not in seen:
                seen.add(path)
                files.append(path)

    return Pattern(
        name=rule.name,
        type="architectural-pattern",
        confidence=rule.confidence,
        files=files,
        description=rule.description,
    )


class ArchitecturePatternDetector:
    """Detects software architecture patterns."""

    def __init__(self, rules: tuple[PatternRule, ...] = DEFAULT_RULES):
        """
        Initialize pattern detector.

        Args:
            rules: Pattern rules to evaluate, in reporting order
        """
        self.rules = rules

    def detect_all_patterns(
        self,
        parsed_files: list[ParsedFile],
        dependency_graph: DependencyGraph | None,
    ) -> list[Pattern]:
        """
        Run every rule.

        Recognition requires a dependency graph; without one nothing is
        reported.
        """
        if dependency_graph is None:
            return []

        paths = [file.path for file in parsed_files]
        patterns = []
        for rule in self.rules:
            pattern = match_rule(rule, paths)
            if pattern is not None:
                logger.debug("Recognized %s across %d files", pattern.name, len(pattern.files))
                patterns.append(pattern)
        return patterns


def detect_mvc_pattern(
    parsed_files: list[ParsedFile], dependency_graph: DependencyGraph | None
) -> Pattern | None:
    """Detect MVC: at least one controller and one model file."""
    if dependency_graph is None:
        return None
    return match_rule(MVC_RULE, [file.path for file in parsed_files])


def detect_layered_architecture(
    parsed_files: list[ParsedFile], dependency_graph: DependencyGraph | None
) -> Pattern | None:
    """Detect layered architecture: controller, service and repository files."""
    if dependency_graph is None:
        return None
    return match_rule(LAYERED_RULE, [file.path for file in parsed_files])
