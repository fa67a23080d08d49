"""
Data Models for Architecture Assessment
=======================================

Issues, recognized patterns, anti-patterns and the aggregate assessment
with its 0-100 score.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum


class Severity(str, Enum):
    """Severity of an issue or anti-pattern."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IssueType(str, Enum):
    """Categories of architecture issues."""

    CIRCULAR_DEPENDENCY = "circular-dependency"
    GOD_OBJECT = "god-object"
    LARGE_FILE = "large-file"
    TIGHT_COUPLING = "tight-coupling"
    LAYER_VIOLATION = "violation-of-layers"


def _value(value):
    return value.value if isinstance(value, Enum) else value


@dataclass
class ArchitectureIssue:
    """A single structural problem found by a detector."""

    id: str = ""
    type: str = ""
    severity: str = Severity.MEDIUM.value
    title: str = ""
    description: str = ""
    affected_files: list[str] = field(default_factory=list)
    recommendation: str = ""

    def __post_init__(self):
        self.type = _value(self.type)
        self.severity = _value(self.severity)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "type": self.type,
            "severity": self.severity,
            "title": self.title,
            "description": self.description,
            "affected_files": list(self.affected_files),
            "recommendation": self.recommendation,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ArchitectureIssue":
        """Load from dict."""
        return cls(
            id=data.get("id", ""),
            type=data.get("type", ""),
            severity=data.get("severity", Severity.MEDIUM.value),
            title=data.get("title", ""),
            description=data.get("description", ""),
            affected_files=list(data.get("affected_files", data.get("affectedFiles", []))),
            recommendation=data.get("recommendation", ""),
        )


@dataclass
class Pattern:
    """A recognized architectural pattern."""

    name: str = ""
    type: str = "architectural-pattern"
    confidence: float = 0.0  # 0.0 to 1.0
    files: list[str] = field(default_factory=list)
    description: str = ""

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Pattern confidence must be within [0, 1], got {self.confidence}")

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "name": self.name,
            "type": self.type,
            "confidence": self.confidence,
            "files": list(self.files),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Pattern":
        """Load from dict."""
        return cls(
            name=data.get("name", ""),
            type=data.get("type", "architectural-pattern"),
            confidence=data.get("confidence", 0.0),
            files=list(data.get("files", [])),
            description=data.get("description", ""),
        )


@dataclass
class AntiPattern:
    """A named, severity-tagged structural problem with a canonical fix."""

    name: str = ""
    severity: str = Severity.MEDIUM.value
    files: list[str] = field(default_factory=list)
    description: str = ""
    recommendation: str = ""

    def __post_init__(self):
        self.severity = _value(self.severity)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "name": self.name,
            "severity": self.severity,
            "files": list(self.files),
            "description": self.description,
            "recommendation": self.recommendation,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AntiPattern":
        """Load from dict."""
        return cls(
            name=data.get("name", ""),
            severity=data.get("severity", Severity.MEDIUM.value),
            files=list(data.get("files", [])),
            description=data.get("description", ""),
            recommendation=data.get("recommendation", ""),
        )


@dataclass(frozen=True)
class ArchitectureAssessment:
    """
    Aggregate output of an architecture assessment.

    The score is derived from ``issues`` and ``anti_patterns`` when the
    assessment is built and cannot be changed afterwards. Use ``build()``
    rather than the constructor.

    Attributes:
        issues: All issues from every detector that ran
        patterns: Recognized architectural patterns
        anti_patterns: Named anti-patterns (currently God Object)
        score: Integer 0-100
        skipped_detectors: Graph-dependent detectors that did not run
        errors: Recoverable failures (malformed graph, failing detector)
    """

    issues: tuple[ArchitectureIssue, ...] = ()
    patterns: tuple[Pattern, ...] = ()
    anti_patterns: tuple[AntiPattern, ...] = ()
    score: int = 100
    skipped_detectors: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        issues: list[ArchitectureIssue],
        patterns: list[Pattern],
        anti_patterns: list[AntiPattern],
        skipped_detectors: list[str] | None = None,
        errors: list[str] | None = None,
        issue_weights: dict[str, int] | None = None,
        anti_pattern_weights: dict[str, int] | None = None,
    ) -> "ArchitectureAssessment":
        """Create an assessment, computing its score from issues and anti-patterns."""
        from ..architecture.scoring import calculate_architecture_score

        score = calculate_architecture_score(
            issues,
            anti_patterns,
            issue_weights=issue_weights,
            anti_pattern_weights=anti_pattern_weights,
        )
        return cls(
            issues=tuple(issues),
            patterns=tuple(patterns),
            anti_patterns=tuple(anti_patterns),
            score=score,
            skipped_detectors=tuple(skipped_detectors or ()),
            errors=tuple(errors or ()),
        )

    def issues_by_type(self, issue_type: str | IssueType) -> list[ArchitectureIssue]:
        """Get all issues of one type."""
        wanted = _value(issue_type)
        return [issue for issue in self.issues if issue.type == wanted]

    def issues_by_severity(self, severity: str | Severity) -> list[ArchitectureIssue]:
        """Get all issues of one severity."""
        wanted = _value(severity)
        return [issue for issue in self.issues if issue.severity == wanted]

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "issues": [issue.to_dict() for issue in self.issues],
            "patterns": [pattern.to_dict() for pattern in self.patterns],
            "anti_patterns": [ap.to_dict() for ap in self.anti_patterns],
            "score": self.score,
            "skipped_detectors": list(self.skipped_detectors),
            "errors": list(self.errors),
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> "ArchitectureAssessment":
        """Load from dict. The stored score is kept as-is."""
        return cls(
            issues=tuple(ArchitectureIssue.from_dict(i) for i in data.get("issues", [])),
            patterns=tuple(Pattern.from_dict(p) for p in data.get("patterns", [])),
            anti_patterns=tuple(
                AntiPattern.from_dict(a)
                for a in data.get("anti_patterns", data.get("antiPatterns", []))
            ),
            score=data.get("score", 100),
            skipped_detectors=tuple(data.get("skipped_detectors", [])),
            errors=tuple(data.get("errors", [])),
        )

    def summary(self) -> str:
        """Get a human-readable summary of the assessment."""
        lines = [
            "=== Architecture Assessment ===",
            f"Score: {self.score}/100",
            f"Issues: {len(self.issues)} "
            f"(high: {len(self.issues_by_severity(Severity.HIGH))}, "
            f"medium: {len(self.issues_by_severity(Severity.MEDIUM))}, "
            f"low: {len(self.issues_by_severity(Severity.LOW))})",
            f"Anti-patterns: {len(self.anti_patterns)}",
            f"Patterns: {', '.join(p.name for p in self.patterns) or 'none'}",
        ]
        if self.skipped_detectors:
            lines.append(f"Skipped: {', '.join(self.skipped_detectors)}")
        return "\n".join(lines)
