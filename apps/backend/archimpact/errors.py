"""
Error Types
===========

Exceptions raised by the architecture and impact analysis engine.

Only structurally invalid inputs are raised to callers. "Nothing found"
conditions (no cycles, no graph, a change request with no impact) are
returned as empty results instead.
"""

from __future__ import annotations

from typing import Any


class ArchImpactError(Exception):
    """Base class for all engine errors."""

    code = "ARCHIMPACT_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        """
        Initialize the error.

        Args:
            message: Human-readable error message
            context: Optional structured details for reporting
        """
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "error": type(self).__name__,
            "code": self.code,
            "message": str(self),
            "context": self.context,
        }


class MalformedGraphError(ArchImpactError):
    """A graph references an unknown node id or repeats a node id."""

    code = "MALFORMED_GRAPH"


class TraversalBudgetExceeded(ArchImpactError):
    """A graph traversal ran past its configured step budget."""

    code = "TRAVERSAL_BUDGET_EXCEEDED"

    def __init__(self, operation: str, budget: int):
        self.operation = operation
        self.budget = budget
        super().__init__(
            f"{operation} exceeded traversal budget of {budget} steps",
            {"operation": operation, "budget": budget},
        )


class InvalidChangeRequestError(ArchImpactError):
    """A structured change request is missing required fields."""

    code = "INVALID_CHANGE_REQUEST"


class PolicyConfigError(ArchImpactError):
    """A policy file could not be read or failed validation."""

    code = "INVALID_POLICY"

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = errors or []
        super().__init__(message, {"errors": self.errors})
