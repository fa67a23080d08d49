"""
Architecture Scorer
===================

Reduces issues and anti-patterns to a single 0-100 score. The penalty per
severity is data (a weight table), not branching logic.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

MAX_SCORE = 100
MIN_SCORE = 0

ISSUE_WEIGHTS: dict[str, int] = {
    "high": 10,
    "medium": 5,
    "low": 2,
}

ANTI_PATTERN_WEIGHTS: dict[str, int] = {
    "high": 8,
    "medium": 4,
    "low": 2,
}


def _severity(item) -> str:
    severity = item.severity
    return severity.value if isinstance(severity, Enum) else severity


def total_penalty(items: Iterable, weights: dict[str, int]) -> int:
    """Sum the weight of every item's severity. Unknown severities cost nothing."""
    return sum(weights.get(_severity(item), 0) for item in items)


def calculate_architecture_score(
    issues: Iterable,
    anti_patterns: Iterable,
    issue_weights: dict[str, int] | None = None,
    anti_pattern_weights: dict[str, int] | None = None,
) -> int:
    """
    Calculate the architecture score.

    Starts at 100, subtracts the weight of every issue and anti-pattern, and
    clamps the result to [0, 100]. The result does not depend on the order
    of either list.

    Args:
        issues: Objects with a ``severity`` of high, medium or low
        anti_patterns: Objects with a ``severity`` of high, medium or low
        issue_weights: Optional override of ISSUE_WEIGHTS
        anti_pattern_weights: Optional override of ANTI_PATTERN_WEIGHTS

    Returns:
        Integer score between 0 and 100
    """
    score = MAX_SCORE
    score -= total_penalty(issues, issue_weights or ISSUE_WEIGHTS)
    score -= total_penalty(anti_patterns, anti_pattern_weights or ANTI_PATTERN_WEIGHTS)
    return max(MIN_SCORE, min(MAX_SCORE, score))
