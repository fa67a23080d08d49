"""
Architecture Assessment
=======================

Runs every structural detector and pattern recognizer over a set of parsed
files and graphs, then folds the results into a scored
ArchitectureAssessment.

Detectors are independent and side-effect free, so they are fanned out on a
thread pool. Results are concatenated in the fixed order of DETECTOR_ORDER,
never in completion order. A detector that raises is logged and recorded in
``errors``; the remaining detectors still contribute.

Usage:
    from archimpact.assessment import ArchitectureAssessor

    assessment = ArchitectureAssessor().assess(parsed_files, dependency_graph)
    print(assessment.summary())
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from .architecture.pattern_detector import ArchitecturePatternDetector
from .architecture.structural_detectors import (
    detect_excess_exports,
    detect_god_objects,
    detect_large_files,
    detect_layer_violations,
    detect_tight_coupling,
    god_object_anti_patterns,
)
from .config import ArchitecturePolicy
from .dependency.cycle_detector import detect_circular_dependencies
from .errors import MalformedGraphError
from .models.architecture_models import ArchitectureAssessment, ArchitectureIssue, Pattern
from .models.graph_models import DependencyGraph, LineageGraph
from .models.parsed_file import ParsedFile

logger = logging.getLogger(__name__)

CIRCULAR_DEPENDENCIES = "circular-dependencies"
GOD_OBJECTS = "god-objects"
EXCESS_EXPORTS = "excess-exports"
LARGE_FILES = "large-files"
TIGHT_COUPLING = "tight-coupling"
LAYER_VIOLATIONS = "layer-violations"
PATTERNS = "patterns"

DETECTOR_ORDER = (
    CIRCULAR_DEPENDENCIES,
    GOD_OBJECTS,
    EXCESS_EXPORTS,
    LARGE_FILES,
    TIGHT_COUPLING,
    LAYER_VIOLATIONS,
    PATTERNS,
)

# Detectors that cannot run without the corresponding graph
DEPENDENCY_GRAPH_DETECTORS = (CIRCULAR_DEPENDENCIES, TIGHT_COUPLING, PATTERNS)
LINEAGE_GRAPH_DETECTORS = (LAYER_VIOLATIONS,)


class ArchitectureAssessor:
    """Orchestrates detectors, recognizers and scoring for one assessment."""

    def __init__(
        self,
        policy: ArchitecturePolicy | None = None,
        max_workers: int | None = None,
        pattern_detector: ArchitecturePatternDetector | None = None,
    ):
        """
        Initialize the assessor.

        Args:
            policy: Thresholds and weights to apply (defaults if None)
            max_workers: Thread pool size, overriding ``policy.max_workers``.
                1 runs every detector inline on the calling thread.
            pattern_detector: Recognizer to use (MVC and layered by default)
        """
        self.policy = policy or ArchitecturePolicy()
        self.max_workers = max_workers or self.policy.max_workers
        self.pattern_detector = pattern_detector or ArchitecturePatternDetector()

    def assess(
        self,
        parsed_files: list[ParsedFile | dict],
        dependency_graph: DependencyGraph | dict | None = None,
        lineage_graph: LineageGraph | dict | None = None,
    ) -> ArchitectureAssessment:
        """
        Assess the architecture of a set of parsed files.

        Args:
            parsed_files: Parsed file records, as dataclasses or dicts
            dependency_graph: Import graph, as a DependencyGraph or dict
            lineage_graph: Optional layer data-flow graph

        Returns:
            Scored ArchitectureAssessment. A malformed or missing graph skips
            the detectors that need it instead of failing the assessment.
        """
        files = [f if isinstance(f, ParsedFile) else ParsedFile.from_dict(f) for f in parsed_files]
        errors: list[str] = []
        skipped: list[str] = []

        dep_graph = self._coerce_graph(DependencyGraph, dependency_graph, "dependency", errors)
        if dep_graph is None:
            skipped.extend(DEPENDENCY_GRAPH_DETECTORS)

        lin_graph = self._coerce_graph(LineageGraph, lineage_graph, "lineage", errors)
        if lin_graph is None:
            skipped.extend(LINEAGE_GRAPH_DETECTORS)

        if skipped:
            logger.warning("Skipping detectors without graph input: %s", ", ".join(skipped))

        tasks = self._build_tasks(files, dep_graph, lin_graph)
        results = self._run_tasks(tasks, errors)

        issues: list[ArchitectureIssue] = []
        patterns: list[Pattern] = []
        for name in DETECTOR_ORDER:
            if name not in results:
                continue
            if name == PATTERNS:
                patterns.extend(results[name])
            else:
                issues.extend(results[name])

        anti_patterns = god_object_anti_patterns(issues)

        assessment = ArchitectureAssessment.build(
            issues,
            patterns,
            anti_patterns,
            skipped_detectors=[name for name in DETECTOR_ORDER if name in skipped],
            errors=errors,
            issue_weights=self.policy.issue_weights,
            anti_pattern_weights=self.policy.anti_pattern_weights,
        )

        logger.info(
            "Assessed %d files: %d issues, %d anti-patterns, %d patterns, score %d",
            len(files),
            len(assessment.issues),
            len(assessment.anti_patterns),
            len(assessment.patterns),
            assessment.score,
        )
        return assessment

    def _coerce_graph(self, graph_cls, graph, label: str, errors: list[str]):
        """Build a graph from dict input. Returns None when absent or malformed."""
        if graph is None or isinstance(graph, graph_cls):
            return graph
        try:
            return graph_cls.from_dict(graph)
        except MalformedGraphError as e:
            logger.warning("Malformed %s graph: %s", label, e)
            errors.append(f"{label} graph: {e}")
            return None

    def _build_tasks(
        self,
        files: list[ParsedFile],
        dep_graph: DependencyGraph | None,
        lin_graph: LineageGraph | None,
    ) -> dict[str, Callable[[], list]]:
        policy = self.policy
        tasks: dict[str, Callable[[], list]] = {
            GOD_OBJECTS: lambda: detect_god_objects(files, policy.god_object_method_threshold),
            EXCESS_EXPORTS: lambda: detect_excess_exports(files, policy.excess_export_threshold),
            LARGE_FILES: lambda: detect_large_files(files, policy.large_file_line_threshold),
        }

        if dep_graph is not None:
            tasks[CIRCULAR_DEPENDENCIES] = lambda: detect_circular_dependencies(
                dep_graph, max_steps=policy.max_traversal_steps
            )
            tasks[TIGHT_COUPLING] = lambda: detect_tight_coupling(
                dep_graph, policy.tight_coupling_threshold
            )
            tasks[PATTERNS] = lambda: self.pattern_detector.detect_all_patterns(files, dep_graph)

        if lin_graph is not None:
            tasks[LAYER_VIOLATIONS] = lambda: detect_layer_violations(lin_graph)

        return tasks

    def _run_tasks(
        self, tasks: dict[str, Callable[[], list]], errors: list[str]
    ) -> dict[str, list]:
        """Run detector tasks, isolating failures. Keys of failed tasks are absent."""
        results: dict[str, list] = {}

        if self.max_workers <= 1:
            for name in DETECTOR_ORDER:
                if name not in tasks:
                    continue
                try:
                    results[name] = tasks[name]()
                except Exception as e:
                    logger.exception("Detector %s failed", name)
                    errors.append(f"{name}: {e}")
            return results

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {name: executor.submit(task) for name, task in tasks.items()}

            for name in DETECTOR_ORDER:
                if name not in futures:
                    continue
                try:
                    results[name] = futures[name].result()
                except Exception as e:
                    logger.exception("Detector %s failed", name)
                    errors.append(f"{name}: {e}")

        return results


def assess_architecture(
    parsed_files: list[ParsedFile | dict],
    dependency_graph: DependencyGraph | dict | None = None,
    lineage_graph: LineageGraph | dict | None = None,
    policy: ArchitecturePolicy | None = None,
) -> ArchitectureAssessment:
    """Convenience wrapper around ArchitectureAssessor.assess()."""
    return ArchitectureAssessor(policy=policy).assess(parsed_files, dependency_graph, lineage_graph)
