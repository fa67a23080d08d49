"""
Architecture Analysis Module
============================

Structural issue detectors, architectural pattern recognition (MVC,
layered architecture) and the architecture score.
"""

from .pattern_detector import (
    ArchitecturePatternDetector,
    PatternRole,
    PatternRule,
    detect_layered_architecture,
    detect_mvc_pattern,
)
from .scoring import calculate_architecture_score
from .structural_detectors import (
    detect_excess_exports,
    detect_god_objects,
    detect_large_files,
    detect_layer_violations,
    detect_tight_coupling,
    god_object_anti_patterns,
)

__all__ = [
    "ArchitecturePatternDetector",
    "PatternRule",
    "PatternRole",
    "detect_mvc_pattern",
    "detect_layered_architecture",
    "calculate_architecture_score",
    "detect_god_objects",
    "detect_excess_exports",
    "detect_large_files",
    "detect_tight_coupling",
    "detect_layer_violations",
    "god_object_anti_patterns",
]
