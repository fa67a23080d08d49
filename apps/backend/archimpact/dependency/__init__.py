"""
Dependency Analysis Module
==========================

Cycle detection over dependency graphs.
"""

from __future__ import annotations

from .cycle_detector import cycle_files, detect_circular_dependencies, find_cycles

__all__ = ["find_cycles", "cycle_files", "detect_circular_dependencies"]
