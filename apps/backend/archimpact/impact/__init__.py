"""
Impact Analysis Module
======================

Change-request parsing, reverse dependency traversal and affected-test
mapping.
"""

from .analyzer import ImpactAnalyzer, dominant_category, estimate_complexity, normalize_path
from .change_parser import extract_change_details, infer_change_type, parse_change_request
from .test_coverage import TestFile, find_affected_tests, map_tests_to_code

__all__ = [
    "ImpactAnalyzer",
    "estimate_complexity",
    "dominant_category",
    "normalize_path",
    "parse_change_request",
    "infer_change_type",
    "extract_change_details",
    "TestFile",
    "map_tests_to_code",
    "find_affected_tests",
]
