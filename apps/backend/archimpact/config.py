"""
Policy Configuration Loader
===========================

Loads the tunable analysis policy (detector thresholds, score weights,
complexity escalation thresholds, traversal budget) from a project's
.archimpact directory. Supports JSON and YAML formats.

Configuration files searched in order:
1. .archimpact/policy.json
2. .archimpact/policy.yaml
3. .archimpact/policy.yml

Project settings are merged over the defaults. Nothing is cached between
calls; every load reads the file again.

Usage:
    from archimpact.config import load_policy

    policy = load_policy(Path("/path/to/project"))
    print(policy.god_object_method_threshold)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .architecture.scoring import ANTI_PATTERN_WEIGHTS, ISSUE_WEIGHTS
from .architecture.structural_detectors import (
    EXCESS_EXPORT_THRESHOLD,
    GOD_OBJECT_METHOD_THRESHOLD,
    LARGE_FILE_LINE_THRESHOLD,
    TIGHT_COUPLING_THRESHOLD,
)
from .errors import PolicyConfigError

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG FILE NAMES
# =============================================================================

CONFIG_FILENAMES = [
    "policy.json",
    "policy.yaml",
    "policy.yml",
]

ARCHIMPACT_DIR = ".archimpact"

VALID_SEVERITIES = {"high", "medium", "low"}


# =============================================================================
# CONFIG SCHEMA DEFINITION
# =============================================================================

POLICY_SCHEMA = {
    "type": "object",
    "properties": {
        "god_object_method_threshold": {"type": "integer", "minimum": 0},
        "excess_export_threshold": {"type": "integer", "minimum": 0},
        "large_file_line_threshold": {"type": "integer", "minimum": 0},
        "tight_coupling_threshold": {"type": "integer", "minimum": 0},
        "issue_weights": {
            "type": "object",
            "patternProperties": {"high|medium|low": {"type": "integer", "minimum": 0}},
        },
        "anti_pattern_weights": {
            "type": "object",
            "patternProperties": {"high|medium|low": {"type": "integer", "minimum": 0}},
        },
        "complexity": {
            "type": "object",
            "properties": {
                "files_medium": {"type": "integer", "minimum": 0},
                "files_high": {"type": "integer", "minimum": 0},
                "breaking_high": {"type": "integer", "minimum": 1},
            },
        },
        "max_traversal_steps": {"type": ["integer", "null"], "minimum": 1},
        "max_workers": {"type": "integer", "minimum": 1},
    },
    "additionalProperties": False,
}

INTEGER_KEYS = (
    "god_object_method_threshold",
    "excess_export_threshold",
    "large_file_line_threshold",
    "tight_coupling_threshold",
)


# =============================================================================
# POLICY MODELS
# =============================================================================

@dataclass
class ComplexityThresholds:
    """
    Escalation thresholds for the estimated complexity of a change.

    Attributes:
        files_medium: More affected files than this is at least "medium"
        files_high: More affected files than this counts as a large affected set
        breaking_high: This many breaking changes or more counts as large
    """

    files_medium: int = 5
    files_high: int = 20
    breaking_high: int = 3

    def to_dict(self) -> dict:
        return {
            "files_medium": self.files_medium,
            "files_high": self.files_high,
            "breaking_high": self.breaking_high,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ComplexityThresholds":
        defaults = cls()
        return cls(
            files_medium=data.get("files_medium", defaults.files_medium),
            files_high=data.get("files_high", defaults.files_high),
            breaking_high=data.get("breaking_high", defaults.breaking_high),
        )


@dataclass
class ArchitecturePolicy:
    """Tunable policy for detectors, scoring and impact analysis."""

    god_object_method_threshold: int = GOD_OBJECT_METHOD_THRESHOLD
    excess_export_threshold: int = EXCESS_EXPORT_THRESHOLD
    large_file_line_threshold: int = LARGE_FILE_LINE_THRESHOLD
    tight_coupling_threshold: int = TIGHT_COUPLING_THRESHOLD
    issue_weights: dict[str, int] = field(default_factory=lambda: dict(ISSUE_WEIGHTS))
    anti_pattern_weights: dict[str, int] = field(
        default_factory=lambda: dict(ANTI_PATTERN_WEIGHTS)
    )
    complexity: ComplexityThresholds = field(default_factory=ComplexityThresholds)
    max_traversal_steps: int | None = None
    max_workers: int = 4

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "god_object_method_threshold": self.god_object_method_threshold,
            "excess_export_threshold": self.excess_export_threshold,
            "large_file_line_threshold": self.large_file_line_threshold,
            "tight_coupling_threshold": self.tight_coupling_threshold,
            "issue_weights": dict(self.issue_weights),
            "anti_pattern_weights": dict(self.anti_pattern_weights),
            "complexity": self.complexity.to_dict(),
            "max_traversal_steps": self.max_traversal_steps,
            "max_workers": self.max_workers,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ArchitecturePolicy":
        """Load from dict, merging partial weight tables over the defaults."""
        defaults = cls()
        issue_weights = dict(defaults.issue_weights)
        issue_weights.update(data.get("issue_weights", {}))
        anti_pattern_weights = dict(defaults.anti_pattern_weights)
        anti_pattern_weights.update(data.get("anti_pattern_weights", {}))

        return cls(
            god_object_method_threshold=data.get(
                "god_object_method_threshold", defaults.god_object_method_threshold
            ),
            excess_export_threshold=data.get(
                "excess_export_threshold", defaults.excess_export_threshold
            ),
            large_file_line_threshold=data.get(
                "large_file_line_threshold", defaults.large_file_line_threshold
            ),
            tight_coupling_threshold=data.get(
                "tight_coupling_threshold", defaults.tight_coupling_threshold
            ),
            issue_weights=issue_weights,
            anti_pattern_weights=anti_pattern_weights,
            complexity=ComplexityThresholds.from_dict(data.get("complexity", {})),
            max_traversal_steps=data.get("max_traversal_steps", defaults.max_traversal_steps),
            max_workers=data.get("max_workers", defaults.max_workers),
        )


# =============================================================================
# CONFIG LOADER
# =============================================================================

class PolicyConfigLoader:
    """
    Loads policy configuration from a project directory.

    Attributes:
        project_dir: Root directory of the project
        config_dir: Path to the .archimpact directory
        config_file: Path to the config file (if found)
    """

    def __init__(self, project_dir: Path | str):
        self.project_dir = Path(project_dir).resolve()
        self.config_dir = self.project_dir / ARCHIMPACT_DIR
        self.config_file: Path | None = None

    def load(self) -> ArchitecturePolicy:
        """
        Load the policy, falling back to defaults when no file exists.

        Returns:
            ArchitecturePolicy with project settings merged over defaults

        Raises:
            PolicyConfigError: If the file cannot be parsed or fails validation
        """
        self.config_file = self._find_config_file()

        if self.config_file is None:
            logger.debug("No policy file under %s, using defaults", self.config_dir)
            return ArchitecturePolicy()

        config_data = self._read_config_file(self.config_file)

        validation_errors = self._validate_config(config_data)
        if validation_errors:
            error_msg = f"Policy validation errors in {self.config_file.name}:\n"
            error_msg += "\n".join(f"  - {err}" for err in validation_errors)
            raise PolicyConfigError(error_msg, validation_errors)

        logger.info("Loaded analysis policy from %s", self.config_file)
        return ArchitecturePolicy.from_dict(config_data)

    def _find_config_file(self) -> Path | None:
        """Find the first existing config file."""
        if not self.config_dir.exists():
            return None

        for filename in CONFIG_FILENAMES:
            config_path = self.config_dir / filename
            if config_path.exists():
                return config_path

        return None

    def _read_config_file(self, config_path: Path) -> dict:
        """
        Read and parse a config file based on its extension.

        Raises:
            PolicyConfigError: If the file cannot be read or parsed
        """
        suffix = config_path.suffix.lower()

        try:
            with open(config_path, "r") as f:
                if suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f) or {}
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise PolicyConfigError(f"Invalid {suffix.lstrip('.').upper()} in {config_path.name}: {e}") from e
        except OSError as e:
            raise PolicyConfigError(f"Failed to read {config_path.name}: {e}") from e

        if not isinstance(data, dict):
            raise PolicyConfigError(f"{config_path.name} must contain a mapping at the top level")
        return data

    def _validate_config(self, config_data: dict) -> list[str]:
        """
        Validate config data against POLICY_SCHEMA.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        valid_keys = set(POLICY_SCHEMA["properties"].keys())
        unknown_keys = set(config_data.keys()) - valid_keys
        if unknown_keys:
            errors.append(f"Unknown keys: {', '.join(sorted(unknown_keys))}")

        for key in INTEGER_KEYS:
            if key in config_data and not _is_int(config_data[key], minimum=0):
                errors.append(f"'{key}' must be a non-negative integer")

        for key in ("issue_weights", "anti_pattern_weights"):
            if key not in config_data:
                continue
            weights = config_data[key]
            if not isinstance(weights, dict):
                errors.append(f"'{key}' must be an object")
                continue
            for severity, weight in weights.items():
                if severity not in VALID_SEVERITIES:
                    errors.append(
                        f"Invalid severity in '{key}': {severity}. "
                        f"Must be one of: {', '.join(sorted(VALID_SEVERITIES))}"
                    )
                if not _is_int(weight, minimum=0):
                    errors.append(f"'{key}.{severity}' must be a non-negative integer")

        if "complexity" in config_data:
            complexity = config_data["complexity"]
            if not isinstance(complexity, dict):
                errors.append("'complexity' must be an object")
            else:
                allowed = set(POLICY_SCHEMA["properties"]["complexity"]["properties"].keys())
                unknown = set(complexity.keys()) - allowed
                if unknown:
                    errors.append(f"Unknown keys in 'complexity': {', '.join(sorted(unknown))}")
                for key in allowed & set(complexity.keys()):
                    minimum = 1 if key == "breaking_high" else 0
                    if not _is_int(complexity[key], minimum=minimum):
                        errors.append(f"'complexity.{key}' must be an integer >= {minimum}")

        if "max_traversal_steps" in config_data:
            steps = config_data["max_traversal_steps"]
            if steps is not None and not _is_int(steps, minimum=1):
                errors.append("'max_traversal_steps' must be a positive integer or null")

        if "max_workers" in config_data and not _is_int(config_data["max_workers"], minimum=1):
            errors.append("'max_workers' must be a positive integer")

        return errors


def _is_int(value, minimum: int | None = None) -> bool:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return minimum is None or value >= minimum


def load_policy(project_dir: Path | str) -> ArchitecturePolicy:
    """Load the analysis policy for a project."""
    return PolicyConfigLoader(project_dir).load()
