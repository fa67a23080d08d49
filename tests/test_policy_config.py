"""
Tests for policy configuration loading (JSON and YAML).
"""

import json

import pytest
import yaml

from archimpact.config import (
    ARCHIMPACT_DIR,
    ArchitecturePolicy,
    ComplexityThresholds,
    PolicyConfigLoader,
    load_policy,
)
from archimpact.errors import PolicyConfigError


@pytest.fixture
def policy_dir(tmp_path):
    """Project directory with an empty .archimpact directory."""
    (tmp_path / ARCHIMPACT_DIR).mkdir()
    return tmp_path


def write_json(project_dir, data):
    (project_dir / ARCHIMPACT_DIR / "policy.json").write_text(json.dumps(data))


def write_yaml(project_dir, data, name="policy.yaml"):
    (project_dir / ARCHIMPACT_DIR / name).write_text(yaml.safe_dump(data))


class TestDefaults:
    """Test behavior without a policy file."""

    def test_no_config_dir(self, tmp_path):
        """Test defaults when .archimpact does not exist."""
        policy = load_policy(tmp_path)
        assert policy == ArchitecturePolicy()
        assert policy.god_object_method_threshold == 20
        assert policy.excess_export_threshold == 15
        assert policy.large_file_line_threshold == 1000
        assert policy.tight_coupling_threshold == 10
        assert policy.max_traversal_steps is None

    def test_empty_config_dir(self, policy_dir):
        """Test defaults when no policy file is present."""
        loader = PolicyConfigLoader(policy_dir)
        assert loader.load() == ArchitecturePolicy()
        assert loader.config_file is None


class TestLoading:
    """Test reading JSON and YAML policies."""

    def test_json_policy(self, policy_dir):
        """Test JSON values are merged over defaults."""
        write_json(
            policy_dir,
            {
                "god_object_method_threshold": 30,
                "issue_weights": {"high": 20},
                "complexity": {"files_high": 50},
                "max_traversal_steps": 10000,
            },
        )
        policy = load_policy(policy_dir)
        assert policy.god_object_method_threshold == 30
        assert policy.issue_weights == {"high": 20, "medium": 5, "low": 2}
        assert policy.complexity == ComplexityThresholds(files_medium=5, files_high=50, breaking_high=3)
        assert policy.max_traversal_steps == 10000

    def test_yaml_policy(self, policy_dir):
        """Test YAML policies are read with PyYAML."""
        write_yaml(policy_dir, {"tight_coupling_threshold": 4, "max_workers": 1})
        policy = load_policy(policy_dir)
        assert policy.tight_coupling_threshold == 4
        assert policy.max_workers == 1

    def test_yml_extension(self, policy_dir):
        """Test the .yml spelling is found."""
        write_yaml(policy_dir, {"large_file_line_threshold": 400}, name="policy.yml")
        assert load_policy(policy_dir).large_file_line_threshold == 400

    def test_json_takes_precedence(self, policy_dir):
        """Test policy.json wins over policy.yaml."""
        write_json(policy_dir, {"excess_export_threshold": 1})
        write_yaml(policy_dir, {"excess_export_threshold": 2})
        loader = PolicyConfigLoader(policy_dir)
        assert loader.load().excess_export_threshold == 1
        assert loader.config_file.name == "policy.json"

    def test_empty_yaml_file(self, policy_dir):
        """Test an empty YAML file means defaults."""
        (policy_dir / ARCHIMPACT_DIR / "policy.yaml").write_text("")
        assert load_policy(policy_dir) == ArchitecturePolicy()

    def test_policy_round_trip(self):
        """Test to_dict/from_dict."""
        policy = ArchitecturePolicy(tight_coupling_threshold=3, max_traversal_steps=50)
        assert ArchitecturePolicy.from_dict(policy.to_dict()) == policy


class TestValidation:
    """Test malformed policies are rejected with every problem listed."""

    def test_invalid_json(self, policy_dir):
        """Test unparsable JSON."""
        (policy_dir / ARCHIMPACT_DIR / "policy.json").write_text("{not json")
        with pytest.raises(PolicyConfigError, match="Invalid JSON"):
            load_policy(policy_dir)

    def test_invalid_yaml(self, policy_dir):
        """Test unparsable YAML."""
        (policy_dir / ARCHIMPACT_DIR / "policy.yaml").write_text("key: [unclosed")
        with pytest.raises(PolicyConfigError, match="Invalid YAML"):
            load_policy(policy_dir)

    def test_non_mapping(self, policy_dir):
        """Test a top-level list is rejected."""
        write_yaml(policy_dir, [1, 2, 3])
        with pytest.raises(PolicyConfigError, match="mapping"):
            load_policy(policy_dir)

    def test_all_errors_reported(self, policy_dir):
        """Test validation collects every problem."""
        write_json(
            policy_dir,
            {
                "unknown_option": True,
                "god_object_method_threshold": -1,
                "issue_weights": {"critical": 5, "high": -2},
                "max_workers": 0,
            },
        )
        with pytest.raises(PolicyConfigError) as exc_info:
            load_policy(policy_dir)
        errors = exc_info.value.errors
        assert len(errors) == 5
        assert any("unknown_option" in e for e in errors)
        assert exc_info.value.code == "INVALID_POLICY"

    def test_booleans_are_not_integers(self, policy_dir):
        """Test true is not accepted as a threshold."""
        write_json(policy_dir, {"large_file_line_threshold": True})
        with pytest.raises(PolicyConfigError):
            load_policy(policy_dir)

    def test_invalid_complexity(self, policy_dir):
        """Test complexity thresholds are validated."""
        write_json(policy_dir, {"complexity": {"breaking_high": 0, "bogus": 1}})
        with pytest.raises(PolicyConfigError) as exc_info:
            load_policy(policy_dir)
        assert len(exc_info.value.errors) == 2
