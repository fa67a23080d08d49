"""
Tests for architectural pattern recognition.
"""

import pytest
from conftest import make_file

from archimpact.architecture.pattern_detector import (
    LAYERED_RULE,
    ArchitecturePatternDetector,
    PatternRole,
    PatternRule,
    detect_layered_architecture,
    detect_mvc_pattern,
    match_rule,
)
from archimpact.models.architecture_models import Pattern


class TestMVC:
    """Test MVC recognition."""

    def test_controller_and_model(self, consumer_graph):
        """Test MVC is recognized with a controller and a model."""
        files = [make_file("app/controllers/user.ts"), make_file("app/models/user.ts")]
        pattern = detect_mvc_pattern(files, consumer_graph)
        assert pattern is not None
        assert pattern.name == "MVC (Model-View-Controller)"
        assert pattern.confidence == 0.7
        assert pattern.files == ["app/controllers/user.ts", "app/models/user.ts"]

    def test_views_are_reported_when_present(self, consumer_graph):
        """Test view files are included but not required."""
        files = [
            make_file("app/UserController.ts"),
            make_file("app/UserModel.ts"),
            make_file("app/UserView.tsx"),
        ]
        pattern = detect_mvc_pattern(files, consumer_graph)
        assert pattern.files == ["app/UserController.ts", "app/UserModel.ts", "app/UserView.tsx"]

    def test_missing_model_is_not_mvc(self, consumer_graph):
        """Test a controller alone is not MVC."""
        files = [make_file("app/controllers/user.ts"), make_file("app/views/user.tsx")]
        assert detect_mvc_pattern(files, consumer_graph) is None

    def test_no_graph_no_pattern(self):
        """Test recognition requires a dependency graph."""
        files = [make_file("app/controllers/user.ts"), make_file("app/models/user.ts")]
        assert detect_mvc_pattern(files, None) is None


class TestLayered:
    """Test layered architecture recognition."""

    def test_all_three_layers(self, layered_files, consumer_graph):
        """Test controller, service and repository files yield the pattern."""
        pattern = detect_layered_architecture(layered_files, consumer_graph)
        assert pattern.name == "Layered Architecture"
        assert pattern.confidence == 0.8
        assert pattern.files == [
            "src/controllers/user_controller.ts",
            "src/services/user_service.ts",
            "src/repositories/user_repository.ts",
        ]

    def test_repo_keyword(self, consumer_graph):
        """Test the short 'repo' keyword counts as a repository."""
        files = [make_file("a/controller.ts"), make_file("a/service.ts"), make_file("a/user_repo.ts")]
        assert detect_layered_architecture(files, consumer_graph) is not None

    def test_missing_service_layer(self, consumer_graph):
        """Test a missing layer means no pattern."""
        files = [make_file("a/controller.ts"), make_file("a/repository.ts")]
        assert detect_layered_architecture(files, consumer_graph) is None


class TestDetector:
    """Test running all rules."""

    def test_detect_all_in_rule_order(self, layered_files, consumer_graph):
        """Test MVC then layered, both matched."""
        patterns = ArchitecturePatternDetector().detect_all_patterns(layered_files, consumer_graph)
        assert [p.name for p in patterns] == ["MVC (Model-View-Controller)", "Layered Architecture"]

    def test_detect_all_without_graph(self, layered_files):
        """Test nothing is reported without a graph."""
        assert ArchitecturePatternDetector().detect_all_patterns(layered_files, None) == []

    def test_custom_rule(self, consumer_graph):
        """Test rules are data and can be swapped."""
        rule = PatternRule(
            name="Hexagonal",
            confidence=0.6,
            description="Ports and adapters",
            roles=(PatternRole("port", ("port",)), PatternRole("adapter", ("adapter",))),
        )
        files = [make_file("src/ports/db.ts"), make_file("src/adapters/pg.ts")]
        patterns = ArchitecturePatternDetector(rules=(rule,)).detect_all_patterns(files, consumer_graph)
        assert [p.name for p in patterns] == ["Hexagonal"]

    def test_files_are_not_duplicated(self):
        """Test a file matching two roles is listed once."""
        pattern = match_rule(
            LAYERED_RULE, ["src/controller_service_repository.ts"]
        )
        assert pattern.files == ["src/controller_service_repository.ts"]

    def test_confidence_must_be_in_range(self):
        """Test invalid confidence values are rejected."""
        with pytest.raises(ValueError):
            Pattern(name="bad", confidence=1.5)
