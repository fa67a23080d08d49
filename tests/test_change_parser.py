"""
Tests for change request parsing.
"""

import pytest

from archimpact.errors import InvalidChangeRequestError
from archimpact.impact.change_parser import (
    extract_change_details,
    infer_change_type,
    parse_change_request,
)
from archimpact.models.impact_models import ChangeRequest, ChangeType


class TestInferChangeType:
    """Test keyword-based type inference."""

    @pytest.mark.parametrize(
        "description,expected",
        [
            ("Add a new endpoint for invoices", ChangeType.MODIFY_API),
            ("Drop a column from the orders table", ChangeType.MODIFY_SCHEMA),
            ("Restyle the settings page", ChangeType.MODIFY_FEATURE),
            ("Add dark mode", ChangeType.ADD_FEATURE),
            ("Remove the legacy payment flow", ChangeType.REMOVE_FEATURE),
            ("Fix crash on login", ChangeType.BUG_FIX),
            ("Improve performance of search", ChangeType.MODIFY_FEATURE),
        ],
    )
    def test_keywords(self, description, expected):
        """Test the first matching keyword group decides the type."""
        assert infer_change_type(description) == expected

    def test_whole_words_only(self):
        """Test keywords inside longer words do not match."""
        assert infer_change_type("Update address formatting") == ChangeType.MODIFY_FEATURE
        assert infer_change_type("Prefix the build output") == ChangeType.MODIFY_FEATURE


class TestExtractDetails:
    """Test explicit target markers."""

    def test_markers(self):
        """Test file, table and component markers are extracted."""
        details = extract_change_details(
            "Rename column, file: src/lib/users.ts, table: users, component: UserCard"
        )
        assert details["target_files"] == ["src/lib/users.ts"]
        assert details["target_tables"] == ["users"]
        assert details["target_components"] == ["UserCard"]
        assert details["target_endpoints"] == []

    def test_endpoint_marker(self):
        """Test endpoint markers keep the full path."""
        details = extract_change_details("Change endpoint: /api/users/{id}")
        assert details["target_endpoints"] == ["/api/users/{id}"]


class TestParseChangeRequest:
    """Test building ChangeRequest values."""

    def test_natural_language(self):
        """Test free text becomes a typed request with targets."""
        change = parse_change_request("Rename a column, file: src/lib/users.ts, table: users")
        assert change.type == "modify-schema"
        assert change.target_files == ("src/lib/users.ts",)
        assert change.target_tables == ("users",)
        assert change.id.startswith("change-")

    def test_structured_input(self):
        """Test dict input keeps explicit fields."""
        change = parse_change_request(
            {
                "id": "chg-1",
                "description": "Drop legacy helper",
                "type": "remove",
                "targetFiles": ["src/legacy.ts"],
            }
        )
        assert change == ChangeRequest(
            id="chg-1",
            description="Drop legacy helper",
            type="remove",
            target_files=("src/legacy.ts",),
        )

    def test_structured_input_gets_id(self):
        """Test a missing id is generated."""
        change = parse_change_request({"description": "Tweak", "type": "refactor"})
        assert change.id.startswith("change-")

    def test_structured_targets_from_description(self):
        """Test description markers fill empty target lists only."""
        change = parse_change_request(
            {
                "description": "Move things, file: src/a.ts, table: accounts",
                "target_tables": ["ledger"],
            }
        )
        assert change.target_files == ("src/a.ts",)
        assert change.target_tables == ("ledger",)

    def test_change_request_passthrough(self):
        """Test an existing ChangeRequest is returned unchanged."""
        original = ChangeRequest(id="x", description="Refactor", type="refactor")
        assert parse_change_request(original) == original

    def test_missing_description(self):
        """Test structured input without a description is rejected."""
        with pytest.raises(InvalidChangeRequestError) as exc_info:
            parse_change_request({"id": "x", "type": "modify"})
        assert exc_info.value.code == "INVALID_CHANGE_REQUEST"

    def test_unknown_type(self):
        """Test unknown change types are rejected."""
        with pytest.raises(InvalidChangeRequestError, match="Unknown change type"):
            parse_change_request({"description": "Something", "type": "rewrite-everything"})
