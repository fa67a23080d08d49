"""
Tests for mapping test files to the code they cover.
"""

import pytest

from archimpact.impact.test_coverage import (
    TestFile,
    find_affected_tests,
    map_tests_to_code,
    stem_under_test,
)


class TestStemUnderTest:
    """Test naming-convention inference."""

    @pytest.mark.parametrize(
        "path,stem",
        [
            ("tests/test_user.py", "user"),
            ("pkg/user_test.go", "user"),
            ("src/user.test.ts", "user"),
            ("src/user.spec.tsx", "user"),
            ("src\\components\\Card.test.jsx", "Card"),
            ("src/user.ts", None),
        ],
    )
    def test_conventions(self, path, stem):
        """Test each supported naming convention."""
        assert stem_under_test(path) == stem


class TestMapping:
    """Test coverage maps and affected-test lookup."""

    def test_explicit_covers_win(self):
        """Test explicit covers lists are used as-is."""
        tests = [TestFile(path="tests/integration.py", covers=["src/a.py", "src/b.py"])]
        assert map_tests_to_code(tests) == {
            "src/a.py": ["tests/integration.py"],
            "src/b.py": ["tests/integration.py"],
        }

    def test_name_based_inference(self):
        """Test tests are matched to sources by stem."""
        tests = [TestFile(path="tests/test_user.py"), TestFile(path="tests/test_order.py")]
        mapping = map_tests_to_code(tests, ["src/user.py", "src/order.py", "src/cart.py"])
        assert mapping == {
            "src/user.py": ["tests/test_user.py"],
            "src/order.py": ["tests/test_order.py"],
        }

    def test_find_affected_tests(self):
        """Test affected tests are de-duplicated and ordered by changed file."""
        tests = [
            TestFile(path="tests/test_b.py"),
            TestFile(path="tests/e2e.py", covers=["src/a.py", "src/b.py"]),
            TestFile(path="tests/test_a.py"),
        ]
        affected = find_affected_tests(["src/a.py", "src/b.py"], tests)
        assert affected == ["tests/e2e.py", "tests/test_a.py", "tests/test_b.py"]

    def test_no_matching_tests(self):
        """Test unrelated tests are not returned."""
        tests = [TestFile(path="tests/test_other.py")]
        assert find_affected_tests(["src/a.py"], tests) == []
