"""
Tests for tag classification and category membership.
"""

import pytest

from flashpoint_packer.packaging import (
    Classification,
    classify,
    has_membership,
    is_restricted,
    split_tags,
)

RESTRICTED = frozenset({"Extreme", "Gore"})


class TestSplitTags:
    """Test delimiter splitting."""

    def test_split_tags(self) -> None:
        """Test splitting on the "; " delimiter."""
        assert split_tags("Action; Platformer; Extreme") == ["Action", "Platformer", "Extreme"]

    def test_split_empty(self) -> None:
        """Test that an empty string has no tokens."""
        assert split_tags("") == []

    def test_split_single(self) -> None:
        """Test a single token."""
        assert split_tags("Puzzle") == ["Puzzle"]


class TestClassify:
    """Test restricted/standard classification."""

    @pytest.mark.parametrize(
        "tags,expected",
        [
            ("", Classification.STANDARD),
            ("Action", Classification.STANDARD),
            ("Action; Puzzle", Classification.STANDARD),
            ("Extreme", Classification.RESTRICTED),
            ("Action; Gore", Classification.RESTRICTED),
            ("Extreme; Gore", Classification.RESTRICTED),
        ],
    )
    def test_truth_table(self, tags: str, expected: Classification) -> None:
        """Test that any restricted tag makes the item restricted."""
        assert classify(tags, RESTRICTED) is expected

    def test_empty_restricted_set(self) -> None:
        """Test that nothing is restricted without restricted tags."""
        assert classify("Extreme; Gore", frozenset()) is Classification.STANDARD

    def test_tags_compare_exactly(self) -> None:
        """Test that partial tag matches do not count."""
        assert classify("Extremely Fun", RESTRICTED) is Classification.STANDARD
        assert classify("extreme", RESTRICTED) is Classification.STANDARD

    def test_is_restricted(self) -> None:
        """Test is_restricted on pre-split tags."""
        assert is_restricted(["Action", "Gore"], RESTRICTED)
        assert not is_restricted([], RESTRICTED)


class TestMembership:
    """Test exact-token category membership."""

    def test_single_member(self) -> None:
        """Test a single-category membership."""
        assert has_membership("SNES", "SNES")

    def test_multiple_members(self) -> None:
        """Test membership among several categories."""
        assert has_membership("Flash; SNES; HTML5", "SNES")

    def test_substring_is_not_membership(self) -> None:
        """Test that a category name inside another name does not match."""
        assert not has_membership("Super SNES Extended", "SNES")
        assert not has_membership("Flash; Super SNES Extended", "SNES")

    def test_empty_membership(self) -> None:
        """Test that an empty membership string matches nothing."""
        assert not has_membership("", "SNES")
