"""Tests for heading hierarchy validation."""

import pytest

from devdash.headings import check_heading_hierarchy


class TestCheckHeadingHierarchy:
    """Tests for check_heading_hierarchy."""

    def test_empty_is_valid(self):
        assert check_heading_hierarchy([]) is True

    def test_single_h1(self):
        assert check_heading_hierarchy([1]) is True

    @pytest.mark.parametrize("levels", [[1, 2, 3], [1, 1, 2, 2, 3], [1, 2, 3, 4, 5, 6]])
    def test_contiguous_levels(self, levels):
        assert check_heading_hierarchy(levels) is True

    def test_must_start_at_h1(self):
        """Test that an outline without h1 is rejected."""
        assert check_heading_hierarchy([2, 3]) is False

    def test_skipped_level(self):
        assert check_heading_hierarchy([1, 2, 4]) is False
        assert check_heading_hierarchy([1, 3]) is False
