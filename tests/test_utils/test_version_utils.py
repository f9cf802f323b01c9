"""Unit tests for portkeeper.utils.version_utils.

Test Coverage:
- Port version splitting (main, revision, epoch)
- Ordering of PEP 440 and free-form main versions
- Revision and epoch precedence
- OS-release tag comparison
- Update type classification
"""

from __future__ import annotations

import functools
import itertools
from typing import Optional

import pytest

from portkeeper.utils.version_utils import (
    VersionOrder,
    compare_versions,
    get_update_type,
    split_port_version,
    _compare_segments,
    _normalize_release,
)


@pytest.mark.unit
class TestSplitPortVersion:
    """Tests for split_port_version."""

    def test_plain_version(self) -> None:
        assert split_port_version("1.2.3") == (0, "1.2.3", 0)

    def test_revision_and_epoch(self) -> None:
        assert split_port_version("2.0_3,1") == (1, "2.0", 3)

    def test_revision_only(self) -> None:
        assert split_port_version("1.24.0_2") == (0, "1.24.0", 2)

    def test_epoch_only(self) -> None:
        assert split_port_version("4.1,2") == (2, "4.1", 0)

    def test_non_numeric_suffix_stays_in_main(self) -> None:
        """A suffix that is not a number is part of the main version."""
        assert split_port_version("1.0_beta") == (0, "1.0_beta", 0)

    def test_surrounding_whitespace_ignored(self) -> None:
        assert split_port_version(" 1.0_1 ") == (0, "1.0", 1)


@pytest.mark.unit
class TestCompareVersions:
    """Tests for compare_versions."""

    @pytest.mark.parametrize(
        "left,right,expected",
        [
            ("1.0", "1.0", VersionOrder.EQUAL),
            ("1.2", "1.10", VersionOrder.LESS),
            ("1.10", "1.2", VersionOrder.GREATER),
            ("1.0", "1.0.0", VersionOrder.EQUAL),
            ("1.0rc1", "1.0", VersionOrder.LESS),
            ("13.1", "13.2", VersionOrder.LESS),
            ("0.4", "0.3", VersionOrder.GREATER),
        ],
        ids=[
            "identical",
            "numeric-minor",
            "numeric-minor-reversed",
            "trailing-zero",
            "pre-release",
            "os-release",
            "os-release-newer",
        ],
    )
    def test_main_version_ordering(
        self, left: str, right: str, expected: VersionOrder
    ) -> None:
        assert compare_versions(left, right) is expected

    def test_revision_breaks_ties(self) -> None:
        assert compare_versions("1.2_1", "1.2") is VersionOrder.GREATER
        assert compare_versions("1.2_1", "1.2_3") is VersionOrder.LESS

    def test_revision_ignored_when_main_differs(self) -> None:
        assert compare_versions("1.2_9", "1.3") is VersionOrder.LESS

    def test_epoch_beats_main_version(self) -> None:
        """A higher epoch wins even against a much higher main version."""
        assert compare_versions("1.0,1", "9.9") is VersionOrder.GREATER
        assert compare_versions("9.9", "1.0,1") is VersionOrder.LESS

    def test_free_form_versions(self) -> None:
        """Versions that are not PEP 440 fall back to segment comparison."""
        assert compare_versions("1.0.x", "1.0.3") is VersionOrder.LESS
        assert compare_versions("abc", "abd") is VersionOrder.LESS

    def test_result_is_int_compatible(self) -> None:
        assert int(compare_versions("1", "2")) == -1
        assert int(compare_versions("2", "1")) == 1
        assert int(compare_versions("2", "2")) == 0

    def test_antisymmetric(self) -> None:
        pairs = [("1.2_1", "1.2_3"), ("1.0,1", "2.0"), ("1.0.x", "1.0.3")]
        for left, right in pairs:
            assert int(compare_versions(left, right)) == -int(
                compare_versions(right, left)
            )

    def test_pep440_sorts_below_free_form_of_same_release(self) -> None:
        assert compare_versions("1.0rc1", "1.0.a.x") is VersionOrder.LESS
        assert compare_versions("1.0", "1.0.a.x") is VersionOrder.LESS
        assert compare_versions("1.0.a.x", "1.0.1") is VersionOrder.LESS

    def test_ordering_is_transitive_across_mixed_versions(self) -> None:
        versions = ["1.0rc1", "1.0", "1.0.a.x", "1.0.1", "1.0a", "2.0", "1.0.x_1"]
        for a, b, c in itertools.product(versions, repeat=3):
            ab = compare_versions(a, b)
            bc = compare_versions(b, c)
            if VersionOrder.LESS in (ab, bc) and VersionOrder.GREATER not in (ab, bc):
                assert compare_versions(a, c) is VersionOrder.LESS, (a, b, c)
            if ab is VersionOrder.EQUAL and bc is VersionOrder.EQUAL:
                assert compare_versions(a, c) is VersionOrder.EQUAL, (a, b, c)

    def test_sorting_mixed_versions_is_stable_under_input_order(self) -> None:
        versions = ["1.0.a.x", "2.0", "1.0rc1", "1.0", "1.0.1"]
        key = functools.cmp_to_key(lambda a, b: int(compare_versions(a, b)))
        expected = ["1.0rc1", "1.0", "1.0.a.x", "1.0.1", "2.0"]
        assert sorted(versions, key=key) == expected
        assert sorted(reversed(versions), key=key) == expected


@pytest.mark.unit
class TestCompareSegments:
    """Tests for the free-form segment comparison."""

    def test_numeric_segments_compare_numerically(self) -> None:
        assert _compare_segments("a.9", "a.10") is VersionOrder.LESS

    def test_numeric_beats_alphabetic(self) -> None:
        assert _compare_segments("2.1", "2.a") is VersionOrder.GREATER

    def test_more_segments_is_newer(self) -> None:
        assert _compare_segments("5.2.x", "5.2.x.1") is VersionOrder.LESS

    def test_equal_segments(self) -> None:
        assert _compare_segments("r.5", "r-5") is VersionOrder.EQUAL


@pytest.mark.unit
class TestGetUpdateType:
    """Tests for get_update_type classification."""

    @pytest.mark.parametrize(
        "current,target,expected",
        [
            (None, "1.0.0", "new"),
            ("1.0.0", None, "unknown"),
            (None, None, "unknown"),
            ("1.2.3", "1.2.3", "same"),
            ("2.0.0", "1.0.0", "downgrade"),
            ("1.0.0", "2.0.0", "major"),
            ("1.2.3", "1.3.0", "minor"),
            ("1.9", "1.10", "minor"),
            ("1.2.3", "1.2.4", "patch"),
            ("1.2.3", "1.2.3_1", "revision"),
            ("1.0,1", "1.0,2", "revision"),
            ("1.0rc1", "1.0", "update"),
        ],
    )
    def test_classification(
        self, current: Optional[str], target: Optional[str], expected: str
    ) -> None:
        assert get_update_type(current, target) == expected


@pytest.mark.unit
class TestNormalizeRelease:
    """Tests for _normalize_release."""

    def test_pads_short_versions(self) -> None:
        assert _normalize_release("3") == (3, 0, 0)

    def test_truncates_long_versions(self) -> None:
        assert _normalize_release("1.2.3.4") == (1, 2, 3)

    def test_reads_leading_digits_of_segment(self) -> None:
        assert _normalize_release("1.0rc1") == (1, 0, 0)

    def test_stops_at_non_numeric_segment(self) -> None:
        assert _normalize_release("2.x.5") == (2, 0, 0)
