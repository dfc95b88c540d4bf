"""Unit tests for version comparison.

Tests for the segment algorithm, truncated build comparison and the
dpkg-backed comparator.
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from sysupdate.core.compare import (
    DpkgComparator,
    VersionComparator,
    compare_versions,
    split_build_stamp,
    truncated_compare,
)
from sysupdate.core.errors import MalformedVersionError
from sysupdate.models.version import Ordering, SuffixOrder, VersionStatus, VersionString
from sysupdate.utils.shell import CommandResult

# Well-formed pairs with a strict ordering, left < right
ORDERED_PAIRS = [
    ("3.3", "3.4"),
    ("3.9", "3.10"),
    ("3.4", "3.4a"),
    ("3.4a", "3.4b"),
    ("1.2", "1.2.1"),
    ("0.9.9", "1.0"),
    ("8.14", "8.14.1"),
    ("1.96.0", "1.97.0-insider"),
    ("2.0rc1", "2.0rc2"),
]


def _cmp(a: str, b: str, order: SuffixOrder = SuffixOrder.SUFFIX_NEWER) -> Ordering:
    return compare_versions(VersionString.parse(a), VersionString.parse(b), order)


class TestCompareVersions:
    """Tests for compare_versions."""

    @pytest.mark.parametrize(("lower", "higher"), ORDERED_PAIRS)
    def test_antisymmetry(self, lower: str, higher: str) -> None:
        """compare(a, b) is GREATER exactly when compare(b, a) is LESS."""
        assert _cmp(higher, lower) is Ordering.GREATER
        assert _cmp(lower, higher) is Ordering.LESS

    @pytest.mark.parametrize(("a", "b"), ORDERED_PAIRS)
    def test_reversed_arguments(self, a: str, b: str) -> None:
        """Swapping arguments reverses the ordering."""
        assert _cmp(b, a) is _cmp(a, b).reverse()

    def test_padding_equivalence(self) -> None:
        """Missing segments count as zero."""
        assert _cmp("3.4", "3.4.0") is Ordering.EQUAL
        assert _cmp("3.4.0.0", "3.4") is Ordering.EQUAL

    def test_numeric_segment_precedence(self) -> None:
        """Segments are compared as numbers, not strings."""
        assert _cmp("3.10", "3.9") is Ordering.GREATER
        assert _cmp("1.100", "1.20") is Ordering.GREATER

    def test_bare_segment_older_than_suffixed(self) -> None:
        """By default a bare segment is older than one with a suffix."""
        assert _cmp("3.6", "3.6a") is Ordering.LESS

    def test_suffixes_compare_lexicographically(self) -> None:
        """Two suffixes on equal numbers compare as strings."""
        assert _cmp("3.5a", "3.5b") is Ordering.LESS
        assert _cmp("3.5b", "3.5a") is Ordering.GREATER

    def test_suffix_older_order(self) -> None:
        """SUFFIX_OLDER treats suffixed segments as pre-releases."""
        assert _cmp("1.0rc1", "1.0", SuffixOrder.SUFFIX_OLDER) is Ordering.LESS
        assert _cmp("3.6", "3.6a", SuffixOrder.SUFFIX_OLDER) is Ordering.GREATER

    def test_suffix_older_keeps_numeric_order(self) -> None:
        """The suffix rule never overrides a numeric difference."""
        assert _cmp("1.1rc1", "1.0", SuffixOrder.SUFFIX_OLDER) is Ordering.GREATER

    def test_identical(self) -> None:
        """Identical versions are equal."""
        assert _cmp("3.5a", "3.5a") is Ordering.EQUAL


class TestTruncatedCompare:
    """Tests for truncated build comparison."""

    def test_different_numeric_stamps(self) -> None:
        """Different build stamps on the same version are an update."""
        status = truncated_compare("1.96.0-insider-1111", "1.96.0-insider-2222")
        assert status is VersionStatus.UPDATE_AVAILABLE

    def test_same_build(self) -> None:
        """Identical builds are equal."""
        status = truncated_compare("1.96.0-insider-1111", "1.96.0-insider-1111")
        assert status is VersionStatus.EQUAL

    def test_local_tag_against_remote_stamp(self) -> None:
        """A local non-numeric tail matches the remote build of the same version."""
        assert truncated_compare("1.96.0-insider", "1.96.0-1732118645") is VersionStatus.EQUAL

    def test_prefix_difference_is_update(self) -> None:
        """Any prefix difference is an update, even an older remote."""
        assert truncated_compare("1.97.0-insider", "1.96.0-1732118645") is (
            VersionStatus.UPDATE_AVAILABLE
        )

    def test_split_build_stamp(self) -> None:
        """Text is split at the last dash only."""
        assert split_build_stamp("1.96.0-insider-1111") == ("1.96.0-insider", "1111")
        assert split_build_stamp(" 1.96.0 ") == ("1.96.0", None)


class TestDpkgComparator:
    """Tests for DpkgComparator."""

    def test_unavailable(self) -> None:
        """Without dpkg the comparator gives no answer."""
        with patch("sysupdate.core.compare.command_exists", return_value=False):
            assert DpkgComparator().compare("1.0", "2.0") is None

    def test_first_successful_operator_wins(self) -> None:
        """eq, gt and lt are tried in order until one succeeds."""
        failed = CommandResult(stdout="", stderr="", returncode=1)
        succeeded = CommandResult(stdout="", stderr="", returncode=0)
        with (
            patch("sysupdate.core.compare.command_exists", return_value=True),
            patch(
                "sysupdate.core.compare.run_command",
                side_effect=[failed, failed, succeeded],
            ) as mock_run,
        ):
            assert DpkgComparator().compare("1.0", "2.0") is Ordering.LESS

        operators = [c.args[0][3] for c in mock_run.call_args_list]
        assert operators == ["eq", "gt", "lt"]

    def test_timeout_gives_no_answer(self) -> None:
        """A hanging dpkg is treated as unavailable."""
        with (
            patch("sysupdate.core.compare.command_exists", return_value=True),
            patch(
                "sysupdate.core.compare.run_command",
                side_effect=subprocess.TimeoutExpired(cmd="dpkg", timeout=5),
            ),
        ):
            assert DpkgComparator().compare("1.0", "2.0") is None


class TestVersionComparator:
    """Tests for VersionComparator."""

    @pytest.fixture
    def comparator(self) -> VersionComparator:
        """Comparator using only the built-in algorithm."""
        return VersionComparator(use_system=False)

    def test_status_mapping(self, comparator: VersionComparator) -> None:
        """Orderings map to statuses from the installed version's view."""
        assert comparator.status("3.4", "3.4") is VersionStatus.EQUAL
        assert comparator.status("3.3", "3.4") is VersionStatus.UPDATE_AVAILABLE
        assert comparator.status("3.10", "3.9") is VersionStatus.LOCAL_AHEAD

    def test_bare_vs_suffix(self, comparator: VersionComparator) -> None:
        """3.6 is older than 3.6a with the default suffix order."""
        assert comparator.compare("3.6", "3.6a") is Ordering.LESS

    def test_accepts_parsed_versions(self, comparator: VersionComparator) -> None:
        """Parsed and raw inputs give the same result."""
        parsed = comparator.compare(VersionString.parse("3.4"), VersionString.parse("3.4.0"))
        assert parsed is Ordering.EQUAL

    def test_malformed_input(self, comparator: VersionComparator) -> None:
        """Unparseable text raises MalformedVersionError."""
        with pytest.raises(MalformedVersionError):
            comparator.compare("latest", "1.0")

    def test_identical_text_skips_system(self) -> None:
        """Identical texts never reach the system comparator."""
        system = MagicMock(spec=DpkgComparator)
        comparator = VersionComparator(system=system)

        assert comparator.compare("3.4", "3.4") is Ordering.EQUAL
        system.compare.assert_not_called()

    def test_system_answer_preferred(self) -> None:
        """The system comparator's answer is used when it has one."""
        system = MagicMock(spec=DpkgComparator)
        system.compare.return_value = Ordering.GREATER
        comparator = VersionComparator(system=system)

        assert comparator.compare("1:1.0", "2.0") is Ordering.GREATER

    def test_fallback_when_system_undecided(self) -> None:
        """Without a system answer the built-in algorithm decides."""
        system = MagicMock(spec=DpkgComparator)
        system.compare.return_value = None
        comparator = VersionComparator(system=system)

        assert comparator.compare("3.10-1", "3.9-1") is Ordering.GREATER
        system.compare.assert_called_once_with("3.10-1", "3.9-1")

    def test_plain_versions_skip_system(self) -> None:
        """Zero padding wins over dpkg's view of 3.4 versus 3.4.0."""
        system = MagicMock(spec=DpkgComparator)
        system.compare.return_value = Ordering.LESS
        comparator = VersionComparator(system=system)

        assert comparator.compare("3.4", "3.4.0") is Ordering.EQUAL
        assert comparator.status("8.14", "8.14.0") is VersionStatus.EQUAL
        system.compare.assert_not_called()

    def test_suffix_older_skips_system(self) -> None:
        """A non-default suffix order is never overridden by dpkg."""
        system = MagicMock(spec=DpkgComparator)
        system.compare.return_value = Ordering.GREATER
        comparator = VersionComparator(suffix_order=SuffixOrder.SUFFIX_OLDER, system=system)

        assert comparator.compare("1.0rc1", "1.0") is Ordering.LESS
        system.compare.assert_not_called()

    def test_epoch_uses_system(self) -> None:
        """An epoch marks Debian syntax and goes to dpkg."""
        system = MagicMock(spec=DpkgComparator)
        system.compare.return_value = Ordering.GREATER
        comparator = VersionComparator(system=system)

        assert comparator.compare("1:1.0", "2.0") is Ordering.GREATER
        system.compare.assert_called_once_with("1:1.0", "2.0")
