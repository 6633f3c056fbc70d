"""Tests for scan range validation and resolution."""

import pytest

from rawinfo.core import iter_scan_numbers, resolve_scan_range, validate_scan_range
from rawinfo.core.errors import ValidationError


class TestValidateScanRange:
    def test_none_and_empty(self):
        assert validate_scan_range(None) == ()
        assert validate_scan_range([]) == ()

    def test_single_and_pair(self):
        assert validate_scan_range([5]) == (5,)
        assert validate_scan_range([5, 10]) == (5, 10)
        assert validate_scan_range([7, 7]) == (7, 7)

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            validate_scan_range([0])

    def test_reversed_pair_rejected(self):
        with pytest.raises(ValidationError, match="Higher bound"):
            validate_scan_range([10, 5])

    def test_too_many_values(self):
        with pytest.raises(ValidationError, match="1 or 2 numbers"):
            validate_scan_range([1, 2, 3])

    def test_non_positive_checked_first(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            validate_scan_range([3, 2, -1])


class TestResolveScanRange:
    def test_empty_request_uses_bounds(self):
        assert resolve_scan_range((), (1, 100)) == (1, 100)
        assert resolve_scan_range(None, (20, 40)) == (20, 40)

    def test_single_value_not_clipped(self):
        assert resolve_scan_range((500,), (1, 100)) == (500, 500)

    def test_pair_clipped_to_bounds(self):
        assert resolve_scan_range((5, 10), (1, 100)) == (5, 10)
        assert resolve_scan_range((1, 1000), (20, 40)) == (20, 40)

    def test_pair_outside_bounds_is_empty(self):
        low, high = resolve_scan_range((200, 300), (1, 100))
        assert low > high
        assert list(iter_scan_numbers((low, high))) == []


class TestIterScanNumbers:
    def test_inclusive(self):
        assert list(iter_scan_numbers((5, 7))) == [5, 6, 7]

    def test_single(self):
        assert list(iter_scan_numbers((9, 9))) == [9]
