"""
Scan range requests and their resolution against instrument bounds.

A request holds zero, one or two scan numbers. It is resolved per
instrument against that instrument's first/last spectrum numbers.
"""

from collections.abc import Sequence
from typing import Optional

from .errors import ValidationError


def validate_scan_range(values: Optional[Sequence[int]]) -> tuple[int, ...]:
    """
    Check a requested scan range.

    Args:
        values: None or empty for the full range, one scan number, or an
            inclusive (low, high) pair.

    Returns:
        The values as a tuple, unchanged.

    Raises:
        ValidationError: If a value is below 1, the upper bound is below the
            lower bound, or more than two values are given.
    """
    if not values:
        return ()
    scans = tuple(values)
    if any(scan < 1 for scan in scans):
        raise ValidationError("Scan numbers must be greater than zero.")
    if len(scans) == 2 and scans[1] < scans[0]:
        raise ValidationError(
            "Higher bound of scan range must be greater or equal to lower."
        )
    if len(scans) > 2:
        raise ValidationError("Scan range must be defined by 1 or 2 numbers.")
    return scans


def resolve_scan_range(
    request: Optional[Sequence[int]],
    bounds: tuple[int, int],
) -> tuple[int, int]:
    """
    Resolve a scan range request against one instrument's bounds.

    A single scan number is used as is, without clipping. A pair is clipped
    to the bounds. No request selects the whole instrument.

    Args:
        request: Validated request (0, 1 or 2 values).
        bounds: (first spectrum, last spectrum) of the instrument.

    Returns:
        Inclusive (low, high) scan numbers to iterate. ``low > high`` means
        the request does not overlap the instrument.
    """
    first, last = bounds
    if not request:
        return (first, last)
    if len(request) == 1:
        return (request[0], request[0])
    if len(request) == 2:
        return (max(request[0], first), min(request[1], last))
    raise ValueError("Scan range must be empty or have 1 or 2 values")


def iter_scan_numbers(resolved: tuple[int, int]) -> range:
    """Scan numbers of an inclusive resolved range."""
    low, high = resolved
    return range(low, high + 1)
