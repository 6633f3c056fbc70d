"""Tests for trailer extra lookup."""

import pytest

from rawinfo.config import MASTER_SCAN_LABELS, MONOISOTOPIC_MZ_LABEL
from rawinfo.core import TrailerField, find_trailer_value, trailer_value


def fields(*pairs):
    return [TrailerField(label, value) for label, value in pairs]


class TestFindTrailerValue:
    def test_exact_match(self):
        trailer = fields(("Charge State:", "2"), ("Monoisotopic M/Z:", "445.12"))
        assert find_trailer_value(trailer, MONOISOTOPIC_MZ_LABEL) == "445.12"

    def test_no_match(self):
        trailer = fields(("Charge State:", "2"))
        assert find_trailer_value(trailer, MONOISOTOPIC_MZ_LABEL) is None

    def test_label_must_match_exactly(self):
        trailer = fields(("Monoisotopic M/Z", "445.12"))
        assert find_trailer_value(trailer, MONOISOTOPIC_MZ_LABEL) is None

    def test_last_match_wins(self):
        trailer = fields(("Monoisotopic M/Z:", "1.0"), ("Monoisotopic M/Z:", "2.0"))
        assert find_trailer_value(trailer, MONOISOTOPIC_MZ_LABEL) == "2.0"

    def test_alternative_labels(self):
        trailer = fields(("Master Index:", "12"))
        assert find_trailer_value(trailer, MASTER_SCAN_LABELS) == "12"


class TestTrailerValue:
    def test_converts_stripped_value(self):
        trailer = fields(("Monoisotopic M/Z:", "  445.1200 "))
        assert trailer_value(trailer, MONOISOTOPIC_MZ_LABEL, float, 0.0) == pytest.approx(445.12)

    def test_default_when_absent(self):
        assert trailer_value([], MONOISOTOPIC_MZ_LABEL, float, 0.0) == 0.0
        assert trailer_value([], MASTER_SCAN_LABELS, int, 0) == 0

    def test_unparsable_value_raises(self):
        trailer = fields(("Master Scan Number:", "n/a"))
        with pytest.raises(ValueError):
            trailer_value(trailer, MASTER_SCAN_LABELS, int, 0)
