"""Tests for timestamp helpers."""

import pytest

from subtitle_review.timecode import (
    components_from_timestamp,
    is_valid_timestamp,
    seconds_from_timestamp,
)


class TestIsValidTimestamp:

    @pytest.mark.parametrize("ts", ["00:00:00", "01:30:45", "99:99:99"])
    def test_valid(self, ts):
        assert is_valid_timestamp(ts)

    @pytest.mark.parametrize("ts", ["0:00:00", "00:00", "00:00:00,000", " 00:00:01", "aa:bb:cc", ""])
    def test_invalid(self, ts):
        assert not is_valid_timestamp(ts)


class TestComponents:

    def test_padded(self):
        assert components_from_timestamp("01:02:03") == (1, 2, 3)

    def test_unpadded_still_parses(self):
        assert components_from_timestamp("1:2:3") == (1, 2, 3)

    def test_wrong_part_count(self):
        assert components_from_timestamp("01:02") is None
        assert components_from_timestamp("01:02:03:04") is None

    def test_non_numeric(self):
        assert components_from_timestamp("01:xx:03") is None

    @pytest.mark.parametrize("ts", ["00:00:1_0", " 1: 2: 3", "01:02:03 ", "01:０2:03", "01::03"])
    def test_rejects_loose_integer_forms(self, ts):
        assert components_from_timestamp(ts) is None

    def test_signed_parts(self):
        assert components_from_timestamp("+1:-2:3") == (1, -2, 3)


class TestSeconds:

    def test_convert(self):
        assert seconds_from_timestamp("01:30:45") == 5445.0

    def test_invalid(self):
        assert seconds_from_timestamp("invalid") is None
