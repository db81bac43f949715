"""Tests for duration literals."""

from __future__ import annotations

from datetime import timedelta

import pytest

from envbind.durations import format_duration, parse_duration


class TestParseDuration:
    """Tests for parse_duration."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("0", timedelta(0)),
            ("-0", timedelta(0)),
            ("5s", timedelta(seconds=5)),
            ("+5s", timedelta(seconds=5)),
            ("-5s", timedelta(seconds=-5)),
            ("1.5h", timedelta(minutes=90)),
            ("2h45m", timedelta(hours=2, minutes=45)),
            ("300ms", timedelta(milliseconds=300)),
            ("10us", timedelta(microseconds=10)),
            ("10µs", timedelta(microseconds=10)),
            ("10μs", timedelta(microseconds=10)),
            ("1000ns", timedelta(microseconds=1)),
            (".5s", timedelta(milliseconds=500)),
            ("1.s", timedelta(seconds=1)),
            ("1h1m1s", timedelta(hours=1, minutes=1, seconds=1)),
        ],
    )
    def test_valid(self, text: str, expected: timedelta) -> None:
        """Test valid literals."""
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("text", ["", "-", "xxx", "1x", "s", ".s", "1h 2m", "1.2.3s"])
    def test_invalid(self, text: str) -> None:
        """Test malformed literals are rejected."""
        with pytest.raises(ValueError, match="time: invalid duration"):
            parse_duration(text)

    @pytest.mark.parametrize("text", ["999999999999h", "-999999999999h"])
    def test_out_of_range(self, text: str) -> None:
        """Test durations beyond the representable range are rejected."""
        with pytest.raises(ValueError, match="time: invalid duration"):
            parse_duration(text)

    def test_missing_unit(self) -> None:
        """Test a bare non-zero number needs a unit."""
        with pytest.raises(ValueError, match="missing unit"):
            parse_duration("10")


class TestFormatDuration:
    """Tests for format_duration."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (timedelta(0), "0s"),
            (timedelta(microseconds=300), "300µs"),
            (timedelta(microseconds=1500), "1.5ms"),
            (timedelta(milliseconds=1500), "1.5s"),
            (timedelta(seconds=30), "30s"),
            (timedelta(minutes=1, seconds=30), "1m30s"),
            (timedelta(hours=2), "2h0m0s"),
            (timedelta(seconds=-90), "-1m30s"),
        ],
    )
    def test_format(self, value: timedelta, expected: str) -> None:
        """Test the rendered literal."""
        assert format_duration(value) == expected

    @pytest.mark.parametrize(
        "value",
        [timedelta(milliseconds=3), timedelta(hours=26, seconds=1), timedelta(seconds=-0.25)],
    )
    def test_parses_back(self, value: timedelta) -> None:
        """Test rendered literals parse to the same duration."""
        assert parse_duration(format_duration(value)) == value
