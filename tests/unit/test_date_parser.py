"""
Unit tests for date_parser module.
"""

from datetime import datetime

import pytest

from reaxmlfeed.utils.date_parser import parse_inspection_time, parse_rea_date


class TestParseReaDate:
    """Tests for parse_rea_date function."""

    def test_reaxml_timestamp(self):
        assert parse_rea_date("2009-01-01-12:30:00") == datetime(2009, 1, 1, 12, 30)

    def test_reaxml_timestamp_without_seconds(self):
        assert parse_rea_date("2009-01-01-12:30") == datetime(2009, 1, 1, 12, 30)

    def test_iso_date(self):
        assert parse_rea_date("2009-01-21") == datetime(2009, 1, 21)

    def test_iso_datetime(self):
        assert parse_rea_date("2009-01-21T09:15:00") == datetime(2009, 1, 21, 9, 15)

    def test_timezone_dropped(self):
        result = parse_rea_date("2009-01-21T09:15:00+10:00")
        assert result == datetime(2009, 1, 21, 9, 15)
        assert result.tzinfo is None

    def test_compact_format(self):
        assert parse_rea_date("20090121-091500") == datetime(2009, 1, 21, 9, 15)

    def test_empty_string(self):
        assert parse_rea_date("") is None

    def test_none(self):
        assert parse_rea_date(None) is None

    def test_invalid_format(self):
        assert parse_rea_date("next tuesday") is None


class TestParseInspectionTime:
    """Tests for parse_inspection_time function."""

    def test_morning(self):
        starts, ends = parse_inspection_time("21-Jan-2009 11:00am to 11:30am")
        assert starts == datetime(2009, 1, 21, 11, 0)
        assert ends == datetime(2009, 1, 21, 11, 30)

    def test_afternoon(self):
        starts, ends = parse_inspection_time("21-Jan-2009 1:00pm to 1:45pm")
        assert starts == datetime(2009, 1, 21, 13, 0)
        assert ends == datetime(2009, 1, 21, 13, 45)

    def test_midday_stays_twelve(self):
        starts, ends = parse_inspection_time("21-Jan-2009 11:30am to 12:00pm")
        assert ends == datetime(2009, 1, 21, 12, 0)

    def test_midnight_becomes_zero(self):
        starts, _ = parse_inspection_time("21-Jan-2009 12:15am to 1:00am")
        assert starts == datetime(2009, 1, 21, 0, 15)

    def test_case_insensitive(self):
        starts, _ = parse_inspection_time("21-JAN-2009 11:00AM to 11:30AM")
        assert starts == datetime(2009, 1, 21, 11, 0)

    @pytest.mark.parametrize("text", ["By appointment", "", "21-Jan-2009", "32-Jan-2009 11:00am to 11:30am"])
    def test_unparseable_gives_none(self, text):
        assert parse_inspection_time(text) == (None, None)
