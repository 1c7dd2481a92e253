"""Unit tests for coercion and date helpers."""

import time
from datetime import date, datetime, timezone

import pytest

from vea_portal.utils import coerce_number, coerce_string, format_date_label, parse_datetime, round_half_up, timestamp_or_none


@pytest.fixture
def new_york_time(monkeypatch):
	if not hasattr(time, "tzset"):
		pytest.skip("time.tzset is not available on this platform")
	monkeypatch.setenv("TZ", "America/New_York")
	time.tzset()
	yield
	monkeypatch.undo()
	time.tzset()


def test_coerce_string():
	assert coerce_string("  x ") == "x"
	assert coerce_string(12) == "12"
	assert coerce_string(3.0) == "3"
	assert coerce_string(True) == ""
	assert coerce_string(float("inf")) == ""
	assert coerce_string(None) == ""


def test_coerce_number():
	assert coerce_number("80%") == 80
	assert coerce_number(" 7.5 ") == 7.5
	assert coerce_number(False) is None
	assert coerce_number("n/a") is None
	assert coerce_number(float("nan")) is None


def test_round_half_up():
	assert round_half_up(2.5) == 3
	assert round_half_up(12.5) == 13
	assert round_half_up(12.49) == 12


def test_parse_datetime_formats():
	assert parse_datetime("2025-03-12") == datetime(2025, 3, 12)
	assert parse_datetime("2025-03-12 14:30") == datetime(2025, 3, 12, 14, 30)
	assert parse_datetime("12/03/2025") == datetime(2025, 3, 12)
	assert parse_datetime("Mar 12, 2025") == datetime(2025, 3, 12)
	assert parse_datetime(date(2025, 3, 12)) == datetime(2025, 3, 12)
	assert parse_datetime("someday") is None
	assert parse_datetime("") is None
	assert parse_datetime(True) is None


def test_aware_datetimes_become_naive():
	parsed = parse_datetime("2025-03-12T08:00:00Z")
	assert parsed.tzinfo is None
	assert parsed == datetime(2025, 3, 12, 8, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)


def test_epoch_milliseconds():
	assert parse_datetime(0) == datetime.fromtimestamp(0)
	assert parse_datetime(1e30) is None


def test_earliest_utc_date_west_of_utc_is_dropped(new_york_time):
	assert parse_datetime("0001-01-01T00:00:00Z") is None
	assert parse_datetime(datetime(1, 1, 1, tzinfo=timezone.utc)) is None


def test_timestamp_or_none():
	assert timestamp_or_none(None) is None
	assert timestamp_or_none(datetime(1, 1, 1)) is None
	assert timestamp_or_none(datetime(2025, 3, 12)) == datetime(2025, 3, 12).timestamp()


def test_format_date_label():
	assert format_date_label(datetime(2025, 3, 5)) == "Mar 5, 2025"
