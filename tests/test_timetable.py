"""Unit tests for timetable normalization."""

import pytest

from vea_portal.timetable import normalize_timetable, parse_time_range, to_12_hour, to_24_hour


@pytest.mark.parametrize(
	"value,expected",
	[
		("8:00 AM", "08:00"),
		("12:15 PM", "12:15"),
		("12:05 am", "00:05"),
		("1:30 PM", "13:30"),
		("09:45", "09:45"),
		("8.40", "08:40"),
		("14:00:00", "14:00"),
		("25:00", None),
		("noon", None),
	],
)
def test_to_24_hour(value, expected):
	assert to_24_hour(value) == expected


def test_to_12_hour():
	assert to_12_hour("00:10") == "12:10 AM"
	assert to_12_hour("08:00") == "8:00 AM"
	assert to_12_hour("12:00") == "12:00 PM"
	assert to_12_hour("15:20") == "3:20 PM"


def test_parse_time_range():
	assert parse_time_range("8:00 AM - 8:40 AM") == ("08:00", "08:40")
	assert parse_time_range("10:00–10:40") == ("10:00", "10:40")
	assert parse_time_range("garbage") == ("08:00", "08:40")
	assert parse_time_range("") == ("08:00", "08:40")


def test_slots_are_normalized_and_ordered():
	slots = normalize_timetable([
		{"id": "s3", "day": "Tue", "time": "9:00 AM - 9:40 AM", "subject": "English", "teacher": "Ada Obi"},
		{"id": "s2", "day": "monday", "startTime": "10:00", "endTime": "10:40", "subject": "Maths", "room": "Lab 2"},
		{"id": "s1", "day": "Monday", "time": "08:00-08:40", "subject": "Civic"},
		"junk",
		{"id": "s4", "subject": "Assembly"},
	])

	assert [slot.id for slot in slots] == ["s1", "s4", "s2", "s3"]
	assert slots[0].time == "8:00 AM - 8:40 AM"
	assert slots[2].location == "Lab 2"
	assert slots[2].day == "Monday"
	assert slots[3].day == "Tuesday"
	assert slots[3].start_time == "09:00"
	assert slots[3].teacher == "Ada Obi"


def test_non_list_timetable():
	assert normalize_timetable({"slots": []}) == []
