"""Timetable slot normalization."""

import logging
import re
from typing import Any, List, Optional, Tuple

from .const import DAY_ORDER, DEFAULT_PERIOD_END, DEFAULT_PERIOD_START
from .models import TimetableSlot
from .records import IdentifiedRecord, normalize_records
from .utils import coerce_string, first_string

_LOGGER = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^(\d{1,2})[:.](\d{2})(?::\d{2})?\s*([AaPp][Mm])?$")
_RANGE_SPLIT_RE = re.compile(r"\s*[-–]\s*")


def to_24_hour(value: str) -> Optional[str]:
	"""Convert ``8:00 AM`` / ``08:00`` / ``8.00`` into ``HH:MM``; None when unrecognised."""
	match = _TIME_RE.match(value.strip())
	if not match:
		return None

	hour = int(match.group(1))
	minute = int(match.group(2))
	meridiem = (match.group(3) or "").upper()

	if meridiem == "PM" and hour != 12:
		hour += 12
	elif meridiem == "AM" and hour == 12:
		hour = 0

	if hour > 23 or minute > 59:
		return None
	return f"{hour:02d}:{minute:02d}"


def to_12_hour(value: str) -> str:
	hour_text, _, minute_text = value.partition(":")
	hour = int(hour_text)
	meridiem = "PM" if hour >= 12 else "AM"
	hour = hour % 12 or 12
	return f"{hour}:{minute_text or '00'} {meridiem}"


def format_time_range(start: str, end: str) -> str:
	return f"{to_12_hour(start)} - {to_12_hour(end)}"


def parse_time_range(label: str) -> Tuple[str, str]:
	"""Split a range label into 24-hour start and end times.

	Unparseable halves fall back to the default first period.
	"""
	if not isinstance(label, str) or not label.strip():
		return DEFAULT_PERIOD_START, DEFAULT_PERIOD_END

	# "8:00 AM - 8:40 AM" has no dash inside a time, so one split is enough
	parts = _RANGE_SPLIT_RE.split(label.strip(), maxsplit=1)
	start = to_24_hour(parts[0]) if parts else None
	end = to_24_hour(parts[1]) if len(parts) > 1 else None
	return start or DEFAULT_PERIOD_START, end or DEFAULT_PERIOD_END


def normalize_day(value: Any) -> str:
	text = coerce_string(value).lower()
	for day in DAY_ORDER:
		if text in (day.lower(), day[:3].lower()):
			return day
	return DAY_ORDER[0]


def normalize_timetable_slot(record: IdentifiedRecord) -> TimetableSlot:
	"""Build a slot from an identified timetable record."""
	label = first_string(record, ("time", "period", "timeRange"))
	if label:
		start, end = parse_time_range(label)
	else:
		start = to_24_hour(first_string(record, ("startTime", "start_time", "start"))) or DEFAULT_PERIOD_START
		end = to_24_hour(first_string(record, ("endTime", "end_time", "end"))) or DEFAULT_PERIOD_END

	return TimetableSlot(
		id=record.id,
		day=normalize_day(record.get("day")),
		start_time=start,
		end_time=end,
		time=format_time_range(start, end),
		subject=first_string(record, ("subject", "subjectName", "title")),
		teacher=first_string(record, ("teacher", "teacherName", "teacher_name")),
		location=first_string(record, ("location", "room", "classroom", "venue")) or None,
		class_name=first_string(record, ("className", "class_name", "class")) or None,
	)


def normalize_timetable(payload: Any) -> List[TimetableSlot]:
	"""Normalize a timetable payload into slots ordered by weekday and start time."""
	slots = [normalize_timetable_slot(record) for record in normalize_records(payload, "slot")]
	slots.sort(key=lambda slot: (DAY_ORDER.index(slot.day), slot.start_time))
	_LOGGER.debug(f"Normalized {len(slots)} timetable slots")
	return slots
