"""Merge of calendar events and assignment due dates into one timeline."""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Iterable, List, Optional

from .assignments import assignment_due_date
from .const import (
	ASSIGNMENT_SUBJECT_KEYS,
	ASSIGNMENT_TITLE_KEYS,
	CALENDAR_END_KEYS,
	CALENDAR_START_KEYS,
	CALENDAR_VISIBLE_AUDIENCES,
	EVENT_SOURCE_ASSIGNMENT,
	EVENT_SOURCE_CALENDAR,
)
from .models import UpcomingEvent
from .records import IdentifiedRecord, to_identified_record
from .utils import (
	end_of_day,
	first_string,
	format_date_label,
	parse_datetime,
	start_of_day,
	timestamp_or_none,
)

_LOGGER = logging.getLogger(__name__)

DATE_RANGE_SEPARATOR = " – "


def _iter_records(value: Any, prefix: str) -> Iterable[IdentifiedRecord]:
	# Ids are kept as resolved so repeated entries collapse in the merge
	if not isinstance(value, (list, tuple)):
		return
	for item in value:
		record = to_identified_record(item, prefix)
		if record is not None:
			yield record


def _first_date(record: Mapping[str, Any], keys: Iterable[str]) -> Optional[datetime]:
	for key in keys:
		value = record.get(key)
		if value is None or value == "":
			continue
		return parse_datetime(value)
	return None


def is_visible_to_students(event: Mapping[str, Any]) -> bool:
	"""Events without an audience are published to everyone."""
	audience = first_string(event, ("audience",)).lower() or "all"
	return audience in CALENDAR_VISIBLE_AUDIENCES


def format_event_range(start: datetime, end: Optional[datetime]) -> str:
	"""Label a calendar event, e.g. ``Mar 20, 2025`` or ``Mar 20, 2025 – Mar 22, 2025``."""
	if end is None or end.date() == start.date():
		return format_date_label(start)
	return f"{format_date_label(start)}{DATE_RANGE_SEPARATOR}{format_date_label(end)}"


def calendar_events_to_timeline(calendar_events: Any, now: Optional[datetime] = None) -> List[UpcomingEvent]:
	"""Convert published calendar entries that are still relevant.

	An event stays relevant until the end of its last day; events without a
	parseable start date or meant for another audience are skipped.
	"""
	today = start_of_day(now or datetime.now())
	timeline: List[UpcomingEvent] = []

	for record in _iter_records(calendar_events, "cal_evt"):
		if not is_visible_to_students(record):
			continue

		start = _first_date(record, CALENDAR_START_KEYS)
		if start is None:
			_LOGGER.debug(f"Skipping calendar event {record.id} without a usable start date")
			continue

		end = _first_date(record, CALENDAR_END_KEYS)
		if end is not None and end < start:
			end = None

		if end_of_day(end or start) < today:
			continue

		sort_key = timestamp_or_none(start_of_day(start))
		if sort_key is None:
			_LOGGER.debug(f"Skipping calendar event {record.id} with an out of range start date")
			continue

		timeline.append(UpcomingEvent(
			id=f"{EVENT_SOURCE_CALENDAR}-{record.id}",
			title=first_string(record, ("title", "name")) or "School Activity",
			date=format_event_range(start, end),
			source=EVENT_SOURCE_CALENDAR,
			sort_key=sort_key,
			description=first_string(record, ("description", "details")) or None,
			location=first_string(record, ("location", "venue")) or None,
			category=first_string(record, ("category", "type")) or None,
		))

	return timeline


def assignments_to_timeline(assignments: Any, now: Optional[datetime] = None) -> List[UpcomingEvent]:
	"""Convert assignment due dates that have not yet passed."""
	today = start_of_day(now or datetime.now())
	timeline: List[UpcomingEvent] = []

	for record in _iter_records(assignments, "assignment"):
		due = assignment_due_date(record)
		if due is None:
			continue
		if end_of_day(due) < today:
			continue
		sort_key = timestamp_or_none(due)
		if sort_key is None:
			continue

		title = first_string(record, ASSIGNMENT_TITLE_KEYS) or "Untitled assignment"
		subject = first_string(record, ASSIGNMENT_SUBJECT_KEYS)
		timeline.append(UpcomingEvent(
			id=f"{EVENT_SOURCE_ASSIGNMENT}-{record.id}",
			title=f"Assignment: {title}",
			date=format_date_label(due),
			source=EVENT_SOURCE_ASSIGNMENT,
			sort_key=sort_key,
			description=first_string(record, ("description", "instructions")) or subject or None,
			category=EVENT_SOURCE_ASSIGNMENT,
		))

	return timeline


def build_upcoming_events(
	calendar_events: Any,
	assignments: Any,
	now: Optional[datetime] = None,
) -> List[UpcomingEvent]:
	"""Build the forward-looking, deduplicated, chronological timeline.

	Args:
		calendar_events: Published calendar entries
		assignments: Assignments already filtered for the student
		now: Reference time, defaults to the current local time

	Returns:
		List of UpcomingEvent objects ordered by their sort key
	"""
	now = now or datetime.now()
	merged = [
		*calendar_events_to_timeline(calendar_events, now),
		*assignments_to_timeline(assignments, now),
	]
	merged.sort(key=lambda event: event.sort_key)

	timeline: List[UpcomingEvent] = []
	seen = set()
	for event in merged:
		if event.id in seen:
			continue
		seen.add(event.id)
		timeline.append(event)

	_LOGGER.debug(f"Built timeline with {len(timeline)} upcoming events")
	return timeline
