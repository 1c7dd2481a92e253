"""Coercion helpers shared by the reconciliation stages."""

import logging
import math
from datetime import date, datetime, time
from typing import Any, Iterable, Mapping, Optional

_LOGGER = logging.getLogger(__name__)

# Date formats the portal has been seen to emit besides ISO 8601
DATE_FORMATS = (
	"%Y-%m-%dT%H:%M:%S",
	"%Y-%m-%dT%H:%M:%S.%fZ",
	"%Y-%m-%dT%H:%M:%SZ",
	"%Y-%m-%d %H:%M:%S",
	"%Y-%m-%d %H:%M",
	"%Y-%m-%d",
	"%d/%m/%Y",
	"%d.%m.%Y",
	"%B %d, %Y",
	"%b %d, %Y",
)


def coerce_string(value: Any) -> str:
	"""Return a trimmed string for strings and finite numbers, else an empty string."""
	if isinstance(value, str):
		return value.strip()
	if isinstance(value, bool):
		return ""
	if isinstance(value, int):
		return str(value)
	if isinstance(value, float):
		if not math.isfinite(value):
			return ""
		return str(int(value)) if value.is_integer() else str(value)
	return ""


def coerce_number(value: Any) -> Optional[float]:
	"""Return a finite float for numbers and numeric strings, else None."""
	if isinstance(value, bool) or value is None:
		return None
	if isinstance(value, (int, float)):
		number = float(value)
	elif isinstance(value, str):
		text = value.strip().rstrip("%").strip()
		if not text:
			return None
		try:
			number = float(text)
		except ValueError:
			return None
	else:
		return None
	return number if math.isfinite(number) else None


def first_string(record: Optional[Mapping[str, Any]], keys: Iterable[str]) -> str:
	"""Return the first non-blank string among ``keys`` of ``record``."""
	if not isinstance(record, Mapping):
		return ""
	for key in keys:
		candidate = coerce_string(record.get(key))
		if candidate:
			return candidate
	return ""


def first_number(record: Optional[Mapping[str, Any]], keys: Iterable[str]) -> Optional[float]:
	"""Return the first numeric value among ``keys`` of ``record``."""
	if not isinstance(record, Mapping):
		return None
	for key in keys:
		candidate = coerce_number(record.get(key))
		if candidate is not None:
			return candidate
	return None


def round_half_up(value: float) -> int:
	"""Round to the nearest integer, halves away from negative infinity."""
	return int(math.floor(value + 0.5))


def round_to(value: float, places: int) -> float:
	"""Round to ``places`` decimals using half-up rounding."""
	factor = 10 ** places
	return math.floor(value * factor + 0.5) / factor


def clamp(value: int, low: int, high: int) -> int:
	return max(low, min(high, value))


def parse_datetime(value: Any) -> Optional[datetime]:
	"""Parse a loosely typed date value into a naive local datetime.

	Args:
		value: ISO string, one of ``DATE_FORMATS``, a ``datetime``/``date``,
			or a millisecond epoch number.

	Returns:
		datetime object, or None when the value cannot be interpreted
	"""
	if value is None or isinstance(value, bool):
		return None
	if isinstance(value, datetime):
		return _to_naive(value)
	if isinstance(value, date):
		return datetime.combine(value, time.min)
	if isinstance(value, (int, float)):
		if not math.isfinite(value):
			return None
		try:
			return datetime.fromtimestamp(value / 1000)
		except (OverflowError, OSError, ValueError):
			return None
	if not isinstance(value, str):
		return None

	text = value.strip()
	if not text:
		return None

	try:
		parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
	except ValueError:
		parsed = None
	if parsed is not None:
		return _to_naive(parsed)

	for fmt in DATE_FORMATS:
		try:
			return datetime.strptime(text, fmt)
		except ValueError:
			continue

	_LOGGER.debug(f"Failed to parse date: {text!r}")
	return None


def _to_naive(value: datetime) -> Optional[datetime]:
	if value.tzinfo is None:
		return value
	try:
		return value.astimezone().replace(tzinfo=None)
	except (OverflowError, ValueError):
		# Shifting to local time can leave the supported year range
		_LOGGER.debug(f"Date out of range for local time: {value.isoformat()}")
		return None


def timestamp_or_none(value: Optional[datetime]) -> Optional[float]:
	"""POSIX timestamp of a naive local datetime, or None when it has none."""
	if value is None:
		return None
	try:
		return value.timestamp()
	except (OverflowError, OSError, ValueError):
		return None


def start_of_day(value: datetime) -> datetime:
	return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
	return datetime.combine(value.date(), time(23, 59, 59))


def format_date_label(value: datetime) -> str:
	"""Format a date the way the dashboard shows it, e.g. ``Mar 20, 2025``."""
	return f"{value:%b} {value.day}, {value.year}"
