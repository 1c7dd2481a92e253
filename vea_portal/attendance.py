"""Reconciliation of attendance payloads into a single summary."""

import logging
from collections.abc import Mapping
from dataclasses import asdict
from typing import Any, Optional

from .const import (
	ATTENDANCE_ABSENT_KEYS,
	ATTENDANCE_PERCENTAGE_KEYS,
	ATTENDANCE_PRESENT_KEYS,
	ATTENDANCE_TOTAL_KEYS,
)
from .models import AttendanceSummary
from .utils import clamp, first_number, round_half_up

_LOGGER = logging.getLogger(__name__)

EMPTY_ATTENDANCE = AttendanceSummary(present=0, total=0, percentage=0)


def reconcile_attendance(payload: Any, fallback: Optional[AttendanceSummary] = None) -> AttendanceSummary:
	"""Derive a complete attendance summary from an aliased payload.

	Args:
		payload: Attendance payload, an AttendanceSummary, or None
		fallback: Summary used for anything the payload does not supply

	Returns:
		AttendanceSummary with non-negative integers and a 0-100 percentage
	"""
	fallback = fallback or EMPTY_ATTENDANCE
	if isinstance(payload, AttendanceSummary):
		payload = asdict(payload)
	if not isinstance(payload, Mapping):
		if payload is not None:
			_LOGGER.debug(f"Ignoring malformed attendance payload of type {type(payload).__name__}")
		payload = {}

	present_value = first_number(payload, ATTENDANCE_PRESENT_KEYS)
	absent_value = first_number(payload, ATTENDANCE_ABSENT_KEYS)
	total_value = first_number(payload, ATTENDANCE_TOTAL_KEYS)
	percentage_value = first_number(payload, ATTENDANCE_PERCENTAGE_KEYS)

	present = _count(present_value if present_value is not None else fallback.present)

	if total_value is not None:
		total = _count(total_value)
	elif present_value is not None and absent_value is not None:
		total = present + _count(absent_value)
	else:
		total = max(_count(fallback.total), present)

	if total <= 0:
		# No distinct total: every recorded session counts as attended
		total = present

	if percentage_value is not None and percentage_value >= 0:
		percentage = round_half_up(percentage_value)
	elif total > 0:
		percentage = round_half_up(present / total * 100)
	else:
		percentage = 0

	return AttendanceSummary(
		present=present,
		total=total,
		percentage=clamp(percentage, 0, 100),
	)


def _count(value: float) -> int:
	return max(round_half_up(value), 0)
