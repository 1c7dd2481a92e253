"""Assembly of the student dashboard from the portal's data sources."""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .academics import normalize_subject_records
from .assignments import filter_assignments_for_teachers, resolve_assignment_status
from .attendance import reconcile_attendance
from .client import PortalClient
from .config import PortalConfig
from .const import (
	SECTION_ASSIGNMENTS,
	SECTION_ATTENDANCE,
	SECTION_CALENDAR,
	SECTION_LIBRARY,
	SECTION_PROFILE,
	SECTION_STATUS_FRESH,
	SECTION_STATUS_MISSING,
	SECTION_SUBJECTS,
	SECTION_TEACHERS,
	SECTION_TIMETABLE,
)
from .events import build_upcoming_events
from .exceptions import PortalError
from .identity import find_matching_student, resolve_student_profile
from .insights import InsightCalculator
from .models import AssignmentState, StudentDashboard, StudentProfile
from .records import normalize_records
from .teachers import collect_student_teacher_names, normalize_teacher_directory
from .timetable import normalize_timetable

_LOGGER = logging.getLogger(__name__)

DASHBOARD_SECTIONS = (
	SECTION_PROFILE,
	SECTION_SUBJECTS,
	SECTION_ATTENDANCE,
	SECTION_TIMETABLE,
	SECTION_ASSIGNMENTS,
	SECTION_LIBRARY,
	SECTION_TEACHERS,
	SECTION_CALENDAR,
)


def evaluate_dashboard_completeness(
	sections: Mapping[str, str],
	expected: Iterable[str] = DASHBOARD_SECTIONS,
) -> Tuple[bool, List[str]]:
	"""Return completeness flag together with the list of missing sections."""
	missing: List[str] = []

	for name in expected:
		status = sections.get(name)
		if status == SECTION_STATUS_FRESH:
			continue
		missing.append(name)

	return not missing, missing


def reconcile_dashboard(
	payloads: Mapping[str, Any],
	student: StudentProfile,
	now: Optional[datetime] = None,
	insight_calculator: Optional[InsightCalculator] = None,
) -> StudentDashboard:
	"""Run every reconciliation stage over already fetched payloads.

	Args:
		payloads: Raw payloads keyed by section name. A section that is absent
			failed to load and is rendered from its empty default.
		student: Caller-supplied fallback profile
		now: Reference time for the timeline, defaults to the current local time
		insight_calculator: Optional memoizing calculator shared between runs

	Returns:
		StudentDashboard; never raises on malformed payloads
	"""
	now = now or datetime.now()
	calculator = insight_calculator or InsightCalculator()

	profile = resolve_student_profile(payloads.get(SECTION_PROFILE), student)
	subjects = normalize_subject_records(payloads.get(SECTION_SUBJECTS))
	attendance = reconcile_attendance(payloads.get(SECTION_ATTENDANCE))
	timetable = normalize_timetable(payloads.get(SECTION_TIMETABLE))
	directory = normalize_teacher_directory(payloads.get(SECTION_TEACHERS))

	teacher_names = collect_student_teacher_names(subjects, timetable, directory)
	class_aliases = [profile.class_name, directory.class_name, directory.class_id]
	assignments = filter_assignments_for_teachers(
		payloads.get(SECTION_ASSIGNMENTS),
		teacher_names,
		[alias for alias in class_aliases if alias],
	)

	assignment_states: Dict[str, AssignmentState] = {}
	for record in assignments:
		status, overdue = resolve_assignment_status(record, now)
		assignment_states[record.id] = AssignmentState(status=status, overdue=overdue)

	sections = {
		name: SECTION_STATUS_FRESH if name in payloads else SECTION_STATUS_MISSING
		for name in DASHBOARD_SECTIONS
	}

	return StudentDashboard(
		profile=profile,
		generated_at=now,
		subjects=subjects,
		attendance=attendance,
		timetable=timetable,
		assignments=assignments,
		assignment_states=assignment_states,
		insights=calculator.calculate(assignments),
		library_loans=normalize_records(payloads.get(SECTION_LIBRARY), "loan"),
		upcoming_events=build_upcoming_events(payloads.get(SECTION_CALENDAR), assignments, now),
		teachers=directory,
		sections=sections,
	)


class DashboardBuilder:
	"""Fetch every data source of a student and reconcile them.

	A failing source is logged and left out; the dashboard still renders
	with that section at its default.
	"""

	def __init__(
		self,
		client: PortalClient,
		insight_calculator: Optional[InsightCalculator] = None,
	) -> None:
		self.client = client
		self.insight_calculator = insight_calculator or InsightCalculator()

	@classmethod
	def from_config(cls, client: PortalClient, config: PortalConfig) -> "DashboardBuilder":
		"""Create a builder whose insight cache is sized from ``config``."""
		return cls(client, InsightCalculator(max_size=config.insight_cache_size))

	async def _resolve_student(self, student: StudentProfile) -> StudentProfile:
		"""Align the fallback profile with the roster entry the portal knows."""
		try:
			roster = await self.client.get_students()
		except PortalError as err:
			_LOGGER.warning(f"Failed to get student roster: {err}")
			return student

		match = find_matching_student(roster, student)
		if match is None:
			_LOGGER.info(f"Student {student.id} not found in roster, using supplied profile")
			return student
		return resolve_student_profile(match, student)

	async def async_build(self, student: StudentProfile, now: Optional[datetime] = None) -> StudentDashboard:
		"""Build the dashboard of ``student``.

		Args:
			student: Fallback profile with every field populated
			now: Reference time for the timeline

		Returns:
			StudentDashboard with per-section freshness in ``sections``
		"""
		payloads: Dict[str, Any] = {}

		effective = await self._resolve_student(student)

		try:
			payloads[SECTION_PROFILE] = await self.client.get_student_profile(effective.id)
		except PortalError as err:
			_LOGGER.warning(f"Failed to get profile for student {effective.id}: {err}")

		# Class may only be known once the profile is in
		profile = resolve_student_profile(payloads.get(SECTION_PROFILE), effective)

		requests = {
			SECTION_SUBJECTS: self.client.get_academic_records(profile.id),
			SECTION_ATTENDANCE: self.client.get_attendance(profile.id),
			SECTION_TIMETABLE: self.client.get_timetable(profile.class_name),
			SECTION_ASSIGNMENTS: self.client.get_assignments(profile.id),
			SECTION_LIBRARY: self.client.get_library_loans(profile.id),
			SECTION_TEACHERS: self.client.get_teacher_assignments(profile.id, profile.class_name),
			SECTION_CALENDAR: self.client.get_published_calendar(),
		}
		results = await asyncio.gather(*requests.values(), return_exceptions=True)

		success_count = 0
		for section, result in zip(requests, results):
			if isinstance(result, Exception):
				_LOGGER.warning(f"Failed to get {section} for student {profile.id}: {result}")
				continue
			if isinstance(result, BaseException):
				raise result
			payloads[section] = result
			success_count += 1

		_LOGGER.info(f"Dashboard data for student {profile.id}: {success_count}/{len(requests)} sources successful")

		dashboard = reconcile_dashboard(payloads, effective, now, self.insight_calculator)

		is_complete, missing = evaluate_dashboard_completeness(dashboard.sections)
		if not is_complete:
			_LOGGER.warning(f"Dashboard for student {profile.id} is missing sections: {missing}")
		return dashboard
