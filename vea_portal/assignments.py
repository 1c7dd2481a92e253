"""Visibility filtering and status of assignments."""

import logging
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any, FrozenSet, Iterable, List, Optional, Set, Tuple, Union

from .const import (
	ASSIGNMENT_CLASS_KEYS,
	ASSIGNMENT_DUE_KEYS,
	ASSIGNMENT_STATUS_GRADED,
	ASSIGNMENT_STATUS_KEYS,
	ASSIGNMENT_STATUS_SENT,
	ASSIGNMENT_STATUS_SUBMITTED,
	ASSIGNMENT_TEACHER_ID_KEYS,
	ASSIGNMENT_TEACHER_NAME_KEYS,
)
from .records import IdentifiedRecord, normalize_records
from .teachers import collect_tokens
from .utils import coerce_string, first_string, parse_datetime

_LOGGER = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_class_token(value: Any) -> str:
	"""Class identifiers compare without whitespace and case."""
	return _WHITESPACE_RE.sub("", coerce_string(value)).lower()


def assignment_teacher_tokens(assignment: Mapping[str, Any]) -> FrozenSet[str]:
	"""Tokens for every teacher-identifying field of an assignment (name and id)."""
	values: List[Any] = []
	for key in (*ASSIGNMENT_TEACHER_NAME_KEYS, *ASSIGNMENT_TEACHER_ID_KEYS):
		value = assignment.get(key)
		if isinstance(value, Mapping):
			# Embedded teacher object, e.g. {"teacher": {"id": ..., "name": ...}}
			values.append(first_string(value, ("name", "fullName", "teacherName")))
			values.append(first_string(value, ("id", "_id", "teacherId")))
		else:
			values.append(value)
	return collect_tokens(values)


def assignment_class_tokens(assignment: Mapping[str, Any]) -> Set[str]:
	tokens = set()
	for key in ASSIGNMENT_CLASS_KEYS:
		value = assignment.get(key)
		if isinstance(value, Mapping):
			candidates = [value.get("id"), value.get("name")]
		else:
			candidates = [value]
		for candidate in candidates:
			token = normalize_class_token(candidate)
			if token:
				tokens.add(token)
	return tokens


def assignment_due_date(assignment: Mapping[str, Any]) -> Optional[datetime]:
	"""Return the parsed due date, or None when missing or unparseable."""
	for key in ASSIGNMENT_DUE_KEYS:
		value = assignment.get(key)
		if value is None or value == "":
			continue
		return parse_datetime(value)
	return None


def due_sort_key(assignment: Mapping[str, Any]) -> Tuple[bool, datetime]:
	"""Order by due date; assignments without a usable due date sort last."""
	due = assignment_due_date(assignment)
	return due is None, due or datetime.max


def is_assignment_visible(
	assignment: Mapping[str, Any],
	student_tokens: FrozenSet[str],
	student_classes: Set[str],
) -> bool:
	"""Decide whether one assignment belongs on the student's dashboard."""
	tokens = assignment_teacher_tokens(assignment)
	if not tokens:
		# Untagged assignments are visible to every student
		return True
	if not tokens.isdisjoint(student_tokens):
		return True
	return not assignment_class_tokens(assignment).isdisjoint(student_classes)


def filter_assignments(
	assignments: Any,
	student_tokens: Iterable[str],
	student_class: Union[str, Iterable[str], None] = None,
) -> List[IdentifiedRecord]:
	"""Return the assignments visible to a student, ordered by due date.

	Args:
		assignments: Raw assignment payload or already identified records
		student_tokens: Teacher tokens known for the student
		student_class: The student's class identifier, or several aliases of it

	Returns:
		Visible assignments sorted ascending by due date, undated last
	"""
	records = normalize_records(assignments, "assignment")
	token_set = frozenset(student_tokens)
	class_set = _class_tokens(student_class)

	visible = [
		record for record in records
		if is_assignment_visible(record, token_set, class_set)
	]
	_LOGGER.debug(f"{len(visible)} of {len(records)} assignments visible to student")

	return sorted(visible, key=due_sort_key)


def filter_assignments_for_teachers(
	assignments: Any,
	teacher_names: Iterable[Any],
	student_class: Union[str, Iterable[str], None] = None,
) -> List[IdentifiedRecord]:
	"""Same as :func:`filter_assignments`, building the tokens from names."""
	return filter_assignments(assignments, collect_tokens(teacher_names), student_class)


def _class_tokens(student_class: Union[str, Iterable[str], None]) -> Set[str]:
	if student_class is None:
		return set()
	if isinstance(student_class, str):
		candidates: Iterable[Any] = [student_class]
	else:
		candidates = student_class
	return {token for token in (normalize_class_token(value) for value in candidates) if token}


def assignment_status(assignment: Mapping[str, Any]) -> str:
	"""Return ``sent``, ``submitted`` or ``graded``; unknown or absent status is ``sent``."""
	status = first_string(assignment, ASSIGNMENT_STATUS_KEYS).lower()
	if status in (ASSIGNMENT_STATUS_SUBMITTED, ASSIGNMENT_STATUS_GRADED):
		return status
	return ASSIGNMENT_STATUS_SENT


def resolve_assignment_status(assignment: Mapping[str, Any], now: Optional[datetime] = None) -> Tuple[str, bool]:
	"""Return the visible status and whether the assignment is overdue.

	The overdue flag only applies while the assignment is still ``sent``.
	"""
	status = assignment_status(assignment)
	if status != ASSIGNMENT_STATUS_SENT:
		return status, False
	due = assignment_due_date(assignment)
	if due is None:
		return status, False
	return status, due < (now or datetime.now())
