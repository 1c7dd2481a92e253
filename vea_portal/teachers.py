"""Teacher name tokens and the student's teacher directory."""

import logging
import re
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, FrozenSet, Iterable, List, Optional

from .const import SUBJECT_TEACHER_KEYS, TEACHER_HONORIFICS
from .models import TeacherContact, TeacherDirectory
from .utils import coerce_string, first_string

_LOGGER = logging.getLogger(__name__)

_PUNCTUATION_RE = re.compile(r"[\W_]+", re.UNICODE)


def teacher_tokens(name: Any) -> FrozenSet[str]:
	"""Return the comparison tokens for a teacher-name-like value.

	The set holds the lowercased raw form, the form with punctuation collapsed
	to single spaces, and the alphanumeric-only form. Names that open with an
	honorific also contribute the collapsed and alphanumeric forms without it.
	Blank or non-string input gives an empty set.

	Example:
		``"Mrs. Jane Doe"`` yields ``{"mrs. jane doe", "mrs jane doe",
		"mrsjanedoe", "jane doe", "janedoe"}``
	"""
	if isinstance(name, (int, float)) and not isinstance(name, bool):
		name = coerce_string(name)
	if not isinstance(name, str) or not name.strip():
		return frozenset()
	return _tokens_for(name.strip().lower())


@lru_cache(maxsize=2048)
def _tokens_for(lowered: str) -> FrozenSet[str]:
	spaced = _PUNCTUATION_RE.sub(" ", lowered).strip()
	tokens = {lowered, spaced, spaced.replace(" ", "")}

	words = spaced.split()
	stripped = list(words)
	while len(stripped) > 1 and stripped[0] in TEACHER_HONORIFICS:
		stripped.pop(0)
	if stripped != words:
		tokens.add(" ".join(stripped))
		tokens.add("".join(stripped))

	return frozenset(token for token in tokens if token)


def collect_tokens(names: Iterable[Any]) -> FrozenSet[str]:
	"""Union of the token sets of every name in ``names``."""
	tokens = set()
	for name in names:
		tokens.update(teacher_tokens(name))
	return frozenset(tokens)


def tokens_match(first: Any, second: Any) -> bool:
	"""Check whether two names are considered the same teacher."""
	return not teacher_tokens(first).isdisjoint(teacher_tokens(second))


def normalize_teacher_directory(payload: Any) -> TeacherDirectory:
	"""Parse the teacher-assignment lookup response.

	Args:
		payload: ``{"class": {...}, "classTeachers": [...], "subjectTeachers": [...], "message": ...}``

	Returns:
		TeacherDirectory, empty when the payload is missing or malformed
	"""
	if not isinstance(payload, Mapping):
		return TeacherDirectory()

	class_info = payload.get("class")
	class_id = first_string(class_info, ("id", "classId")) or None
	class_name = first_string(class_info, ("name", "className")) or None

	directory = TeacherDirectory(
		class_teachers=_parse_contacts(payload.get("classTeachers")),
		subject_teachers=_parse_contacts(payload.get("subjectTeachers")),
		class_id=class_id,
		class_name=class_name,
		message=coerce_string(payload.get("message")) or None,
	)
	_LOGGER.debug(
		f"Teacher directory: {len(directory.class_teachers)} class teachers, "
		f"{len(directory.subject_teachers)} subject teachers"
	)
	return directory


def _parse_contacts(value: Any) -> List[TeacherContact]:
	if not isinstance(value, list):
		return []

	contacts = []
	for entry in value:
		if not isinstance(entry, Mapping):
			continue
		name = first_string(entry, ("teacherName", "teacher_name", "name"))
		teacher_id = first_string(entry, ("teacherId", "teacher_id", "id"))
		subject = first_string(entry, ("subject", "subjectName"))
		if not name and not teacher_id and not subject:
			continue
		contacts.append(TeacherContact(
			teacher_name=name,
			teacher_id=teacher_id or None,
			teacher_email=first_string(entry, ("teacherEmail", "teacher_email", "email")) or None,
			role=first_string(entry, ("role",)) or None,
			subject=subject or None,
		))
	return contacts


def collect_student_teacher_names(
	subjects: Iterable[Any] = (),
	timetable: Iterable[Any] = (),
	directory: Optional[TeacherDirectory] = None,
) -> List[str]:
	"""Gather every teacher name and id known for the student.

	Sources are the subject records, the timetable slots and the explicit
	teacher-assignment lookup. Order of first appearance is preserved.
	"""
	names: List[str] = []
	seen = set()

	def add(value: Any) -> None:
		text = coerce_string(value)
		if text and text not in seen:
			seen.add(text)
			names.append(text)

	for subject in subjects:
		add(_teacher_of(subject))
	for slot in timetable:
		add(_teacher_of(slot))
	if directory is not None:
		for contact in directory.contacts:
			add(contact.teacher_name)
			add(contact.teacher_id)

	return names


def _teacher_of(item: Any) -> str:
	if isinstance(item, Mapping):
		return first_string(item, SUBJECT_TEACHER_KEYS)
	return coerce_string(getattr(item, "teacher", None))
