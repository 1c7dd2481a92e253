"""Resolution of the student's identity from remote and fallback profiles."""

import logging
from collections.abc import Mapping
from typing import Any, Iterable, Optional

from .const import PROFILE_FIELD_ALIASES
from .models import StudentProfile
from .records import IdentifiedRecord, normalize_records
from .utils import coerce_string, first_string

_LOGGER = logging.getLogger(__name__)


def resolve_profile_field(raw: Any, field_name: str) -> str:
	"""Return the first non-blank value for ``field_name`` among its aliases.

	Top-level keys are checked before the record's nested ``metadata``.
	"""
	if not isinstance(raw, Mapping):
		return ""
	aliases = PROFILE_FIELD_ALIASES[field_name]
	value = first_string(raw, aliases)
	if value:
		return value
	return first_string(raw.get("metadata"), aliases)


def resolve_student_profile(raw: Any, fallback: StudentProfile) -> StudentProfile:
	"""Merge a fetched profile against a complete fallback, field by field.

	Args:
		raw: Profile payload; may be None or malformed if the fetch failed
		fallback: Caller-supplied profile with every field populated

	Returns:
		StudentProfile with no blank field
	"""
	if not isinstance(raw, Mapping):
		if raw is not None:
			_LOGGER.debug(f"Ignoring malformed profile payload of type {type(raw).__name__}")
		return fallback

	return StudentProfile(
		id=resolve_profile_field(raw, "id") or fallback.id,
		name=resolve_profile_field(raw, "name") or fallback.name,
		email=resolve_profile_field(raw, "email") or fallback.email,
		class_name=resolve_profile_field(raw, "class_name") or fallback.class_name,
		admission_number=resolve_profile_field(raw, "admission_number") or fallback.admission_number,
	)


def find_matching_student(roster: Any, student: StudentProfile) -> Optional[IdentifiedRecord]:
	"""Find the roster entry that describes ``student``.

	Entries are compared by id first, then admission number, email and
	finally name, all case-insensitively. Returns None when nothing matches.
	"""
	records = normalize_records(roster, "student")
	if not records:
		return None

	for field_name in ("id", "admission_number", "email", "name"):
		target = _match_token(getattr(student, field_name))
		if not target:
			continue
		for record in records:
			candidates = _record_tokens(record, field_name)
			if target in candidates:
				_LOGGER.debug(f"Matched student {student.id} to roster entry {record.id} by {field_name}")
				return record

	_LOGGER.debug(f"No roster entry matched student {student.id}")
	return None


def _record_tokens(record: Mapping[str, Any], field_name: str) -> Iterable[str]:
	sources = [record]
	metadata = record.get("metadata")
	if isinstance(metadata, Mapping):
		sources.append(metadata)
	tokens = set()
	for source in sources:
		for key in PROFILE_FIELD_ALIASES[field_name]:
			token = _match_token(source.get(key))
			if token:
				tokens.add(token)
	return tokens


def _match_token(value: Any) -> str:
	return coerce_string(value).lower()
