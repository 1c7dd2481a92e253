"""Academic record normalization."""

import logging
from collections.abc import Mapping
from typing import Any, List, Optional

from .const import (
	CONTINUOUS_ASSESSMENT_KEYS,
	FAILING_GRADE,
	GRADE_BOUNDARIES,
	SUBJECT_GRADE_KEYS,
	SUBJECT_NAME_KEYS,
	SUBJECT_SCORE_KEYS,
	SUBJECT_TEACHER_KEYS,
)
from .models import SubjectRecord
from .records import normalize_records
from .utils import clamp, coerce_string, first_number, first_string, round_half_up

_LOGGER = logging.getLogger(__name__)

MAX_SUBJECT_NAME_DEPTH = 3


def extract_subject_name(entry: Any, depth: int = 0) -> Optional[str]:
	"""Find a subject name in a string or a (possibly nested) mapping."""
	if isinstance(entry, str):
		return entry.strip() or None
	if not isinstance(entry, Mapping) or depth > MAX_SUBJECT_NAME_DEPTH:
		return None

	for key in SUBJECT_NAME_KEYS:
		candidate = entry.get(key)
		if isinstance(candidate, str) and candidate.strip():
			return candidate.strip()
		if isinstance(candidate, Mapping):
			nested = extract_subject_name(candidate, depth + 1)
			if nested:
				return nested
	return None


def derive_percentage(record: Mapping[str, Any]) -> Optional[float]:
	"""Return the record's percentage, from a direct field or its CA components."""
	direct = first_number(record, SUBJECT_SCORE_KEYS)
	if direct is not None:
		return direct

	earned = 0.0
	for keys in CONTINUOUS_ASSESSMENT_KEYS.values():
		earned += first_number(record, keys) or 0.0
	if earned <= 0:
		return None

	obtainable = first_number(record, ("totalObtainable", "totalMarksObtainable"))
	if obtainable is None or obtainable <= 0:
		obtainable = 100.0
	return earned / obtainable * 100


def grade_for_score(score: Optional[int]) -> str:
	if score is None:
		return ""
	for minimum, grade in GRADE_BOUNDARIES:
		if score >= minimum:
			return grade
	return FAILING_GRADE


def normalize_subject_records(payload: Any) -> List[SubjectRecord]:
	"""Normalize academic records into subjects with score and grade.

	Args:
		payload: List of subject entries with aliased score, grade and teacher fields

	Returns:
		List of SubjectRecord objects in payload order
	"""
	subjects: List[SubjectRecord] = []

	for record in normalize_records(payload, "subject"):
		name = extract_subject_name(record) or "Subject"
		percentage = derive_percentage(record)
		score = clamp(round_half_up(percentage), 0, 100) if percentage is not None else None
		grade = first_string(record, SUBJECT_GRADE_KEYS).upper() or grade_for_score(score)

		teacher = first_string(record, SUBJECT_TEACHER_KEYS)
		if not teacher and isinstance(record.get("teacher"), Mapping):
			teacher = coerce_string(record["teacher"].get("name"))

		subjects.append(SubjectRecord(
			id=record.id,
			subject=name,
			score=score,
			grade=grade,
			teacher=teacher or None,
		))

	_LOGGER.debug(f"Normalized {len(subjects)} subject records")
	return subjects
