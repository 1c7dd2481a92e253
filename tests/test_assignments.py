"""Unit tests for assignment visibility, ordering and status."""

from datetime import datetime

from vea_portal.assignments import (
	filter_assignments,
	filter_assignments_for_teachers,
	normalize_class_token,
	resolve_assignment_status,
)
from vea_portal.teachers import collect_tokens

NOW = datetime(2025, 3, 10, 12, 0)


def _ids(records):
	return [record.id for record in records]


def test_honorific_teacher_name_matches_known_teacher():
	assignments = [{"id": "a1", "teacherName": "Mrs. Ada Obi", "className": "JSS1A"}]
	visible = filter_assignments_for_teachers(assignments, ["ada obi"], "JSS2B")
	assert _ids(visible) == ["a1"]


def test_untagged_assignment_is_visible_regardless_of_class():
	assignments = [{"id": "a1", "className": "JSS1A"}]
	visible = filter_assignments_for_teachers(assignments, ["Bola Ade"], "JSS2B")
	assert _ids(visible) == ["a1"]


def test_unknown_teacher_falls_back_to_class():
	assignments = [
		{"id": "same-class", "teacherName": "Stranger", "className": " jss 2b "},
		{"id": "other-class", "teacherName": "Stranger", "className": "JSS1A"},
		{"id": "no-class", "teacherName": "Stranger"},
	]
	visible = filter_assignments_for_teachers(assignments, ["Ada Obi"], "JSS2B")
	assert _ids(visible) == ["same-class"]


def test_teacher_id_matches():
	assignments = [{"id": "a1", "teacherId": "T-77", "className": "JSS1A"}]
	visible = filter_assignments(assignments, collect_tokens(["t77"]), "JSS2B")
	assert _ids(visible) == ["a1"]


def test_embedded_teacher_object_matches():
	assignments = [{"id": "a1", "teacher": {"id": "t5", "name": "Dr. Chi Eze"}, "className": "X"}]
	visible = filter_assignments_for_teachers(assignments, ["Chi Eze"], "JSS2B")
	assert _ids(visible) == ["a1"]


def test_class_aliases_are_accepted():
	assignments = [{"id": "a1", "teacherName": "Stranger", "classId": "cls-9"}]
	visible = filter_assignments_for_teachers(assignments, [], ["JSS2B", "cls-9"])
	assert _ids(visible) == ["a1"]


def test_adding_a_teacher_never_removes_assignments():
	assignments = [
		{"id": "a1", "teacherName": "Ada Obi", "className": "JSS1A"},
		{"id": "a2", "teacherName": "Bola Ade", "className": "JSS2B"},
		{"id": "a3", "teacherName": "Chi Eze", "className": "JSS3C"},
		{"id": "a4"},
	]
	before = set(_ids(filter_assignments_for_teachers(assignments, ["Ada Obi"], "JSS2B")))
	after = set(_ids(filter_assignments_for_teachers(assignments, ["Ada Obi", "Chi Eze"], "JSS2B")))
	assert before <= after
	assert after - before == {"a3"}


def test_sorted_by_due_date_with_undated_last():
	assignments = [
		{"id": "undated"},
		{"id": "late", "dueDate": "2025-04-01"},
		{"id": "bad", "dueDate": "someday"},
		{"id": "early", "dueDate": "2025-03-12T09:00:00"},
		{"id": "undated-2"},
	]
	visible = filter_assignments(assignments, frozenset(), None)
	assert _ids(visible) == ["early", "late", "undated", "bad", "undated-2"]


def test_malformed_input_is_tolerated():
	assert filter_assignments(None, frozenset(), "JSS2B") == []
	assert _ids(filter_assignments([None, "x", {"id": "ok"}], frozenset(), "JSS2B")) == ["ok"]


def test_normalize_class_token():
	assert normalize_class_token(" JSS 2B ") == "jss2b"
	assert normalize_class_token(None) == ""


def test_status_resolution():
	assert resolve_assignment_status({"status": "Graded"}, NOW) == ("graded", False)
	assert resolve_assignment_status({"status": "submitted", "dueDate": "2025-01-01"}, NOW) == ("submitted", False)
	assert resolve_assignment_status({"dueDate": "2025-03-01"}, NOW) == ("sent", True)
	assert resolve_assignment_status({"status": "sent", "dueDate": "2025-03-20"}, NOW) == ("sent", False)
	assert resolve_assignment_status({"status": "draft"}, NOW) == ("sent", False)


def test_extreme_due_dates_sort_without_error():
	assignments = [
		{"id": "undated"},
		{"id": "far", "dueDate": "9999-12-31"},
		{"id": "ancient", "dueDate": "0001-01-01"},
	]
	visible = filter_assignments(assignments, frozenset(), None)
	assert _ids(visible) == ["ancient", "far", "undated"]
	assert resolve_assignment_status(assignments[2], NOW) == ("sent", True)
