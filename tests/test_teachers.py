"""Unit tests for teacher tokens and the teacher directory."""

import pytest

from vea_portal.models import SubjectRecord, TimetableSlot
from vea_portal.teachers import (
	collect_student_teacher_names,
	collect_tokens,
	normalize_teacher_directory,
	teacher_tokens,
	tokens_match,
)


@pytest.mark.parametrize("value", [None, "", "   ", True, ["Ada"], {"name": "Ada"}])
def test_blank_or_non_string_gives_empty_set(value):
	assert teacher_tokens(value) == frozenset()


def test_token_variants():
	tokens = teacher_tokens("Mrs. Jane  Doe")
	assert "mrs. jane  doe" in tokens
	assert "mrs jane doe" in tokens
	assert "mrsjanedoe" in tokens
	assert "jane doe" in tokens
	assert "janedoe" in tokens


def test_numeric_ids_produce_tokens():
	assert "1042" in teacher_tokens(1042)


@pytest.mark.parametrize(
	"first,second",
	[
		("Ada Obi", "ada obi"),
		("Ada-Obi", "ada obi"),
		("ADA_OBI", "Ada Obi"),
		("Mrs. Ada Obi", "ada obi"),
		("Dr Ada Obi", "Mrs Ada Obi"),
	],
)
def test_tokens_are_symmetric(first, second):
	assert tokens_match(first, second)
	assert tokens_match(second, first)


def test_different_teachers_do_not_match():
	assert not tokens_match("Ada Obi", "Bola Ade")


def test_lone_honorific_is_kept():
	assert "mr" in teacher_tokens("Mr")


def test_collect_tokens_unions():
	tokens = collect_tokens(["Ada Obi", None, "T-12"])
	assert "adaobi" in tokens
	assert "t12" in tokens


def test_directory_parsing():
	directory = normalize_teacher_directory({
		"class": {"id": "cls-1", "name": "JSS2B"},
		"classTeachers": [{"teacherId": "t1", "teacherName": "Mrs. Ada Obi", "role": "Form teacher"}],
		"subjectTeachers": [
			{"subject": "Mathematics", "teacherId": "t2", "teacherName": "Mr Bola Ade", "teacherEmail": "bola@school.test"},
			"broken",
			{},
		],
		"message": None,
	})
	assert directory.class_id == "cls-1"
	assert directory.class_name == "JSS2B"
	assert [contact.teacher_name for contact in directory.contacts] == ["Mrs. Ada Obi", "Mr Bola Ade"]
	assert directory.subject_teachers[0].teacher_email == "bola@school.test"
	assert directory.message is None


def test_directory_from_malformed_payload():
	directory = normalize_teacher_directory("unavailable")
	assert directory.contacts == []
	assert directory.class_name is None


def test_student_teacher_names_from_every_source():
	subjects = [SubjectRecord(id="s1", subject="English", teacher="Ada Obi")]
	timetable = [
		TimetableSlot(id="t1", day="Monday", start_time="08:00", end_time="08:40", time="", subject="Maths", teacher="Bola Ade"),
		{"teacherName": "Ada Obi"},
	]
	directory = normalize_teacher_directory({"classTeachers": [{"teacherId": "t9", "teacherName": "Chi Eze"}]})

	names = collect_student_teacher_names(subjects, timetable, directory)
	assert names == ["Ada Obi", "Bola Ade", "Chi Eze", "t9"]
