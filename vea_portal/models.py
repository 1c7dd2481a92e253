"""Data models for the student dashboard view."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .const import ASSIGNMENT_STATUS_SENT, SECTION_STATUS_FRESH
from .records import IdentifiedRecord


@dataclass(frozen=True)
class StudentProfile:
	"""Identity of the student the dashboard belongs to."""
	id: str
	name: str
	email: str
	class_name: str
	admission_number: str

	def to_dict(self) -> Dict[str, str]:
		return {
			"id": self.id,
			"name": self.name,
			"email": self.email,
			"class": self.class_name,
			"admissionNumber": self.admission_number,
		}


@dataclass(frozen=True)
class AttendanceSummary:
	"""Attendance counts; percentage is always within 0-100."""
	present: int = 0
	total: int = 0
	percentage: int = 0

	def to_dict(self) -> Dict[str, int]:
		return {"present": self.present, "total": self.total, "percentage": self.percentage}

	def __str__(self) -> str:
		return f"{self.present}/{self.total} ({self.percentage}%)"


@dataclass(frozen=True)
class UpcomingEvent:
	"""An entry on the upcoming-events timeline."""
	id: str
	title: str
	date: str
	source: str  # "calendar" or "assignment"
	sort_key: float
	description: Optional[str] = None
	location: Optional[str] = None
	category: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			"id": self.id,
			"title": self.title,
			"date": self.date,
			"description": self.description,
			"source": self.source,
			"location": self.location,
			"category": self.category,
		}

	def __str__(self) -> str:
		return f"{self.title} ({self.source}) - {self.date}"


@dataclass(frozen=True)
class AssignmentState:
	"""Visible status of one assignment; overdue only applies while still sent."""
	status: str = ASSIGNMENT_STATUS_SENT
	overdue: bool = False

	def to_dict(self) -> Dict[str, Any]:
		return {"status": self.status, "overdue": self.overdue}


@dataclass(frozen=True)
class AssignmentInsight:
	"""Aggregate performance over the visible assignments."""
	total: int = 0
	submitted: int = 0
	graded: int = 0
	pending: int = 0
	completion_rate: int = 0
	average_score: Optional[float] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			"total": self.total,
			"submitted": self.submitted,
			"graded": self.graded,
			"pending": self.pending,
			"completionRate": self.completion_rate,
			"averageScore": self.average_score,
		}


@dataclass(frozen=True)
class TimetableSlot:
	"""A weekly timetable slot."""
	id: str
	day: str
	start_time: str
	end_time: str
	time: str
	subject: str
	teacher: str
	location: Optional[str] = None
	class_name: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			"id": self.id,
			"day": self.day,
			"startTime": self.start_time,
			"endTime": self.end_time,
			"time": self.time,
			"subject": self.subject,
			"teacher": self.teacher,
			"location": self.location,
			"className": self.class_name,
		}

	def __str__(self) -> str:
		return f"{self.day} {self.time}: {self.subject}"


@dataclass(frozen=True)
class SubjectRecord:
	"""A subject on the student's academic record."""
	id: str
	subject: str
	score: Optional[int] = None
	grade: str = ""
	teacher: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			"id": self.id,
			"subject": self.subject,
			"score": self.score,
			"grade": self.grade,
			"teacher": self.teacher,
		}


@dataclass(frozen=True)
class TeacherContact:
	"""A teacher linked to the student's class or one of its subjects."""
	teacher_name: str
	teacher_id: Optional[str] = None
	teacher_email: Optional[str] = None
	role: Optional[str] = None
	subject: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			"teacherName": self.teacher_name,
			"teacherId": self.teacher_id,
			"teacherEmail": self.teacher_email,
			"role": self.role,
			"subject": self.subject,
		}


@dataclass
class TeacherDirectory:
	"""Class and subject teachers resolved for a student."""
	class_teachers: List[TeacherContact] = field(default_factory=list)
	subject_teachers: List[TeacherContact] = field(default_factory=list)
	class_id: Optional[str] = None
	class_name: Optional[str] = None
	message: Optional[str] = None

	@property
	def contacts(self) -> List[TeacherContact]:
		return [*self.class_teachers, *self.subject_teachers]

	def to_dict(self) -> Dict[str, Any]:
		return {
			"class": {"id": self.class_id, "name": self.class_name},
			"classTeachers": [contact.to_dict() for contact in self.class_teachers],
			"subjectTeachers": [contact.to_dict() for contact in self.subject_teachers],
			"message": self.message,
		}


@dataclass
class StudentDashboard:
	"""The reconciled view model for a single student."""
	profile: StudentProfile
	generated_at: datetime
	subjects: List[SubjectRecord] = field(default_factory=list)
	attendance: AttendanceSummary = field(default_factory=AttendanceSummary)
	timetable: List[TimetableSlot] = field(default_factory=list)
	assignments: List[IdentifiedRecord] = field(default_factory=list)
	assignment_states: Dict[str, AssignmentState] = field(default_factory=dict)
	insights: AssignmentInsight = field(default_factory=AssignmentInsight)
	library_loans: List[IdentifiedRecord] = field(default_factory=list)
	upcoming_events: List[UpcomingEvent] = field(default_factory=list)
	teachers: TeacherDirectory = field(default_factory=TeacherDirectory)
	sections: Dict[str, str] = field(default_factory=dict)

	@property
	def missing_sections(self) -> List[str]:
		"""Sections whose source failed and were rendered from defaults."""
		return [name for name, status in self.sections.items() if status != SECTION_STATUS_FRESH]

	def to_dict(self) -> Dict[str, Any]:
		return {
			"profile": self.profile.to_dict(),
			"generatedAt": self.generated_at.isoformat(),
			"subjects": [subject.to_dict() for subject in self.subjects],
			"attendance": self.attendance.to_dict(),
			"timetable": [slot.to_dict() for slot in self.timetable],
			"assignments": [assignment.to_dict() for assignment in self.assignments],
			"assignmentStates": {key: state.to_dict() for key, state in self.assignment_states.items()},
			"insights": self.insights.to_dict(),
			"libraryLoans": [loan.to_dict() for loan in self.library_loans],
			"upcomingEvents": [event.to_dict() for event in self.upcoming_events],
			"teachers": self.teachers.to_dict(),
			"sections": dict(self.sections),
		}
