"""Constants for the VEA portal dashboard."""

# Configuration
CONF_BASE_URL = "PORTAL_BASE_URL"
CONF_API_TOKEN = "PORTAL_API_TOKEN"
CONF_TIMEOUT = "PORTAL_TIMEOUT"
CONF_INSIGHT_CACHE_SIZE = "PORTAL_INSIGHT_CACHE_SIZE"

# Default values
DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_INSIGHT_CACHE_SIZE = 64

# Endpoints
ENDPOINT_STUDENTS = "/api/students"
ENDPOINT_STUDENT_PROFILE = "/api/students/{student_id}"
ENDPOINT_STUDENT_TEACHERS = "/api/students/{student_id}/teachers"
ENDPOINT_GRADES = "/api/grades"
ENDPOINT_ATTENDANCE = "/api/attendance"
ENDPOINT_TIMETABLE = "/api/timetable"
ENDPOINT_ASSIGNMENTS = "/api/assignments"
ENDPOINT_LIBRARY_BORROWED = "/api/library/borrowed"
ENDPOINT_SCHOOL_CALENDAR = "/api/school-calendar"

# Identifier resolution priority, first non-empty wins
RECORD_ID_KEYS = ("id", "ID", "_id", "reference", "slug", "email", "name")

# Student profile aliases
PROFILE_FIELD_ALIASES = {
	"id": ("id", "studentId", "student_id", "studentID", "_id"),
	"name": ("name", "fullName", "full_name", "studentName"),
	"email": ("email", "emailAddress", "email_address"),
	"class_name": ("class", "className", "class_name", "classLevel", "section", "assignedClassName"),
	"admission_number": ("admissionNumber", "admission_number", "admissionNo", "admission_no", "admission"),
}

# Attendance aliases
ATTENDANCE_PRESENT_KEYS = ("present", "presentDays", "present_days", "daysPresent", "attended")
ATTENDANCE_ABSENT_KEYS = ("absent", "absentDays", "absent_days", "daysAbsent")
ATTENDANCE_TOTAL_KEYS = ("total", "totalDays", "total_days", "daysTotal", "totalSessions")
ATTENDANCE_PERCENTAGE_KEYS = ("percentage", "attendancePercentage", "attendanceRate", "rate")

# Teacher identification
SUBJECT_TEACHER_KEYS = ("teacher", "teacherName", "teacher_name", "subjectTeacher", "instructor")
ASSIGNMENT_TEACHER_NAME_KEYS = ("teacherName", "teacher_name", "teacher", "assignedBy", "createdByName")
ASSIGNMENT_TEACHER_ID_KEYS = ("teacherId", "teacher_id", "createdBy")
ASSIGNMENT_CLASS_KEYS = ("className", "class_name", "class", "classId", "class_id")
TEACHER_HONORIFICS = frozenset({
	"mr", "mrs", "ms", "miss", "mx", "dr", "prof", "sir", "madam", "mallam", "master",
})

# Assignment fields
ASSIGNMENT_TITLE_KEYS = ("title", "name", "assignmentTitle")
ASSIGNMENT_DUE_KEYS = ("dueDate", "due_date", "deadline", "dueAt", "due")
ASSIGNMENT_STATUS_KEYS = ("status", "submissionStatus")
ASSIGNMENT_SUBJECT_KEYS = ("subject", "subjectName", "subject_name")

ASSIGNMENT_STATUS_SENT = "sent"
ASSIGNMENT_STATUS_SUBMITTED = "submitted"
ASSIGNMENT_STATUS_GRADED = "graded"

# Calendar fields
CALENDAR_START_KEYS = ("startDate", "start_date", "start", "date")
CALENDAR_END_KEYS = ("endDate", "end_date", "end")
CALENDAR_VISIBLE_AUDIENCES = frozenset({"all", "students"})

EVENT_SOURCE_CALENDAR = "calendar"
EVENT_SOURCE_ASSIGNMENT = "assignment"

# Academic records
SUBJECT_NAME_KEYS = ("subject", "subjectName", "name", "title", "label", "text", "value")
SUBJECT_SCORE_KEYS = ("totalPercentage", "percentage", "total", "totalScore", "grandTotal", "score")
SUBJECT_GRADE_KEYS = ("grade", "letterGrade", "gradeLetter")
CONTINUOUS_ASSESSMENT_KEYS = {
	"ca1": ("firstCA", "ca1"),
	"ca2": ("secondCA", "ca2"),
	"assignment": ("noteAssignment", "assignment"),
	"exam": ("exam",),
}
GRADE_BOUNDARIES = (
	(90, "A"),
	(80, "B"),
	(70, "C"),
	(60, "D"),
)
FAILING_GRADE = "F"

# Timetable
DAY_ORDER = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
DEFAULT_PERIOD_START = "08:00"
DEFAULT_PERIOD_END = "08:40"

# Dashboard sections
SECTION_PROFILE = "profile"
SECTION_SUBJECTS = "subjects"
SECTION_ATTENDANCE = "attendance"
SECTION_TIMETABLE = "timetable"
SECTION_ASSIGNMENTS = "assignments"
SECTION_LIBRARY = "library"
SECTION_TEACHERS = "teachers"
SECTION_CALENDAR = "calendar"

SECTION_STATUS_FRESH = "fresh"
SECTION_STATUS_MISSING = "missing"
