#!/usr/bin/env python3
"""
VEA Portal Dashboard Debug Script

This script builds the dashboard of one student against a live portal and
prints every reconciled section, together with the raw payload sizes.

Usage:
    python3 debug_dashboard.py STUDENT_ID [NAME] [EMAIL] [CLASS] [ADMISSION_NUMBER]

Settings are read from the environment or a .env file:
    PORTAL_BASE_URL=https://portal.example.edu
    PORTAL_API_TOKEN=your_session_token
"""

import asyncio
import json
import logging
import sys

from vea_portal.client import PortalClient
from vea_portal.config import load_config
from vea_portal.dashboard import DashboardBuilder, evaluate_dashboard_completeness
from vea_portal.exceptions import PortalConfigError
from vea_portal.models import StudentProfile

# Set up detailed logging
logging.basicConfig(
	level=logging.DEBUG,
	format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def fallback_profile(argv):
	"""Build the caller-side profile from the command line."""
	values = list(argv) + [""] * 5
	student_id = values[0]
	return StudentProfile(
		id=student_id,
		name=values[1] or "Student",
		email=values[2] or f"{student_id}@students.local",
		class_name=values[3] or "Unassigned",
		admission_number=values[4] or student_id,
	)


async def debug_dashboard(student: StudentProfile):
	"""Build and print the dashboard of ``student``."""
	config = load_config()
	print(f"🔍 Building dashboard for {student.id} from {config.base_url}")
	print("=" * 50)

	async with PortalClient.from_config(config) as client:
		builder = DashboardBuilder.from_config(client, config)
		dashboard = await builder.async_build(student)

	print(f"\n👤 Profile: {dashboard.profile.name} ({dashboard.profile.class_name})")
	print(f"📊 Attendance: {dashboard.attendance}")
	print(f"📚 Subjects: {len(dashboard.subjects)}")
	for subject in dashboard.subjects:
		print(f"   - {subject.subject}: {subject.score} {subject.grade}")
	print(f"🗓️ Timetable slots: {len(dashboard.timetable)}")
	for slot in dashboard.timetable[:10]:
		print(f"   - {slot}")
	print(f"📝 Visible assignments: {len(dashboard.assignments)}")
	for assignment in dashboard.assignments:
		state = dashboard.assignment_states[assignment.id]
		flag = " (overdue)" if state.overdue else ""
		print(f"   - {assignment.get('title', assignment.id)}: {state.status}{flag}")
	print(f"📈 Insights: {json.dumps(dashboard.insights.to_dict())}")
	print(f"📖 Library loans: {len(dashboard.library_loans)}")
	print(f"⏭️ Upcoming events: {len(dashboard.upcoming_events)}")
	for event in dashboard.upcoming_events:
		print(f"   - {event}")

	is_complete, missing = evaluate_dashboard_completeness(dashboard.sections)
	if is_complete:
		print("\n✅ All sections loaded")
	else:
		print(f"\n⚠️ Missing sections: {', '.join(missing)}")
	return is_complete


def main():
	if len(sys.argv) < 2:
		print(__doc__)
		sys.exit(1)

	try:
		complete = asyncio.run(debug_dashboard(fallback_profile(sys.argv[1:])))
	except PortalConfigError as e:
		print(f"❌ Configuration error: {e}")
		sys.exit(1)

	sys.exit(0 if complete else 2)


if __name__ == "__main__":
	main()
