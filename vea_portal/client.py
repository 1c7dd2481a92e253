"""Client for the school portal REST endpoints."""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp

from .config import PortalConfig
from .const import (
	DEFAULT_TIMEOUT_SECONDS,
	ENDPOINT_ASSIGNMENTS,
	ENDPOINT_ATTENDANCE,
	ENDPOINT_GRADES,
	ENDPOINT_LIBRARY_BORROWED,
	ENDPOINT_SCHOOL_CALENDAR,
	ENDPOINT_STUDENT_PROFILE,
	ENDPOINT_STUDENT_TEACHERS,
	ENDPOINT_STUDENTS,
	ENDPOINT_TIMETABLE,
)
from .exceptions import PortalAPIError, PortalAuthError, PortalConnectionError, PortalDataError
from .records import unwrap_collection

_LOGGER = logging.getLogger(__name__)

DEFAULT_HEADERS = {
	"Accept": "application/json, text/plain, */*",
	"User-Agent": "vea-portal-dashboard/1.0",
}


class PortalClient:
	"""Client for fetching raw dashboard payloads from the portal.

	Every getter returns the decoded JSON (unwrapped from its envelope where the
	endpoint uses one). Nothing is retried; callers decide how to degrade.
	"""

	def __init__(
		self,
		base_url: str,
		token: Optional[str] = None,
		session: Optional[aiohttp.ClientSession] = None,
		timeout: float = DEFAULT_TIMEOUT_SECONDS,
	):
		"""Initialise the portal client.

		Args:
			base_url: Portal origin, e.g. ``https://portal.example.edu``
			token: Optional bearer token for the session
			session: Optional aiohttp session. If None, a new one will be created.
			timeout: Total request timeout in seconds
		"""
		self.base_url = base_url.rstrip("/")
		self._token = token
		self._session = session
		self._own_session = session is None
		self._timeout = aiohttp.ClientTimeout(total=timeout)

	@classmethod
	def from_config(cls, config: PortalConfig, session: Optional[aiohttp.ClientSession] = None) -> "PortalClient":
		return cls(config.base_url, token=config.api_token, session=session, timeout=config.timeout)

	async def __aenter__(self):
		"""Async context manager entry."""
		if self._own_session:
			self._session = aiohttp.ClientSession(timeout=self._timeout)
		return self

	async def __aexit__(self, exc_type, exc_val, exc_tb):
		"""Async context manager exit."""
		if self._own_session and self._session:
			await self._session.close()
			self._session = None

	def _headers(self) -> Dict[str, str]:
		headers = DEFAULT_HEADERS.copy()
		if self._token:
			headers["Authorization"] = f"Bearer {self._token}"
		return headers

	async def _get_json(self, path: str, source: str, params: Optional[Dict[str, str]] = None) -> Any:
		"""Fetch ``path`` and decode its JSON body.

		Args:
			path: Endpoint path relative to the base URL
			source: Human readable source name used in errors and logs
			params: Optional query parameters

		Returns:
			Decoded JSON payload

		Raises:
			PortalAuthError: Session rejected, or an HTML page served instead of JSON
			PortalAPIError: Any other non-200 response
			PortalConnectionError: Transport failure or timeout
			PortalDataError: Body is not valid JSON
		"""
		if self._session is None:
			raise PortalAPIError("Client not properly initialised")

		url = f"{self.base_url}{path}"
		query = {key: value for key, value in (params or {}).items() if value}

		try:
			async with self._session.get(url, headers=self._headers(), params=query) as resp:
				if resp.status in (401, 403):
					raise PortalAuthError(f"Session rejected for {source}: HTTP {resp.status}")
				if resp.status != 200:
					raise PortalAPIError(f"Failed to get {source}: HTTP {resp.status}")

				# Check content type before attempting JSON decode
				content_type = resp.headers.get("content-type", "").lower()
				if "text/html" in content_type:
					_LOGGER.warning(f"Got HTML response instead of JSON for {source} - session may have expired")
					raise PortalAuthError("Session expired - received HTML instead of JSON")

				try:
					data = await resp.json()
				except aiohttp.ContentTypeError as e:
					# Content-type header may be wrong while the body is still JSON
					text = await resp.text()
					_LOGGER.warning(f"Content-type error for {source}, attempting manual JSON parse: {e}")
					try:
						data = json.loads(text)
					except json.JSONDecodeError as decode_error:
						_LOGGER.error(f"Failed to parse {source} response as JSON: {text[:200]}...")
						raise PortalDataError(f"Invalid JSON response from {source} endpoint") from decode_error

		except aiohttp.ClientError as e:
			raise PortalConnectionError(f"Connection error while fetching {source}: {e}") from e
		except asyncio.TimeoutError as e:
			raise PortalConnectionError(f"Timeout while fetching {source}") from e
		except json.JSONDecodeError as e:
			raise PortalDataError(f"Failed to parse {source} data: {e}") from e

		_LOGGER.debug(f"Fetched {source} from {path}")
		return data

	async def get_students(self) -> Any:
		"""Get the student roster."""
		data = await self._get_json(ENDPOINT_STUDENTS, "students")
		return unwrap_collection(data, ("students", "data", "items"))

	async def get_student_profile(self, student_id: str) -> Any:
		"""Get the profile of a single student."""
		data = await self._get_json(ENDPOINT_STUDENT_PROFILE.format(student_id=student_id), "student profile")
		if isinstance(data, dict) and isinstance(data.get("student"), dict):
			return data["student"]
		return data

	async def get_academic_records(self, student_id: str) -> Any:
		"""Get the per-subject academic records of a student."""
		data = await self._get_json(ENDPOINT_GRADES, "academic records", {"studentId": student_id})
		return unwrap_collection(data, ("grades", "subjects", "records", "data"))

	async def get_attendance(self, student_id: str) -> Any:
		"""Get the attendance totals of a student."""
		data = await self._get_json(ENDPOINT_ATTENDANCE, "attendance", {"studentId": student_id})
		if isinstance(data, dict) and isinstance(data.get("attendance"), dict):
			return data["attendance"]
		return data

	async def get_timetable(self, class_name: str) -> Any:
		"""Get the weekly timetable of a class."""
		data = await self._get_json(ENDPOINT_TIMETABLE, "timetable", {"className": class_name})
		return unwrap_collection(data, ("timetable", "slots", "data"))

	async def get_assignments(self, student_id: str) -> Any:
		"""Get the assignments sent to a student."""
		data = await self._get_json(ENDPOINT_ASSIGNMENTS, "assignments", {"studentId": student_id})
		return unwrap_collection(data, ("assignments", "data", "items"))

	async def get_library_loans(self, student_id: str) -> Any:
		"""Get the books currently borrowed by a student."""
		data = await self._get_json(ENDPOINT_LIBRARY_BORROWED, "library loans", {"studentId": student_id})
		return unwrap_collection(data, ("books", "borrowed", "loans", "data"))

	async def get_teacher_assignments(self, student_id: str, class_name: Optional[str] = None) -> Any:
		"""Get the class and subject teachers linked to a student."""
		path = ENDPOINT_STUDENT_TEACHERS.format(student_id=student_id)
		return await self._get_json(path, "teacher assignments", {"className": class_name or ""})

	async def get_published_calendar(self) -> Any:
		"""Get the events of the published school calendar."""
		data = await self._get_json(ENDPOINT_SCHOOL_CALENDAR, "school calendar", {"status": "published"})
		if isinstance(data, dict) and isinstance(data.get("calendar"), dict):
			data = data["calendar"]
		return unwrap_collection(data, ("events", "data", "items"))
