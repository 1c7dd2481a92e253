"""Normalization of loosely shaped payload items into identified records."""

import logging
import uuid
from collections.abc import Mapping
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set

from .const import RECORD_ID_KEYS
from .utils import coerce_string

_LOGGER = logging.getLogger(__name__)


class IdentifiedRecord(Mapping):
	"""Read-only mapping guaranteed to expose a non-empty ``id``.

	The source item is copied on creation; later stages derive new records
	rather than editing this one.
	"""

	__slots__ = ("_data",)

	def __init__(self, data: Mapping[str, Any], record_id: str) -> None:
		if not record_id:
			raise ValueError("IdentifiedRecord requires a non-empty id")
		payload = dict(data)
		payload["id"] = record_id
		self._data = payload

	@property
	def id(self) -> str:
		return self._data["id"]

	def __getitem__(self, key: str) -> Any:
		return self._data[key]

	def __iter__(self) -> Iterator[str]:
		return iter(self._data)

	def __len__(self) -> int:
		return len(self._data)

	def __repr__(self) -> str:
		return f"IdentifiedRecord({self._data!r})"

	def with_id(self, record_id: str) -> "IdentifiedRecord":
		"""Return a copy of this record under a different id."""
		return IdentifiedRecord(self._data, record_id)

	def to_dict(self) -> Dict[str, Any]:
		return dict(self._data)


def resolve_record_id(value: Mapping[str, Any]) -> str:
	"""Return the first stable identifier carried by ``value``, or an empty string."""
	for key in RECORD_ID_KEYS:
		candidate = coerce_string(value.get(key))
		if candidate:
			return candidate
	return ""


def generate_record_id(prefix: str) -> str:
	return f"{prefix}_{uuid.uuid4().hex[:8]}"


def to_identified_record(value: Any, prefix: str = "record") -> Optional[IdentifiedRecord]:
	"""Convert a single payload item, returning None when it is not object-shaped."""
	if isinstance(value, IdentifiedRecord):
		return value
	if not isinstance(value, Mapping):
		return None
	record_id = resolve_record_id(value) or generate_record_id(prefix)
	return IdentifiedRecord(value, record_id)


def normalize_records(value: Any, prefix: str = "record") -> List[IdentifiedRecord]:
	"""Normalize a collection of unknown shape into identified records.

	Args:
		value: Raw payload, ideally a list of objects
		prefix: Prefix for fabricated identifiers

	Returns:
		List of IdentifiedRecord objects with ids unique within the list.
		Non-list input yields an empty list; non-object entries are dropped.
	"""
	if not isinstance(value, (list, tuple)):
		if value is not None:
			_LOGGER.debug(f"Expected a list of {prefix} items, got {type(value).__name__}")
		return []

	records: List[IdentifiedRecord] = []
	seen: Set[str] = set()
	dropped = 0

	for item in value:
		record = to_identified_record(item, prefix)
		if record is None:
			dropped += 1
			continue
		if record.id in seen:
			record = record.with_id(_disambiguate(record.id, seen))
		seen.add(record.id)
		records.append(record)

	if dropped:
		_LOGGER.debug(f"Dropped {dropped} malformed {prefix} entries")
	return records


def _disambiguate(record_id: str, seen: Set[str]) -> str:
	suffix = 2
	while f"{record_id}-{suffix}" in seen:
		suffix += 1
	return f"{record_id}-{suffix}"


def unwrap_collection(payload: Any, keys: Iterable[str]) -> Any:
	"""Pull a list out of a response envelope such as ``{"students": [...]}``.

	Lists are returned unchanged; envelopes without a list under any of
	``keys`` return None.
	"""
	if isinstance(payload, list):
		return payload
	if isinstance(payload, Mapping):
		for key in keys:
			candidate = payload.get(key)
			if isinstance(candidate, list):
				return candidate
	return None
