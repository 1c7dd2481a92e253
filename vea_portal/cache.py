"""Explicit memoization table for derived dashboard state."""

import hashlib
import json
import logging
from collections import OrderedDict
from threading import Lock
from typing import Any, Callable, Dict, Hashable, Iterable, Mapping, Optional

_LOGGER = logging.getLogger(__name__)


class MemoCache:
	"""Thread-safe LRU table keyed by a fingerprint of the input collection."""

	def __init__(self, max_size: int = 64) -> None:
		if max_size < 1:
			raise ValueError("max_size must be at least 1")
		self._entries: "OrderedDict[Hashable, Any]" = OrderedDict()
		self._max_size = max_size
		self._lock = Lock()
		self.hits = 0
		self.misses = 0

	@property
	def max_size(self) -> int:
		return self._max_size

	def __len__(self) -> int:
		with self._lock:
			return len(self._entries)

	def __contains__(self, key: Hashable) -> bool:
		with self._lock:
			return key in self._entries

	def get(self, key: Hashable) -> Optional[Any]:
		"""Return a cached value, marking it most recently used."""
		with self._lock:
			if key not in self._entries:
				return None
			self._entries.move_to_end(key)
			return self._entries[key]

	def put(self, key: Hashable, value: Any) -> None:
		"""Store a value, evicting the least recently used entry when full."""
		with self._lock:
			self._entries[key] = value
			self._entries.move_to_end(key)
			while len(self._entries) > self._max_size:
				evicted, _ = self._entries.popitem(last=False)
				_LOGGER.debug(f"Evicted memo entry {evicted!r}")

	def get_or_compute(self, key: Hashable, factory: Callable[[], Any]) -> Any:
		"""Return the cached value for ``key``, computing and storing it on a miss."""
		with self._lock:
			if key in self._entries:
				self._entries.move_to_end(key)
				self.hits += 1
				return self._entries[key]
			self.misses += 1

		# Computed outside the lock; concurrent misses for one key compute the same value
		value = factory()
		self.put(key, value)
		return value

	def invalidate(self, key: Optional[Hashable] = None) -> None:
		"""Drop one entry, or every entry when ``key`` is None."""
		with self._lock:
			if key is None:
				self._entries.clear()
			else:
				self._entries.pop(key, None)


def fingerprint(records: Iterable[Mapping[str, Any]]) -> str:
	"""Return a stable content hash for a collection of mappings.

	Two collections with equal items in equal order share a fingerprint,
	so any change to the underlying collection selects a new cache entry.
	"""
	digest = hashlib.sha1()
	for record in records:
		payload: Dict[str, Any] = dict(record)
		digest.update(json.dumps(payload, sort_keys=True, default=str).encode("utf-8"))
		digest.update(b"\x1e")
	return digest.hexdigest()
