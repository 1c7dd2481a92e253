"""Assignment performance aggregation."""

import logging
import math
from collections.abc import Mapping
from typing import Any, List, Optional

from .assignments import assignment_status
from .cache import MemoCache, fingerprint
from .const import (
	ASSIGNMENT_STATUS_GRADED,
	ASSIGNMENT_STATUS_SUBMITTED,
	DEFAULT_INSIGHT_CACHE_SIZE,
)
from .models import AssignmentInsight
from .records import IdentifiedRecord, normalize_records
from .utils import round_half_up, round_to

_LOGGER = logging.getLogger(__name__)


def calculate_assignment_insights(assignments: Any) -> AssignmentInsight:
	"""Aggregate completion and scores over the visible assignments.

	Args:
		assignments: Filtered assignment records

	Returns:
		AssignmentInsight; average_score is None when no assignment has a score
	"""
	records = normalize_records(assignments, "assignment")
	total = len(records)
	submitted = 0
	graded = 0
	scores: List[float] = []

	for record in records:
		status = assignment_status(record)
		if status == ASSIGNMENT_STATUS_SUBMITTED:
			submitted += 1
		elif status == ASSIGNMENT_STATUS_GRADED:
			graded += 1

		score = _numeric_score(record.get("score"))
		if score is not None:
			scores.append(score)

	completion_rate = round_half_up((submitted + graded) / total * 100) if total else 0
	average_score: Optional[float] = round_to(sum(scores) / len(scores), 2) if scores else None
	_LOGGER.debug(f"Insights over {total} assignments: {submitted} submitted, {graded} graded, {len(scores)} scored")

	return AssignmentInsight(
		total=total,
		submitted=submitted,
		graded=graded,
		pending=max(total - graded, 0),
		completion_rate=completion_rate,
		average_score=average_score,
	)


def _numeric_score(value: Any) -> Optional[float]:
	# Only JSON numbers count; "85" and booleans are not scores
	if isinstance(value, bool) or not isinstance(value, (int, float)):
		return None
	return float(value) if math.isfinite(value) else None


class InsightCalculator:
	"""Memoized insight calculation keyed by the assignment collection's content."""

	def __init__(self, cache: Optional[MemoCache] = None, max_size: int = DEFAULT_INSIGHT_CACHE_SIZE) -> None:
		self._cache = cache if cache is not None else MemoCache(max_size=max_size)

	@property
	def cache(self) -> MemoCache:
		return self._cache

	def calculate(self, assignments: List[IdentifiedRecord]) -> AssignmentInsight:
		"""Return insights, recomputing only when the collection changed."""
		if not isinstance(assignments, (list, tuple)):
			return calculate_assignment_insights(assignments)
		# Insights never read ids, and fabricated ones change on every normalization
		key = fingerprint(
			{name: value for name, value in item.items() if name != "id"}
			for item in assignments
			if isinstance(item, Mapping)
		)
		return self._cache.get_or_compute(key, lambda: calculate_assignment_insights(assignments))

	def invalidate(self) -> None:
		self._cache.invalidate()
