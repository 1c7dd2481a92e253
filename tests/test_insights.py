"""Unit tests for assignment insights and their memoization."""

from vea_portal.cache import MemoCache
from vea_portal.insights import InsightCalculator, calculate_assignment_insights
from vea_portal.models import AssignmentInsight


def test_empty_collection():
	assert calculate_assignment_insights([]) == AssignmentInsight(0, 0, 0, 0, 0, None)
	assert calculate_assignment_insights(None) == AssignmentInsight()


def test_counts_and_rates():
	assignments = [
		{"id": "a1", "status": "submitted"},
		{"id": "a2", "status": "graded", "score": 78},
		{"id": "a3", "status": "graded", "score": 91.5},
		{"id": "a4"},
		{"id": "a5", "status": "unknown", "score": "85"},
		{"id": "a6", "status": "sent", "score": True},
	]
	insight = calculate_assignment_insights(assignments)
	assert insight.total == 6
	assert insight.submitted == 1
	assert insight.graded == 2
	assert insight.pending == 4
	assert insight.completion_rate == 50
	assert insight.average_score == 84.75


def test_average_is_rounded_to_two_places():
	assignments = [{"id": "a", "score": 1}, {"id": "b", "score": 2}, {"id": "c", "score": 2}]
	assert calculate_assignment_insights(assignments).average_score == 1.67


def test_completion_rate_rounds_half_up():
	assignments = [{"id": "a", "status": "submitted"}] + [{"id": f"b{i}"} for i in range(7)]
	assert calculate_assignment_insights(assignments).completion_rate == 13


def test_to_dict_uses_camel_case():
	data = calculate_assignment_insights([{"id": "a", "status": "graded", "score": 70}]).to_dict()
	assert data["completionRate"] == 100
	assert data["averageScore"] == 70


def test_calculator_reuses_cached_result():
	calculator = InsightCalculator()
	assignments = [{"id": "a1", "status": "graded", "score": 80}]

	first = calculator.calculate(assignments)
	second = calculator.calculate([dict(item) for item in assignments])

	assert first is second
	assert calculator.cache.hits == 1
	assert calculator.cache.misses == 1


def test_calculator_ignores_fabricated_ids():
	calculator = InsightCalculator()
	calculator.calculate([{"title": "untagged", "status": "sent", "id": "assignment_1a2b3c4d"}])
	calculator.calculate([{"title": "untagged", "status": "sent", "id": "assignment_9f8e7d6c"}])
	assert calculator.cache.hits == 1


def test_calculator_recomputes_when_collection_changes():
	calculator = InsightCalculator()
	first = calculator.calculate([{"id": "a1", "status": "sent"}])
	second = calculator.calculate([{"id": "a1", "status": "submitted"}])
	assert first.completion_rate == 0
	assert second.completion_rate == 100
	assert calculator.cache.misses == 2


def test_calculator_invalidate():
	cache = MemoCache(max_size=4)
	calculator = InsightCalculator(cache=cache)
	calculator.calculate([{"id": "a1"}])
	assert len(cache) == 1
	calculator.invalidate()
	assert len(cache) == 0


def test_only_numeric_scores_are_averaged():
	assignments = [
		{"id": "a", "score": 60},
		{"id": "b", "score": "100"},
		{"id": "c", "score": float("nan")},
		{"id": "d", "score": None},
		{"id": "e", "score": False},
	]
	assert calculate_assignment_insights(assignments).average_score == 60
	assert calculate_assignment_insights([{"id": "a", "score": "85"}]).average_score is None
