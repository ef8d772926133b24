"""
Unit tests for the Statistics Engine.
"""

import pytest
from src.agents.statistics import StatisticsEngine, StatisticsFailure
from src.models.answer import AnswerCandidate, ParsedAnswers
from src.models.statistics import DiversityMetrics, StatisticsRecord, TopAnswerEntry


def make_answers(*answers, timestamp=None):
    return [
        AnswerCandidate(username=f"user{i}", answer=a, timestamp=timestamp)
        for i, a in enumerate(answers)
    ]


def make_parsed(*answers):
    candidates = make_answers(*answers)
    return ParsedAnswers(story_id="test-story", answers=candidates, count=len(candidates))


@pytest.fixture
def engine():
    return StatisticsEngine()


def test_distribution_groups_canonical_answers(engine):
    """Case and punctuation variants count as one answer."""
    record = engine.compute_statistics(make_parsed("Blue", "blue!", "BLUE", "Red"))

    assert record.story_id == "test-story"
    assert record.total_answers == 4
    assert record.unique_answers == 2
    assert record.answer_distribution == {"blue": 3, "red": 1}
    assert record.top_answers[0] == TopAnswerEntry(answer="blue", count=3, percentage=75.0)
    assert record.top_answers[1] == TopAnswerEntry(answer="red", count=1, percentage=25.0)


def test_distribution_keeps_first_seen_order(engine):
    record = engine.compute_statistics(make_parsed("Red", "Blue", "Green", "Blue"))

    assert list(record.answer_distribution) == ["red", "blue", "green"]


def test_empty_answers_give_zeroed_record(engine):
    record = engine.compute_statistics(make_parsed())

    assert record.total_answers == 0
    assert record.unique_answers == 0
    assert record.answer_distribution == {}
    assert record.top_answers == []
    assert record.created_at == record.updated_at != ""


def test_single_answer(engine):
    record = engine.compute_statistics(make_parsed("Yes"))

    assert record.top_answers == [TopAnswerEntry(answer="yes", count=1, percentage=100.0)]


def test_top_answers_ties_keep_insertion_order(engine):
    """Equal counts are ranked in the order the answers were first seen."""
    record = engine.compute_statistics(make_parsed("b", "a", "a", "b", "c"))

    assert [t.answer for t in record.top_answers] == ["b", "a", "c"]


def test_top_answers_limited_to_ten(engine):
    answers = [f"answer {i}" for i in range(12)] + ["answer 3"]
    record = engine.compute_statistics(make_parsed(*answers))

    assert len(record.top_answers) == 10
    assert record.top_answers[0].answer == "answer 3"
    assert sum(t.count for t in record.top_answers) <= record.total_answers
    assert record.unique_answers <= record.total_answers


def test_percentages_rounded_to_two_places(engine):
    record = engine.compute_statistics(make_parsed("x", "y", "y"))

    assert record.top_answers[0].percentage == 66.67
    assert record.top_answers[1].percentage == 33.33


def test_compute_statistics_is_idempotent(engine):
    parsed = make_parsed("Blue", "red", "RED!", "green", "Blue")

    first = engine.compute_statistics(parsed)
    second = engine.compute_statistics(parsed)

    assert first.answer_distribution == second.answer_distribution
    assert first.top_answers == second.top_answers


def test_malformed_input_raises_statistics_failure(engine):
    with pytest.raises(StatisticsFailure):
        engine.compute_statistics(None)

    broken = ParsedAnswers(story_id="broken", answers=[None], count=1)
    with pytest.raises(StatisticsFailure) as exc_info:
        engine.compute_statistics(broken)

    assert exc_info.value.story_id == "broken"


def test_diversity_metrics(engine):
    metrics = engine.diversity_metrics(make_answers("Ответ 1", "Ответ 2", "Ответ 1"))

    assert metrics.uniqueness_ratio == 0.67  # 2 unique / 3 total
    assert metrics.average_length == 7
    assert metrics.length_variance == 0


def test_diversity_metrics_use_canonical_lengths(engine):
    """'a!' is measured as 'a'; averages round half up."""
    metrics = engine.diversity_metrics(make_answers("a!", "ab"))

    assert metrics.uniqueness_ratio == 1.0
    assert metrics.average_length == 2  # 1.5 rounds up
    assert metrics.length_variance == 0  # 0.25


def test_diversity_metrics_variance(engine):
    metrics = engine.diversity_metrics(make_answers("ab", "abcdef"))

    assert metrics.average_length == 4
    assert metrics.length_variance == 4


def test_diversity_metrics_empty(engine):
    assert engine.diversity_metrics([]) == DiversityMetrics(0.0, 0, 0)


def test_analyze_trends(engine):
    answers = [
        AnswerCandidate("user1", "Короткий", "2024-01-01T10:00:00Z"),
        AnswerCandidate("user2", "Средний ответ", "2024-01-01T10:30:00Z"),
        AnswerCandidate("user3", "Очень длинный ответ пользователя", "2024-01-01T11:00:00Z"),
    ]

    result = engine.analyze_trends(answers)

    assert result.most_popular_time == "10:00-11:00"
    assert result.answer_length_average == 18  # (8 + 13 + 32) / 3
    assert set(result.sentiment_distribution) == {"positive", "negative", "neutral"}


def test_most_popular_time_tie_goes_to_first_slot(engine):
    answers = [
        AnswerCandidate("user1", "a", "2024-01-01T23:15:00"),
        AnswerCandidate("user2", "b", "2024-01-01T09:00:00"),
    ]

    assert engine.analyze_trends(answers).most_popular_time == "23:00-24:00"


def test_most_popular_time_ignores_missing_and_invalid_timestamps(engine):
    answers = [
        AnswerCandidate("user1", "a", None),
        AnswerCandidate("user2", "b", "not-a-date"),
        AnswerCandidate("user3", "c", "2024-01-01T08:45:00"),
    ]

    assert engine.analyze_trends(answers).most_popular_time == "8:00-9:00"
    assert engine.analyze_trends(make_answers("a", "b")).most_popular_time is None


def test_analyze_trends_empty(engine):
    result = engine.analyze_trends([])

    assert result.answer_length_average == 0
    assert result.most_popular_time is None
    assert result.sentiment_distribution == {"positive": 0, "negative": 0, "neutral": 0}


def test_sentiment_distribution(engine):
    answers = make_answers("отлично хорошо", "плохо ужасно", "нормально", "good but bad", "I HATE it")

    result = engine.analyze_trends(answers).sentiment_distribution

    # "good but bad" counts as positive: positive words are checked first
    assert result == {"positive": 2, "negative": 2, "neutral": 1}


def test_create_summary(engine):
    record = engine.compute_statistics(make_parsed("Blue", "blue!", "BLUE", "Red"))

    summary = engine.create_summary(record)

    assert summary == 'Processed 4 answers. Unique: 2. Popular answer: "blue" (75%)'


def test_create_summary_fractional_percentage(engine):
    record = StatisticsRecord(
        story_id="s",
        total_answers=3,
        unique_answers=2,
        top_answers=[TopAnswerEntry("синий", 2, 66.67)]
    )

    assert '"синий" (66.67%)' in engine.create_summary(record)


def test_create_summary_without_top_answers(engine):
    summary = engine.create_summary(StatisticsRecord(story_id="s"))

    assert summary == "Processed 0 answers. Unique: 0. No popular answer data"


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
