"""
Statistics Engine.

Aggregates extracted answers into per-story distributions, rankings and
derived metrics (diversity, time-of-day trends, sentiment).
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

import config.settings as settings
from src.models.answer import AnswerCandidate, ParsedAnswers
from src.models.statistics import (
    DiversityMetrics,
    StatisticsRecord,
    TopAnswerEntry,
    TrendReport,
)
from src.utils.text import normalize_answer, round_half_up

logger = logging.getLogger(__name__)


class StatisticsFailure(Exception):
    """Unexpected fault while computing statistics for one story."""

    def __init__(self, story_id: str, message: str):
        super().__init__(f"Failed to calculate statistics for story {story_id}: {message}")
        self.story_id = story_id


class StatisticsEngine:
    """
    Computes statistics from extraction results.

    All public methods are pure: they read their arguments and return new
    objects, so one engine can serve many stories concurrently.
    """

    def __init__(
        self,
        top_answers_limit: int = settings.TOP_ANSWERS_LIMIT,
        positive_words: Iterable[str] = settings.POSITIVE_WORDS,
        negative_words: Iterable[str] = settings.NEGATIVE_WORDS
    ):
        """
        Initialize statistics engine.

        Args:
            top_answers_limit: Maximum number of entries in the top-answers ranking
            positive_words: Substrings marking an answer as positive
            negative_words: Substrings marking an answer as negative
        """
        self.top_answers_limit = top_answers_limit
        self.positive_words = tuple(w.lower() for w in positive_words)
        self.negative_words = tuple(w.lower() for w in negative_words)

    def compute_statistics(self, parsed_answers: ParsedAnswers) -> StatisticsRecord:
        """
        Calculate aggregated statistics for a story.

        Args:
            parsed_answers: Extraction result

        Returns:
            StatisticsRecord (zeroed when there are no answers)

        Raises:
            StatisticsFailure: If the input is malformed
        """
        story_id = getattr(parsed_answers, "story_id", "<unknown>")

        try:
            answers = parsed_answers.answers
            total = len(answers)
            distribution = self.answer_distribution(answers)
            top_answers = self.top_answers(distribution, total)
        except Exception as e:
            logger.error(f"Error calculating statistics for story {story_id}: {e}")
            raise StatisticsFailure(story_id, str(e)) from e

        now = datetime.now(timezone.utc).isoformat()
        record = StatisticsRecord(
            story_id=story_id,
            total_answers=total,
            unique_answers=len(distribution),
            answer_distribution=distribution,
            top_answers=top_answers,
            created_at=now,
            updated_at=now
        )

        logger.info(
            f"Statistics calculated for {story_id}: "
            f"{record.total_answers} total, {record.unique_answers} unique"
        )
        return record

    def answer_distribution(self, answers: Sequence[AnswerCandidate]) -> Dict[str, int]:
        """Count answers by canonical form, keys in first-seen order."""
        distribution = Counter()
        for answer in answers:
            distribution[normalize_answer(answer.answer)] += 1
        return dict(distribution)

    def top_answers(
        self,
        distribution: Dict[str, int],
        total_answers: int
    ) -> List[TopAnswerEntry]:
        """
        Rank answers by count.

        Ties keep the distribution's first-seen order (sorted() is stable,
        including with reverse=True).
        """
        if total_answers == 0:
            return []

        ranked = sorted(distribution.items(), key=lambda item: item[1], reverse=True)
        return [
            TopAnswerEntry(
                answer=answer,
                count=count,
                percentage=round_half_up(count / total_answers * 100, 2)
            )
            for answer, count in ranked[:self.top_answers_limit]
        ]

    def diversity_metrics(self, answers: Sequence[AnswerCandidate]) -> DiversityMetrics:
        """
        Measure how varied the answers are.

        Lengths are taken on the canonical form; variance is the population
        variance. Everything is 0 for an empty input.
        """
        if not answers:
            return DiversityMetrics()

        normalized = pd.Series([normalize_answer(a.answer) for a in answers], dtype="object")
        lengths = normalized.str.len()

        return DiversityMetrics(
            uniqueness_ratio=round_half_up(normalized.nunique() / len(normalized), 2),
            average_length=round_half_up(float(lengths.mean())),
            length_variance=round_half_up(float(lengths.var(ddof=0)))
        )

    def analyze_trends(self, answers: Sequence[AnswerCandidate]) -> TrendReport:
        """
        Analyze answer timing, length and sentiment.

        Args:
            answers: Candidates of one story

        Returns:
            TrendReport; most_popular_time is None when no answer carries a
            parseable timestamp
        """
        if not answers:
            return TrendReport()

        total_length = sum(len(a.answer) for a in answers)

        return TrendReport(
            most_popular_time=self._most_popular_time(answers),
            answer_length_average=round_half_up(total_length / len(answers)),
            sentiment_distribution=self._sentiment_distribution(answers)
        )

    def create_summary(self, statistics: StatisticsRecord) -> str:
        """One-line human-readable summary of a statistics record."""
        parts = [
            f"Processed {statistics.total_answers} answers",
            f"Unique: {statistics.unique_answers}"
        ]

        if statistics.top_answers:
            top = statistics.top_answers[0]
            parts.append(f'Popular answer: "{top.answer}" ({top.percentage:g}%)')
        else:
            parts.append("No popular answer data")

        return ". ".join(parts)

    def _most_popular_time(self, answers: Sequence[AnswerCandidate]) -> Optional[str]:
        """
        Hour-of-day slot with the most answers.

        Ties go to the slot seen first. Unparseable timestamps are ignored.
        """
        time_slots = Counter()

        for answer in answers:
            if not answer.timestamp:
                continue
            try:
                hour = datetime.fromisoformat(answer.timestamp).hour
            except (TypeError, ValueError):
                logger.debug(f"Ignoring invalid timestamp '{answer.timestamp}'")
                continue
            time_slots[f"{hour}:00-{hour + 1}:00"] += 1

        if not time_slots:
            return None

        return time_slots.most_common(1)[0][0]

    def _sentiment_distribution(self, answers: Sequence[AnswerCandidate]) -> Dict[str, int]:
        """Naive lexicon split; positive is checked before negative."""
        distribution = {"positive": 0, "negative": 0, "neutral": 0}

        for answer in answers:
            lower_answer = answer.answer.lower()
            if any(word in lower_answer for word in self.positive_words):
                distribution["positive"] += 1
            elif any(word in lower_answer for word in self.negative_words):
                distribution["negative"] += 1
            else:
                distribution["neutral"] += 1

        return distribution
