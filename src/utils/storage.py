"""
Storage utility.

File I/O helpers for answer records, statistics records and quality reports.
"""

import json
import os
import logging
from typing import List, Optional
from datetime import datetime, timezone

from src.models.answer import AnswerRecord, ParsedAnswers
from src.models.statistics import QualityReport, StatisticsRecord

logger = logging.getLogger(__name__)


class StorageManager:
    """
    Manages JSON persistence for processed stories.

    Handles:
    - Answer records (data/answers/<story_id>.json), keyed by username
    - Statistics (data/statistics/<story_id>.json)
    - Quality reports (data/quality/<story_id>.json)
    """

    def __init__(self, data_root: str):
        """
        Initialize storage manager.

        Args:
            data_root: Root data directory (e.g., /path/to/data)
        """
        self.data_root = data_root
        self.answers_dir = os.path.join(data_root, "answers")
        self.statistics_dir = os.path.join(data_root, "statistics")
        self.quality_dir = os.path.join(data_root, "quality")

        # Create directories if they don't exist
        os.makedirs(self.answers_dir, exist_ok=True)
        os.makedirs(self.statistics_dir, exist_ok=True)
        os.makedirs(self.quality_dir, exist_ok=True)

        logger.info(f"Initialized StorageManager with data_root={data_root}")

    def save_answers(self, parsed_answers: ParsedAnswers) -> None:
        """
        Save answer records for a story.

        Records are keyed by (story_id, username); saving an answer for a
        username already on file replaces the stored answer.

        Args:
            parsed_answers: Extraction result to persist
        """
        story_id = parsed_answers.story_id
        created_at = datetime.now(timezone.utc).isoformat()

        records = {r.username: r for r in (self.load_answers(story_id) or [])}
        for answer in parsed_answers.answers:
            records[answer.username] = AnswerRecord(
                story_id=story_id,
                username=answer.username,
                answer=answer.answer,
                extracted_at=parsed_answers.extracted_at,
                created_at=created_at
            )

        self._write_answer_records(story_id, list(records.values()))
        logger.info(f"Saved {len(parsed_answers.answers)} answer records for story {story_id}")

    def load_answers(self, story_id: str) -> Optional[List[AnswerRecord]]:
        """
        Load answer records for a story.

        Returns:
            List of AnswerRecord, or None if file doesn't exist
        """
        data = self._read_json(os.path.join(self.answers_dir, f"{story_id}.json"))
        if data is None:
            return None
        return [AnswerRecord.from_dict(item) for item in data]

    def update_answer(self, story_id: str, username: str, new_answer: str) -> None:
        """
        Replace (or add) the stored answer of one user.

        Args:
            story_id: Story identifier
            username: Answer author
            new_answer: Corrected answer text
        """
        now = datetime.now(timezone.utc).isoformat()
        records = {r.username: r for r in (self.load_answers(story_id) or [])}
        records[username] = AnswerRecord(
            story_id=story_id,
            username=username,
            answer=new_answer,
            extracted_at=now,
            created_at=now
        )

        self._write_answer_records(story_id, list(records.values()))
        logger.info(f"Updated answer for {username} in story {story_id}")

    def save_statistics(self, statistics: StatisticsRecord) -> None:
        """Save the statistics record of a story."""
        filepath = os.path.join(self.statistics_dir, f"{statistics.story_id}.json")
        self._write_json(filepath, statistics.to_dict())
        logger.info(f"Saved statistics to {filepath}")

    def load_statistics(self, story_id: str) -> Optional[StatisticsRecord]:
        """Load statistics for a story, or None if not processed yet."""
        data = self._read_json(os.path.join(self.statistics_dir, f"{story_id}.json"))
        if data is None:
            return None
        return StatisticsRecord.from_dict(data)

    def save_quality_report(self, story_id: str, report: QualityReport) -> None:
        """Save the extraction quality report of a story."""
        filepath = os.path.join(self.quality_dir, f"{story_id}.json")
        self._write_json(filepath, report.to_dict())
        logger.debug(f"Saved quality report to {filepath}")

    def load_quality_report(self, story_id: str) -> Optional[QualityReport]:
        """Load the quality report of a story, or None if missing."""
        data = self._read_json(os.path.join(self.quality_dir, f"{story_id}.json"))
        if data is None:
            return None
        return QualityReport.from_dict(data)

    def get_all_story_ids(self) -> List[str]:
        """
        Get all stories that have statistics on file.

        Returns:
            Sorted list of story identifiers
        """
        story_ids = []
        for filename in os.listdir(self.statistics_dir):
            if filename.endswith('.json'):
                story_ids.append(filename[:-len('.json')])

        return sorted(story_ids)

    def _write_answer_records(self, story_id: str, records: List[AnswerRecord]) -> None:
        filepath = os.path.join(self.answers_dir, f"{story_id}.json")
        self._write_json(filepath, [r.to_dict() for r in records])

    def _write_json(self, filepath: str, data) -> None:
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except Exception as e:
            logger.error(f"Failed to write {filepath}: {e}")
            raise

    def _read_json(self, filepath: str):
        if not os.path.exists(filepath):
            logger.debug(f"No file found at {filepath}")
            return None

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                return json.load(f)
        except Exception as e:
            logger.error(f"Failed to load {filepath}: {e}")
            return None
