"""
Ingestion Agent.

Loads OCR results for story images. Supports result files written by the
external OCR service and mock data for testing.
"""

import json
import logging
import os
from typing import Iterable, List, Optional

import config.settings as settings
from src.models.raw_text import RawText

logger = logging.getLogger(__name__)


class IngestionAgent:
    """
    Fetches RawText records, one per story.

    Real mode reads <ocr_dir>/<story_id>.json files of the form
    {"story_id": ..., "text": ..., "confidence": ...}.
    Mock mode generates synthetic story replies so the pipeline can be
    exercised without an OCR service.
    """

    def __init__(self, ocr_dir: Optional[str] = None, use_mock_data: bool = False):
        """
        Initialize ingestion agent.

        Args:
            ocr_dir: Directory holding OCR result JSON files
            use_mock_data: If True, generate mock OCR text instead of reading files
        """
        self.ocr_dir = ocr_dir
        self.use_mock_data = use_mock_data

        if use_mock_data:
            logger.info("Initialized IngestionAgent in MOCK mode")
        else:
            logger.info(f"Initialized IngestionAgent reading from {ocr_dir}")

    def list_story_ids(self) -> List[str]:
        """Story ids available for processing, sorted."""
        if self.use_mock_data:
            return list(settings.MOCK_STORY_IDS)

        if not self.ocr_dir or not os.path.isdir(self.ocr_dir):
            logger.warning(f"OCR directory not found: {self.ocr_dir}")
            return []

        return sorted(
            filename[:-len(".json")]
            for filename in os.listdir(self.ocr_dir)
            if filename.endswith(".json")
        )

    def fetch(self, story_id: str) -> Optional[RawText]:
        """
        Fetch the OCR result of one story.

        Returns:
            RawText, or None if the result is missing or malformed
        """
        if self.use_mock_data:
            return self._generate_mock_raw_text(story_id)

        filepath = os.path.join(self.ocr_dir or "", f"{story_id}.json")
        if not os.path.exists(filepath):
            logger.warning(f"No OCR result found for {story_id}")
            return None

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return RawText.from_dict(data, default_story_id=story_id)
        except (json.JSONDecodeError, ValueError, TypeError, AttributeError) as e:
            logger.error(f"Malformed OCR result for {story_id}: {e}")
            return None

    def fetch_all(self, story_ids: Optional[Iterable[str]] = None) -> List[RawText]:
        """Fetch OCR results for the given stories (all available if None)."""
        if story_ids is None:
            story_ids = self.list_story_ids()

        results = []
        for story_id in story_ids:
            raw = self.fetch(story_id)
            if raw is not None:
                results.append(raw)

        logger.info(f"Loaded {len(results)} OCR results")
        return results

    @staticmethod
    def is_image_file(key: str) -> bool:
        """True if an object key points at a supported image type."""
        return key.lower().endswith(settings.IMAGE_EXTENSIONS)

    @staticmethod
    def extract_story_id(key: str) -> Optional[str]:
        """
        Derive the story id from an object key of the form story_id/filename.

        Returns None for keys without a directory component.
        """
        parts = key.split("/")
        if len(parts) >= 2 and parts[0]:
            return parts[0]
        return None

    def _generate_mock_raw_text(self, story_id: str) -> RawText:
        """
        Generate a synthetic OCR transcription.

        Mixes every reply layout the extractor understands, plus UI noise
        that must be filtered out.
        """
        seed = sum(ord(c) for c in story_id)

        answers = ["Blue", "Red", "blue!", "Green", "BLUE", "Love it", "bad idea", "Yellow"]
        layouts = [
            '@{user} replied "{answer}"',
            "{user}: {answer}",
            "@{user} - {answer}",
        ]

        lines = ["Instagram", "Tap to reply"]
        for i in range(settings.MOCK_ANSWERS_PER_STORY):
            answer = answers[(i + seed) % len(answers)]
            layout = layouts[i % len(layouts)]
            lines.append(layout.format(user=f"user_{seed % 100}_{i}", answer=answer))
        lines.append("Swipe up to see more")

        confidence = 0.6 + (seed % 4) * 0.1

        logger.info(f"Generated mock OCR text for {story_id}")
        return RawText(story_id=story_id, text="\n".join(lines), confidence=round(confidence, 2))
