"""
Pipeline Orchestrator.

Coordinates sequential processing of story OCR results.
"""

import logging
from typing import Dict, Iterable, Optional

from src.agents.aggregation import StoryTrendAggregator
from src.agents.extraction import AnswerExtractor, ParsingFailure
from src.agents.ingestion import IngestionAgent
from src.agents.quality import QualityAnalyzer
from src.agents.statistics import StatisticsEngine, StatisticsFailure
from src.agents.validation import CandidateValidator
from src.models.raw_text import RawText
from src.utils.storage import StorageManager
import config.settings as settings

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """
    Orchestrates per-story processing.

    Coordinates:
    1. Ingestion → 2. Extraction → 3. Quality Analysis
    → 4. Statistics → 5. Persistence → 6. Summary

    After all stories: Overview Aggregation
    """

    def __init__(
        self,
        data_root: str,
        ocr_dir: Optional[str] = None,
        use_mock_data: bool = settings.USE_MOCK_DATA,
        continue_on_failure: bool = settings.CONTINUE_ON_STORY_FAILURE
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            data_root: Root directory for persisted answers and statistics
            ocr_dir: Directory of OCR result JSON files
            use_mock_data: Generate mock OCR text instead of reading files
            continue_on_failure: Skip a failing story instead of aborting the run
        """
        self.continue_on_failure = continue_on_failure

        logger.info("Initializing pipeline components...")

        self.storage = StorageManager(data_root)
        self.ingestion_agent = IngestionAgent(ocr_dir=ocr_dir, use_mock_data=use_mock_data)

        self.extractor = AnswerExtractor(validator=CandidateValidator())
        self.quality_analyzer = QualityAnalyzer()
        self.statistics_engine = StatisticsEngine()

        self.aggregator = StoryTrendAggregator(storage=self.storage)

        logger.info("Pipeline initialized successfully")

    def run(
        self,
        story_ids: Optional[Iterable[str]] = None,
        output_dir: str = str(settings.OUTPUT_ROOT)
    ) -> str:
        """
        Process stories and generate the overview table.

        Args:
            story_ids: Stories to process (all available if None)
            output_dir: Directory for the overview CSV

        Returns:
            Path to generated overview CSV
        """
        raw_texts = self.ingestion_agent.fetch_all(story_ids)
        logger.info(f"Starting pipeline for {len(raw_texts)} stories")

        processed = 0
        for raw_text in raw_texts:
            try:
                if self.process_story(raw_text) is not None:
                    processed += 1
            except (ParsingFailure, StatisticsFailure) as e:
                logger.error(f"Failed to process story {e.story_id}: {e}")
                if self.continue_on_failure:
                    logger.warning("Continuing with next story")
                    continue
                raise

        logger.info(f"Processed {processed}/{len(raw_texts)} stories")

        output_path = self.aggregator.generate_overview_table(output_dir=output_dir)
        logger.info(f"Pipeline complete! Overview table: {output_path}")
        return output_path

    def process_story(self, raw_text: RawText) -> Optional[Dict]:
        """
        Process one story's OCR text.

        Returns:
            Dict with parsed answers, statistics, quality, diversity, trends
            and summary; None when the story yields no answers

        Raises:
            ParsingFailure: If extraction fails
            StatisticsFailure: If statistics computation fails
        """
        story_id = raw_text.story_id
        logger.info(f"Processing story: {story_id}")

        if not raw_text.text or not raw_text.text.strip():
            logger.warning(f"No text found in image for story {story_id}")
            return None

        # STAGE 1: Extraction
        parsed = self.extractor.extract(raw_text.text, story_id)

        # STAGE 2: Quality Analysis
        quality = self.quality_analyzer.analyze_quality(parsed, raw_text.confidence)
        logger.info(
            f"Extraction quality for {story_id}: {quality.quality} ({quality.confidence:.2f})"
        )
        if quality.issues:
            logger.warning(f"Quality issues: {', '.join(quality.issues)}")

        if parsed.count == 0:
            logger.warning(f"No user answers found in story {story_id}")
            return None

        # STAGE 3: Statistics
        statistics = self.statistics_engine.compute_statistics(parsed)
        diversity = self.statistics_engine.diversity_metrics(parsed.answers)
        trends = self.statistics_engine.analyze_trends(parsed.answers)

        # STAGE 4: Persistence
        self.storage.save_answers(parsed)
        self.storage.save_statistics(statistics)
        self.storage.save_quality_report(story_id, quality)

        summary = self.statistics_engine.create_summary(statistics)
        logger.info(f"Processing completed for {story_id}: {summary}")

        return {
            "parsed_answers": parsed,
            "statistics": statistics,
            "quality": quality,
            "diversity": diversity,
            "trends": trends,
            "summary": summary
        }
