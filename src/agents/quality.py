"""
Extraction Quality Analyzer.

Scores how far an extraction can be trusted, given the OCR confidence and the
volume and variety of the extracted answers.
"""

import logging

import config.settings as settings
from src.models.answer import ParsedAnswers
from src.models.statistics import QualityReport
from src.utils.text import normalize_answer

logger = logging.getLogger(__name__)

ISSUE_LOW_OCR_CONFIDENCE = "Low OCR confidence"
ISSUE_NO_ANSWERS = "No answers extracted"
ISSUE_FEW_ANSWERS = "Very few answers extracted"
ISSUE_MANY_DUPLICATES = "Many duplicate answers"


class QualityAnalyzer:
    """
    Produces a QualityReport from an extraction result.

    Score starts at 1.0. Every condition is evaluated; penalties multiply,
    except "no answers" which pins the score to 0.
    """

    def __init__(
        self,
        low_confidence_threshold: float = settings.LOW_OCR_CONFIDENCE_THRESHOLD,
        few_answers_threshold: int = settings.FEW_ANSWERS_THRESHOLD,
        duplicate_ratio_threshold: float = settings.DUPLICATE_RATIO_THRESHOLD,
        high_score: float = settings.HIGH_QUALITY_SCORE,
        medium_score: float = settings.MEDIUM_QUALITY_SCORE
    ):
        self.low_confidence_threshold = low_confidence_threshold
        self.few_answers_threshold = few_answers_threshold
        self.duplicate_ratio_threshold = duplicate_ratio_threshold
        self.high_score = high_score
        self.medium_score = medium_score

    def analyze_quality(
        self,
        parsed_answers: ParsedAnswers,
        ocr_confidence: float
    ) -> QualityReport:
        """
        Analyze extraction quality.

        Args:
            parsed_answers: Extraction result for one story
            ocr_confidence: OCR confidence in [0, 1]

        Returns:
            QualityReport with tier, issue tags (in evaluation order) and score
        """
        issues = []
        score = 1.0
        total = parsed_answers.count

        if ocr_confidence < self.low_confidence_threshold:
            issues.append(ISSUE_LOW_OCR_CONFIDENCE)
            score *= 0.7

        if total == 0:
            issues.append(ISSUE_NO_ANSWERS)
            score = 0.0

        if 0 < total < self.few_answers_threshold:
            issues.append(ISSUE_FEW_ANSWERS)
            score *= 0.8

        unique = len({normalize_answer(a.answer) for a in parsed_answers.answers})
        if unique < total * self.duplicate_ratio_threshold:
            issues.append(ISSUE_MANY_DUPLICATES)
            score *= 0.9

        report = QualityReport(
            quality=self._tier(score),
            issues=issues,
            confidence=score
        )

        logger.debug(
            f"Quality for {parsed_answers.story_id}: {report.quality} "
            f"(score={score:.2f}, issues={issues})"
        )
        return report

    def _tier(self, score: float) -> str:
        if score >= self.high_score:
            return "high"
        if score >= self.medium_score:
            return "medium"
        return "low"
