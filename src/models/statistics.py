"""
Statistics data models.

Aggregated per-story statistics, quality reports and derived metrics.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

QUALITY_TIERS = ("high", "medium", "low")


@dataclass(frozen=True)
class TopAnswerEntry:
    """One row of the top-answers ranking."""
    answer: str  # Normalized answer
    count: int
    percentage: float  # 0-100, two decimal places

    @classmethod
    def from_dict(cls, data: dict) -> "TopAnswerEntry":
        return cls(
            answer=data["answer"],
            count=int(data["count"]),
            percentage=float(data["percentage"])
        )

    def to_dict(self) -> dict:
        return {
            "answer": self.answer,
            "count": self.count,
            "percentage": self.percentage
        }


@dataclass
class StatisticsRecord:
    """
    Aggregated statistics for a single story.
    Output of the StatisticsEngine.
    """
    story_id: str
    total_answers: int = 0
    unique_answers: int = 0
    answer_distribution: Dict[str, int] = field(default_factory=dict)
    top_answers: List[TopAnswerEntry] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "StatisticsRecord":
        """Create StatisticsRecord from JSON dict."""
        return cls(
            story_id=data["story_id"],
            total_answers=data.get("total_answers", 0),
            unique_answers=data.get("unique_answers", 0),
            answer_distribution=dict(data.get("answer_distribution", {})),
            top_answers=[TopAnswerEntry.from_dict(t) for t in data.get("top_answers", [])],
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", "")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "story_id": self.story_id,
            "total_answers": self.total_answers,
            "unique_answers": self.unique_answers,
            "answer_distribution": self.answer_distribution,
            "top_answers": [t.to_dict() for t in self.top_answers],
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }


@dataclass
class QualityReport:
    """
    Coarse trust label for one extraction.
    """
    quality: str  # "high", "medium", or "low"
    issues: List[str] = field(default_factory=list)
    confidence: float = 0.0  # Score in [0, 1]

    def __post_init__(self):
        # Validate tier
        if self.quality not in QUALITY_TIERS:
            raise ValueError(
                f"Invalid quality: {self.quality}. Must be 'high', 'medium', or 'low'"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "QualityReport":
        return cls(
            quality=data["quality"],
            issues=list(data.get("issues", [])),
            confidence=float(data.get("confidence", 0.0))
        )

    def to_dict(self) -> dict:
        return {
            "quality": self.quality,
            "issues": self.issues,
            "confidence": self.confidence
        }


@dataclass(frozen=True)
class DiversityMetrics:
    """Spread of answers within a story."""
    uniqueness_ratio: float = 0.0
    average_length: int = 0
    length_variance: int = 0


@dataclass
class TrendReport:
    """Time-of-day, length and sentiment trends for a story's answers."""
    most_popular_time: Optional[str] = None
    answer_length_average: int = 0
    sentiment_distribution: Dict[str, int] = field(
        default_factory=lambda: {"positive": 0, "negative": 0, "neutral": 0}
    )
