"""
Answer data models.

Represents username → answer pairs extracted from OCR text, the per-story
extraction result, and the persisted answer row.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class AnswerCandidate:
    """
    A validated username → answer pair.
    Output of the Extractor; never mutated after creation.
    """
    username: str
    answer: str
    timestamp: Optional[str] = None  # ISO-8601, when known

    @classmethod
    def from_dict(cls, data: dict) -> "AnswerCandidate":
        """Create AnswerCandidate from JSON dict."""
        return cls(
            username=data["username"],
            answer=data["answer"],
            timestamp=data.get("timestamp")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "username": self.username,
            "answer": self.answer,
            "timestamp": self.timestamp
        }


@dataclass
class ParsedAnswers:
    """
    Result of one extraction call for a story.
    """
    story_id: str
    answers: List[AnswerCandidate] = field(default_factory=list)
    count: int = 0  # Always len(answers)
    extracted_at: str = ""  # ISO-8601

    @property
    def total_answers(self) -> int:
        return self.count

    @classmethod
    def from_dict(cls, data: dict) -> "ParsedAnswers":
        """Create ParsedAnswers from JSON dict."""
        answers = [AnswerCandidate.from_dict(a) for a in data.get("answers", [])]
        return cls(
            story_id=data["story_id"],
            answers=answers,
            count=data.get("total_answers", len(answers)),
            extracted_at=data.get("extracted_at", "")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "story_id": self.story_id,
            "answers": [a.to_dict() for a in self.answers],
            "total_answers": self.count,
            "extracted_at": self.extracted_at
        }


@dataclass
class AnswerRecord:
    """
    Persisted answer row, keyed by (story_id, username).
    """
    story_id: str
    username: str
    answer: str
    extracted_at: str = ""
    created_at: str = ""

    @property
    def key(self) -> tuple:
        return (self.story_id, self.username)

    @classmethod
    def from_dict(cls, data: dict) -> "AnswerRecord":
        """Create AnswerRecord from JSON dict."""
        return cls(
            story_id=data["story_id"],
            username=data["username"],
            answer=data["answer"],
            extracted_at=data.get("extracted_at", ""),
            created_at=data.get("created_at", "")
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "story_id": self.story_id,
            "username": self.username,
            "answer": self.answer,
            "extracted_at": self.extracted_at,
            "created_at": self.created_at
        }
