"""
Raw text data model.

Represents one OCR transcription of a story image, as handed over by the
external OCR service.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RawText:
    """
    OCR output for a single story image.
    Immutable input to the extraction stage.
    """
    story_id: str  # Story the image belongs to
    text: str  # Full transcribed text
    confidence: float  # OCR confidence in [0, 1]

    def __post_init__(self):
        # Validate confidence
        if not (0.0 <= self.confidence <= 1.0):
            raise ValueError(
                f"Invalid confidence: {self.confidence}. Must be between 0 and 1"
            )

    @classmethod
    def from_dict(cls, data: dict, default_story_id: str = "") -> "RawText":
        """Create RawText from an OCR result JSON dict."""
        return cls(
            story_id=data.get("story_id") or default_story_id,
            text=data.get("text") or "",
            confidence=float(data.get("confidence", 0.0))
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "story_id": self.story_id,
            "text": self.text,
            "confidence": self.confidence
        }
