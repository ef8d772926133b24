"""
Answer Extraction Agent.

Turns raw OCR text from a story image into validated, deduplicated
username → answer candidates.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional, Sequence

from src.agents.validation import CandidateValidator
from src.models.answer import AnswerCandidate, ParsedAnswers
from src.models.raw_text import RawText
from src.utils.text import clean_answer, dedup_key

logger = logging.getLogger(__name__)

TOKEN = r"[A-Za-z0-9_]+"
RESPONSE_VERBS = r"(?:replied|answered|says?|ответила?)"

FALLBACK_USERNAME_RE = re.compile(rf"@?({TOKEN})")


class ParsingFailure(Exception):
    """Internal fault while extracting answers for one story."""

    def __init__(self, story_id: str, message: str):
        super().__init__(f"Failed to parse answers for story {story_id}: {message}")
        self.story_id = story_id


class MatchStrategy:
    """
    One heuristic for finding (username, answer) pairs in text.

    The pattern must expose the username as group 1 and the answer as group 2.
    """

    def __init__(self, name: str, pattern: re.Pattern):
        self.name = name
        self.pattern = pattern

    def find_candidates(
        self,
        text: str,
        build: Callable[[str, str], Optional[AnswerCandidate]]
    ) -> Iterator[AnswerCandidate]:
        """
        Yield the candidates accepted by ``build`` in text order.

        ``build`` cleans and validates a raw pair, returning None to reject it.
        """
        for match in self.pattern.finditer(text):
            candidate = build(match.group(1), match.group(2))
            if candidate is not None:
                yield candidate

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class LineBlockStrategy(MatchStrategy):
    """
    Username and answer on consecutive lines.

    The pattern matches only the username line and captures the answer line
    inside a lookahead, so a rejected pair leaves its answer line free to
    start the next pair. An accepted answer line is not reused as a username.
    """

    def find_candidates(self, text, build):
        resume_at = 0
        for match in self.pattern.finditer(text):
            if match.start() < resume_at:
                continue

            candidate = build(match.group(1), match.group(2))
            if candidate is not None:
                resume_at = match.end(2)
                yield candidate


# Applied in this order; every strategy scans the whole text
DEFAULT_STRATEGIES = (
    # @john replied "Blue"
    MatchStrategy(
        "mention_verb_quote",
        re.compile(
            rf"@({TOKEN})[ \t]+{RESPONSE_VERBS}[ \t]*[\"'“”«:][ \t]*(.+?)(?=\n|@|$)",
            re.IGNORECASE
        )
    ),
    # john: Blue
    MatchStrategy(
        "label_colon",
        re.compile(rf"^({TOKEN}):[ \t]*([^\n]+)", re.MULTILINE)
    ),
    # @john - Blue
    MatchStrategy(
        "mention_dash",
        re.compile(rf"@({TOKEN})[ \t]*[-–—][ \t]*(.+?)(?=\n|@|$)")
    ),
    # john
    # Blue
    LineBlockStrategy(
        "token_newline",
        re.compile(
            rf"^[ \t]*({TOKEN})[ \t]*\n(?=(?:[ \t]*\n)*[ \t]*(?!@)([^\n]+))",
            re.MULTILINE
        )
    ),
)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AnswerExtractor:
    """
    Extracts username → answer pairs from OCR text.

    Two-stage pipeline:
    1. Primary stage: every strategy runs over the full text; pairs are
       cleaned, validated, and the first answer per username is kept.
    2. Fallback stage: only when the primary stage found nothing, adjacent
       non-empty lines are read as (username, answer).
    The combined pool is then deduplicated on username + answer.
    """

    def __init__(
        self,
        validator: Optional[CandidateValidator] = None,
        strategies: Sequence[MatchStrategy] = DEFAULT_STRATEGIES
    ):
        """
        Initialize extractor.

        Args:
            validator: Username/answer predicates (default configuration if None)
            strategies: Ordered matcher strategies for the primary stage
        """
        self.validator = validator or CandidateValidator()
        self.strategies = tuple(strategies)

        logger.info(
            f"Initialized AnswerExtractor with strategies="
            f"{[s.name for s in self.strategies]}"
        )

    def extract(
        self,
        raw_text: Optional[str],
        story_id: str,
        extracted_at: Optional[str] = None
    ) -> ParsedAnswers:
        """
        Extract answer candidates from OCR text.

        Args:
            raw_text: Transcribed text (None or empty yields an empty result)
            story_id: Story identifier
            extracted_at: ISO-8601 extraction time (defaults to now, UTC)

        Returns:
            ParsedAnswers with the deduplicated candidates

        Raises:
            ParsingFailure: On an internal fault (e.g. non-string text)
        """
        logger.debug(f"Parsing answers from OCR text for story {story_id}")
        timestamp = extracted_at or _utc_now()

        try:
            answers = self._extract_candidates(raw_text or "", timestamp)
        except Exception as e:
            logger.error(f"Error parsing answers for story {story_id}: {e}")
            raise ParsingFailure(story_id, str(e)) from e

        logger.info(f"Extracted {len(answers)} answers for story {story_id}")

        return ParsedAnswers(
            story_id=story_id,
            answers=answers,
            count=len(answers),
            extracted_at=timestamp
        )

    def extract_raw_text(self, raw: RawText) -> ParsedAnswers:
        """Extract from an OCR result record."""
        return self.extract(raw.text, raw.story_id)

    def _extract_candidates(self, text: str, timestamp: str) -> List[AnswerCandidate]:
        text = text.replace("\r\n", "\n").replace("\r", "\n")

        candidates = self._run_primary_stage(text, timestamp)
        if not candidates:
            logger.debug("Primary strategies found no answers, trying line-pair fallback")
            candidates = self._run_fallback_stage(text, timestamp)

        return self._deduplicate(candidates)

    def _run_primary_stage(self, text: str, timestamp: str) -> List[AnswerCandidate]:
        """Run all strategies; the first accepted answer per username wins."""
        candidates = []
        seen_usernames = set()

        def build(username: str, answer: str) -> Optional[AnswerCandidate]:
            return self._build_candidate(username, answer, timestamp)

        for strategy in self.strategies:
            for candidate in strategy.find_candidates(text, build):
                username_key = candidate.username.lower()
                if username_key in seen_usernames:
                    logger.debug(
                        f"[{strategy.name}] skipping repeat answer from '{candidate.username}'"
                    )
                    continue

                seen_usernames.add(username_key)
                candidates.append(candidate)

        return candidates

    def _run_fallback_stage(self, text: str, timestamp: str) -> List[AnswerCandidate]:
        """Read each adjacent pair of non-empty lines as (username, answer)."""
        lines = [line.strip() for line in text.split("\n") if line.strip()]
        candidates = []

        for current, following in zip(lines, lines[1:]):
            match = FALLBACK_USERNAME_RE.fullmatch(current)
            if not match:
                continue

            candidate = self._build_candidate(match.group(1), following, timestamp)
            if candidate is not None:
                candidates.append(candidate)

        if candidates:
            logger.info(f"Fallback parsing recovered {len(candidates)} answers")

        return candidates

    def _build_candidate(
        self,
        username: str,
        answer: str,
        timestamp: str
    ) -> Optional[AnswerCandidate]:
        """Clean and validate a raw pair. Returns None when rejected."""
        username = username.strip()
        answer = clean_answer(answer)

        if not self.validator.is_valid_username(username):
            logger.debug(f"Rejected username '{username}'")
            return None

        if not self.validator.is_valid_answer(answer):
            logger.debug(f"Rejected answer from '{username}'")
            return None

        return AnswerCandidate(username=username, answer=answer, timestamp=timestamp)

    def _deduplicate(self, candidates: List[AnswerCandidate]) -> List[AnswerCandidate]:
        """Drop repeats of the same username + answer, keeping scan order."""
        seen = set()
        unique = []

        for candidate in candidates:
            key = dedup_key(candidate.username, candidate.answer)
            if key in seen:
                continue
            seen.add(key)
            unique.append(candidate)

        if len(unique) < len(candidates):
            logger.debug(f"Removed {len(candidates) - len(unique)} duplicate answers")

        return unique
