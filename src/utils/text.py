"""
Text utility.

Cleaning, canonical normalization and rounding shared by the extractor,
quality analyzer and statistics engine.
"""

import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

QUOTE_CHARS = "\"'“”‘’«»"
PUNCTUATION_CHARS = ".,!?;:"

_WHITESPACE_RE = re.compile(r"\s+")
_PUNCTUATION_RE = re.compile(f"[{re.escape(PUNCTUATION_CHARS)}]")
_LEADING_QUOTE_RE = re.compile(f"^[{QUOTE_CHARS}]+")
_TRAILING_QUOTE_RE = re.compile(f"[{QUOTE_CHARS}]+$")


def clean_answer(answer: str) -> str:
    """
    Strip surrounding quote characters and collapse whitespace.

    Args:
        answer: Raw answer text captured by a matcher

    Returns:
        Cleaned answer (original casing and punctuation kept)
    """
    answer = answer.strip()
    answer = _LEADING_QUOTE_RE.sub("", answer)
    answer = _TRAILING_QUOTE_RE.sub("", answer)
    return _WHITESPACE_RE.sub(" ", answer).strip()


def normalize_answer(answer: str) -> str:
    """
    Canonical form used for grouping answers.

    Lowercase, punctuation (. , ! ? ; :) removed, whitespace collapsed, trimmed.
    """
    answer = answer.lower().strip()
    answer = _PUNCTUATION_RE.sub("", answer)
    return _WHITESPACE_RE.sub(" ", answer).strip()


def dedup_key(username: str, answer: str) -> str:
    """Composite key identifying one transcribed answer of one user."""
    return f"{username.lower()}_{answer.lower()}"


def round_half_up(value: float, places: int = 0) -> Union[int, float]:
    """
    Round the way a dashboard reader expects (2.5 -> 3), not banker's rounding.

    Returns an int when places == 0, else a float.
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if places == 0:
        return int(rounded)
    return float(rounded)
