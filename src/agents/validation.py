"""
Candidate validation.

Decides whether a captured username or answer looks like real user content
rather than platform UI text.
"""

import re
from typing import Iterable

import config.settings as settings

USERNAME_RE = re.compile(r"[A-Za-z0-9_]+")


class CandidateValidator:
    """
    Username and answer predicates applied to every extracted pair.

    Holds only immutable configuration, so one instance can be shared.
    """

    def __init__(
        self,
        username_min_length: int = settings.USERNAME_MIN_LENGTH,
        username_max_length: int = settings.USERNAME_MAX_LENGTH,
        reserved_usernames: Iterable[str] = settings.RESERVED_USERNAMES,
        answer_min_length: int = settings.ANSWER_MIN_LENGTH,
        answer_max_length: int = settings.ANSWER_MAX_LENGTH,
        system_phrases: Iterable[str] = settings.SYSTEM_UI_PHRASES
    ):
        self.username_min_length = username_min_length
        self.username_max_length = username_max_length
        self.reserved_usernames = frozenset(w.lower() for w in reserved_usernames)
        self.answer_min_length = answer_min_length
        self.answer_max_length = answer_max_length
        self.system_phrases = tuple(p.lower() for p in system_phrases)

    def is_valid_username(self, username: str) -> bool:
        """
        Check that a token looks like a platform handle.

        Rejects tokens outside the length bounds, tokens with characters other
        than ASCII letters, digits and underscore, and reserved UI words.
        """
        if not username:
            return False

        if not (self.username_min_length <= len(username) <= self.username_max_length):
            return False

        if not USERNAME_RE.fullmatch(username):
            return False

        return username.lower() not in self.reserved_usernames

    def is_valid_answer(self, answer: str) -> bool:
        """Check answer length and reject system UI messages ("tap to reply", ...)."""
        if not answer:
            return False

        if not (self.answer_min_length <= len(answer) <= self.answer_max_length):
            return False

        lower_answer = answer.lower()
        return not any(phrase in lower_answer for phrase in self.system_phrases)
