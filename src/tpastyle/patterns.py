"""Lexical matching of custom syntax inside style sheet text.

Two kinds of pattern are unioned:
- quoted calls: a double-quoted string shaped like name(arguments)
- bare tokens: whole-word reserved words such as START or DEG-END

Matching never parses CSS. Overlapping candidates are resolved
leftmost-longest, ties going to the pattern configured first.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from tpastyle.constants import DIRECTION_TOKENS, QUOTED_CALL_PATTERN


class PatternKind(Enum):
    QUOTED_CALL = "quoted_call"
    BARE_TOKEN = "bare_token"


@dataclass(frozen=True)
class Span:
    """A matched region of text.

    Attributes:
        start: Offset of the first matched character
        end: Offset just past the last matched character
        text: The matched text
        pattern_index: Position of the pattern that produced the match
    """

    start: int
    end: int
    text: str
    pattern_index: int = 0

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Pattern:
    """A compiled matching rule."""

    regex: re.Pattern[str]
    kind: PatternKind

    @classmethod
    def quoted_call(cls, pattern: str = QUOTED_CALL_PATTERN) -> "Pattern":
        return cls(re.compile(pattern), PatternKind.QUOTED_CALL)

    @classmethod
    def bare_tokens(cls, words: Iterable[str] = DIRECTION_TOKENS) -> "Pattern":
        """Build a whole-word alternation; longer words are tried first."""
        ordered = sorted(set(words), key=lambda word: (-len(word), word))
        if not ordered:
            raise ValueError("bare_tokens() needs at least one word")
        alternation = "|".join(re.escape(word) for word in ordered)
        return cls(re.compile(rf"\b(?:{alternation})\b"), PatternKind.BARE_TOKEN)

    def finditer(self, text: str) -> Iterable[re.Match[str]]:
        return self.regex.finditer(text)

    def fullmatch(self, text: str) -> bool:
        return self.regex.fullmatch(text) is not None


DEFAULT_PATTERNS: tuple[Pattern, ...] = (Pattern.quoted_call(), Pattern.bare_tokens())


def match(text: str, patterns: Iterable[Pattern] = DEFAULT_PATTERNS) -> list[Span]:
    """Find custom syntax candidates in text.

    Args:
        text: Raw text to scan
        patterns: Patterns in priority order

    Returns:
        Non-overlapping spans in order of appearance
    """
    candidates = [
        Span(m.start(), m.end(), m.group(), index)
        for index, pattern in enumerate(patterns)
        for m in pattern.finditer(text)
        if m.end() > m.start()
    ]
    candidates.sort(key=lambda span: (span.start, -len(span), span.pattern_index))

    spans: list[Span] = []
    consumed_until = 0
    for span in candidates:
        if span.start < consumed_until:
            continue
        spans.append(span)
        consumed_until = span.end
    return spans


def contains_match(text: str, patterns: Iterable[Pattern] = DEFAULT_PATTERNS) -> bool:
    """Check whether any pattern matches text."""
    return any(pattern.regex.search(text) for pattern in patterns)
