"""Lazy, position-local tokenizer for kana readings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from kanatype.core.romaji_table import (
    LONG_VOWEL,
    MORAIC_N,
    SMALL_TSU,
    SMALL_Y,
    YOUON,
    is_passive,
    to_hiragana,
)

PLAIN = "plain"
YOUON_KIND = "youon"
SMALL_TSU_KIND = "small_tsu"
N_KIND = "n"
LONG_KIND = "long"


@dataclass(frozen=True)
class Token:
    """One typing unit found at ``start`` in a reading.

    ``text`` is the hiragana-folded kana and ``length`` the number of reading
    characters it covers (1, or 2 for a youon digraph).
    """

    kind: str
    text: str
    length: int
    start: int

    @property
    def end(self) -> int:
        """Raw index right after this token."""
        return self.start + self.length


def skip_passive(reading: str, index: int) -> int:
    """Move *index* past punctuation and spaces."""
    while index < len(reading) and is_passive(reading[index]):
        index += 1
    return index


def next_token(reading: str, index: int) -> Optional[Token]:
    """Classify the token at *index* (after passive characters), or None at the end.

    Only the current character and the one after it are inspected.
    """
    start = skip_passive(reading, index)
    if start >= len(reading):
        return None
    current = to_hiragana(reading[start])
    following = to_hiragana(reading[start + 1]) if start + 1 < len(reading) else ""

    if current == SMALL_TSU:
        return Token(SMALL_TSU_KIND, current, 1, start)
    if current == MORAIC_N:
        return Token(N_KIND, current, 1, start)
    if current == LONG_VOWEL:
        return Token(LONG_KIND, current, 1, start)
    if following in SMALL_Y and current + following in YOUON:
        return Token(YOUON_KIND, current + following, 2, start)
    return Token(PLAIN, current, 1, start)


def token_after(reading: str, token: Token) -> Optional[Token]:
    """The token that follows *token*, skipping passive characters in between."""
    return next_token(reading, token.end)
