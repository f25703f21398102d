"""Candidate spellings for the token under the cursor.

The set depends on the neighbouring tokens (and on settings), so it is derived
again for every keystroke and never cached.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from kanatype.core.romaji_table import (
    VOWELS,
    consonant_onset,
    lookup,
    starts_with_vowel_or_y,
)
from kanatype.core.settings import Settings
from kanatype.core.tokenizer import (
    LONG_KIND,
    N_KIND,
    PLAIN,
    SMALL_TSU_KIND,
    YOUON_KIND,
    Token,
    next_token,
    token_after,
)

EXPLICIT_SMALL_TSU = ("ltu", "xtu")
N_BEFORE_CONSONANT = ("n", "nn")
N_BEFORE_VOWEL = ("n'", "nn")
LONG_FALLBACK = "-"


def lead_spelling(token: Optional[Token]) -> str:
    """Canonical spelling used when a neighbour looks ahead at *token*.

    Tokens whose spelling depends on their own context (small tsu, long vowel)
    have no lead spelling.
    """
    if token is None:
        return ""
    if token.kind in (PLAIN, YOUON_KIND):
        return lookup(token.text)[0]
    if token.kind == N_KIND:
        return "n"
    return ""


def geminate_options(upcoming: Optional[Token]) -> List[str]:
    """First consonant of every spelling of *upcoming*, primary spelling first."""
    if upcoming is None or upcoming.kind not in (PLAIN, YOUON_KIND):
        return []
    options: List[str] = []
    for spelling in lookup(upcoming.text):
        onset = consonant_onset(spelling)
        if onset and onset[0] not in options:
            options.append(onset[0])
    return options


def last_vowel(romaji: str) -> str:
    for ch in reversed(romaji):
        if ch in VOWELS:
            return ch
    return ""


def token_candidates(
    reading: str,
    token: Token,
    last_romaji: str,
    settings: Settings,
) -> Tuple[str, ...]:
    if token.kind == SMALL_TSU_KIND:
        options = geminate_options(token_after(reading, token))
        if settings.allow_explicit_small_tsu:
            options.extend(EXPLICIT_SMALL_TSU)
        return tuple(options)

    if token.kind == LONG_KIND:
        return (last_vowel(last_romaji) or LONG_FALLBACK,)

    if token.kind == N_KIND:
        upcoming = token_after(reading, token)
        if upcoming is not None and starts_with_vowel_or_y(lead_spelling(upcoming)):
            return N_BEFORE_VOWEL
        return N_BEFORE_CONSONANT

    return lookup(token.text)


def current_candidates(
    reading: str,
    index: int,
    last_romaji: str,
    settings: Settings,
) -> Tuple[Optional[Token], Tuple[str, ...]]:
    """Token at *index* and the whole-token spellings that would complete it."""
    token = next_token(reading, index)
    if token is None:
        return None, ()
    return token, token_candidates(reading, token, last_romaji, settings)
