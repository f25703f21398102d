"""Canonical romaji for whole readings.

Used to label words and show reference spellings. Keystroke acceptance is done
by ``kanatype.core.matcher``, which also accepts spellings never produced here
(``si`` for し and so on).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from kanatype.core.candidates import (
    EXPLICIT_SMALL_TSU,
    LONG_FALLBACK,
    geminate_options,
    last_vowel,
    lead_spelling,
)
from kanatype.core.romaji_table import (
    UnknownKanaHook,
    lookup,
    normalize_reading,
    starts_with_vowel_or_y,
)
from kanatype.core.tokenizer import (
    LONG_KIND,
    N_KIND,
    SMALL_TSU_KIND,
    next_token,
    token_after,
)

if TYPE_CHECKING:
    from kanatype.core.words import WordEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RomajiSpelling:
    primary: str
    alt: Tuple[str, ...] = ()


def _log_unknown(char: str, reading: str) -> None:
    logger.warning("Unknown kana %r in %r", char, reading)


def generate_romaji(
    reading: str,
    include_alt: bool = True,
    on_unknown: Optional[UnknownKanaHook] = None,
) -> RomajiSpelling:
    """Build the display romaji for *reading*.

    Each alternate in ``alt`` differs from ``primary`` in exactly one unit:
    ``nn`` for ん, ``ltu``/``xtu`` for っ and ``-`` for ー.
    """
    hook = on_unknown or _log_unknown
    text = normalize_reading(reading)
    pieces: List[Tuple[str, Tuple[str, ...]]] = []

    index = 0
    token = next_token(text, index)
    while token is not None:
        upcoming = token_after(text, token)

        if token.kind == SMALL_TSU_KIND:
            doubled = geminate_options(upcoming)
            if doubled:
                pieces.append((doubled[0], EXPLICIT_SMALL_TSU))
            else:
                pieces.append(("xtu", ("ltu",)))
        elif token.kind == LONG_KIND:
            vowel = last_vowel("".join(p for p, _ in pieces))
            pieces.append((vowel, (LONG_FALLBACK,)) if vowel else (LONG_FALLBACK, ()))
        elif token.kind == N_KIND:
            n = "n'" if starts_with_vowel_or_y(lead_spelling(upcoming)) else "n"
            pieces.append((n, ("nn",)))
        else:
            pieces.append((lookup(token.text, on_unknown=hook, reading=reading)[0], ()))

        index = token.end
        token = next_token(text, index)

    primary = "".join(p for p, _ in pieces)
    if not include_alt:
        return RomajiSpelling(primary=primary)

    alt: List[str] = []
    for i, (_, alternates) in enumerate(pieces):
        head = "".join(p for p, _ in pieces[:i])
        tail = "".join(p for p, _ in pieces[i + 1:])
        for option in alternates:
            spelled = head + option + tail
            if spelled != primary and spelled not in alt:
                alt.append(spelled)
    return RomajiSpelling(primary=primary, alt=tuple(alt))


def attach_romaji(entries: Iterable["WordEntry"]) -> List["WordEntry"]:
    """Return copies of *entries* with ``romaji_primary``/``romaji_alt`` filled in.

    Entries that already carry a primary spelling are kept as they are.
    """
    result: List["WordEntry"] = []
    for entry in entries:
        if entry.romaji_primary:
            result.append(entry)
            continue

        def _report(char: str, reading: str, entry_id: str = entry.id) -> None:
            logger.warning("Unknown kana %r in id=%s reading=%s", char, entry_id, reading)

        spelling = generate_romaji(entry.reading, include_alt=True, on_unknown=_report)
        result.append(replace(entry, romaji_primary=spelling.primary, romaji_alt=spelling.alt))
    return result
