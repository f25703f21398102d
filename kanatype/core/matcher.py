"""Keystroke matching engine.

``apply_keystroke`` is a pure reducer over an immutable ``MatchState``: it never
mutates its input, does no I/O and never raises for bad input. Rejections are
reported through ``MatchResult.status``.

Accepted keys are the lowercase letters, the apostrophe (used to close ``n'``),
the hyphen (ー with no vowel before it) and the ``"backspace"`` signal. Callers
are expected to filter everything else out before calling the reducer (see
``is_accepted_key``).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Tuple

from kanatype.core.candidates import current_candidates
from kanatype.core.romaji_table import is_passive, typable_length
from kanatype.core.settings import Settings
from kanatype.core.tokenizer import skip_passive

PROGRESS = "progress"
COMPLETED = "completed"
ERROR = "error"

BACKSPACE = "backspace"
ACCEPTED_KEYS = frozenset("abcdefghijklmnopqrstuvwxyz'-")
MAX_EXPECTED = 3


@dataclass(frozen=True)
class MatchState:
    reading: str
    index: int = 0
    buffer: str = ""
    last_romaji: str = ""


@dataclass(frozen=True)
class MatchResult:
    state: MatchState
    status: str
    advanced: bool
    expected: Tuple[str, ...]


def is_accepted_key(key: str) -> bool:
    """True for the keys the reducer understands (letters, ``'``, ``-``, backspace)."""
    key = key.lower()
    return key == BACKSPACE or key in ACCEPTED_KEYS


def create_match_state(reading: str) -> MatchState:
    return MatchState(reading=reading)


def candidate_spellings(state: MatchState, settings: Settings) -> Tuple[str, ...]:
    """Whole-token spellings that would complete the token under the cursor."""
    _, options = current_candidates(state.reading, state.index, state.last_romaji, settings)
    return options


def expected_next_chars(state: MatchState, settings: Settings) -> List[str]:
    """Up to three distinct characters that would be accepted next (for hints)."""
    position = len(state.buffer)
    unique: List[str] = []
    for option in candidate_spellings(state, settings):
        if not option:
            continue
        char = option[position] if position < len(option) else option[0]
        if char not in unique:
            unique.append(char)
    return unique[:MAX_EXPECTED]


def _result(state: MatchState, status: str, advanced: bool, settings: Settings) -> MatchResult:
    return MatchResult(
        state=state,
        status=status,
        advanced=advanced,
        expected=tuple(expected_next_chars(state, settings)),
    )


def apply_keystroke(state: MatchState, key: str, settings: Settings) -> MatchResult:
    """Apply one keystroke and return the new state with its status.

    * ``error``: the key is not a valid continuation (or backspace is denied);
      the input state is returned as is.
    * ``progress``: the key was consumed; ``advanced`` is True when it
      completed a token.
    * ``completed``: the whole reading has been typed. Further calls keep
      returning ``completed`` without changing anything.
    """
    key = key.lower()
    working = state
    skipped = skip_passive(working.reading, working.index)
    if skipped != working.index:
        working = replace(working, index=skipped)

    token, options = current_candidates(working.reading, working.index, working.last_romaji, settings)
    if token is None:
        return _result(working, COMPLETED, False, settings)

    if key == BACKSPACE:
        if settings.allow_backspace and working.buffer:
            return _result(replace(working, buffer=working.buffer[:-1]), PROGRESS, False, settings)
        return _result(state, ERROR, False, settings)

    candidate = working.buffer + key
    if not key or not any(option.startswith(candidate) for option in options):
        return _result(state, ERROR, False, settings)

    if candidate in options:
        next_index = skip_passive(working.reading, token.end)
        committed = MatchState(
            reading=working.reading,
            index=next_index,
            buffer="",
            last_romaji=candidate,
        )
        status = COMPLETED if next_index >= len(working.reading) else PROGRESS
        return _result(committed, status, True, settings)

    return _result(replace(working, buffer=candidate), PROGRESS, False, settings)


def completion_ratio(state: MatchState) -> float:
    """Share of typable characters already committed, in [0, 1].

    Passive characters count neither towards the total nor towards progress,
    so the ratio reaches 1.0 exactly when the reading has been consumed.
    """
    total = typable_length(state.reading)
    if total == 0:
        return 0.0
    done = sum(1 for ch in state.reading[: state.index] if not is_passive(ch))
    return min(1.0, done / total)
