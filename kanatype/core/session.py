from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from kanatype.core.matcher import (
    COMPLETED,
    ERROR,
    MatchResult,
    MatchState,
    apply_keystroke,
    completion_ratio,
    create_match_state,
    expected_next_chars,
)
from kanatype.core.settings import Settings


@dataclass(frozen=True)
class SessionStats:
    """Snapshot of a practice session's counters."""

    correct: int
    mistakes: int
    combo: int
    max_combo: int
    completed_units: int
    accuracy: float
    kpm: float


class PracticeSession:
    """Types a sequence of readings one after the other.

    Owns exactly one MatchState at a time; a fresh one is created whenever the
    current reading is completed. Statistics follow the usual conventions:

      * **correct** – keystrokes that completed a token.
      * **mistakes** – rejected keystrokes (including denied backspace).
      * **combo** – readings completed since the last mistake. A mistake resets
        it to zero, and completing the reading it happened in counts again.
      * **KPM** – correct keystrokes per minute since the session started.
    """

    def __init__(self, readings: Sequence[str], settings: Settings) -> None:
        """Initialize a session over *readings* with read-only *settings*."""
        self._readings: List[str] = list(readings)
        self._settings = settings
        self._index = 0
        self._state: Optional[MatchState] = create_match_state(self._readings[0]) if self._readings else None
        self._start_time = time.time()
        self._correct = 0
        self._mistakes = 0
        self._combo = 0
        self._max_combo = 0

    @property
    def index(self) -> int:
        """Index of the current reading (0-based)."""
        return self._index

    @property
    def start_time(self) -> float:
        return self._start_time

    @property
    def total_units(self) -> int:
        return len(self._readings)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def state(self) -> MatchState:
        """Match state of the current reading."""
        if self._state is None:
            raise IndexError("practice session is complete")
        return self._state

    def expected(self) -> List[str]:
        """Hint characters for the current reading (empty once the session is complete)."""
        if self._state is None:
            return []
        return expected_next_chars(self._state, self._settings)

    def current_reading(self) -> str:
        return self._readings[self._index]

    def is_complete(self) -> bool:
        return self._index >= len(self._readings)

    def press(self, key: str) -> MatchResult:
        """Apply one keystroke to the current reading and update the counters."""
        result = apply_keystroke(self.state, key, self._settings)
        if result.status == ERROR:
            self._mistakes += 1
            self._combo = 0
            return result

        if result.advanced:
            self._correct += 1

        if result.status == COMPLETED:
            self._combo += 1
            self._max_combo = max(self._max_combo, self._combo)
            self._index += 1
            self._state = create_match_state(self._readings[self._index]) if not self.is_complete() else None
        else:
            self._state = result.state
        return result

    def progress(self) -> float:
        """Overall progress in [0, 1], counting partial progress in the current reading."""
        if not self._readings:
            return 1.0
        partial = completion_ratio(self._state) if self._state is not None else 0.0
        return min(1.0, (self._index + partial) / len(self._readings))

    def accuracy(self) -> float:
        """Correct keystrokes as a percentage of correct plus rejected ones."""
        total = self._correct + self._mistakes
        if total == 0:
            return 100.0
        return (self._correct / total) * 100.0

    def kpm(self) -> float:
        elapsed_minutes = max((time.time() - self._start_time) / 60.0, 1e-6)
        return self._correct / elapsed_minutes

    def stats(self) -> SessionStats:
        return SessionStats(
            correct=self._correct,
            mistakes=self._mistakes,
            combo=self._combo,
            max_combo=self._max_combo,
            completed_units=self._index,
            accuracy=self.accuracy(),
            kpm=self.kpm(),
        )
