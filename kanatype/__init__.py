"""kanatype: a romaji typing tutor for Japanese kana readings."""

from kanatype.core.matcher import (
    MatchResult,
    MatchState,
    apply_keystroke,
    completion_ratio,
    create_match_state,
    expected_next_chars,
)
from kanatype.core.romaji_generate import RomajiSpelling, generate_romaji
from kanatype.core.settings import Settings

__all__ = [
    "MatchResult",
    "MatchState",
    "RomajiSpelling",
    "Settings",
    "apply_keystroke",
    "completion_ratio",
    "create_match_state",
    "expected_next_chars",
    "generate_romaji",
]
