"""Application entry point for the kanatype romaji typing tutor."""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from kanatype.core.matcher import BACKSPACE, ERROR, is_accepted_key
from kanatype.core.romaji_generate import generate_romaji
from kanatype.core.sentences import SentenceEntry, SentenceRepository, split_into_segments
from kanatype.core.session import PracticeSession
from kanatype.core.settings import MAX_WORD_LEVEL, MIN_WORD_LEVEL, Settings, SettingsStore
from kanatype.core.words import WordEntry, WordRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_COUNT = 10
WORD_MODE = "words"
SENTENCE_MODE = "sentences"
# Typed in place of the backspace key in the line-oriented front end.
BACKSPACE_CHAR = "<"

# (prompt, reading) per practice unit
Unit = Tuple[str, str]


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kanatype",
        description="Practice typing the romaji of Japanese words and sentences.",
    )
    parser.add_argument(
        "--mode",
        choices=(WORD_MODE, SENTENCE_MODE),
        default=WORD_MODE,
        help="Practice single words or sentences split into segments (default: words).",
    )
    parser.add_argument(
        "--level",
        type=int,
        choices=range(MIN_WORD_LEVEL, MAX_WORD_LEVEL + 1),
        metavar=f"{{{MIN_WORD_LEVEL}..{MAX_WORD_LEVEL}}}",
        help="Highest level to draw from (default: the saved setting for the mode).",
    )
    parser.add_argument("--count", type=int, default=DEFAULT_COUNT, help="Number of words or sentences to practice.")
    parser.add_argument("--settings", type=Path, help="Settings file (default: ~/.kanatype/settings.json).")
    parser.add_argument("--words", type=Path, help="Directory with level*.yaml word banks.")
    parser.add_argument("--sentences", type=Path, help="Directory with level*.yaml sentence banks.")
    parser.add_argument("--seed", type=int, help="Random seed for the selection.")
    return parser


def pick_entries(pool: Sequence[T], count: int, seed: Optional[int] = None) -> List[T]:
    rng = random.Random(seed)
    return rng.sample(list(pool), min(max(count, 0), len(pool)))


def word_prompt(entry: WordEntry, show_romaji: bool) -> str:
    label = f"{entry.display} ({entry.reading})"
    if entry.meaning:
        label += f" - {entry.meaning}"
    if show_romaji and entry.romaji_primary:
        label += f"  [{entry.romaji_primary}]"
    return label


def sentence_units(entry: SentenceEntry, show_romaji: bool) -> List[Unit]:
    """One practice unit per segment; the meaning is shown with the first one."""
    segments = split_into_segments(entry)
    units: List[Unit] = []
    for position, segment in enumerate(segments, start=1):
        label = f"[{position}/{len(segments)}] {segment.text} ({segment.reading})"
        if position == 1 and entry.meaning:
            label += f" - {entry.meaning}"
        if show_romaji:
            label += f"  [{generate_romaji(segment.reading, include_alt=False).primary}]"
        units.append((label, segment.reading))
    return units


def practice(
    session: PracticeSession,
    prompts: Sequence[str],
    read_line: Optional[Callable[[str], str]] = None,
    write: Optional[Callable[[str], None]] = None,
) -> None:
    """Run the line-oriented practice loop until every unit is typed or input ends."""
    read_line = read_line or input
    write = write or print
    while not session.is_complete():
        unit = session.index
        write(prompts[unit])
        try:
            line = read_line("> ")
        except EOFError:
            break

        for ch in line.strip():
            key = BACKSPACE if ch == BACKSPACE_CHAR else ch
            if not is_accepted_key(key):
                continue
            result = session.press(key)
            if result.status == ERROR:
                hint = "/".join(result.expected) or "?"
                write(f"  miss: {ch!r} (expected {hint})")
                continue
            if session.index != unit:
                break

        if session.index != unit:
            write(f"  ok ({session.progress() * 100:.0f}%)")
        else:
            state = session.state
            hint = "/".join(session.expected())
            write(f"  typed so far: {state.reading[:state.index]}{state.buffer} (next: {hint})")


def _word_units(args: argparse.Namespace, settings: Settings) -> Optional[List[Unit]]:
    level = args.level or settings.word_level
    try:
        repository = WordRepository(args.words)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Could not load word banks: %s", e)
        return None

    pool = repository.words_up_to(level)
    words = pick_entries(pool, args.count, args.seed)
    if not words:
        logger.error("No words available up to level %d", level)
        return None
    logger.info("Practicing %d of %d words up to level %d", len(words), len(pool), level)
    return [(word_prompt(w, settings.romaji_hint), w.reading) for w in words]


def _sentence_units(args: argparse.Namespace, settings: Settings) -> Optional[List[Unit]]:
    level = args.level or settings.sentence_level
    try:
        repository = SentenceRepository(args.sentences)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Could not load sentence banks: %s", e)
        return None

    pool = repository.sentences_up_to(level)
    sentences = pick_entries(pool, args.count, args.seed)
    if not sentences:
        logger.error("No sentences available up to level %d", level)
        return None
    logger.info("Practicing %d of %d sentences up to level %d", len(sentences), len(pool), level)
    return [unit for s in sentences for unit in sentence_units(s, settings.romaji_hint)]


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    store = SettingsStore(args.settings)
    settings = store.load()

    if args.mode == SENTENCE_MODE:
        units = _sentence_units(args, settings)
        noun = "segments"
    else:
        units = _word_units(args, settings)
        noun = "words"
    if units is None:
        return 1

    session = PracticeSession([reading for _, reading in units], settings)
    practice(session, [prompt for prompt, _ in units])

    stats = session.stats()
    print(
        f"Completed {stats.completed_units}/{session.total_units} {noun}, "
        f"accuracy {stats.accuracy:.1f}%, {stats.kpm:.0f} KPM, best combo {stats.max_combo}"
    )
    return 0


def run() -> None:
    sys.exit(main())
