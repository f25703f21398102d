from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from kanatype.core.romaji_table import typable_length
from kanatype.core.words import bank_sort_key, level_number

# Characters that end a segment; each stays attached to the text before it.
SEGMENT_END = "。．.！？!?"
_SEGMENT_SPLIT = re.compile(r"(?<=[。．.！？!?])")


@dataclass(frozen=True)
class SentenceEntry:
    id: str
    text: str
    reading: str
    meaning: str
    level: int
    source: str = ""


@dataclass(frozen=True)
class SentenceSegment:
    text: str
    reading: str


@dataclass(frozen=True)
class SentenceBank:
    key: str
    name: str
    level: int
    entries: List[SentenceEntry]


def _default_sentences_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "data" / "sentences"


def _split(value: str) -> List[str]:
    return [part for part in _SEGMENT_SPLIT.split(value) if part]


def split_into_segments(entry: SentenceEntry) -> List[SentenceSegment]:
    """Split a sentence into the units typed one after the other.

    Text and reading are cut after every sentence terminator and paired by
    position; the side with fewer parts is padded with empty strings.
    Terminators are dropped from the segment readings, and segments whose
    reading has nothing to type are left out. A sentence without any typable
    segment comes back whole.
    """
    text_parts = _split(entry.text)
    reading_parts = _split(entry.reading)
    segments: List[SentenceSegment] = []
    for i in range(max(len(text_parts), len(reading_parts))):
        text = text_parts[i] if i < len(text_parts) else ""
        reading = reading_parts[i].rstrip(SEGMENT_END) if i < len(reading_parts) else ""
        if typable_length(reading) == 0:
            continue
        segments.append(SentenceSegment(text=text.strip(), reading=reading.strip()))
    return segments or [SentenceSegment(text=entry.text, reading=entry.reading)]


def parse_sentence_bank(path: Path) -> SentenceBank:
    """Read one ``level<N>.yaml`` sentence file into a SentenceBank."""
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"{path.name}: expected YAML with 'title' and 'entries'")
    title = raw.get("title")
    items = raw.get("entries")
    if not title or not isinstance(title, str):
        raise ValueError(f"{path.name}: missing or invalid 'title'")
    if not isinstance(items, list) or not items:
        raise ValueError(f"{path.name}: 'entries' must be a non-empty list")

    level = level_number(path.stem) or 1
    entries: List[SentenceEntry] = []
    for i, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"{path.name}: entry {i} is not a mapping")
        text = str(item.get("text") or "").strip()
        reading = str(item.get("reading") or "").strip()
        if not text or not reading:
            raise ValueError(f"{path.name}: entry {i} needs 'text' and 'reading'")
        entries.append(
            SentenceEntry(
                id=str(item.get("id") or f"{path.stem}-{i}"),
                text=text,
                reading=reading,
                meaning=str(item.get("meaning") or "").strip(),
                level=level,
                source=str(item.get("source") or "").strip(),
            )
        )
    return SentenceBank(key=path.stem, name=title.strip(), level=level, entries=entries)


class SentenceRepository:
    """Sentence banks bundled under ``kanatype/data/sentences``."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else _default_sentences_dir()
        self._banks = self._load_banks()

    def all(self) -> List[SentenceBank]:
        return list(self._banks.values())

    def get(self, key: str) -> SentenceBank:
        return self._banks[key]

    def sentences_up_to(self, level: int) -> List[SentenceEntry]:
        return [entry for bank in self._banks.values() if bank.level <= level for entry in bank.entries]

    def _load_banks(self) -> Dict[str, SentenceBank]:
        if not self._base_dir.exists():
            raise FileNotFoundError(f"Sentence bank directory not found: {self._base_dir}")

        banks: Dict[str, SentenceBank] = {}
        for path in sorted(self._base_dir.glob("level*.yaml"), key=bank_sort_key):
            bank = parse_sentence_bank(path)
            banks[bank.key] = bank

        if not banks:
            raise ValueError(f"No sentence bank files (level*.yaml) found in {self._base_dir}")
        return banks
