from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from kanatype.core.romaji_generate import attach_romaji


@dataclass(frozen=True)
class WordEntry:
    id: str
    display: str
    reading: str
    meaning: str
    level: int
    tags: Tuple[str, ...] = ()
    romaji_primary: Optional[str] = None
    romaji_alt: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WordBank:
    key: str
    name: str
    level: int
    entries: List[WordEntry]


def _default_words_dir() -> Path:
    return Path(__file__).resolve().parent.parent / "data" / "words"


def level_number(stem: str) -> Optional[int]:
    m = re.match(r"^level(\d+)$", stem)
    return int(m.group(1)) if m else None


def bank_sort_key(p: Path) -> tuple[int, str]:
    number = level_number(p.stem)
    if number is not None:
        return (number, p.stem)
    return (10**9, p.stem)


def parse_word_bank(path: Path) -> WordBank:
    """Read one ``level<N>.yaml`` file into a WordBank (romaji not attached yet)."""
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
    entries: List[WordEntry] = []
    for i, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"{path.name}: entry {i} is not a mapping")
        display = str(item.get("display") or "").strip()
        reading = str(item.get("reading") or "").strip()
        if not display or not reading:
            raise ValueError(f"{path.name}: entry {i} needs 'display' and 'reading'")
        tags = item.get("tags") or []
        if isinstance(tags, str):
            tags = [tags]
        entries.append(
            WordEntry(
                id=str(item.get("id") or f"{path.stem}-{i}"),
                display=display,
                reading=reading,
                meaning=str(item.get("meaning") or "").strip(),
                level=level,
                tags=tuple(str(t) for t in tags if str(t).strip()),
            )
        )
    return WordBank(key=path.stem, name=title.strip(), level=level, entries=entries)


class WordRepository:
    """Word banks bundled under ``kanatype/data/words``, with display romaji attached."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else _default_words_dir()
        self._banks = self._load_banks()

    def all(self) -> List[WordBank]:
        return list(self._banks.values())

    def get(self, key: str) -> WordBank:
        return self._banks[key]

    def words_up_to(self, level: int) -> List[WordEntry]:
        """All entries whose bank level is at most *level*."""
        return [entry for bank in self._banks.values() if bank.level <= level for entry in bank.entries]

    def _load_banks(self) -> Dict[str, WordBank]:
        if not self._base_dir.exists():
            raise FileNotFoundError(f"Word bank directory not found: {self._base_dir}")

        banks: Dict[str, WordBank] = {}
        for path in sorted(self._base_dir.glob("level*.yaml"), key=bank_sort_key):
            bank = parse_word_bank(path)
            banks[bank.key] = WordBank(
                key=bank.key,
                name=bank.name,
                level=bank.level,
                entries=attach_romaji(bank.entries),
            )

        if not banks:
            raise ValueError(f"No word bank files (level*.yaml) found in {self._base_dir}")
        return banks
