"""Tests for kanatype.core.words – YAML word bank loading."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from kanatype.core.matcher import apply_keystroke, create_match_state
from kanatype.core.settings import Settings
from kanatype.core.words import WordBank, WordEntry, WordRepository, parse_word_bank


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def words_dir(tmp_path: Path) -> Path:
    d = tmp_path / "data" / "words"
    d.mkdir(parents=True)
    return d


def _write(directory: Path, name: str, content: str) -> Path:
    path = directory / name
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


LEVEL1 = """\
    title: Basics
    entries:
      - id: a1
        display: 猫
        reading: ねこ
        meaning: cat
        tags: [noun]
      - display: 切手
        reading: きって
"""

LEVEL2 = """\
    title: More
    entries:
      - id: b1
        display: 新聞
        reading: しんぶん
        meaning: newspaper
        tags: noun
"""


# ---------------------------------------------------------------------------
# parse_word_bank
# ---------------------------------------------------------------------------

class TestParseWordBank:
    def test_parses_entries(self, words_dir: Path):
        bank = parse_word_bank(_write(words_dir, "level1.yaml", LEVEL1))
        assert isinstance(bank, WordBank)
        assert bank.key == "level1"
        assert bank.name == "Basics"
        assert bank.level == 1
        assert bank.entries[0] == WordEntry(
            id="a1", display="猫", reading="ねこ", meaning="cat", level=1, tags=("noun",)
        )

    def test_generated_id_and_defaults(self, words_dir: Path):
        bank = parse_word_bank(_write(words_dir, "level1.yaml", LEVEL1))
        entry = bank.entries[1]
        assert entry.id == "level1-2"
        assert entry.meaning == ""
        assert entry.tags == ()
        assert entry.romaji_primary is None

    def test_single_tag_string(self, words_dir: Path):
        bank = parse_word_bank(_write(words_dir, "level2.yaml", LEVEL2))
        assert bank.entries[0].tags == ("noun",)

    def test_missing_title(self, words_dir: Path):
        path = _write(words_dir, "level1.yaml", "entries:\n  - {display: a, reading: あ}\n")
        with pytest.raises(ValueError, match="title"):
            parse_word_bank(path)

    def test_empty_entries(self, words_dir: Path):
        path = _write(words_dir, "level1.yaml", "title: Empty\nentries: []\n")
        with pytest.raises(ValueError, match="entries"):
            parse_word_bank(path)

    def test_entry_without_reading(self, words_dir: Path):
        path = _write(words_dir, "level1.yaml", "title: Bad\nentries:\n  - {display: 猫}\n")
        with pytest.raises(ValueError, match="reading"):
            parse_word_bank(path)

    def test_entry_not_a_mapping(self, words_dir: Path):
        path = _write(words_dir, "level1.yaml", "title: Bad\nentries:\n  - ねこ\n")
        with pytest.raises(ValueError, match="mapping"):
            parse_word_bank(path)

    def test_empty_file(self, words_dir: Path):
        path = _write(words_dir, "level1.yaml", "")
        with pytest.raises(ValueError):
            parse_word_bank(path)


# ---------------------------------------------------------------------------
# WordRepository
# ---------------------------------------------------------------------------

class TestWordRepository:
    def test_loads_and_sorts_numerically(self, words_dir: Path):
        _write(words_dir, "level10.yaml", LEVEL2)
        _write(words_dir, "level2.yaml", LEVEL2)
        _write(words_dir, "level1.yaml", LEVEL1)
        repo = WordRepository(words_dir)
        assert [bank.key for bank in repo.all()] == ["level1", "level2", "level10"]

    def test_attaches_romaji(self, words_dir: Path):
        _write(words_dir, "level1.yaml", LEVEL1)
        repo = WordRepository(words_dir)
        entries = repo.get("level1").entries
        assert [e.romaji_primary for e in entries] == ["neko", "kitte"]
        assert entries[1].romaji_alt == ("kiltute", "kixtute")

    def test_words_up_to(self, words_dir: Path):
        _write(words_dir, "level1.yaml", LEVEL1)
        _write(words_dir, "level2.yaml", LEVEL2)
        repo = WordRepository(words_dir)
        assert len(repo.words_up_to(1)) == 2
        assert len(repo.words_up_to(2)) == 3

    def test_get_unknown_key(self, words_dir: Path):
        _write(words_dir, "level1.yaml", LEVEL1)
        with pytest.raises(KeyError):
            WordRepository(words_dir).get("level9")

    def test_missing_directory(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            WordRepository(tmp_path / "nope")

    def test_no_level_files(self, words_dir: Path):
        _write(words_dir, "notes.yaml", LEVEL1)
        with pytest.raises(ValueError, match="No word bank files"):
            WordRepository(words_dir)


# ---------------------------------------------------------------------------
# Bundled word banks
# ---------------------------------------------------------------------------

class TestBundledWords:
    def test_bundled_banks_load(self):
        repo = WordRepository()
        assert repo.all()
        assert all(bank.entries for bank in repo.all())

    def test_every_bundled_word_is_typeable_from_its_romaji(self):
        settings = Settings()
        for entry in WordRepository().words_up_to(10):
            state = create_match_state(entry.reading)
            status = "progress"
            for key in entry.romaji_primary:
                result = apply_keystroke(state, key, settings)
                assert result.status != "error", (entry.id, key)
                state, status = result.state, result.status
            assert status == "completed", entry.id
