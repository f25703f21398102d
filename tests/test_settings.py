"""Tests for kanatype.core.settings – settings record and JSON persistence."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path

import pytest

from kanatype.core.settings import DEFAULT_SETTINGS, Settings, SettingsStore, settings_from_dict


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def settings_file(tmp_path: Path) -> Path:
    return tmp_path / "kanatype" / "settings.json"


@pytest.fixture()
def store(settings_file: Path) -> SettingsStore:
    """SettingsStore backed by a temp file so tests don't touch ~/.kanatype."""
    return SettingsStore(settings_file)


# ---------------------------------------------------------------------------
# Settings dataclass
# ---------------------------------------------------------------------------

class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.allow_explicit_small_tsu is True
        assert s.allow_backspace is True
        assert s.romaji_hint is True
        assert s.word_level == 3
        assert s.sentence_level == 1

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_SETTINGS.allow_backspace = False  # type: ignore[misc]


# ---------------------------------------------------------------------------
# settings_from_dict
# ---------------------------------------------------------------------------

class TestSettingsFromDict:
    def test_empty(self):
        assert settings_from_dict({}) == DEFAULT_SETTINGS

    def test_values(self):
        s = settings_from_dict({"allow_backspace": False, "word_level": 7})
        assert s.allow_backspace is False
        assert s.word_level == 7

    def test_unknown_keys_ignored(self):
        assert settings_from_dict({"theme": "dark", "volume": 0.4}) == DEFAULT_SETTINGS

    def test_wrong_types_ignored(self):
        s = settings_from_dict({"allow_backspace": "no", "word_level": "high", "romaji_hint": 0})
        assert s == DEFAULT_SETTINGS

    def test_bool_is_not_a_level(self):
        assert settings_from_dict({"word_level": True}).word_level == 3

    def test_float_level_truncated(self):
        assert settings_from_dict({"word_level": 4.7}).word_level == 4

    @pytest.mark.parametrize("raw, clamped", [(0, 1), (-5, 1), (11, 10), (42, 10)])
    def test_level_clamped(self, raw: int, clamped: int):
        assert settings_from_dict({"word_level": raw}).word_level == clamped

    def test_sentence_level_clamped(self):
        assert settings_from_dict({"sentence_level": 0}).sentence_level == 1
        assert settings_from_dict({"sentence_level": 12}).sentence_level == 10

    @pytest.mark.parametrize("raw", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_level_ignored(self, raw: float):
        assert settings_from_dict({"word_level": raw}).word_level == 3


# ---------------------------------------------------------------------------
# SettingsStore – load
# ---------------------------------------------------------------------------

class TestLoad:
    def test_missing_file(self, store: SettingsStore):
        assert store.load() == DEFAULT_SETTINGS

    def test_reads_existing_file(self, settings_file: Path):
        settings_file.parent.mkdir(parents=True)
        settings_file.write_text(json.dumps({"allow_explicit_small_tsu": False}), encoding="utf-8")
        assert SettingsStore(settings_file).load().allow_explicit_small_tsu is False

    def test_corrupt_json(self, settings_file: Path, caplog: pytest.LogCaptureFixture):
        settings_file.parent.mkdir(parents=True)
        settings_file.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="kanatype.core.settings"):
            assert SettingsStore(settings_file).load() == DEFAULT_SETTINGS
        assert "Could not load settings" in caplog.text

    def test_not_an_object(self, settings_file: Path):
        settings_file.parent.mkdir(parents=True)
        settings_file.write_text("[1, 2]", encoding="utf-8")
        assert SettingsStore(settings_file).load() == DEFAULT_SETTINGS

    @pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_level_in_file(self, settings_file: Path, literal: str):
        settings_file.parent.mkdir(parents=True)
        settings_file.write_text(f'{{"word_level": {literal}, "romaji_hint": false}}', encoding="utf-8")
        loaded = SettingsStore(settings_file).load()
        assert loaded.word_level == 3
        assert loaded.romaji_hint is False

    def test_default_path_under_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert SettingsStore().file_path == tmp_path / ".kanatype" / "settings.json"


# ---------------------------------------------------------------------------
# SettingsStore – save / update / reset
# ---------------------------------------------------------------------------

class TestSave:
    def test_creates_file(self, store: SettingsStore, settings_file: Path):
        store.save(Settings(allow_backspace=False))
        assert settings_file.exists()
        payload = json.loads(settings_file.read_text(encoding="utf-8"))
        assert payload == asdict(Settings(allow_backspace=False))

    def test_round_trip(self, store: SettingsStore, settings_file: Path):
        saved = Settings(allow_explicit_small_tsu=False, romaji_hint=False, word_level=5)
        store.save(saved)
        assert SettingsStore(settings_file).load() == saved

    def test_save_clamps_level(self, store: SettingsStore):
        store.save(Settings(word_level=99))
        assert store.load().word_level == 10

    def test_update(self, store: SettingsStore, settings_file: Path):
        updated = store.update(allow_backspace=False)
        assert updated.allow_backspace is False
        assert updated.allow_explicit_small_tsu is True
        assert SettingsStore(settings_file).load() == updated

    def test_update_unknown_setting(self, store: SettingsStore):
        with pytest.raises(ValueError, match="volume"):
            store.update(volume=0.5)

    @pytest.mark.parametrize(
        "changes",
        [{"word_level": "5"}, {"allow_backspace": "yes"}, {"romaji_hint": 1}, {"word_level": float("nan")}],
    )
    def test_update_rejects_wrong_types(self, store: SettingsStore, settings_file: Path, changes: dict):
        with pytest.raises(ValueError, match="Invalid value"):
            store.update(**changes)
        assert store.load() == DEFAULT_SETTINGS
        assert not settings_file.exists()

    def test_update_clamps_level(self, store: SettingsStore):
        assert store.update(word_level=42).word_level == 10

    def test_reset(self, store: SettingsStore, settings_file: Path):
        store.update(word_level=8)
        store.reset()
        assert store.load() == DEFAULT_SETTINGS
        assert SettingsStore(settings_file).load() == DEFAULT_SETTINGS

    def test_write_failure_is_logged(
        self, store: SettingsStore, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ):
        def _fail(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "write_text", _fail)
        with caplog.at_level(logging.WARNING, logger="kanatype.core.settings"):
            store.save(Settings(romaji_hint=False))
        assert "Could not save settings" in caplog.text
        assert store.load().romaji_hint is False
