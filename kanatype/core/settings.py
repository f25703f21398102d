from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

MIN_WORD_LEVEL = 1
MAX_WORD_LEVEL = 10


@dataclass(frozen=True)
class Settings:
    """User settings. The matching engine only reads the two ``allow_*`` flags."""

    allow_explicit_small_tsu: bool = True
    allow_backspace: bool = True
    romaji_hint: bool = True
    word_level: int = 3
    sentence_level: int = 1


DEFAULT_SETTINGS = Settings()

# Marks a value that does not fit the field's type.
_INVALID = object()


def _default_path() -> Path:
    return Path.home() / ".kanatype" / "settings.json"


def _clamp_level(value: int) -> int:
    return max(MIN_WORD_LEVEL, min(MAX_WORD_LEVEL, value))


def _clamp_levels(settings: Settings) -> Settings:
    return replace(
        settings,
        word_level=_clamp_level(settings.word_level),
        sentence_level=_clamp_level(settings.sentence_level),
    )


def _coerce(name: str, raw: Any) -> Any:
    """Return *raw* converted to the type of field *name*, or ``_INVALID``."""
    default = getattr(DEFAULT_SETTINGS, name)
    if isinstance(default, bool):
        return raw if isinstance(raw, bool) else _INVALID
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return _INVALID
    if isinstance(raw, float) and not math.isfinite(raw):
        return _INVALID
    return int(raw)


def settings_from_dict(payload: Dict[str, Any]) -> Settings:
    """Build Settings from a decoded JSON object, ignoring unknown or ill-typed keys."""
    values: Dict[str, Any] = {}
    for field in fields(Settings):
        if field.name not in payload:
            continue
        value = _coerce(field.name, payload[field.name])
        if value is not _INVALID:
            values[field.name] = value
    return _clamp_levels(replace(DEFAULT_SETTINGS, **values))


class SettingsStore:
    """Persists Settings as JSON (default: ~/.kanatype/settings.json).

    A missing or unreadable file yields the defaults; it is rewritten on the
    next save.
    """

    def __init__(self, file_path: Optional[Path] = None) -> None:
        self._file_path = Path(file_path) if file_path is not None else _default_path()
        self._settings = self._load()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> Settings:
        return self._settings

    def save(self, settings: Settings) -> None:
        self._settings = _clamp_levels(settings)
        self._save()

    def update(self, **changes: Any) -> Settings:
        """Apply keyword changes (same names as the Settings fields) and persist.

        Raises ValueError for unknown names and for values of the wrong type.
        """
        unknown = set(changes) - {f.name for f in fields(Settings)}
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        values: Dict[str, Any] = {}
        for name, raw in changes.items():
            value = _coerce(name, raw)
            if value is _INVALID:
                raise ValueError(f"Invalid value for {name}: {raw!r}")
            values[name] = value
        self.save(replace(self._settings, **values))
        return self._settings

    def reset(self) -> None:
        self._settings = DEFAULT_SETTINGS
        self._save()

    def _load(self) -> Settings:
        if not self._file_path.exists():
            return DEFAULT_SETTINGS
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load settings from %s: %s", self._file_path, e)
            return DEFAULT_SETTINGS
        if not isinstance(payload, dict):
            logger.warning("Ignoring settings in %s: expected a JSON object", self._file_path)
            return DEFAULT_SETTINGS
        return settings_from_dict(payload)

    def _save(self) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(asdict(self._settings), indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save settings to %s: %s", self._file_path, e)
