"""Kana to romaji spelling tables and the character helpers shared by the engine.

Every spelling list is ordered: the first entry is the canonical display form,
the rest are alternate spellings that are accepted while typing.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple

VOWELS = frozenset("aiueo")

SMALL_Y = frozenset("ゃゅょ")
SMALL_TSU = "っ"
MORAIC_N = "ん"
LONG_VOWEL = "ー"

# Punctuation and spaces that never need a keystroke.
PASSIVE_CHARS = frozenset("、。！？・　 ～-”＂")

_KATAKANA_FIRST = 0x30A1
_KATAKANA_LAST = 0x30F6
_KATAKANA_OFFSET = 0x60

UnknownKanaHook = Callable[[str, str], None]

BASE: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    # Small vowels
    "ぁ": ("a",), "ぃ": ("i",), "ぅ": ("u",), "ぇ": ("e",), "ぉ": ("o",),
    # Vowels
    "あ": ("a",), "い": ("i",), "う": ("u",), "え": ("e",), "お": ("o",),
    # K
    "か": ("ka", "ca"), "き": ("ki",), "く": ("ku",), "け": ("ke",), "こ": ("ko", "co"),
    # S
    "さ": ("sa",), "し": ("shi", "si"), "す": ("su",), "せ": ("se",), "そ": ("so",),
    # T
    "た": ("ta",), "ち": ("chi", "ti"), "つ": ("tsu", "tu"), "て": ("te",), "と": ("to",),
    # N
    "な": ("na",), "に": ("ni",), "ぬ": ("nu",), "ね": ("ne",), "の": ("no",),
    # H
    "は": ("ha",), "ひ": ("hi",), "ふ": ("fu", "hu"), "へ": ("he",), "ほ": ("ho",),
    # M
    "ま": ("ma",), "み": ("mi",), "む": ("mu",), "め": ("me",), "も": ("mo",),
    # Y
    "や": ("ya",), "ゆ": ("yu",), "よ": ("yo",),
    # R
    "ら": ("ra",), "り": ("ri",), "る": ("ru",), "れ": ("re",), "ろ": ("ro",),
    # W
    "わ": ("wa",), "ゐ": ("wi",), "ゑ": ("we",), "を": ("wo", "o"),
    "ん": ("n", "nn"),
    # Voiced
    "が": ("ga",), "ぎ": ("gi",), "ぐ": ("gu",), "げ": ("ge",), "ご": ("go",),
    "ざ": ("za",), "じ": ("ji", "zi"), "ず": ("zu",), "ぜ": ("ze",), "ぞ": ("zo",),
    "だ": ("da",), "ぢ": ("di",), "づ": ("du",), "で": ("de",), "ど": ("do",),
    "ば": ("ba",), "び": ("bi",), "ぶ": ("bu",), "べ": ("be",), "ぼ": ("bo",),
    # Semi-voiced
    "ぱ": ("pa",), "ぴ": ("pi",), "ぷ": ("pu",), "ぺ": ("pe",), "ぽ": ("po",),
    "ゔ": ("vu",),
    # Standalone small y
    "ゃ": ("ya",), "ゅ": ("yu",), "ょ": ("yo",),
})

YOUON: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "きゃ": ("kya",), "きゅ": ("kyu",), "きょ": ("kyo",),
    "しゃ": ("sha", "sya"), "しゅ": ("shu", "syu"), "しょ": ("sho", "syo"),
    "ちゃ": ("cha", "cya", "tya"), "ちゅ": ("chu", "cyu", "tyu"), "ちょ": ("cho", "cyo", "tyo"),
    "にゃ": ("nya",), "にゅ": ("nyu",), "にょ": ("nyo",),
    "ひゃ": ("hya",), "ひゅ": ("hyu",), "ひょ": ("hyo",),
    "みゃ": ("mya",), "みゅ": ("myu",), "みょ": ("myo",),
    "りゃ": ("rya",), "りゅ": ("ryu",), "りょ": ("ryo",),
    "ぎゃ": ("gya",), "ぎゅ": ("gyu",), "ぎょ": ("gyo",),
    "じゃ": ("ja", "jya", "zya"), "じゅ": ("ju", "jyu", "zyu"), "じょ": ("jo", "jyo", "zyo"),
    "びゃ": ("bya",), "びゅ": ("byu",), "びょ": ("byo",),
    "ぴゃ": ("pya",), "ぴゅ": ("pyu",), "ぴょ": ("pyo",),
})


def to_hiragana(char: str) -> str:
    """Fold a single katakana character to hiragana; anything else is returned as is."""
    if not char:
        return char
    code = ord(char[0])
    if _KATAKANA_FIRST <= code <= _KATAKANA_LAST:
        return chr(code - _KATAKANA_OFFSET)
    return char


def normalize_reading(text: str) -> str:
    return "".join(to_hiragana(ch) for ch in text)


def is_passive(char: str) -> bool:
    return char in PASSIVE_CHARS


def typable_length(text: str) -> int:
    """Number of characters in *text* that need at least one keystroke."""
    return sum(1 for ch in text if not is_passive(ch))


def consonant_onset(romaji: str) -> str:
    """Leading consonant run of a spelling ("sh" for "shi", "" for "a")."""
    onset = []
    for ch in romaji:
        if ch in VOWELS:
            break
        onset.append(ch)
    return "".join(onset)


def starts_with_vowel_or_y(romaji: str) -> bool:
    return bool(romaji) and (romaji[0] in VOWELS or romaji[0] == "y")


def lookup(
    kana: str,
    on_unknown: Optional[UnknownKanaHook] = None,
    reading: Optional[str] = None,
) -> Tuple[str, ...]:
    """Return the accepted spellings for a kana unit (one kana or a youon digraph).

    An unmapped unit degrades to literal passthrough: the unit itself is its
    only spelling and *on_unknown* (if given) is told about it.
    """
    folded = normalize_reading(kana)
    spellings = YOUON.get(folded) or BASE.get(folded)
    if spellings:
        return spellings
    if on_unknown is not None:
        on_unknown(kana, reading if reading is not None else kana)
    return (folded,)
