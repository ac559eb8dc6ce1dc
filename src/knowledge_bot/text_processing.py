"""Text helpers shared by retrieval and prompt composition.

  normalize            - ASCII-folded lowercase text used for follow-up detection
  extract_query_words  - significant query words used for keyword scoring
  detect_script        - Cyrillic or Latin, used to pin the reply script
  is_follow_up         - "continue the previous answer" intent
"""
from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

from .schema import Script

STOP_WORDS = frozenset(
    {
        "the", "and", "for", "are", "but", "not", "you", "with", "this", "that",
        "what", "how", "from", "koji", "koja", "koje", "kako", "kada", "gde",
        "šta", "sta", "što", "sto", "ili", "ali", "već", "vec", "samo", "biti",
        "bio", "bila", "sam", "smo", "ste", "jer", "kao", "pri", "ako", "još",
        "jos", "mogu", "može", "moze", "treba", "postoji", "ima", "nije",
    }
)

DEFAULT_FOLLOW_UP_TRIGGERS: tuple[str, ...] = (
    "jos",
    "nastavi",
    "dalje",
    "daj jos",
    "nastavi dalje",
)

_PUNCTUATION = re.compile(r"[^\w\s]")
_NON_ASCII_LETTER = re.compile(r"[^a-z\s]")
_CYRILLIC = re.compile(r"[\u0400-\u04ff]")


def normalize(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return _NON_ASCII_LETTER.sub("", stripped).strip()


def extract_query_words(text: str) -> list[str]:
    """Split a query into the words used for keyword scoring.

    Repeated words are kept so that each occurrence contributes to the
    chunk score.

    Args:
        text: Raw (or translated) user query.

    Returns:
        Lower-cased words longer than two characters that are not stop words.
    """
    cleaned = _PUNCTUATION.sub(" ", text.lower())
    return [word for word in cleaned.split() if len(word) > 2 and word not in STOP_WORDS]


def detect_script(text: str) -> Script:
    if _CYRILLIC.search(text):
        return Script.CYRILLIC
    return Script.LATIN


def is_follow_up(text: str, triggers: Iterable[str] = DEFAULT_FOLLOW_UP_TRIGGERS) -> bool:
    """Return True when the message asks to continue the previous answer."""
    normalized = normalize(text)
    folded = (normalize(trigger) for trigger in triggers)
    return any(trigger in normalized for trigger in folded if trigger)
