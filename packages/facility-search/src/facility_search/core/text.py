from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

_SEPARATORS = re.compile(r"[\W_]+")


def strip_diacritics(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def normalize_text(value: str | None) -> str:
    """Lowercase, strip accents and collapse punctuation to single spaces."""
    if not value:
        return ""
    folded = strip_diacritics(value).lower().replace("’", "'")
    return " ".join(_SEPARATORS.sub(" ", folded).split())


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    """Whole-word (or whole-phrase) keyword match on normalized text."""
    if not text:
        return False
    padded = f" {text} "
    return any(f" {keyword} " in padded for keyword in keywords if keyword)


def normalize_facility_name(value: str | None, prefixes: Iterable[str] = ()) -> str:
    words = normalize_text(value).split()
    prefix_set = {word for prefix in prefixes for word in normalize_text(prefix).split()}
    kept = [word for word in words if word not in prefix_set]
    return " ".join(kept)
