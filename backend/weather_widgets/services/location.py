"""Canonical forms of free-text city names.

``normalize_location`` produces the display/storage form ("new york" ->
"New York"). Only the character after each space is capitalized, so
"new-york" becomes "New-york". ``cache_key`` is kept as a separate step on
top of it.
"""

from typing import Any


def normalize_location(raw: Any) -> str:
    if not raw or not isinstance(raw, str):
        return ""
    words = raw.strip().lower().split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def cache_key(normalized: str) -> str:
    return normalized.lower()
