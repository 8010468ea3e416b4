"""
URL scheme of the word-list site.

    page 1 : https://www.bestwordlist.com/p/o/1/words5lettersthirdlettero.htm
    page k : https://www.bestwordlist.com/p/o/1/words5lettersthirdletteropage<k>.htm
"""

from __future__ import annotations

BASE_URL = "https://www.bestwordlist.com/p"

ORDINALS = ("first", "second", "third", "fourth", "fifth")


def position_name(index: int) -> str:
    """Zero-based index -> ordinal used by the site ('position7' past fifth)."""
    if 0 <= index < len(ORDINALS):
        return ORDINALS[index]
    return f"position{index + 1}"


def seed_base(letter: str, index: int, length: int) -> str:
    """URL stem shared by every page of one listing (no page suffix, no .htm)."""
    l = letter.lower()
    return f"{BASE_URL}/{l}/1/words{length}letters{position_name(index)}letter{l}"


def page_url(base: str, page: int) -> str:
    if page <= 1:
        return f"{base}.htm"
    return f"{base}page{page}.htm"
