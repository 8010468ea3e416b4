"""
Candidate filtering against a compiled RuleSet.

Given:
  - a pool of words (e.g., everything scraped from the word source)
  - a RuleSet compiled from the rule language

Return:
  - words that satisfy ALL constraints.

Checks run in a fixed order and the first failure rejects the word:
  1) length
  2) exact letters (greens)
  3) absent letters (grays)
  4) present letters (yellows), including their banned positions

Because (3) runs before (4), a letter listed as both absent and present
always rejects the word at the absent check.
"""

from typing import Iterable, List, Optional

from .rules import RuleSet


def explain_rejection(word: str, rules: RuleSet) -> Optional[str]:
    """
    Return the name of the first failing check, or None if `word` passes.

    Names: "length", "exact", "absent", "present".
    """
    w = word.strip().upper()

    if len(w) != rules.length:
        return "length"

    for idx, letter in rules.exact.items():
        if idx >= len(w) or w[idx] != letter:
            return "exact"

    for letter in rules.absent:
        if letter in w:
            return "absent"

    for letter, banned in rules.present.items():
        if letter not in w:
            return "present"
        # Letter is there, but not allowed at these spots
        for idx in banned:
            if idx < len(w) and w[idx] == letter:
                return "present"

    return None


def check_word(word: str, rules: RuleSet) -> bool:
    """True iff `word` satisfies every constraint in `rules`. Pure."""
    return explain_rejection(word, rules) is None


def filter_candidates(words: Iterable[str], rules: RuleSet) -> List[str]:
    """
    Keep only words that pass `check_word`.

    Returns:
      List[str] of accepted words, uppercased, order preserved as in `words`.
    """
    out: List[str] = []
    for w in words:
        if check_word(w, rules):
            out.append(w.strip().upper())
    return out
