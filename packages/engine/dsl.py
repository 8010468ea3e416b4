"""
Compiler for the rule language.

The rule language is line oriented and case-insensitive:

    O at 3                      exact   (green)   -> exact[2] = 'O'
    A in word                   present (yellow)  -> present['A'] = ()
    A in word, not at 1, 2      present + ban     -> present['A'] = (0, 1)
    no S, T, R, E               absent  (gray)    -> absent += S T R E
    LENGTH: 6                   word length       -> length = 6

Each line is offered to LINE_RULES in order. The first rule that accepts
the line wins and later rules are not tried. A line nobody accepts is
ignored, so chatty translator output never breaks compilation.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .rules import DEFAULT_LENGTH, RuleSet

logger = logging.getLogger(__name__)

# One-based positions accepted in source text for exact rules.
MIN_POSITION = 1
MAX_POSITION = 9


@dataclass
class _Draft:
    """Mutable accumulator; only ever turned into a RuleSet at the end."""
    exact: Dict[int, str] = field(default_factory=dict)
    present: Dict[str, List[int]] = field(default_factory=dict)
    absent: List[str] = field(default_factory=list)
    length: int = DEFAULT_LENGTH

    def freeze(self) -> RuleSet:
        return RuleSet.build(
            exact=self.exact, present=self.present, absent=self.absent, length=self.length
        )


# An action returns False to decline a line it matched syntactically
# (e.g. "A AT 0"), which lets the next rule in the table try it.
Action = Callable[[re.Match, _Draft], bool]


@dataclass(frozen=True)
class LineRule:
    name: str
    pattern: re.Pattern
    action: Action

    def accept(self, line: str, draft: _Draft) -> bool:
        m = self.pattern.search(line)
        if m is None:
            return False
        return self.action(m, draft)


def _split_csv(text: str) -> List[str]:
    return [t.strip() for t in text.split(",") if t.strip()]


def _exact(m: re.Match, d: _Draft) -> bool:
    pos = int(m.group(2))
    if not MIN_POSITION <= pos <= MAX_POSITION:
        return False
    # Later rules for the same position overwrite earlier ones.
    d.exact[pos - 1] = m.group(1)
    return True


def _absent(m: re.Match, d: _Draft) -> bool:
    d.absent.extend(t for t in _split_csv(m.group(1)) if len(t) == 1)
    return True


_NOT_AT_RE = re.compile(r"NOT\s+AT\s+([\d,\s]+)$")


def _present(m: re.Match, d: _Draft) -> bool:
    banned: List[int] = []
    tail = _NOT_AT_RE.search(m.string)
    if tail:
        digits = re.findall(r"\d+", tail.group(1))
        banned = [p for p in (int(t) - 1 for t in digits) if p >= 0]
    d.present[m.group(1)] = banned
    return True


def _length(m: re.Match, d: _Draft) -> bool:
    n = int(m.group(1))
    if n < 1:
        return False
    d.length = n
    return True


# Priority order matters: first accepting rule wins.
LINE_RULES: Tuple[LineRule, ...] = (
    LineRule("exact", re.compile(r"^([A-Z])\s+AT\s+(\d)$"), _exact),
    LineRule("absent", re.compile(r"^NO\s+([A-Z,\s]+)$"), _absent),
    LineRule("present", re.compile(r"^([A-Z])\s+IN\s+WORD\b"), _present),
    LineRule("length", re.compile(r"^LENGTH\s*:\s*(\d+)$"), _length),
)


def classify_line(line: str, draft: Optional[_Draft] = None) -> Optional[str]:
    """
    Feed one (already normalized) line through the table.
    Returns the name of the rule that took it, or None if it was ignored.
    """
    draft = draft if draft is not None else _Draft()
    for rule in LINE_RULES:
        if rule.accept(line, draft):
            return rule.name
    return None


def compile_rules(text: str | None) -> RuleSet:
    """
    Compile rule-language text into a RuleSet.

    Empty or unrecognized input yields the default RuleSet
    (no exact/present constraints, nothing absent, length 5).
    """
    draft = _Draft()
    for raw in (text or "").upper().splitlines():
        line = raw.strip()
        if not line:
            continue
        taken = classify_line(line, draft)
        if taken is None:
            logger.debug("ignored rule line: %r", line)
    return draft.freeze()
