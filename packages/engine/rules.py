"""
Compiled rule structure shared by the compiler and the evaluator.

A RuleSet is the only thing the evaluator ever sees. It is produced in one
go by `packages.engine.dsl.compile_rules` and is read-only afterwards:
mappings are wrapped in MappingProxyType and sequences are tuples.

Conventions:
  - positions are ZERO-based everywhere inside the program
  - letters are single uppercase A–Z characters
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

DEFAULT_LENGTH = 5


def _frozen(d: Mapping) -> Mapping:
    return MappingProxyType(dict(d))


@dataclass(frozen=True)
class RuleSet:
    """
    Letter-position constraints for one puzzle state.

    Fields:
      exact   : position -> letter that must be there (green)
      present : letter -> positions where it must NOT be (yellow)
      absent  : letters that must not appear at all (gray)
      length  : required word length
    """
    exact: Mapping[int, str] = field(default_factory=lambda: _frozen({}))
    present: Mapping[str, Tuple[int, ...]] = field(default_factory=lambda: _frozen({}))
    absent: Tuple[str, ...] = ()
    length: int = DEFAULT_LENGTH

    @classmethod
    def build(
            cls,
            *,
            exact: Mapping[int, str] | None = None,
            present: Mapping[str, List[int] | Tuple[int, ...]] | None = None,
            absent: List[str] | Tuple[str, ...] = (),
            length: int = DEFAULT_LENGTH,
    ) -> "RuleSet":
        """Freeze plain containers into a RuleSet."""
        if length < 1:
            raise ValueError(f"length must be a positive integer; got {length}")
        return cls(
            exact=_frozen(exact or {}),
            present=_frozen({k: tuple(v) for k, v in (present or {}).items()}),
            absent=tuple(absent),
            length=int(length),
        )

    def absent_letters(self) -> frozenset:
        return frozenset(self.absent)

    def seed(self) -> Tuple[int, str] | None:
        """
        Exact constraint used to query the word source: the one with the
        lowest position. None when the rules have no exact constraint.
        """
        if not self.exact:
            return None
        pos = min(self.exact)
        return pos, self.exact[pos]

    def allowed_positions(self, letter: str) -> List[int]:
        """Positions (0-based) where a present letter may still sit."""
        banned = set(self.present.get(letter, ()))
        return [i for i in range(self.length) if i not in banned]

    def to_dict(self) -> Dict:
        """JSON-friendly view (keys stringified the way json.dump would)."""
        return {
            "exact": {str(k): v for k, v in sorted(self.exact.items())},
            "present": {k: list(v) for k, v in self.present.items()},
            "absent": list(self.absent),
            "length": self.length,
        }
