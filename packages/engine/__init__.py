from .rules import RuleSet, DEFAULT_LENGTH
from .dsl import compile_rules, classify_line
from .constraints import check_word, filter_candidates, explain_rejection

__all__ = [
    "RuleSet",
    "DEFAULT_LENGTH",
    "compile_rules",
    "classify_line",
    "check_word",
    "filter_candidates",
    "explain_rejection",
]
