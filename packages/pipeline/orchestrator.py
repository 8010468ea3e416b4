"""
End-to-end run: constraints text -> validated candidate words.

Steps (strictly sequential, one request in flight at a time):
  1) translate free text into rule text (skipped when rule text is given)
  2) compile the rule text
  3) pick the seed: the exact constraint with the lowest position
  4) collect every word for the seed from the word-list site
  5) keep words that satisfy all rules
  6) optionally confirm each survivor with the dictionary API
  7) report words plus rejected / invalid counts

A WordhuntError in steps 1–4 stops the run; it is reported once, as
`PipelineResult.failure`. Step 6 never fails the run.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import requests

from packages.dictionary import DictionaryValidator, ValidationCache
from packages.engine import RuleSet, compile_rules, explain_rejection, filter_candidates
from packages.net import ResilientFetcher, WordhuntError
from packages.translate import GeminiTranslator
from packages.wordsource import PaginatedCollector, Seed
from packages.wordsource.collector import unique_preserve_order
from .config import VALIDATE_DELAY, Settings

logger = logging.getLogger(__name__)

# Called once per dictionary lookup: (index, total, word, verdict)
ProgressFn = Callable[[int, int, str, bool], None]


@dataclass
class PipelineResult:
    rule_text: str = ""
    rules: Optional[RuleSet] = None
    seeds: List[Seed] = field(default_factory=list)
    fetched: int = 0
    candidates: List[str] = field(default_factory=list)
    words: List[str] = field(default_factory=list)
    rejected: int = 0
    invalid: int = 0
    validated: bool = False
    failure: Optional[str] = None
    diagnostic: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def to_dict(self) -> Dict:
        return {
            "rule_text": self.rule_text,
            "rules": self.rules.to_dict() if self.rules is not None else None,
            "seeds": [{"letter": s.letter, "position": s.position + 1} for s in self.seeds],
            "fetched": self.fetched,
            "candidates": list(self.candidates),
            "words": list(self.words),
            "rejected": self.rejected,
            "invalid": self.invalid,
            "validated": self.validated,
            "failure": self.failure,
            "diagnostic": self.diagnostic,
        }


def select_seeds(rules: RuleSet, *, present_fallback: bool = False) -> List[Seed]:
    """
    Seed policy.

    Normally a single seed: the exact constraint with the lowest position.
    With `present_fallback` and no exact constraint, take the present letter
    with the fewest allowed positions (first in rule order on ties) and seed
    every position it may still occupy.
    """
    exact = rules.seed()
    if exact is not None:
        pos, letter = exact
        return [Seed(letter, pos)]
    if not present_fallback:
        return []

    best: Optional[str] = None
    best_allowed: List[int] = []
    for letter in rules.present:
        allowed = rules.allowed_positions(letter)
        logger.debug("present letter %s allowed at %s", letter, [p + 1 for p in allowed])
        if allowed and (best is None or len(allowed) < len(best_allowed)):
            best, best_allowed = letter, allowed

    if best is None:
        return []
    return [Seed(best, p) for p in best_allowed]


class Orchestrator:
    def __init__(
            self,
            *,
            translator: Optional[GeminiTranslator] = None,
            collector: Optional[PaginatedCollector] = None,
            validator: Optional[DictionaryValidator] = None,
            present_fallback: bool = False,
            validate_delay: float = VALIDATE_DELAY,
            sleep: Callable[[float], None] = time.sleep,
    ):
        self.translator = translator
        self.collector = collector or PaginatedCollector(sleep=sleep)
        self.validator = validator
        self.present_fallback = present_fallback
        self.validate_delay = validate_delay
        self.sleep = sleep

    @classmethod
    def from_settings(
            cls,
            settings: Settings,
            *,
            validate: bool = False,
            present_fallback: bool = False,
            session: Optional[requests.Session] = None,
            cache: Optional[ValidationCache] = None,
            sleep: Callable[[float], None] = time.sleep,
    ) -> "Orchestrator":
        """Wire every component from Settings, sharing one HTTP session."""
        session = session or requests.Session()

        def fetcher(name: str) -> ResilientFetcher:
            return ResilientFetcher(
                name=name,
                max_attempts=settings.max_attempts,
                initial_delay=settings.initial_delay,
                timeout=settings.timeout,
                sleep=sleep,
            )

        translator = GeminiTranslator(
            settings.api_key, model=settings.model, session=session,
            fetcher=fetcher("Gemini API"),
        )
        collector = PaginatedCollector(
            session=session, fetcher=fetcher("word list"),
            page_delay=settings.page_delay, sleep=sleep,
        )
        validator = DictionaryValidator(cache, session=session) if validate else None
        return cls(
            translator=translator,
            collector=collector,
            validator=validator,
            present_fallback=present_fallback,
            validate_delay=settings.validate_delay,
            sleep=sleep,
        )

    def _rule_text(self, prompt: Optional[str], rule_text: Optional[str]) -> str:
        if rule_text is not None:
            return rule_text
        if self.translator is None:
            raise WordhuntError("No translator configured and no rule text given.")
        return self.translator.translate(prompt or "")

    def _validate(self, words: List[str], length: int, progress: Optional[ProgressFn]) -> List[str]:
        keep: List[str] = []
        total = len(words)
        for i, w in enumerate(words, 1):
            verdict = self.validator.is_real_word(w, length)
            if verdict:
                keep.append(w)
            if progress is not None:
                progress(i, total, w, verdict)
            if i < total:
                self.sleep(self.validate_delay)
        return keep

    def run(
            self,
            prompt: Optional[str] = None,
            *,
            rule_text: Optional[str] = None,
            progress: Optional[ProgressFn] = None,
    ) -> PipelineResult:
        """
        Run the pipeline on a free-text `prompt`, or on ready-made
        `rule_text` (translation skipped).
        """
        result = PipelineResult()

        try:
            result.rule_text = self._rule_text(prompt, rule_text)
            rules = compile_rules(result.rule_text)
            result.rules = rules
            logger.info("parsed rules: %s", rules.to_dict())

            result.seeds = select_seeds(rules, present_fallback=self.present_fallback)
            if not result.seeds:
                result.diagnostic = (
                    "No exact position requirements found. Cannot fetch a word list."
                )
                logger.warning(result.diagnostic)
                return result

            collections = self.collector.collect_many(result.seeds, rules.length)
        except WordhuntError as e:
            logger.error("pipeline failed: %s", e)
            result.failure = str(e)
            return result

        errors = [c.error for c in collections if c.error]
        fetched = unique_preserve_order(w for c in collections for w in c.words)
        result.fetched = len(fetched)
        if not fetched:
            result.diagnostic = "No words fetched."
            if errors:
                result.diagnostic += " " + "; ".join(errors)
            logger.warning(result.diagnostic)
            return result

        result.candidates = filter_candidates(fetched, rules)
        result.rejected = result.fetched - len(result.candidates)
        logger.info(
            "filtered %d fetched words to %d candidates", result.fetched, len(result.candidates)
        )
        if logger.isEnabledFor(logging.DEBUG):
            for w in fetched[:5]:
                logger.debug("sample %s -> %s", w, explain_rejection(w, rules) or "pass")

        if self.validator is None or not result.candidates:
            result.words = list(result.candidates)
            return result

        result.words = self._validate(result.candidates, rules.length, progress)
        result.invalid = len(result.candidates) - len(result.words)
        result.validated = True
        return result
