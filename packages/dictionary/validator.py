"""
Dictionary cross-check for surviving candidates.

This module answers: "Is this a real English word?"
Lookup order for (word, length):
  1. cached verdict -> return it (no request)
  2. len(word) != length -> False, cached (no request)
  3. GET <DICT_API_URL><word>
       200 -> True, 404 -> False, anything else -> True

Step 3 is deliberately permissive: a flaky lookup (5xx, 429, no network)
keeps the candidate rather than dropping a possibly-correct answer.
Nothing here ever raises to the caller.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DICT_API_URL = "https://api.dictionaryapi.dev/api/v2/entries/en/"
DEFAULT_TIMEOUT = 10.0

CacheKey = Tuple[str, int]


class ValidationCache:
    """Verdicts keyed by (lowercase word, expected length). Never evicted."""

    def __init__(self):
        self._verdicts: Dict[CacheKey, bool] = {}

    @staticmethod
    def key(word: str, length: int) -> CacheKey:
        return word.strip().lower(), int(length)

    def get(self, word: str, length: int) -> Optional[bool]:
        return self._verdicts.get(self.key(word, length))

    def put(self, word: str, length: int, verdict: bool) -> bool:
        self._verdicts[self.key(word, length)] = verdict
        return verdict

    def __contains__(self, key: CacheKey) -> bool:
        return self.key(*key) in self._verdicts

    def __len__(self) -> int:
        return len(self._verdicts)


class DictionaryValidator:
    def __init__(
            self,
            cache: Optional[ValidationCache] = None,
            *,
            session: Optional[requests.Session] = None,
            url: str = DICT_API_URL,
            timeout: float = DEFAULT_TIMEOUT,
    ):
        self.cache = cache if cache is not None else ValidationCache()
        self.session = session or requests.Session()
        self.url = url
        self.timeout = timeout

    def is_real_word(self, word: str, length: int) -> bool:
        cached = self.cache.get(word, length)
        if cached is not None:
            return cached

        w = word.strip().lower()
        if len(w) != length:
            return self.cache.put(w, length, False)

        try:
            resp = self.session.get(self.url + w, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Network error during dictionary check for %r: %s", w, e)
            return self.cache.put(w, length, True)

        if resp.status_code == 200:
            return self.cache.put(w, length, True)
        if resp.status_code == 404:
            return self.cache.put(w, length, False)

        logger.error("Dictionary API failed for word %r with status: %s", w, resp.status_code)
        return self.cache.put(w, length, True)
