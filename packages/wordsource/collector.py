"""
Multi-page collection of candidate words for one seed constraint.

A seed is one exact constraint (letter at a zero-based position). The site
lists every word with that letter at that position, split across pages.

Pagination is a two-state machine driven from `collect`:

    Fetching(page) --next == page + 1--> Fetching(page + 1)
    Fetching(page) --anything else-----> Done

so a page is never requested out of sequence. A 404 after page 1 also
means Done. Any other failure throws away what was collected so far.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

import requests

from packages.net import FatalHttpError, ResilientFetcher, WordhuntError
from .extract import parse_page
from .urls import page_url, seed_base

logger = logging.getLogger(__name__)

PAGE_DELAY = 0.1  # seconds between page requests


@dataclass(frozen=True)
class Seed:
    letter: str
    position: int  # zero-based

    def __str__(self) -> str:
        return f"{self.letter} at position {self.position + 1}"


class CursorState(enum.Enum):
    FETCHING = "fetching"
    DONE = "done"


@dataclass
class PageCursor:
    """Where we are in one listing."""
    base: str
    page: int = 1
    state: CursorState = CursorState.FETCHING

    @property
    def url(self) -> str:
        return page_url(self.base, self.page)

    @property
    def done(self) -> bool:
        return self.state is CursorState.DONE

    def advance(self, declared_next: Optional[int]) -> None:
        """Continue iff the page announced exactly the following page."""
        if declared_next is not None and declared_next == self.page + 1:
            self.page = declared_next
        else:
            self.state = CursorState.DONE

    def finish(self) -> None:
        self.state = CursorState.DONE


@dataclass
class Collection:
    """Outcome of collecting one seed."""
    seed: Seed
    words: List[str] = field(default_factory=list)
    pages: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def unique_preserve_order(words: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for w in words:
        if w not in seen:
            seen.add(w)
            out.append(w)
    return out


class PaginatedCollector:
    """Fetch and parse every page for a seed through a ResilientFetcher."""

    def __init__(
            self,
            *,
            session: Optional[requests.Session] = None,
            fetcher: Optional[ResilientFetcher] = None,
            page_delay: float = PAGE_DELAY,
            sleep: Callable[[float], None] = time.sleep,
    ):
        self.session = session or requests.Session()
        self.fetcher = fetcher or ResilientFetcher(name="word list")
        self.page_delay = page_delay
        self.sleep = sleep

    def _fetch(self, url: str) -> str:
        def send(token):
            return self.session.get(url, timeout=token.remaining())

        return self.fetcher.request(send).text

    def collect(self, seed: Seed, length: int) -> Collection:
        """
        Collect all words of `length` letters with `seed.letter` at
        `seed.position`. Words are deduplicated; on a fatal failure the
        result is empty and `error` says why.
        """
        cursor = PageCursor(seed_base(seed.letter, seed.position, length))
        found: List[str] = []
        result = Collection(seed=seed)
        logger.info("fetching word list from %s", cursor.url)

        try:
            while not cursor.done:
                url = cursor.url
                logger.debug("page %d: %s", cursor.page, url)
                try:
                    html = self._fetch(url)
                except FatalHttpError as e:
                    if e.status == 404 and cursor.page > 1:
                        logger.info("page %d not found. Finished pagination.", cursor.page)
                        cursor.finish()
                        break
                    raise

                page = parse_page(html, length)
                result.pages += 1
                found.extend(page.words)
                logger.debug("found %d words on page %d", len(page.words), cursor.page)

                cursor.advance(page.next_page)
                if not cursor.done:
                    self.sleep(self.page_delay)
        except WordhuntError as e:
            logger.error("Error fetching word list for %s: %s", seed, e)
            result.error = str(e)
            return result

        result.words = unique_preserve_order(found)
        logger.info(
            "found %d unique words across %d page(s) for %s",
            len(result.words), result.pages, seed,
        )
        return result

    def collect_many(self, seeds: Iterable[Seed], length: int) -> List[Collection]:
        return [self.collect(s, length) for s in seeds]
