"""
Parse one word-list page.

Page conventions:
  - the searched letter is emphasised inline:  GR<b>O</b>AN
  - words the site flags as invalid sit in red spans: <span class=rd>XXXXX</span>
  - the next page, if any, is announced in the head:
        <link rel=next href=words5lettersthirdletteropage2.htm>

Extraction drops the emphasis, removes red spans together with their text,
then collects every uppercase run of exactly `length` letters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup

_NEXT_HREF_RE = re.compile(r"page(\d+)\.htm")


@dataclass
class ParsedPage:
    words: List[str]
    next_page: Optional[int]


def _word_re(length: int) -> re.Pattern:
    return re.compile(rf"\b([A-Z]{{{length}}})\b")


def _next_page(soup: BeautifulSoup) -> Optional[int]:
    link = soup.find("link", rel="next")
    if link is None:
        return None
    m = _NEXT_HREF_RE.search(link.get("href") or "")
    return int(m.group(1)) if m else None


def parse_page(html: str, length: int) -> ParsedPage:
    """Words on the page (in page order, duplicates kept) + declared next page."""
    soup = BeautifulSoup(html, "html.parser")
    nxt = _next_page(soup)

    for b in soup.find_all("b"):
        b.unwrap()
    for span in soup.find_all("span", class_="rd"):
        span.decompose()
    # GR + O + AN -> GROAN after unwrapping the <b>
    soup.smooth()

    text = soup.get_text(" ")
    return ParsedPage(words=_word_re(length).findall(text), next_page=nxt)


def extract_words(html: str, length: int) -> List[str]:
    return parse_page(html, length).words


def next_page_number(html: str) -> Optional[int]:
    return _next_page(BeautifulSoup(html, "html.parser"))
