from .collector import PaginatedCollector, PageCursor, CursorState, Collection, Seed
from .extract import parse_page, extract_words, next_page_number
from .urls import seed_base, page_url, position_name

__all__ = [
    "PaginatedCollector",
    "PageCursor",
    "CursorState",
    "Collection",
    "Seed",
    "parse_page",
    "extract_words",
    "next_page_number",
    "seed_base",
    "page_url",
    "position_name",
]
