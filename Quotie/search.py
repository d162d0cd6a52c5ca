#!/usr/bin/env python3
"""
Search and input helpers for the quote collection.

- search_quotes(): case-insensitive substring match over text, author and
  source, optionally narrowed to a SourceCategory
- SourceCategory: keyword heuristics that bucket free-text sources
- parse_quote_input(): split a pasted/dictated line into text, author, source
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from .models import Quote


_BOOK_WORDS = ["book", "novel", "chapter", "page", "kindle", "audiobook", "paperback", "hardcover"]
_BOOK_BLOCKERS = ["podcast", "episode", "movie", "film", "song", "album", "track", "keynote", "talk", "ted", "tedx"]

_CATEGORY_WORDS = {
    "Movies": ["movie", "film", "cinema", "scene", "director", "screenplay", "netflix", "hulu", "disney", "hbo", "prime video"],
    "Podcasts": ["podcast", "episode", "ep ", "ep.", "spotify", "apple podcasts", "overcast"],
    "Speeches": ["keynote", "talk", "speech", "ted", "tedx", "lecture", "sermon"],
    "Articles": ["article", "essay", "blog", "newsletter", "substack", "medium", "nyt", "guardian", "washington post", "the atlantic"],
    "Songs": ["song", "lyrics", "album", "track", "single"],
}


def _has_any(text: str, words: Iterable[str]) -> bool:
    return any(word in text for word in words)


def _looks_like_book_title(source: str) -> bool:
    # "Book titles" without the word "book" still count
    if _has_any(source, ["http", ".com", "www."]):
        return False
    if _has_any(source, _BOOK_BLOCKERS):
        return False
    return 2 <= len(source.split()) <= 8


class SourceCategory(Enum):
    """Browse categories inferred from a quote's source."""
    BOOKS = "Books"
    MOVIES = "Movies"
    PODCASTS = "Podcasts"
    SPEECHES = "Speeches"
    ARTICLES = "Articles"
    SONGS = "Songs"
    MISC = "Misc"

    def matches(self, source: str) -> bool:
        s = source.lower().strip()
        if not s:
            return False
        if self is SourceCategory.MISC:
            return True
        if self is SourceCategory.BOOKS:
            return _has_any(s, _BOOK_WORDS) or _looks_like_book_title(s)
        return _has_any(s, _CATEGORY_WORDS[self.value])


def search_quotes(
    quotes: Sequence[Quote],
    query: str = "",
    category: Optional[SourceCategory] = None,
) -> List[Quote]:
    """Filter quotes by category then by a case-insensitive query."""
    results = list(quotes)
    if category is not None:
        results = [q for q in results if category.matches(q.source)]

    needle = query.strip().lower()
    if not needle:
        return results
    return [
        q for q in results
        if needle in q.text.lower()
        or needle in q.author.lower()
        or needle in q.source.lower()
    ]


@dataclass
class ParsedQuote:
    text: str = ""
    author: str = ""
    source: str = ""


def parse_quote_input(raw: str) -> Optional[ParsedQuote]:
    """
    Split "Quote text. By Author. Source" into its parts.

    Curly quotation marks are stripped, the line is split on periods, the
    first part is the text, the second the author (a leading "by " is
    dropped) and the third the source. Returns None for blank input.
    """
    cleaned = raw.replace("“", "").replace("”", "").strip()
    if not cleaned:
        return None

    parts = [p.strip() for p in cleaned.split(".")]
    parts = [p for p in parts if p]
    if not parts:
        return None

    if len(parts) > 1 and parts[1].lower().startswith("by "):
        parts[1] = parts[1][3:].strip()

    parsed = ParsedQuote(text=parts[0])
    if len(parts) > 1:
        parsed.author = parts[1]
    if len(parts) > 2:
        parsed.source = parts[2]
    return parsed
