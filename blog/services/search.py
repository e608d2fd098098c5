r"""Search-term extraction for free-text post queries.

Whitespace is the Unicode class matched by ``\s``, so no-break spaces and
the ASCII separator controls U+001C..U+001F split terms as well.
"""

from __future__ import annotations

import re

MIN_TERM_LENGTH = 2
LIKE_ESCAPE = "\\"

_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_search_query(raw_query: str) -> str:
    """Collapse whitespace runs to a single space and trim the ends."""

    return _WHITESPACE_RUN.sub(" ", raw_query).strip()


def ordered_search_terms(raw_query: str) -> list[str]:
    """Return unique terms of at least ``MIN_TERM_LENGTH`` characters in first-seen order."""

    query = sanitize_search_query(raw_query)
    if not query:
        return []
    # dict keeps insertion order while dropping repeats
    unique_terms = dict.fromkeys(query.split(" "))
    return [term for term in unique_terms if len(term) >= MIN_TERM_LENGTH]


def extract_search_terms(raw_query: str) -> set[str]:
    return set(ordered_search_terms(raw_query))


def like_contains_pattern(term: str) -> str:
    """Build a LIKE pattern matching ``term`` literally anywhere in the value."""

    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


__all__ = [
    "LIKE_ESCAPE",
    "MIN_TERM_LENGTH",
    "extract_search_terms",
    "like_contains_pattern",
    "ordered_search_terms",
    "sanitize_search_query",
]
