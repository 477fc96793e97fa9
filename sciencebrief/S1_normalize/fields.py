"""Field extraction across inconsistent feed schemas.

Each multi-source field is resolved by an ordered list of strategies. A
strategy takes the raw item (plus the cleaned description) and returns a
value or None; the first non-empty value wins. Strategies are plain module
functions so each one can be tested on its own.
"""

import re
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any, Optional

from ..core import from_struct_time, parse_feed_date
from .config import KEYWORD_VOCABULARY, MAX_KEYWORDS, UNKNOWN_AUTHORS
from .html import clean_whitespace, html_to_text

Strategy = Callable[[Mapping, str], Optional[str]]

# "by Jane Doe and John Smith": names are Capitalised words, case-sensitive
_NAME = r"[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*"
AUTHOR_BYLINE_RE = re.compile(rf"\b[Bb]y\s+({_NAME}(?:\s+(?:and|&)\s+{_NAME})*)")

DOI_RE = re.compile(r"10\.\d{4,}/\S+")
_DOI_PREFIX_RE = re.compile(r"^(?:doi:\s*|https?://(?:dx\.)?doi\.org/)", re.I)


def field_text(value: Any) -> str:
    """Coerce a raw field to stripped text ("" for missing/non-text)."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    # feedparser content blocks: [{"value": "..."}]
    if isinstance(value, Sequence) and value:
        first = value[0]
        if isinstance(first, Mapping):
            return field_text(first.get("value"))
        return field_text(first)
    if isinstance(value, Mapping):
        return field_text(value.get("value") or value.get("name"))
    return ""


def first_match(strategies: Sequence[Strategy], item: Mapping, description: str = "") -> Optional[str]:
    """Run strategies in order, return the first non-empty result."""
    for strategy in strategies:
        value = strategy(item, description)
        if value:
            return value
    return None


# ─────────────────────────────────────────────────────────────
# Description
# ─────────────────────────────────────────────────────────────

DESCRIPTION_FIELDS = ("description", "content_encoded", "contentEncoded", "content", "summary")


def extract_description(item: Mapping) -> str:
    """First non-empty of description / content:encoded / content / summary, as text."""
    for key in DESCRIPTION_FIELDS:
        raw = field_text(item.get(key))
        if raw:
            return html_to_text(raw)
    return ""


# ─────────────────────────────────────────────────────────────
# Authors
# ─────────────────────────────────────────────────────────────

def author_from_creator(item: Mapping, description: str = "") -> Optional[str]:
    """Dublin Core creator (`dc:creator`)."""
    return clean_whitespace(field_text(item.get("creator") or item.get("dc_creator"))) or None


def author_from_author_field(item: Mapping, description: str = "") -> Optional[str]:
    """RSS/Atom author, or the names of an Atom author list."""
    author = clean_whitespace(field_text(item.get("author")))
    if author:
        return author
    names = [
        clean_whitespace(a.get("name", ""))
        for a in item.get("authors") or []
        if isinstance(a, Mapping)
    ]
    names = [n for n in names if n]
    return ", ".join(names) or None


def author_from_byline(item: Mapping, description: str = "") -> Optional[str]:
    """Scan the description for a "by NAME [and NAME]" byline."""
    if not description:
        return None
    match = AUTHOR_BYLINE_RE.search(description)
    return match.group(1) if match else None


AUTHOR_STRATEGIES: list[Strategy] = [
    author_from_creator,
    author_from_author_field,
    author_from_byline,
]


def extract_authors(item: Mapping, description: str | None = None) -> str:
    """
    Resolve the author string of a raw item.

    Order: creator field, author field, byline in the description. The first
    hit wins; signals are never merged.

    Args:
        item: Raw feed item
        description: Cleaned description; derived from the item when omitted

    Returns:
        Author string, or "Unknown authors"
    """
    if description is None:
        description = extract_description(item)
    return first_match(AUTHOR_STRATEGIES, item, description) or UNKNOWN_AUTHORS


# ─────────────────────────────────────────────────────────────
# DOI
# ─────────────────────────────────────────────────────────────

def doi_from_field(item: Mapping, description: str = "") -> Optional[str]:
    """Explicit DOI fields (`prism:doi`, `dc:identifier`)."""
    for key in ("doi", "prism_doi"):
        value = field_text(item.get(key))
        if value:
            return _DOI_PREFIX_RE.sub("", value)

    dc_id = field_text(item.get("dc_identifier"))
    if dc_id:
        stripped = _DOI_PREFIX_RE.sub("", dc_id)
        if stripped.startswith("10."):
            return stripped
    return None


def doi_from_link(item: Mapping, description: str = "") -> Optional[str]:
    """DOI embedded in the article link (e.g. https://doi.org/10.1038/...)."""
    match = DOI_RE.search(field_text(item.get("link")))
    return match.group(0) if match else None


def doi_from_description(item: Mapping, description: str = "") -> Optional[str]:
    """DOI mentioned in the description text."""
    match = DOI_RE.search(description or "")
    if not match:
        return None
    # Sentence punctuation after an inline DOI is not part of it
    return match.group(0).rstrip(".,;") or None


DOI_STRATEGIES: list[Strategy] = [
    doi_from_field,
    doi_from_link,
    doi_from_description,
]


def extract_doi(item: Mapping, description: str | None = None) -> Optional[str]:
    """Opportunistic DOI lookup; None when nothing matches."""
    if description is None:
        description = extract_description(item)
    return first_match(DOI_STRATEGIES, item, description)


# ─────────────────────────────────────────────────────────────
# Keywords
# ─────────────────────────────────────────────────────────────

def extract_keywords(title: str, description: str | None = None) -> list[str]:
    """
    Match the controlled vocabulary against title and description.

    Returns at most six terms, in vocabulary order (breadth over frequency).
    """
    text = f"{title or ''} {description or ''}".lower()
    found = [kw for kw in KEYWORD_VOCABULARY if kw in text]
    return list(dict.fromkeys(found))[:MAX_KEYWORDS]


# ─────────────────────────────────────────────────────────────
# Date
# ─────────────────────────────────────────────────────────────

PARSED_DATE_FIELDS = ("published_parsed", "updated_parsed")
TEXT_DATE_FIELDS = ("pubDate", "published", "isoDate", "updated", "dc_date", "dcDate")


def extract_date(item: Mapping, fallback: datetime) -> datetime:
    """
    Best-effort publication time.

    Falls back to `fallback` (the fetch time) when the item has no usable
    date, so "undated" and "published just now" look the same downstream.
    """
    for key in PARSED_DATE_FIELDS:
        dt = from_struct_time(item.get(key))
        if dt:
            return dt

    for key in TEXT_DATE_FIELDS:
        dt = parse_feed_date(field_text(item.get(key)))
        if dt:
            return dt

    return fallback
