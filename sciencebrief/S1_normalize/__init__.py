"""Step 1: Normalize raw feed items into Articles."""

from .config import KEYWORD_VOCABULARY, MAX_KEYWORDS, UNKNOWN_AUTHORS
from .fields import (
    AUTHOR_STRATEGIES,
    DOI_STRATEGIES,
    extract_authors,
    extract_date,
    extract_description,
    extract_doi,
    extract_keywords,
    first_match,
)
from .html import clean_whitespace, html_to_text
from .normalize import normalize_item, normalize_items

__all__ = [
    "KEYWORD_VOCABULARY",
    "MAX_KEYWORDS",
    "UNKNOWN_AUTHORS",
    "AUTHOR_STRATEGIES",
    "DOI_STRATEGIES",
    "first_match",
    "html_to_text",
    "clean_whitespace",
    "extract_authors",
    "extract_date",
    "extract_description",
    "extract_doi",
    "extract_keywords",
    "normalize_item",
    "normalize_items",
]
