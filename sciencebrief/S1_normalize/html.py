"""HTML and text cleaning utilities."""

import re

from .config import HTML_ENTITIES

_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")


def strip_tags(text: str) -> str:
    """Replace every tag with a space. No parsing, no validation."""
    if not text:
        return ""
    return _TAG_RE.sub(" ", text)


def decode_entities(text: str) -> str:
    """Decode the fixed entity set. Unknown entities are kept verbatim."""
    if not text:
        return ""
    for entity, char in HTML_ENTITIES.items():
        text = text.replace(entity, char)
    return text


def clean_whitespace(text: str) -> str:
    """Normalize whitespace."""
    if not text:
        return ""
    return _WS_RE.sub(" ", text).strip()


def html_to_text(html: str | None) -> str:
    """
    Reduce an HTML fragment to plain text.

    Tags are stripped before entities are decoded, so an escaped `&lt;b&gt;`
    comes back as literal text rather than being removed as a tag.

    Args:
        html: Raw HTML (or plain text, or None)

    Returns:
        Plain text with collapsed whitespace
    """
    if not html:
        return ""
    text = strip_tags(str(html))
    text = decode_entities(text)
    return clean_whitespace(text)
