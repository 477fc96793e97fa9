"""Step 5: Output delivery."""

from .console import to_console, to_json, to_markdown

__all__ = ["to_console", "to_json", "to_markdown"]
