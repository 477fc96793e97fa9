"""Default feed registry - load from config/feeds.yaml.

The registry is read once per path and handed to callers as an immutable
value; nothing in the pipeline reaches for it implicitly.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from .models import FeedDescriptor

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"
FEEDS_CONFIG_PATH = CONFIG_DIR / "feeds.yaml"
FEEDS_FILE_ENV = "SCIENCEBRIEF_FEEDS_FILE"

CATEGORY_LABELS: dict[str, str] = {
    "psychology": "Psychology",
    "neuroscience": "Neuroscience",
    "perception": "Perception",
    "music": "Music & Cognition",
}


class RegistryError(Exception):
    """The feed registry file is missing or malformed."""


class FeedRegistry(BaseModel):
    """Category -> feed descriptors, in file order."""

    model_config = ConfigDict(frozen=True)

    categories: dict[str, tuple[FeedDescriptor, ...]]

    def category_names(self) -> list[str]:
        return list(self.categories)

    def feeds(self, category: str, include_disabled: bool = False) -> list[FeedDescriptor]:
        """Feeds of one category; unknown categories yield []."""
        feeds = self.categories.get(category, ())
        return [f for f in feeds if include_disabled or f.enabled]

    def all_feeds(self, include_disabled: bool = False) -> list[FeedDescriptor]:
        out: list[FeedDescriptor] = []
        for category in self.categories:
            out.extend(self.feeds(category, include_disabled))
        return out

    def to_dict(self) -> dict:
        return {
            category: [f.to_dict() for f in feeds]
            for category, feeds in self.categories.items()
        }


def resolve_feeds_path(path: Optional[str | Path] = None) -> Path:
    """Explicit path > $SCIENCEBRIEF_FEEDS_FILE > config/feeds.yaml."""
    if path:
        return Path(path)
    env_value = os.environ.get(FEEDS_FILE_ENV)
    if env_value:
        return Path(env_value)
    return FEEDS_CONFIG_PATH


def parse_registry(data: object) -> FeedRegistry:
    """Validate raw YAML data into a FeedRegistry."""
    if not isinstance(data, dict):
        raise RegistryError("Feed registry must map category names to feed lists")

    categories: dict[str, tuple[FeedDescriptor, ...]] = {}
    seen_ids: set[str] = set()
    for category, entries in data.items():
        descriptors = []
        for entry in entries or []:
            if not isinstance(entry, dict):
                raise RegistryError(f"Invalid feed entry in '{category}': {entry!r}")
            try:
                descriptor = FeedDescriptor(**{"category": str(category), **entry})
            except ValidationError as e:
                raise RegistryError(f"Invalid feed entry in '{category}': {e}") from e
            if descriptor.id in seen_ids:
                raise RegistryError(f"Duplicate feed id: {descriptor.id}")
            seen_ids.add(descriptor.id)
            descriptors.append(descriptor)
        categories[str(category)] = tuple(descriptors)

    return FeedRegistry(categories=categories)


@lru_cache(maxsize=8)
def _load_registry(path: Path) -> FeedRegistry:
    if not path.exists():
        raise RegistryError(f"Feed registry not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RegistryError(f"Invalid YAML in {path}: {e}") from e

    registry = parse_registry(data or {})
    logger.info(f"Loaded {len(registry.all_feeds(include_disabled=True))} feeds from {path}")
    return registry


def load_registry(path: Optional[str | Path] = None) -> FeedRegistry:
    """
    Load the feed registry (cached per resolved path).

    Args:
        path: Optional YAML path; see resolve_feeds_path for the defaults

    Returns:
        Immutable FeedRegistry

    Raises:
        RegistryError: missing file, bad YAML, or invalid entries
    """
    return _load_registry(resolve_feeds_path(path).resolve())
