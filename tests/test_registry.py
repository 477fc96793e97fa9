#!/usr/bin/env python
"""Feed registry - unit tests"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from sciencebrief.registry import (
    FEEDS_CONFIG_PATH,
    RegistryError,
    load_registry,
    parse_registry,
    resolve_feeds_path,
)


class TestDefaultRegistry:
    """config/feeds.yaml"""

    def test_file_exists(self):
        assert FEEDS_CONFIG_PATH.exists()

    def test_categories(self):
        registry = load_registry(FEEDS_CONFIG_PATH)
        assert registry.category_names() == ["psychology", "neuroscience", "perception", "music"]

    def test_disabled_feeds_skipped(self):
        registry = load_registry(FEEDS_CONFIG_PATH)
        enabled = {f.id for f in registry.all_feeds()}
        everything = {f.id for f in registry.all_feeds(include_disabled=True)}

        assert "curr-dir" not in enabled
        assert "j-neuro" not in enabled
        assert {"curr-dir", "j-neuro"} <= everything
        assert "nat-neuro" in enabled

    def test_descriptors_complete(self):
        registry = load_registry(FEEDS_CONFIG_PATH)
        for feed in registry.all_feeds(include_disabled=True):
            assert feed.id
            assert feed.name
            assert feed.url.startswith("https://")
            assert feed.category in registry.categories

    def test_cached(self):
        assert load_registry(FEEDS_CONFIG_PATH) is load_registry(FEEDS_CONFIG_PATH)

    def test_to_dict_lists_disabled(self):
        data = load_registry(FEEDS_CONFIG_PATH).to_dict()
        psych_ids = [f["id"] for f in data["psychology"]]
        assert "curr-dir" in psych_ids


class TestLoadRegistry:
    """Custom registry files"""

    def test_custom_file(self, tmp_path):
        path = tmp_path / "feeds.yaml"
        path.write_text(
            "music:\n"
            "  - id: mp\n"
            "    name: Music Perception\n"
            "    url: https://feeds.test/mp\n",
            encoding="utf-8",
        )
        registry = load_registry(path)
        assert [f.id for f in registry.feeds("music")] == ["mp"]

    def test_env_override(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("x:\n  - {id: a, name: A, url: 'https://feeds.test/a'}\n", encoding="utf-8")
        monkeypatch.setenv("SCIENCEBRIEF_FEEDS_FILE", str(path))

        assert resolve_feeds_path() == path
        assert load_registry().category_names() == ["x"]

    def test_explicit_path_beats_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SCIENCEBRIEF_FEEDS_FILE", str(tmp_path / "env.yaml"))
        assert resolve_feeds_path(FEEDS_CONFIG_PATH) == FEEDS_CONFIG_PATH

    def test_missing_file(self, tmp_path):
        with pytest.raises(RegistryError):
            load_registry(tmp_path / "nope.yaml")

    def test_bad_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("music: [unclosed\n", encoding="utf-8")
        with pytest.raises(RegistryError):
            load_registry(path)


class TestParseRegistry:
    """Validation"""

    def test_duplicate_ids(self):
        data = {
            "a": [{"id": "dup", "name": "One", "url": "https://feeds.test/1"}],
            "b": [{"id": "dup", "name": "Two", "url": "https://feeds.test/2"}],
        }
        with pytest.raises(RegistryError, match="dup"):
            parse_registry(data)

    def test_missing_url(self):
        with pytest.raises(RegistryError):
            parse_registry({"a": [{"id": "x", "name": "X"}]})

    def test_not_a_mapping(self):
        with pytest.raises(RegistryError):
            parse_registry(["a", "b"])

    def test_empty_category(self):
        registry = parse_registry({"empty": None})
        assert registry.feeds("empty") == []

    def test_unknown_category(self):
        registry = parse_registry({})
        assert registry.feeds("astrology") == []
