"""
Tests for tiered config resolution and write-back.
"""

import json

import pytest

from mss_widget.core.config_resolver import (
    ConfigResolver,
    DefaultsTier,
    DirectoryTier,
    FORMS_DEFAULT,
    IMAGES_DEFAULT,
    WIDGET_DEFAULT,
)
from mss_widget.core.errors import ConfigWriteError, UnknownConfigKindError


@pytest.fixture
def dirs(tmp_path):
    data_dir = tmp_path / "data"
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    return data_dir, repo_dir


@pytest.fixture
def resolver(dirs):
    data_dir, repo_dir = dirs
    return ConfigResolver.from_dirs(data_dir, repo_dir)


class TestResolution:
    """Lookup order: runtime data, repository defaults, built-in defaults."""

    def test_builtin_defaults_when_no_files(self, resolver):
        assert resolver.get("widget") == WIDGET_DEFAULT
        assert resolver.get("forms") == FORMS_DEFAULT
        assert resolver.get("images") == IMAGES_DEFAULT
        assert resolver.get("forms")["headline"] == "Practice TOEFL Speaking Test"

    def test_repo_tier_used_when_data_missing(self, resolver, dirs):
        _, repo_dir = dirs
        (repo_dir / "form.json").write_text(json.dumps({"headline": "From repo"}))

        doc, source = resolver.resolve("forms")
        assert doc == {"headline": "From repo"}
        assert source == "repo"

    def test_data_tier_wins_over_repo(self, resolver, dirs):
        data_dir, repo_dir = dirs
        data_dir.mkdir()
        (repo_dir / "config.json").write_text(json.dumps({"theme": "repo"}))
        (data_dir / "config.json").write_text(json.dumps({"theme": "runtime"}))

        doc, source = resolver.resolve("widget")
        assert doc == {"theme": "runtime"}
        assert source == "data"

    def test_corrupt_data_file_falls_through(self, resolver, dirs):
        data_dir, repo_dir = dirs
        data_dir.mkdir()
        (data_dir / "image.json").write_text("{not json")
        (repo_dir / "image.json").write_text(json.dumps({"logoDataUrl": "data:x"}))

        assert resolver.get("images") == {"logoDataUrl": "data:x"}

    def test_non_object_root_falls_through(self, resolver, dirs):
        data_dir, _ = dirs
        data_dir.mkdir()
        (data_dir / "form.json").write_text("[1, 2, 3]")

        assert resolver.get("forms") == FORMS_DEFAULT

    def test_returned_default_is_a_copy(self, resolver):
        doc = resolver.get("widget")
        doc["theme"] = "mutated"
        doc["editable"]["headline"] = False

        fresh = resolver.get("widget")
        assert fresh["theme"] == "apple"
        assert fresh["editable"]["headline"] is True

    def test_unknown_kind(self, resolver):
        with pytest.raises(UnknownConfigKindError):
            resolver.get("colors")

    def test_kinds_in_declaration_order(self, resolver):
        assert resolver.kinds() == ["widget", "forms", "images"]


class TestWrites:
    """Writes replace the whole runtime document and nothing else."""

    def test_put_then_get_round_trip(self, resolver):
        doc = {"theme": "dark", "api": {"enabled": False}, "audioMaxSeconds": 60, "survey": ["a", "b"]}
        resolver.put("widget", doc)

        assert resolver.get("widget") == doc

    def test_put_replaces_rather_than_merges(self, resolver):
        resolver.put("forms", {"headline": "One", "stopButton": "Halt"})
        resolver.put("forms", {"headline": "Two"})

        assert resolver.get("forms") == {"headline": "Two"}

    @pytest.mark.parametrize("bad", [None, [1, 2], "text", 42])
    def test_non_object_stored_as_empty(self, resolver, bad):
        resolver.put("images", bad)

        doc, source = resolver.resolve("images")
        assert doc == {}
        assert source == "data"

    def test_put_creates_directories_and_pretty_prints(self, tmp_path):
        data_dir = tmp_path / "nested" / "runtime"
        resolver = ConfigResolver.from_dirs(data_dir, tmp_path / "repo")

        resolver.put("forms", {"headline": "Hi"})

        text = (data_dir / "form.json").read_text()
        assert text.startswith("{\n  \"headline\"")
        assert json.loads(text) == {"headline": "Hi"}

    def test_put_never_touches_repo_tier(self, resolver, dirs):
        _, repo_dir = dirs
        original = json.dumps({"headline": "Repo"})
        (repo_dir / "form.json").write_text(original)

        resolver.put("forms", {"headline": "Runtime"})

        assert (repo_dir / "form.json").read_text() == original

    def test_write_failure_surfaces(self, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("file in the way")
        resolver = ConfigResolver.from_dirs(blocker, tmp_path / "repo")

        with pytest.raises(ConfigWriteError):
            resolver.put("widget", {"theme": "x"})

    def test_put_unknown_kind(self, resolver):
        with pytest.raises(UnknownConfigKindError):
            resolver.put("colors", {})


class TestTierDeclaration:
    def test_first_tier_must_be_writable(self, tmp_path):
        with pytest.raises(ValueError):
            ConfigResolver(tiers=(DirectoryTier("repo", tmp_path), DefaultsTier()))

    def test_only_one_writable_tier(self, tmp_path):
        with pytest.raises(ValueError):
            ConfigResolver(tiers=(
                DirectoryTier("a", tmp_path / "a", writable=True),
                DirectoryTier("b", tmp_path / "b", writable=True),
                DefaultsTier(),
            ))
