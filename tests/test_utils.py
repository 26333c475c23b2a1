"""Tests for utility functions."""

from liveconfig.utils import deep_merge
from liveconfig.utils import find_key
from liveconfig.utils import split_section


class TestDeepMerge:
    """Test deep_merge function."""

    def test_empty_dicts(self):
        """Test merging empty dictionaries."""
        assert deep_merge({}, {}) == {}

    def test_overlay_wins(self):
        """Test overlay takes precedence for simple values."""
        assert deep_merge({"host": "a", "port": 1}, {"host": "b"}) == {"host": "b", "port": 1}

    def test_nested_merge(self):
        """Test environment-style overlay of a nested section."""
        base = {"database_config": {"host": "localhost", "port": 5432}, "http_listener": ":80"}
        overlay = {"database_config": {"host": "example.com"}}
        assert deep_merge(base, overlay) == {
            "database_config": {"host": "example.com", "port": 5432},
            "http_listener": ":80",
        }

    def test_dict_replaces_non_dict(self):
        """Test overlay dict replaces a scalar in base."""
        assert deep_merge({"a": "string"}, {"a": {"b": 1}}) == {"a": {"b": 1}}

    def test_lists_not_merged(self):
        """Test lists are replaced, not merged."""
        assert deep_merge({"tags": [1, 2, 3]}, {"tags": [4]}) == {"tags": [4]}

    def test_original_not_modified(self):
        """Test that original dicts are not modified."""
        base = {"a": {"b": 1}}
        overlay = {"a": {"c": 2}}
        deep_merge(base, overlay)
        assert base == {"a": {"b": 1}}
        assert overlay == {"a": {"c": 2}}


class TestKeyHelpers:
    """Test case-insensitive key helpers."""

    def test_find_key_exact(self):
        assert find_key({"host": "a"}, "host") == "a"

    def test_find_key_ignores_case(self):
        assert find_key({"databaseConfig": {"host": "a"}}, "DATABASECONFIG") == {"host": "a"}

    def test_find_key_prefers_exact_match(self):
        assert find_key({"Host": "upper", "host": "lower"}, "host") == "lower"

    def test_find_key_default(self):
        assert find_key({}, "missing") is None
        assert find_key({}, "missing", 42) == 42

    def test_find_key_skips_non_string_keys(self):
        assert find_key({1: "one", "One": "word"}, "one") == "word"

    def test_split_section(self):
        assert split_section("databaseConfig") == ["databaseConfig"]
        assert split_section("servers.primary") == ["servers", "primary"]
        assert split_section("") == []
