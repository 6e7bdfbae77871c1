"""Unit tests for the keys module."""

from __future__ import annotations

from fnmatch import fnmatchcase

import pytest

from redisconf.core.keys import (
    child_keys,
    combine,
    namespace_pattern,
    parent_path,
    section_key,
    strip_prefix,
)


class TestStripPrefix:
    """Test suite for strip_prefix."""

    @pytest.mark.parametrize(
        "remote_key,expected",
        [
            ("testproject:database:host", "database:host"),
            ("testproject:nlog:minlevel", "nlog:minlevel"),
            ("testproject:weather:location", "weather:location"),
            ("testproject:database:connection:string", "database:connection:string"),
        ],
    )
    def test_strips_namespace(self, remote_key, expected):
        """Test the namespace segment is removed."""
        assert strip_prefix("testproject", remote_key) == expected

    @pytest.mark.parametrize(
        "remote_key",
        ["wrongproject:database:host", "other:nlog:minlevel", "randomkey", "testprojectx:a"],
    )
    def test_other_namespace_returns_none(self, remote_key):
        """Test keys from other namespaces are rejected."""
        assert strip_prefix("testproject", remote_key) is None

    def test_case_insensitive_prefix(self):
        """Test prefix comparison ignores case but keeps the remainder."""
        assert strip_prefix("myapp", "MyApp:Weather:Location") == "Weather:Location"

    def test_prefix_only_returns_none(self):
        """Test nothing after the prefix yields no key."""
        assert strip_prefix("myapp", "myapp:") is None
        assert strip_prefix("myapp", "myapp") is None


class TestNamespacePattern:
    """Test suite for namespace_pattern."""

    def test_plain_namespace(self):
        assert namespace_pattern("myapp") == "myapp:*"

    def test_glob_characters_escaped(self):
        """Test glob metacharacters in the namespace are escaped."""
        assert namespace_pattern("my*app") == "my\\*app:*"
        assert namespace_pattern("a?[b]") == "a\\?\\[b\\]:*"

    def test_pattern_matches_namespace_keys(self):
        pattern = namespace_pattern("myapp")
        assert fnmatchcase("myapp:weather:location", pattern)
        assert not fnmatchcase("other:x", pattern)


class TestPaths:
    """Test suite for path helpers."""

    def test_combine(self):
        assert combine("weather", "location") == "weather:location"
        assert combine(None, "weather") == "weather"
        assert combine("", "a", "", "b") == "a:b"

    def test_section_key(self):
        assert section_key("weather:location") == "location"
        assert section_key("weather") == "weather"
        assert section_key("") == ""

    def test_parent_path(self):
        assert parent_path("a:b:c") == "a:b"
        assert parent_path("a") is None

    def test_child_keys_root(self):
        keys = ["weather:location", "weather:maxTemp", "logging:level", "Weather:minTemp"]
        assert child_keys(keys) == ["logging", "weather"]

    def test_child_keys_nested(self):
        keys = ["weather:location", "WEATHER:maxTemp", "weather:units:temp", "logging:level"]
        assert child_keys(keys, "weather") == ["location", "maxTemp", "units"]

    def test_child_keys_no_match(self):
        assert child_keys(["weather:location"], "logging") == []
        assert child_keys(["weather"], "weather") == []
