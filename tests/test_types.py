"""Unit tests for ConfigurationSnapshot."""

from __future__ import annotations

import pytest

from redisconf.core.types import EMPTY_SNAPSHOT, ConfigurationSnapshot


class TestConfigurationSnapshot:
    """Test suite for ConfigurationSnapshot."""

    def test_case_insensitive_lookup(self):
        snap = ConfigurationSnapshot({"Weather:Location": "Auckland"})
        assert snap["weather:location"] == "Auckland"
        assert "WEATHER:LOCATION" in snap
        assert snap.get("weather:LOCATION") == "Auckland"
        assert snap.get("missing") is None
        assert snap.get("missing", "x") == "x"

    def test_missing_key_raises(self):
        with pytest.raises(KeyError):
            ConfigurationSnapshot()["missing"]

    def test_last_write_wins_keeps_first_spelling(self):
        snap = ConfigurationSnapshot([("Weather:Location", "a"), ("weather:location", "b")])
        assert len(snap) == 1
        assert list(snap) == ["Weather:Location"]
        assert snap["weather:location"] == "b"

    def test_equality(self):
        snap = ConfigurationSnapshot({"a:b": "1", "c": "2"})
        assert snap == {"A:B": "1", "c": "2"}
        assert snap == ConfigurationSnapshot({"c": "2", "a:b": "1"})
        assert snap != {"a:b": "1"}
        assert snap != {"a:b": "1", "c": "3"}

    def test_is_immutable(self):
        snap = ConfigurationSnapshot({"a": "1"})
        with pytest.raises(TypeError):
            snap["a"] = "2"  # type: ignore[index]
        with pytest.raises(AttributeError):
            snap.other = 1  # type: ignore[attr-defined]

    def test_to_dict_and_empty(self):
        assert ConfigurationSnapshot({"a": "1"}).to_dict() == {"a": "1"}
        assert len(EMPTY_SNAPSHOT) == 0
        assert "a" not in EMPTY_SNAPSHOT
        assert 1 not in EMPTY_SNAPSHOT
