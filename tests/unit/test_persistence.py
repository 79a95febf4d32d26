"""
Unit tests for the key-value persistence backends.
"""

import json

import pytest

from recall.persistence import JsonFileBackend, KeyValueBackend, MemoryBackend


class TestMemoryBackend:
    """In-memory backend."""

    def test_default_when_missing(self):
        assert MemoryBackend().load("nothing", []) == []

    def test_default_is_copied(self):
        default = []
        loaded = MemoryBackend().load("nothing", default)
        loaded.append(1)
        assert default == []

    def test_values_are_not_shared(self):
        backend = MemoryBackend()
        value = [{"id": "a"}]
        backend.save("k", value)
        value[0]["id"] = "changed"

        loaded = backend.load("k", [])
        loaded.append({"id": "b"})

        assert backend.load("k", []) == [{"id": "a"}]

    def test_initial_data(self):
        backend = MemoryBackend({"k": [1, 2]})
        assert backend.load("k", []) == [1, 2]
        assert backend.keys() == ["k"]

    def test_rejects_non_json_values(self):
        with pytest.raises(TypeError):
            MemoryBackend().save("k", [object()])

    def test_satisfies_protocol(self):
        assert isinstance(MemoryBackend(), KeyValueBackend)


class TestJsonFileBackend:
    """File-backed store."""

    def test_round_trip(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        backend.save("spaced_repetition.items", [{"id": "a", "interval": 6}])

        assert backend.load("spaced_repetition.items", []) == [{"id": "a", "interval": 6}]
        with open(tmp_path / "spaced_repetition.items.json", encoding="utf-8") as f:
            assert json.load(f) == [{"id": "a", "interval": 6}]

    def test_default_when_missing(self, tmp_path):
        assert JsonFileBackend(tmp_path).load("missing", {"x": 1}) == {"x": 1}

    def test_creates_directory(self, tmp_path):
        target = tmp_path / "nested" / "data"
        JsonFileBackend(target)
        assert target.is_dir()

    def test_last_write_wins(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        backend.save("k", [1])
        backend.save("k", [2])
        assert backend.load("k", []) == [2]

    def test_no_temp_files_left(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        backend.save("k", [1])
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test_failed_write_keeps_previous_value(self, tmp_path):
        backend = JsonFileBackend(tmp_path)
        backend.save("k", [1])

        with pytest.raises(TypeError):
            backend.save("k", [object()])

        assert backend.load("k", []) == [1]
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test_shared_directory_between_instances(self, tmp_path):
        JsonFileBackend(tmp_path).save("k", ["a"])
        assert JsonFileBackend(tmp_path).load("k", []) == ["a"]
