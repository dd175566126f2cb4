import json
import logging

import pytest

from assessment.storage import InMemoryStore, JsonFileStore


@pytest.fixture(params=["memory", "json"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryStore()
    return JsonFileStore(tmp_path / "docs")


class TestStores:
    def test_missing_key_returns_default(self, any_store):
        assert any_store.load("nothing") is None
        assert any_store.load("nothing", default=[]) == []

    def test_save_load_delete(self, any_store):
        any_store.save("rcpUsers", [{"email": "a@b.c"}])
        assert any_store.load("rcpUsers") == [{"email": "a@b.c"}]
        any_store.delete("rcpUsers")
        assert any_store.load("rcpUsers", default=[]) == []
        any_store.delete("rcpUsers")

    def test_callers_get_copies(self, any_store):
        doc = {"items": [1]}
        any_store.save("k", doc)
        doc["items"].append(2)
        loaded = any_store.load("k")
        loaded["items"].append(3)
        assert any_store.load("k") == {"items": [1]}

        default = []
        any_store.load("other", default=default).append("x")
        assert default == []


class TestJsonFileStore:
    def test_one_file_per_key(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.save("team/a b", {"x": 1})
        assert json.loads((tmp_path / "team_a_b.json").read_text(encoding="utf-8")) == {"x": 1}
        assert not list(tmp_path.glob("*.tmp"))

    def test_non_ascii_round_trip(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.save("dept", {"name": "Ministère des Finances"})
        assert JsonFileStore(tmp_path).load("dept") == {"name": "Ministère des Finances"}

    def test_corrupt_document_loads_default(self, tmp_path, caplog):
        (tmp_path / "rcpAssignments.json").write_text("{not json", encoding="utf-8")
        store = JsonFileStore(tmp_path)
        with caplog.at_level(logging.ERROR, logger="assessment.storage"):
            assert store.load("rcpAssignments", default=[]) == []
        assert "Error reading" in caplog.text
