import json

import pytest

from tango.domain.errors import StorageError
from tango.infrastructure.storage import InMemoryStorage, JsonFileStorage


class TestInMemoryStorage:
    def test_basic_operations(self):
        s = InMemoryStorage({"a": "1"})
        s.set_item("b", "2")
        s.remove_item("a")
        s.remove_item("missing")

        assert s.get_item("a") is None
        assert s.get_item("b") == "2"
        assert s.keys() == ["b"]

    def test_quota(self):
        s = InMemoryStorage(quota_bytes=8)
        s.set_item("k", "1234")
        with pytest.raises(StorageError, match="Quota exceeded"):
            s.set_item("k2", "123456")
        assert s.get_item("k2") is None


class TestJsonFileStorage:
    def test_missing_file_is_empty(self, tmp_path):
        s = JsonFileStorage(tmp_path / "nested" / "store.json")
        assert s.get_item("x") is None
        assert s.keys() == []

    def test_persists_across_handles(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        JsonFileStorage(path).set_item("k", "v")

        assert JsonFileStorage(path).get_item("k") == "v"
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}
        assert list(path.parent.glob("*.tmp")) == []

    def test_remove_item(self, tmp_path):
        s = JsonFileStorage(tmp_path / "store.json")
        s.set_item("a", "1")
        s.set_item("b", "2")
        s.remove_item("a")
        assert s.keys() == ["b"]

    def test_reads_reflect_external_changes(self, tmp_path):
        path = tmp_path / "store.json"
        s = JsonFileStorage(path)
        s.set_item("a", "1")
        path.write_text(json.dumps({"a": "2"}), encoding="utf-8")
        assert s.get_item("a") == "2"

    @pytest.mark.parametrize("content", ["{{{", "[1, 2]"])
    def test_corrupt_file_raises_storage_error(self, tmp_path, content):
        path = tmp_path / "store.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileStorage(path).get_item("a")
