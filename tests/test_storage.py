"""Tests for the key-value storage backends."""

import pytest

from rupeewise.services.storage import (
    InMemoryStorage,
    InvalidKeyError,
    LocalFileStorage,
    StorageWriteError,
)


@pytest.fixture(params=["memory", "local"])
def storage(request, tmp_path):
    if request.param == "memory":
        return InMemoryStorage()
    return LocalFileStorage(tmp_path / "store")


class TestStorageContract:
    """Behaviour every backend shares."""

    def test_missing_key_reads_none(self, storage):
        assert storage.read("rupeeWise_debts") is None

    def test_write_then_read(self, storage):
        storage.write("rupeeWise_debts", '[{"id": "1"}]')
        assert storage.read("rupeeWise_debts") == '[{"id": "1"}]'

    def test_overwrite(self, storage):
        storage.write("k", "first")
        storage.write("k", "second")
        assert storage.read("k") == "second"

    def test_delete(self, storage):
        storage.write("k", "value")
        assert storage.delete("k") is True
        assert storage.read("k") is None
        assert storage.delete("k") is False

    def test_keys_sorted(self, storage):
        storage.write("b", "1")
        storage.write("a", "2")
        assert storage.keys() == ["a", "b"]


class TestLocalFileStorage:
    """Tests specific to the JSON file backend."""

    def test_one_file_per_key(self, tmp_path):
        storage = LocalFileStorage(tmp_path / "data")
        storage.write("rupeeWise_budgets", "[]")
        assert (tmp_path / "data" / "rupeeWise_budgets.json").read_text(encoding="utf-8") == "[]"

    def test_unicode_round_trip(self, tmp_path):
        storage = LocalFileStorage(tmp_path)
        storage.write("k", '"₹500 for chai"')
        assert storage.read("k") == '"₹500 for chai"'

    def test_no_temp_files_left(self, tmp_path):
        storage = LocalFileStorage(tmp_path)
        storage.write("k", "value")
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test_keys_of_missing_directory(self, tmp_path):
        assert LocalFileStorage(tmp_path / "nowhere").keys() == []

    def test_rejects_path_like_keys(self, tmp_path):
        storage = LocalFileStorage(tmp_path)
        with pytest.raises(InvalidKeyError):
            storage.write("../escape", "x")
        with pytest.raises(InvalidKeyError):
            storage.read("a/b")

    def test_unusable_directory_raises_write_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        storage = LocalFileStorage(blocker / "data")
        with pytest.raises(StorageWriteError):
            storage.write("k", "value")


class TestInMemoryStorage:

    def test_initial_content_is_copied(self):
        initial = {"k": "v"}
        storage = InMemoryStorage(initial)
        storage.write("k", "changed")
        assert initial == {"k": "v"}

    def test_write_count(self):
        storage = InMemoryStorage()
        storage.write("a", "1")
        storage.write("a", "2")
        assert storage.write_count == 2
