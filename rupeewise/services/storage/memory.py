"""In-memory storage, for tests and for running without a writable data directory."""

from typing import Optional

from rupeewise.services.storage.interface import KeyValueStorageInterface


class InMemoryStorage(KeyValueStorageInterface):
    """Keeps blobs in a dict. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value
        self.write_count += 1

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._data)
