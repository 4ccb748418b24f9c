"""In-memory key/value storage, mainly for tests and throwaway sessions."""

from tango.domain.errors import StorageError
from tango.domain.ports import KeyValueStorage


class InMemoryStorage(KeyValueStorage):
    """
    Dict-backed storage.

    Args:
        initial: Optional starting contents.
        quota_bytes: If set, writes that would push the total size of keys
            and values past this many UTF-8 bytes raise StorageError.
    """

    def __init__(self, initial: dict[str, str] | None = None, quota_bytes: int | None = None):
        self._data: dict[str, str] = dict(initial or {})
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            projected = dict(self._data)
            projected[key] = value
            used = sum(
                len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in projected.items()
            )
            if used > self.quota_bytes:
                raise StorageError(
                    f"Quota exceeded writing {key!r} ({used} > {self.quota_bytes} bytes)"
                )
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def clear(self) -> None:
        self._data.clear()
