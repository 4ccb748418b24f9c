"""
File-backed key/value storage.

The whole store is one JSON object (key -> string) on disk. Every call
re-reads the file so separate handles always see the current contents.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from tango.domain.errors import StorageError
from tango.domain.ports import KeyValueStorage

logger = logging.getLogger(__name__)


class JsonFileStorage(KeyValueStorage):
    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except (ValueError, RecursionError) as e:
            raise StorageError(f"Corrupt storage file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Corrupt storage file {self.path}: expected a JSON object")
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e
        logger.debug(f"Wrote {len(data)} keys to {self.path}")

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove_item(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)

    def keys(self) -> list[str]:
        return list(self._load())
