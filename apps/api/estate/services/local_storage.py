"""File-backed key/value storage with browser local-storage semantics."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from .change_feed import PollingChangeFeed

logger = logging.getLogger(__name__)

FileToken = tuple[int, int, int]


class StorageQuotaExceededError(OSError):
    """Raised when a write would grow the storage file past its quota."""


@dataclass(slots=True)
class StorageEvent:
    """Change to a single key made by another writer."""

    key: str
    old_value: str | None
    new_value: str | None


class LocalStorage:
    """String-to-string store persisted as one JSON object on disk.

    Every call goes to the file so several processes sharing a path see each
    other's writes. There is no locking: the last writer wins.
    """

    def __init__(self, path: str | Path, *, quota_bytes: int = 5 * 1024 * 1024) -> None:
        self.path = Path(path)
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = value
        self._write_all(items)

    def file_token(self) -> FileToken | None:
        """Identity of the current file contents, None when absent."""

        try:
            stat = self.path.stat()
        except FileNotFoundError:
            return None
        return stat.st_ino, stat.st_mtime_ns, stat.st_size

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            items = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError:
            logger.exception("Local storage file %s is corrupt; treating it as empty", self.path)
            return {}
        if not isinstance(items, dict):
            logger.error("Local storage file %s does not hold an object; treating it as empty", self.path)
            return {}
        return {str(key): value for key, value in items.items() if isinstance(value, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        encoded = json.dumps(items, ensure_ascii=False).encode("utf-8")
        if self.quota_bytes and len(encoded) > self.quota_bytes:
            raise StorageQuotaExceededError(
                f"Writing {len(encoded)} bytes exceeds the {self.quota_bytes} byte local storage quota"
            )

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(encoded)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class StorageWatcher(PollingChangeFeed):
    """Report writes to one key made by other processes sharing the file.

    Writes made through this process are acknowledged by the owner so they
    never come back as events.
    """

    def __init__(self, storage: LocalStorage, key: str, *, interval_seconds: float = 2.0) -> None:
        super().__init__(interval_seconds)
        self._storage = storage
        self._key = key
        self._last_token = storage.file_token()
        self._last_value = storage.get_item(key)
        self.last_event: StorageEvent | None = None

    def acknowledge(self, value: str | None) -> None:
        """Record a write made by this process."""

        self._last_value = value
        self._last_token = self._storage.file_token()

    async def poll(self) -> bool:
        token = self._storage.file_token()
        if token == self._last_token:
            return False
        self._last_token = token

        value = self._storage.get_item(self._key)
        if value == self._last_value:
            return False

        self.last_event = StorageEvent(key=self._key, old_value=self._last_value, new_value=value)
        self._last_value = value
        logger.debug("Local storage key %s changed by another writer", self._key)
        return True
