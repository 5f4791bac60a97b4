"""Persistence adapters for custom property records."""
from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from ..repositories import properties as properties_repo
from ..schemas.properties import Property
from .change_feed import ChangeFeed, PollingChangeFeed
from .local_storage import LocalStorage, StorageWatcher

CUSTOM_PROPERTIES_STORAGE_KEY = "estate:custom-properties.v1"

logger = logging.getLogger(__name__)


class PropertyPersistenceError(RuntimeError):
    """Raised when a backend refuses to store or delete a custom record."""


class PropertyBackend(Protocol):
    """Storage for custom records, selected once when the store is built."""

    mode: str
    change_feed: ChangeFeed

    def custom_properties(self) -> list[Property]:
        """Return the best-known custom records without blocking on the network."""

    async def load(self) -> bool:
        """Re-read authoritative state; False when the read failed."""

    async def save(self, record: Property) -> None:
        """Insert or fully replace the record with the same id."""

    async def delete(self, property_id: str) -> None:
        """Delete the record with this id, if any."""

    async def close(self) -> None:
        """Release resources held by the backend."""


def decode_custom_properties(raw: str | None) -> list[Property]:
    """Parse the stored JSON array; anything unreadable yields no records."""

    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.exception("Failed to load custom properties: stored value is not valid JSON")
        return []
    if not isinstance(parsed, list):
        logger.error("Failed to load custom properties: stored value is not an array")
        return []
    return _parse_payloads(parsed)


def encode_custom_properties(records: Iterable[Property]) -> str:
    return json.dumps([record.to_payload() for record in records], ensure_ascii=False)


def _parse_payloads(payloads: Iterable[Any]) -> list[Property]:
    records: list[Property] = []
    for payload in payloads:
        try:
            record = Property.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Skipping malformed custom property: %s", exc)
            continue
        records.append(record.model_copy(update={"source": None}))
    return records


class LocalPropertyBackend:
    """Custom records kept as one JSON array in :class:`LocalStorage`.

    Reads go straight to the file so a write is visible to the very next
    snapshot, including writes made by other processes.
    """

    mode = "local"

    def __init__(
        self,
        storage: LocalStorage,
        *,
        key: str = CUSTOM_PROPERTIES_STORAGE_KEY,
        poll_interval_seconds: float = 2.0,
    ) -> None:
        self.storage = storage
        self.key = key
        self.change_feed = StorageWatcher(storage, key, interval_seconds=poll_interval_seconds)

    def custom_properties(self) -> list[Property]:
        return decode_custom_properties(self.storage.get_item(self.key))

    async def load(self) -> bool:
        return True

    async def save(self, record: Property) -> None:
        current = self.custom_properties()
        self._write([record, *(item for item in current if item.id != record.id)])

    async def delete(self, property_id: str) -> None:
        current = self.custom_properties()
        self._write([item for item in current if item.id != property_id])

    async def close(self) -> None:
        await self.change_feed.aclose()

    def _write(self, records: list[Property]) -> None:
        encoded = encode_custom_properties(records)
        try:
            self.storage.set_item(self.key, encoded)
        except OSError as exc:
            logger.error("Failed to persist custom properties: %s", exc)
            raise PropertyPersistenceError("Could not save custom properties to local storage") from exc
        self.change_feed.acknowledge(encoded)


class TableChangeFeed(PollingChangeFeed):
    """Detect inserts, updates and deletes on the properties table.

    The baseline is the fingerprint read alongside the last successful fetch,
    so a write landing after that fetch is reported by the next poll. Until a
    fetch has succeeded every poll reports a change.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession], *, interval_seconds: float = 2.0) -> None:
        super().__init__(interval_seconds)
        self._sessionmaker = sessionmaker
        self._fingerprint: tuple[int, int] | None = None

    def mark_loaded(self, fingerprint: tuple[int, int]) -> None:
        """Record the table state the cache now reflects."""

        self._fingerprint = fingerprint

    async def poll(self) -> bool:
        async with self._sessionmaker() as session:
            fingerprint = await properties_repo.table_fingerprint(session)
        return fingerprint != self._fingerprint


class RemotePropertyBackend:
    """Custom records stored as JSON payload rows in the hosted database."""

    mode = "backend"

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        *,
        engine: AsyncEngine | None = None,
        poll_interval_seconds: float = 2.0,
    ) -> None:
        self._sessionmaker = sessionmaker
        self._engine = engine
        self._cache: list[Property] = []
        self.change_feed = TableChangeFeed(sessionmaker, interval_seconds=poll_interval_seconds)

    def custom_properties(self) -> list[Property]:
        return list(self._cache)

    async def load(self) -> bool:
        try:
            async with self._sessionmaker() as session:
                fingerprint = await properties_repo.table_fingerprint(session)
                payloads = await properties_repo.list_payloads(session)
        except Exception:  # noqa: BLE001 - reads degrade to the last good cache
            logger.exception("Failed to load properties from the backend")
            return False
        self._cache = _parse_payloads(payloads)
        self.change_feed.mark_loaded(fingerprint)
        return True

    async def save(self, record: Property) -> None:
        try:
            async with self._sessionmaker() as session, session.begin():
                await properties_repo.upsert_payload(session, record.id, record.to_payload())
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Failed to upsert property %s to the backend: %s", record.id, exc)
            raise PropertyPersistenceError(f"Could not save property {record.id}") from exc

    async def delete(self, property_id: str) -> None:
        try:
            async with self._sessionmaker() as session, session.begin():
                await properties_repo.delete_by_id(session, property_id)
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Failed to delete property %s from the backend: %s", property_id, exc)
            raise PropertyPersistenceError(f"Could not delete property {property_id}") from exc

    async def close(self) -> None:
        await self.change_feed.aclose()
        if self._engine is not None:
            await self._engine.dispose()
