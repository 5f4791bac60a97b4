"""Merged, live view over built-in and custom property records."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, Sequence

from ..core.config import Settings
from ..data.properties import BUILT_IN_PROPERTIES
from ..db.session import build_engine, build_sessionmaker
from ..schemas.properties import Property
from .local_storage import LocalStorage
from .property_backends import LocalPropertyBackend, PropertyBackend, RemotePropertyBackend

Listener = Callable[[], None]
Unsubscribe = Callable[[], None]

logger = logging.getLogger(__name__)


def merge_properties(custom: Iterable[Property], built_in: Iterable[Property]) -> list[Property]:
    """Custom records first, then built-ins whose id no custom record shadows."""

    merged = [record.with_source("custom") for record in custom]
    custom_ids = {record.id for record in merged}
    merged.extend(record.with_source("initial") for record in built_in if record.id not in custom_ids)
    return merged


class SameProcessNotifier:
    """Synchronous fan-out to listeners registered in this process."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def __len__(self) -> int:
        return len(self._listeners)

    def add(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:  # noqa: BLE001 - one broken view must not starve the rest
                logger.exception("Property listener %r failed", listener)


class PropertyStore:
    """Single owner of the merged property list.

    Every mutation ends with a fresh read of the backend, whether or not the
    write succeeded, so the cached view converges on what the backend holds.
    """

    def __init__(self, backend: PropertyBackend, *, built_in: Sequence[Property] = BUILT_IN_PROPERTIES) -> None:
        self.backend = backend
        self._built_in = tuple(built_in)
        self._notifier = SameProcessNotifier()
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def mode(self) -> str:
        return self.backend.mode

    def get_snapshot(self) -> list[Property]:
        return merge_properties(self.backend.custom_properties(), self._built_in)

    def find_by_id(self, property_id: str) -> Property | None:
        for record in self.get_snapshot():
            if record.id == property_id:
                return record
        return None

    async def upsert(self, record: Property) -> None:
        """Persist a custom record; errors propagate after the resync."""

        payload = record.model_copy(update={"source": None})
        try:
            await self.backend.save(payload)
        finally:
            await self.refresh()

    async def remove(self, property_id: str) -> None:
        try:
            await self.backend.delete(property_id)
        finally:
            await self.refresh()

    async def refresh(self) -> None:
        """Re-read authoritative state and tell subscribers it may have changed."""

        if await self.backend.load():
            self._notifier.notify()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Call ``listener`` whenever the merged view may have changed.

        The external change feed runs while at least one listener is
        registered. In backend mode each subscription also starts a fetch.
        """

        self._notifier.add(listener)
        if len(self._notifier) == 1:
            self.backend.change_feed.start(self.refresh)
        if self.mode == "backend":
            self._spawn(self.refresh())

        unsubscribed = False

        def unsubscribe() -> None:
            nonlocal unsubscribed
            if unsubscribed:
                return
            unsubscribed = True
            self._notifier.remove(listener)
            if not len(self._notifier):
                self.backend.change_feed.stop()

        return unsubscribe

    async def close(self) -> None:
        for task in list(self._pending):
            task.cancel()
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        await self.backend.close()

    def _spawn(self, coro) -> None:
        try:
            task = asyncio.get_running_loop().create_task(coro)
        except RuntimeError:
            coro.close()
            logger.debug("No running event loop; skipping background property fetch")
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


def build_property_store(settings: Settings) -> PropertyStore:
    """Pick the backend once from configuration and wrap it in a store."""

    backend: PropertyBackend
    if settings.backend_configured:
        engine = build_engine(settings)
        backend = RemotePropertyBackend(
            build_sessionmaker(engine),
            engine=engine,
            poll_interval_seconds=settings.change_poll_interval_seconds,
        )
    else:
        storage = LocalStorage(settings.local_storage_path, quota_bytes=settings.local_storage_quota_bytes)
        backend = LocalPropertyBackend(storage, poll_interval_seconds=settings.change_poll_interval_seconds)

    logger.info("Property store running in %s mode", backend.mode)
    return PropertyStore(backend)
