"""Polling change feeds that turn external writes into store notifications."""
from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Awaitable, Callable

ChangeHandler = Callable[[], Awaitable[None]]

logger = logging.getLogger(__name__)


class ChangeFeed:
    """Channel the store subscribes to once and forwards as its own event.

    The base class never reports a change, which makes it the adapter for
    targets without an external channel.
    """

    def __init__(self) -> None:
        self._on_change: ChangeHandler | None = None

    @property
    def running(self) -> bool:
        return False

    def start(self, on_change: ChangeHandler) -> None:
        self._on_change = on_change

    def stop(self) -> None:
        self._on_change = None

    async def aclose(self) -> None:
        self.stop()

    async def poll(self) -> bool:
        """Return True when the watched resource changed since the last poll."""

        return False

    async def check(self) -> bool:
        """Poll once and forward a detected change to the handler."""

        changed = await self.poll()
        if changed and self._on_change is not None:
            await self._on_change()
        return changed


class PollingChangeFeed(ChangeFeed):
    """Run :meth:`check` on a fixed interval in a background task."""

    def __init__(self, interval_seconds: float) -> None:
        super().__init__()
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, on_change: ChangeHandler) -> None:
        super().start(on_change)
        if self.running:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; %s only advances on explicit checks", type(self).__name__)
            return
        self._task = loop.create_task(self._run())

    def stop(self) -> None:
        super().stop()
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def aclose(self) -> None:
        task = self._task
        self.stop()
        if task is not None:
            with suppress(asyncio.CancelledError):
                await task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.check()
            except asyncio.CancelledError:
                raise
            except Exception:  # noqa: BLE001 - a failed poll must not end the feed
                logger.exception("%s poll failed", type(self).__name__)
