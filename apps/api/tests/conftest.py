"""Shared fixtures for property store tests."""
from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from estate.models import Base
from estate.services.local_storage import LocalStorage
from estate.services.property_backends import LocalPropertyBackend, RemotePropertyBackend
from estate.services.property_store import PropertyStore

SLOW_POLL = 3600.0


@pytest.fixture
def storage_path(tmp_path: Path) -> Path:
    return tmp_path / "local-storage.json"


@pytest.fixture
def local_store(storage_path: Path) -> PropertyStore:
    backend = LocalPropertyBackend(LocalStorage(storage_path), poll_interval_seconds=SLOW_POLL)
    return PropertyStore(backend)


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'backend.db'}"


@pytest_asyncio.fixture
async def remote_store(database_url: str):
    engine = create_async_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    backend = RemotePropertyBackend(
        async_sessionmaker(engine, expire_on_commit=False),
        engine=engine,
        poll_interval_seconds=SLOW_POLL,
    )
    store = PropertyStore(backend)
    yield store
    await store.close()
