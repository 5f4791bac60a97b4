"""Database engine and session management for the hosted backend."""
from __future__ import annotations

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from ..core.config import Settings


def resolve_backend_url(settings: Settings) -> URL:
    """Combine the configured endpoint with the access key.

    The key is used as the connection password unless the URL already
    carries one. File-based URLs have no host and are returned untouched.
    """

    url = make_url(settings.backend_url.strip())
    if url.host and url.password is None:
        url = url.set(password=settings.backend_key.strip())
    return url


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine used by the remote property backend."""

    connect_args: dict[str, object] = {}
    if settings.backend_ssl_required:
        connect_args["ssl"] = True

    return create_async_engine(
        resolve_backend_url(settings),
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
