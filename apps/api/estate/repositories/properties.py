"""Data access helpers for custom property rows."""
from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement, Select, delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.property import PropertyRecord, property_revision_seq

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _next_revision(dialect: str) -> ColumnElement[int]:
    """Revision for the row being written, always above every existing one.

    Timestamps come from whichever clock wrote them, so change detection
    relies on this counter instead.
    """

    if dialect == "postgresql":
        return property_revision_seq.next_value()
    # SQLite serialises writers, so max + 1 cannot be handed out twice.
    return select(func.coalesce(func.max(PropertyRecord.revision), 0) + 1).scalar_subquery()


async def list_payloads(session: AsyncSession) -> list[dict[str, Any]]:
    """Return every stored payload, most recently written first.

    The row id wins over a missing or blank ``id`` inside the payload.
    """

    stmt: Select[tuple[PropertyRecord]] = select(PropertyRecord).order_by(
        PropertyRecord.revision.desc(), PropertyRecord.id.asc()
    )
    result = await session.execute(stmt)
    payloads: list[dict[str, Any]] = []
    for record in result.scalars():
        payload = dict(record.data or {})
        if not payload.get("id"):
            payload["id"] = record.id
        payloads.append(payload)
    return payloads


async def upsert_payload(session: AsyncSession, property_id: str, payload: dict[str, Any]) -> None:
    """Insert the row or overwrite its payload entirely."""

    dialect = session.get_bind().dialect.name
    insert = _UPSERT_DIALECTS.get(dialect)

    if insert is None:
        revision = await session.scalar(select(func.coalesce(func.max(PropertyRecord.revision), 0) + 1))
        record = await session.get(PropertyRecord, property_id)
        if record is None:
            session.add(PropertyRecord(id=property_id, data=payload, revision=revision))
        else:
            record.data = payload
            record.revision = revision
            session.add(record)
        return

    stmt = insert(PropertyRecord).values(id=property_id, data=payload, revision=_next_revision(dialect))
    stmt = stmt.on_conflict_do_update(
        index_elements=[PropertyRecord.id],
        set_={"data": stmt.excluded.data, "revision": stmt.excluded.revision, "updated_at": func.now()},
    )
    await session.execute(stmt)


async def delete_by_id(session: AsyncSession, property_id: str) -> bool:
    """Delete a row, returning whether one existed."""

    result = await session.execute(delete(PropertyRecord).where(PropertyRecord.id == property_id))
    return bool(result.rowcount)


async def table_fingerprint(session: AsyncSession) -> tuple[int, int]:
    """Cheap summary that changes on every insert, update or delete.

    Inserts and updates raise the highest revision; a delete lowers the count.
    """

    stmt = select(func.count(PropertyRecord.id), func.max(PropertyRecord.revision))
    count, latest = (await session.execute(stmt)).one()
    return int(count or 0), int(latest or 0)
