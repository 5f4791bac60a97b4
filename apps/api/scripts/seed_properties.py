"""Create the backend schema and copy the built-in catalog into it."""
from __future__ import annotations

import asyncio
import sys

from estate.core.config import settings
from estate.data.properties import BUILT_IN_PROPERTIES
from estate.db.session import build_engine, build_sessionmaker
from estate.models import Base
from estate.repositories import properties as properties_repo


async def create_schema(engine) -> None:
	"""Create the database schema if it does not already exist."""

	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)


async def seed_properties(sessionmaker) -> int:
	"""Insert or overwrite a row for every built-in property."""

	async with sessionmaker() as session:
		async with session.begin():
			for record in BUILT_IN_PROPERTIES:
				await properties_repo.upsert_payload(session, record.id, record.to_payload())
				print(f"Migrated: {record.name}")
	return len(BUILT_IN_PROPERTIES)


async def main() -> int:
	if not settings.backend_configured:
		print("Missing backend credentials. Set BACKEND_URL and BACKEND_KEY.", file=sys.stderr)
		return 1

	engine = build_engine(settings)
	try:
		await create_schema(engine)
		count = await seed_properties(build_sessionmaker(engine))
	finally:
		await engine.dispose()
	print(f"Database schema ensured and {count} properties seeded.")
	return 0


if __name__ == "__main__":
	sys.exit(asyncio.run(main()))
