"""Script to create the identity tables directly, bypassing migrations."""

import asyncio

from sqlalchemy import text
from sqlalchemy.schema import CreateSchema

from medchain.config import settings
from medchain.database import engine
from medchain.models import metadata


async def init_db() -> None:
    """Initialize the database by creating all tables."""
    async with engine.begin() as conn:
        await conn.execute(text('CREATE EXTENSION IF NOT EXISTS "pgcrypto"'))

        if settings.db_schema:
            await conn.execute(CreateSchema(settings.db_schema, if_not_exists=True))

        await conn.run_sync(metadata.create_all)

        print("✓ Database initialized successfully!")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_db())
