"""Script to seed roles and the bootstrap admin account."""

import asyncio
import sys

from medchain.database import AsyncSessionLocal, engine
from medchain.middleware.logging import configure_logging
from medchain.repositories.auth_repository import AuthRepository
from medchain.seed import seed_database


async def main() -> int:
    configure_logging()

    try:
        async with AsyncSessionLocal() as session:
            await seed_database(AuthRepository(session))
    except Exception as e:
        print(f"✗ Seeding failed: {e}", file=sys.stderr)
        return 1
    finally:
        await engine.dispose()

    print("✓ Seed data applied successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
