"""Shared metadata for the identity tables."""

from sqlalchemy import MetaData

from medchain.config import settings

# All identity tables live in one metadata so foreign keys resolve; DB_SCHEMA
# relocates them to a named schema.
metadata = MetaData(schema=settings.db_schema or None)
