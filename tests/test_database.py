"""Tests for database URL handling."""

import pytest

from medchain.database import async_database_url


@pytest.mark.parametrize(
    "url",
    [
        "postgresql://medchain:secret@db:5432/medchain",
        "postgres://medchain:secret@db:5432/medchain",
        "postgresql+psycopg2://medchain:secret@db:5432/medchain",
    ],
)
def test_urls_are_pointed_at_asyncpg(url):
    assert async_database_url(url) == "postgresql+asyncpg://medchain:secret@db:5432/medchain"


def test_query_parameters_are_kept():
    url = async_database_url("postgresql://u:p@db/medchain?ssl=require")

    assert url.startswith("postgresql+asyncpg://u:p@db/medchain")
    assert "ssl=require" in url


def test_non_postgres_url_is_rejected():
    with pytest.raises(ValueError):
        async_database_url("sqlite:///medchain.db")
