"""Remaining tables of the standard identity schema.

Claims, external logins and stored tokens are created by migrations so the
schema matches what identity tooling expects; no endpoint reads them yet.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.dialects.postgresql import UUID

from medchain.models.base import metadata

user_claims = Table(
    "user_claims",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "user_id",
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("claim_type", Text),
    Column("claim_value", Text),
)

role_claims = Table(
    "role_claims",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "role_id",
        UUID(as_uuid=True),
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("claim_type", Text),
    Column("claim_value", Text),
)

user_logins = Table(
    "user_logins",
    metadata,
    Column("login_provider", String(128), primary_key=True),
    Column("provider_key", String(128), primary_key=True),
    Column("provider_display_name", Text),
    Column(
        "user_id",
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
)

user_tokens = Table(
    "user_tokens",
    metadata,
    Column(
        "user_id",
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("login_provider", String(128), primary_key=True),
    Column("name", String(128), primary_key=True),
    Column("value", Text),
)
