"""Create identity tables

Revision ID: 001
Revises:
Create Date: 2025-08-02 06:00:00.000000

Users, roles and role assignments, plus the claims, external-login and
token tables of the standard identity schema. DB_SCHEMA relocates all of
them to a named schema.

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op
from medchain.config import settings

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA = settings.db_schema or None


def _fk(table: str) -> str:
    return f"{SCHEMA}.{table}.id" if SCHEMA else f"{table}.id"


def upgrade() -> None:
    """Create identity tables."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')
    if SCHEMA:
        op.execute(f'CREATE SCHEMA IF NOT EXISTS "{SCHEMA}"')

    op.create_table(
        "users",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("user_name", sa.String(256), nullable=False),
        sa.Column("normalized_user_name", sa.String(256), nullable=False),
        sa.Column("email", sa.String(256), nullable=False),
        sa.Column("normalized_email", sa.String(256), nullable=False),
        sa.Column("email_confirmed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("password_hash", sa.Text(), nullable=True),
        sa.Column("security_stamp", sa.Text(), nullable=True),
        sa.Column("concurrency_stamp", sa.Text(), nullable=True),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("lockout_enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("access_failed_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("full_name", sa.Text(), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("profile_picture_url", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("specialization", sa.String(200), nullable=True),
        sa.Column("license_number", sa.String(100), nullable=True),
        sa.Column("insurance_provider", sa.Text(), nullable=True),
        sa.Column("wallet_address", sa.String(100), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_users_normalized_user_name", "users", ["normalized_user_name"], unique=True, schema=SCHEMA
    )
    op.create_index("ix_users_normalized_email", "users", ["normalized_email"], schema=SCHEMA)

    op.create_table(
        "roles",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("normalized_name", sa.String(256), nullable=False),
        sa.Column("concurrency_stamp", sa.Text(), nullable=True),
        schema=SCHEMA,
    )
    op.create_index(
        "ix_roles_normalized_name", "roles", ["normalized_name"], unique=True, schema=SCHEMA
    )

    op.create_table(
        "user_roles",
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey(_fk("users"), ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "role_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey(_fk("roles"), ondelete="CASCADE"),
            primary_key=True,
        ),
        schema=SCHEMA,
    )
    op.create_index("ix_user_roles_role_id", "user_roles", ["role_id"], schema=SCHEMA)

    op.create_table(
        "user_claims",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey(_fk("users"), ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("claim_type", sa.Text(), nullable=True),
        sa.Column("claim_value", sa.Text(), nullable=True),
        schema=SCHEMA,
    )
    op.create_index("ix_user_claims_user_id", "user_claims", ["user_id"], schema=SCHEMA)

    op.create_table(
        "role_claims",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "role_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey(_fk("roles"), ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("claim_type", sa.Text(), nullable=True),
        sa.Column("claim_value", sa.Text(), nullable=True),
        schema=SCHEMA,
    )
    op.create_index("ix_role_claims_role_id", "role_claims", ["role_id"], schema=SCHEMA)

    op.create_table(
        "user_logins",
        sa.Column("login_provider", sa.String(128), primary_key=True),
        sa.Column("provider_key", sa.String(128), primary_key=True),
        sa.Column("provider_display_name", sa.Text(), nullable=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey(_fk("users"), ondelete="CASCADE"),
            nullable=False,
        ),
        schema=SCHEMA,
    )
    op.create_index("ix_user_logins_user_id", "user_logins", ["user_id"], schema=SCHEMA)

    op.create_table(
        "user_tokens",
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey(_fk("users"), ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("login_provider", sa.String(128), primary_key=True),
        sa.Column("name", sa.String(128), primary_key=True),
        sa.Column("value", sa.Text(), nullable=True),
        schema=SCHEMA,
    )


def downgrade() -> None:
    """Drop identity tables."""
    op.drop_table("user_tokens", schema=SCHEMA)
    op.drop_index("ix_user_logins_user_id", table_name="user_logins", schema=SCHEMA)
    op.drop_table("user_logins", schema=SCHEMA)
    op.drop_index("ix_role_claims_role_id", table_name="role_claims", schema=SCHEMA)
    op.drop_table("role_claims", schema=SCHEMA)
    op.drop_index("ix_user_claims_user_id", table_name="user_claims", schema=SCHEMA)
    op.drop_table("user_claims", schema=SCHEMA)
    op.drop_index("ix_user_roles_role_id", table_name="user_roles", schema=SCHEMA)
    op.drop_table("user_roles", schema=SCHEMA)
    op.drop_index("ix_roles_normalized_name", table_name="roles", schema=SCHEMA)
    op.drop_table("roles", schema=SCHEMA)
    op.drop_index("ix_users_normalized_email", table_name="users", schema=SCHEMA)
    op.drop_index("ix_users_normalized_user_name", table_name="users", schema=SCHEMA)
    op.drop_table("users", schema=SCHEMA)
