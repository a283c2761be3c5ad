"""Seed roles and the admin account

Revision ID: 002
Revises: 001
Create Date: 2025-08-02 06:46:59.000000

Inserts the three fixed roles and the single bootstrap admin account,
assigned the Admin role.

"""

import uuid
from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op
from medchain.config import settings
from medchain.core.security import get_password_hash
from medchain.seed import ADMIN_BOOTSTRAP_PASSWORD, ADMIN_EMAIL, ADMIN_FULL_NAME

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA = settings.db_schema or None

ADMIN_ROLE_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
DOCTOR_ROLE_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
PATIENT_ROLE_ID = uuid.UUID("00000000-0000-0000-0000-000000000003")
ADMIN_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")

roles_table = sa.table(
    "roles",
    sa.column("id", postgresql.UUID(as_uuid=True)),
    sa.column("name", sa.String),
    sa.column("normalized_name", sa.String),
    sa.column("concurrency_stamp", sa.Text),
    schema=SCHEMA,
)

users_table = sa.table(
    "users",
    sa.column("id", postgresql.UUID(as_uuid=True)),
    sa.column("user_name", sa.String),
    sa.column("normalized_user_name", sa.String),
    sa.column("email", sa.String),
    sa.column("normalized_email", sa.String),
    sa.column("email_confirmed", sa.Boolean),
    sa.column("password_hash", sa.Text),
    sa.column("security_stamp", sa.Text),
    sa.column("concurrency_stamp", sa.Text),
    sa.column("full_name", sa.Text),
    schema=SCHEMA,
)

user_roles_table = sa.table(
    "user_roles",
    sa.column("user_id", postgresql.UUID(as_uuid=True)),
    sa.column("role_id", postgresql.UUID(as_uuid=True)),
    schema=SCHEMA,
)


def upgrade() -> None:
    """Insert roles, the admin user and the admin's role assignment."""
    op.bulk_insert(
        roles_table,
        [
            {
                "id": role_id,
                "name": name,
                "normalized_name": name.upper(),
                "concurrency_stamp": str(uuid.uuid4()),
            }
            for role_id, name in (
                (ADMIN_ROLE_ID, "Admin"),
                (DOCTOR_ROLE_ID, "Doctor"),
                (PATIENT_ROLE_ID, "Patient"),
            )
        ],
    )

    op.bulk_insert(
        users_table,
        [
            {
                "id": ADMIN_USER_ID,
                "user_name": ADMIN_EMAIL,
                "normalized_user_name": ADMIN_EMAIL.upper(),
                "email": ADMIN_EMAIL,
                "normalized_email": ADMIN_EMAIL.upper(),
                "email_confirmed": True,
                "password_hash": get_password_hash(ADMIN_BOOTSTRAP_PASSWORD),
                "security_stamp": uuid.uuid4().hex.upper(),
                "concurrency_stamp": str(uuid.uuid4()),
                "full_name": ADMIN_FULL_NAME,
            }
        ],
    )

    op.bulk_insert(
        user_roles_table,
        [{"user_id": ADMIN_USER_ID, "role_id": ADMIN_ROLE_ID}],
    )


def downgrade() -> None:
    """Remove the seeded rows."""
    op.execute(user_roles_table.delete().where(user_roles_table.c.user_id == ADMIN_USER_ID))
    op.execute(users_table.delete().where(users_table.c.id == ADMIN_USER_ID))
    op.execute(
        roles_table.delete().where(
            roles_table.c.id.in_([ADMIN_ROLE_ID, DOCTOR_ROLE_ID, PATIENT_ROLE_ID])
        )
    )
