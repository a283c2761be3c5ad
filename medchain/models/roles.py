"""Role and user-role model definitions."""

from enum import Enum

from sqlalchemy import Column, ForeignKey, String, Table, Text, text
from sqlalchemy.dialects.postgresql import UUID

from medchain.models.base import metadata


class UserRole(str, Enum):
    """Fixed set of roles a user can be assigned."""

    ADMIN = "Admin"
    DOCTOR = "Doctor"
    PATIENT = "Patient"


roles = Table(
    "roles",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()")),
    Column("name", String(256), nullable=False),
    Column("normalized_name", String(256), nullable=False, unique=True, index=True),
    Column("concurrency_stamp", Text),
)

user_roles = Table(
    "user_roles",
    metadata,
    Column(
        "user_id",
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "role_id",
        UUID(as_uuid=True),
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)
