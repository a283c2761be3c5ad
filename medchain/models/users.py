"""User model definition using SQLAlchemy Core."""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    String,
    Table,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import UUID

from medchain.models.base import metadata

users = Table(
    "users",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True, server_default=text("gen_random_uuid()")),
    # Identity (user name is the email address)
    Column("user_name", String(256), nullable=False),
    Column("normalized_user_name", String(256), nullable=False, unique=True, index=True),
    Column("email", String(256), nullable=False),
    Column("normalized_email", String(256), nullable=False, index=True),
    Column("email_confirmed", Boolean, nullable=False, server_default=text("false")),
    Column("password_hash", Text),
    Column("security_stamp", Text),
    Column("concurrency_stamp", Text),
    Column("phone_number", String(20)),
    Column("lockout_enabled", Boolean, nullable=False, server_default=text("true")),
    Column("access_failed_count", Integer, nullable=False, server_default=text("0")),
    # Profile
    Column("full_name", Text, nullable=False),
    Column("date_of_birth", Date),
    Column("address", Text),
    Column("profile_picture_url", Text),
    Column("bio", Text),
    # Doctor-only
    Column("specialization", String(200)),
    Column("license_number", String(100)),
    # Patient-only
    Column("insurance_provider", Text),
    Column("wallet_address", String(100)),
    # Audit
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=text("NOW()")),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=text("NOW()")),
)
