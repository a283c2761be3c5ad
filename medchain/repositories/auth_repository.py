"""Data access for users, roles and role assignments."""

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from medchain.core.security import get_password_hash, validate_password, verify_password
from medchain.models.roles import UserRole, roles, user_roles
from medchain.models.users import users

logger = structlog.get_logger(__name__)


def normalize(value: str) -> str:
    """Normalize a user name, email or role name for lookups."""
    return value.strip().upper()


@dataclass
class IdentityResult:
    """Outcome of an identity operation that can fail with user-facing errors."""

    succeeded: bool
    errors: list[str] = field(default_factory=list)

    @classmethod
    def success(cls) -> "IdentityResult":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, *errors: str) -> "IdentityResult":
        return cls(succeeded=False, errors=list(errors))

    @property
    def message(self) -> str:
        return ", ".join(self.errors)


class DbTransaction:
    """Explicit commit/rollback handle over the session's current transaction."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.completed = False

    async def commit(self) -> None:
        await self.db.commit()
        self.completed = True

    async def rollback(self) -> None:
        await self.db.rollback()
        self.completed = True

    async def __aenter__(self) -> "DbTransaction":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        # Anything neither committed nor rolled back is discarded
        if not self.completed:
            await self.rollback()


class AuthRepository:
    """Repository for identity lookups, account creation and role assignment."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: str | UUID | None) -> dict | None:
        """Get user by id. Blank or malformed ids return None."""
        if user_id is None or (isinstance(user_id, str) and not user_id.strip()):
            return None

        try:
            user_uuid = user_id if isinstance(user_id, UUID) else UUID(str(user_id))
        except ValueError:
            return None

        result = await self.db.execute(select(users).where(users.c.id == user_uuid))
        user = result.mappings().first()
        return dict(user) if user else None

    async def get_user_by_email(self, email: str | None) -> dict | None:
        """Get user by email, ignoring case."""
        if not email or not email.strip():
            return None

        result = await self.db.execute(
            select(users).where(users.c.normalized_email == normalize(email))
        )
        user = result.mappings().first()
        return dict(user) if user else None

    async def get_user_by_name(self, user_name: str) -> dict | None:
        result = await self.db.execute(
            select(users).where(users.c.normalized_user_name == normalize(user_name))
        )
        user = result.mappings().first()
        return dict(user) if user else None

    async def create_user(self, user: dict, password: str) -> tuple[dict | None, IdentityResult]:
        """
        Create a user account with a hashed password.

        The row is flushed but not committed; the caller owns the transaction.

        Args:
            user: Column values for the new user (``user_name``, ``email`` and
                ``full_name`` at minimum)
            password: Plain-text password

        Returns:
            Tuple of (created user or None, result carrying any validation errors)
        """
        errors = validate_password(password or "")

        if await self.get_user_by_name(user["user_name"]) is not None:
            errors.append(f"Username '{user['user_name']}' is already taken.")

        if errors:
            return None, IdentityResult.failed(*errors)

        now = datetime.now(UTC)
        values = {
            **user,
            "id": user.get("id") or uuid.uuid4(),
            "normalized_user_name": normalize(user["user_name"]),
            "normalized_email": normalize(user["email"]),
            "password_hash": get_password_hash(password),
            "security_stamp": uuid.uuid4().hex.upper(),
            "concurrency_stamp": str(uuid.uuid4()),
            "created_at": user.get("created_at") or now,
            "updated_at": user.get("updated_at") or now,
        }

        result = await self.db.execute(users.insert().values(**values).returning(users))
        created = result.mappings().first()

        if not created:
            raise ValueError("Failed to create user")

        return dict(created), IdentityResult.success()

    async def check_password(self, user: dict | None, password: str | None) -> bool:
        if user is None or not password or not password.strip():
            return False
        if not user.get("password_hash"):
            return False
        return verify_password(password, user["password_hash"])

    async def get_user_roles(self, user: dict | None) -> list[str]:
        """Names of the roles assigned to a user, alphabetically."""
        if user is None:
            return []

        query = (
            select(roles.c.name)
            .select_from(user_roles.join(roles, user_roles.c.role_id == roles.c.id))
            .where(user_roles.c.user_id == user["id"])
            .order_by(roles.c.name)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_role_by_name(self, role_name: str) -> dict | None:
        result = await self.db.execute(
            select(roles).where(roles.c.normalized_name == normalize(role_name))
        )
        role = result.mappings().first()
        return dict(role) if role else None

    async def role_exists(self, role_name: str) -> bool:
        return await self.get_role_by_name(role_name) is not None

    async def create_role(self, role_name: str) -> dict:
        """Insert a role row. The caller owns the transaction."""
        result = await self.db.execute(
            roles.insert()
            .values(
                id=uuid.uuid4(),
                name=role_name,
                normalized_name=normalize(role_name),
                concurrency_stamp=str(uuid.uuid4()),
            )
            .returning(roles)
        )
        role = result.mappings().first()

        if not role:
            raise ValueError(f"Failed to create role {role_name}")

        return dict(role)

    async def add_user_to_role(self, user: dict | None, role: UserRole | str) -> IdentityResult:
        """Assign an existing role to a user. The caller owns the transaction."""
        if user is None:
            return IdentityResult.failed("User is required.")

        role_name = role.value if isinstance(role, UserRole) else role
        role_row = await self.get_role_by_name(role_name)
        if role_row is None:
            return IdentityResult.failed(f"Role {role_name.upper()} does not exist.")

        existing = await self.db.execute(
            select(user_roles.c.user_id).where(
                user_roles.c.user_id == user["id"],
                user_roles.c.role_id == role_row["id"],
            )
        )
        if existing.first() is not None:
            return IdentityResult.failed(f"User already in role '{role_row['name']}'.")

        await self.db.execute(user_roles.insert().values(user_id=user["id"], role_id=role_row["id"]))
        return IdentityResult.success()

    async def register_user(self, user: dict, password: str, role: UserRole) -> bool:
        """
        Create a user and assign a role, committing after each step.

        Unlike ``AuthService.register`` this path is not atomic: a failed role
        assignment leaves the created user in place.
        """
        if user is None or not password or not password.strip():
            return False

        created, result = await self.create_user(user, password)
        if not result.succeeded or created is None:
            return False
        await self.db.commit()

        if not await self.role_exists(role.value):
            await self.create_role(role.value)
            await self.db.commit()

        role_result = await self.add_user_to_role(created, role)
        if not role_result.succeeded:
            logger.warning(
                "role_assignment_failed",
                user_id=str(created["id"]),
                role=role.value,
                errors=role_result.errors,
            )
            return False

        await self.db.commit()
        return True

    async def list_users(self, offset: int = 0, limit: int = 20) -> tuple[list[dict], int]:
        """Page through users ordered by creation time."""
        total = await self.db.scalar(select(func.count()).select_from(users))

        result = await self.db.execute(
            select(users).order_by(users.c.created_at.desc()).offset(offset).limit(limit)
        )
        rows = [dict(row) for row in result.mappings().all()]
        return rows, int(total or 0)

    async def commit(self) -> None:
        await self.db.commit()

    def begin_transaction(self) -> DbTransaction:
        """Open an explicit transaction handle over the session."""
        return DbTransaction(self.db)
