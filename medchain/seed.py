"""Bootstrap data: the fixed roles and the initial admin account."""

import structlog

from medchain.models.roles import UserRole
from medchain.repositories.auth_repository import AuthRepository
from medchain.services.role_service import RoleService

logger = structlog.get_logger(__name__)

ADMIN_EMAIL = "admin@medchain.com"
ADMIN_FULL_NAME = "System Admin"
# Bootstrap credential; change it after first login.
ADMIN_BOOTSTRAP_PASSWORD = "Admin@123"


async def seed_database(repository: AuthRepository) -> None:
    """
    Ensure every role exists and that the admin account is present.

    Safe to run repeatedly: nothing is created twice.

    Raises:
        Exception: Any database error, after logging it
    """
    try:
        created_roles = await RoleService(repository).ensure_roles_exist()
        logger.info("roles_seeded", created=created_roles)

        if await repository.get_user_by_email(ADMIN_EMAIL) is not None:
            return

        async with repository.begin_transaction() as transaction:
            admin, result = await repository.create_user(
                {
                    "user_name": ADMIN_EMAIL,
                    "email": ADMIN_EMAIL,
                    "full_name": ADMIN_FULL_NAME,
                    "email_confirmed": True,
                },
                ADMIN_BOOTSTRAP_PASSWORD,
            )
            if not result.succeeded or admin is None:
                await transaction.rollback()
                logger.error("admin_user_creation_failed", errors=result.errors)
                return

            role_result = await repository.add_user_to_role(admin, UserRole.ADMIN)
            if not role_result.succeeded:
                await transaction.rollback()
                logger.error("admin_role_assignment_failed", errors=role_result.errors)
                return

            await transaction.commit()

        logger.info("admin_user_created", email=ADMIN_EMAIL)
    except Exception:
        logger.exception("database_seeding_failed")
        raise
