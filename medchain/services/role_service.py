"""Role bootstrap service."""

import structlog

from medchain.models.roles import UserRole
from medchain.repositories.auth_repository import AuthRepository

logger = structlog.get_logger(__name__)


class RoleService:
    """Keeps the role table in step with the ``UserRole`` enum."""

    def __init__(self, repository: AuthRepository):
        self.repository = repository

    async def ensure_roles_exist(self) -> list[str]:
        """
        Create any missing role rows.

        Returns:
            Names of the roles that were created
        """
        created: list[str] = []

        for role in UserRole:
            if not await self.repository.role_exists(role.value):
                await self.repository.create_role(role.value)
                created.append(role.value)
                logger.info("role_created", role=role.value)

        if created:
            await self.repository.commit()

        return created
