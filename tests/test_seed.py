"""Tests for role bootstrap and admin seeding."""

import pytest

from medchain.models.roles import UserRole
from medchain.repositories.auth_repository import IdentityResult
from medchain.seed import ADMIN_BOOTSTRAP_PASSWORD, ADMIN_EMAIL, seed_database
from medchain.services.role_service import RoleService


@pytest.mark.asyncio
class TestRoleService:
    """Tests for RoleService.ensure_roles_exist."""

    async def test_creates_only_missing_roles(self, repository):
        repository.role_exists.side_effect = lambda name: name == "Admin"

        created = await RoleService(repository).ensure_roles_exist()

        assert created == ["Doctor", "Patient"]
        assert [call.args[0] for call in repository.create_role.await_args_list] == [
            "Doctor",
            "Patient",
        ]
        repository.commit.assert_awaited_once()

    async def test_nothing_to_do(self, repository):
        created = await RoleService(repository).ensure_roles_exist()

        assert created == []
        repository.create_role.assert_not_awaited()
        repository.commit.assert_not_awaited()


@pytest.mark.asyncio
class TestSeedDatabase:
    """Tests for seed_database."""

    async def test_creates_admin_with_admin_role(self, repository, transaction, user_factory):
        admin = user_factory(email=ADMIN_EMAIL, user_name=ADMIN_EMAIL)
        repository.role_exists.return_value = False
        repository.create_user.return_value = (admin, IdentityResult.success())

        await seed_database(repository)

        assert repository.create_role.await_count == len(UserRole)
        new_user, password = repository.create_user.await_args.args
        assert new_user["email"] == ADMIN_EMAIL
        assert new_user["full_name"] == "System Admin"
        assert new_user["email_confirmed"] is True
        assert password == ADMIN_BOOTSTRAP_PASSWORD
        repository.add_user_to_role.assert_awaited_once_with(admin, UserRole.ADMIN)
        transaction.db.commit.assert_awaited_once()

    async def test_existing_admin_is_left_alone(self, repository, test_user):
        repository.get_user_by_email.return_value = test_user

        await seed_database(repository)
        await seed_database(repository)

        repository.create_user.assert_not_awaited()
        repository.add_user_to_role.assert_not_awaited()

    async def test_failed_admin_creation_rolls_back(self, repository, transaction):
        repository.create_user.return_value = (
            None,
            IdentityResult.failed("Username 'admin@medchain.com' is already taken."),
        )

        await seed_database(repository)

        transaction.db.rollback.assert_awaited_once()
        transaction.db.commit.assert_not_awaited()
        repository.add_user_to_role.assert_not_awaited()

    async def test_database_errors_propagate(self, repository):
        repository.role_exists.side_effect = RuntimeError("relation does not exist")

        with pytest.raises(RuntimeError):
            await seed_database(repository)
