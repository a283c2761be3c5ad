"""Database models."""

from medchain.models.base import metadata
from medchain.models.identity import role_claims, user_claims, user_logins, user_tokens
from medchain.models.roles import UserRole, roles, user_roles
from medchain.models.users import users

__all__ = [
    "UserRole",
    "metadata",
    "role_claims",
    "roles",
    "user_claims",
    "user_logins",
    "user_roles",
    "user_tokens",
    "users",
]
