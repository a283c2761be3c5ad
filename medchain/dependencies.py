"""FastAPI dependencies."""

from collections.abc import Awaitable, Callable
from typing import Annotated

import redis
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from medchain.config import settings
from medchain.core.exceptions import ForbiddenException, UnauthorizedException
from medchain.core.redis_client import CacheManager, get_redis_client
from medchain.core.security import decode_auth_token
from medchain.core.session import SessionStorage
from medchain.database import get_db
from medchain.repositories.auth_repository import AuthRepository
from medchain.services.auth_service import AuthService
from medchain.services.auth_state_provider import AuthStateProvider, Principal, create_principal

# Security
security = HTTPBearer(auto_error=False)


def get_auth_repository(db: Annotated[AsyncSession, Depends(get_db)]) -> AuthRepository:
    return AuthRepository(db)


def get_auth_service(
    repository: Annotated[AuthRepository, Depends(get_auth_repository)],
) -> AuthService:
    return AuthService(repository)


def get_session_storage(
    redis_client: Annotated[redis.Redis, Depends(get_redis_client)],
) -> SessionStorage:
    return SessionStorage(CacheManager(redis_client))


def get_session_id(request: Request) -> str | None:
    """Session id from the session cookie, if the browser sent one."""
    return request.cookies.get(settings.session_cookie_name)


def get_auth_state_provider(
    storage: Annotated[SessionStorage, Depends(get_session_storage)],
    session_id: Annotated[str | None, Depends(get_session_id)],
) -> AuthStateProvider:
    return AuthStateProvider(storage, session_id)


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Principal:
    """
    Validate the bearer token (signature, issuer, audience, expiry).

    Args:
        credentials: Bearer token credentials

    Returns:
        Principal built from the token's claims

    Raises:
        UnauthorizedException: If the token is missing, invalid or expired
    """
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    payload = decode_auth_token(credentials.credentials)
    if payload is None or not isinstance(payload.get("sub"), str):
        raise UnauthorizedException()

    return create_principal(payload)


async def get_current_user(
    principal: Annotated[Principal, Depends(get_current_principal)],
    repository: Annotated[AuthRepository, Depends(get_auth_repository)],
) -> dict:
    """
    Load the user named by the bearer token.

    Raises:
        UnauthorizedException: If the user no longer exists
    """
    user = await repository.get_user_by_id(principal.user_id)

    if not user:
        raise UnauthorizedException("User not found")

    return user


def require_roles(*roles: str) -> Callable[..., Awaitable[Principal]]:
    """Build a dependency that admits principals holding any of ``roles``."""

    async def checker(
        principal: Annotated[Principal, Depends(get_current_principal)],
    ) -> Principal:
        if not any(principal.is_in_role(role) for role in roles):
            raise ForbiddenException(required_roles=list(roles))
        return principal

    return checker


# Type aliases for dependency injection
AuthRepositoryDep = Annotated[AuthRepository, Depends(get_auth_repository)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
SessionStorageDep = Annotated[SessionStorage, Depends(get_session_storage)]
AuthStateProviderDep = Annotated[AuthStateProvider, Depends(get_auth_state_provider)]
CurrentUser = Annotated[dict, Depends(get_current_user)]
