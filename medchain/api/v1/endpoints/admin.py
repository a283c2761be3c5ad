"""Admin endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from medchain.dependencies import AuthRepositoryDep, require_roles
from medchain.models.roles import UserRole
from medchain.schemas.users import UserListResponse, UserResponse
from medchain.services.auth_state_provider import Principal

router = APIRouter(prefix="/admin", tags=["Admin"])

AdminPrincipal = Annotated[Principal, Depends(require_roles(UserRole.ADMIN.value))]


@router.get(
    "/users",
    response_model=UserListResponse,
    status_code=status.HTTP_200_OK,
    summary="List all users",
)
async def list_users(
    admin: AdminPrincipal,
    repository: AuthRepositoryDep,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
) -> UserListResponse:
    """
    List registered users with their roles.

    Requires the Admin role.
    """
    rows, total = await repository.list_users(offset=(page - 1) * page_size, limit=page_size)

    users = []
    for row in rows:
        roles = await repository.get_user_roles(row)
        users.append(UserResponse.model_validate({**row, "roles": roles}))

    return UserListResponse(users=users, total=total, page=page, page_size=page_size)
