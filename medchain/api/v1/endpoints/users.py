"""User endpoints."""

from fastapi import APIRouter

from medchain.dependencies import AuthRepositoryDep, CurrentUser
from medchain.schemas.users import UserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(
    current_user: CurrentUser,
    repository: AuthRepositoryDep,
):
    """Get the profile of the bearer token's user, with their roles."""
    roles = await repository.get_user_roles(current_user)
    return UserResponse.model_validate({**current_user, "roles": roles})
