"""Authentication endpoints."""

from fastapi import APIRouter, Query, Request, Response, status

from medchain.config import settings
from medchain.core.session import AUTH_TOKEN_KEY, SessionStorage, new_session_id
from medchain.dependencies import (
    AuthServiceDep,
    AuthStateProviderDep,
    SessionStorageDep,
    get_session_id,
)
from medchain.schemas.auth import (
    AuthResponse,
    AuthStateResponse,
    LoginRequest,
    RegisterRequest,
    UserExistsResponse,
)
from medchain.services.auth_state_provider import AuthStateProvider

router = APIRouter()


def _set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=settings.session_cookie_secure or settings.is_production,
        samesite="lax",
    )


async def _start_session(
    request: Request,
    response: Response,
    storage: SessionStorage,
    token: str,
) -> None:
    """
    Bind a newly issued token to a fresh session.

    The session id is always regenerated on sign-in and any token stored
    under the previous id is dropped.
    """
    previous_session_id = get_session_id(request)
    if previous_session_id:
        storage.delete(previous_session_id, AUTH_TOKEN_KEY)

    session_id = new_session_id()
    provider = AuthStateProvider(storage, session_id)

    if await provider.notify_user_authentication(token):
        _set_session_cookie(response, session_id)


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    tags=["Authentication"],
    summary="Log in with email and password",
    responses={status.HTTP_401_UNAUTHORIZED: {"model": AuthResponse}},
)
async def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    auth_service: AuthServiceDep,
    storage: SessionStorageDep,
) -> AuthResponse:
    """
    Verify credentials, issue a token and bind it to the session.

    Unknown emails and wrong passwords both answer 401 "Invalid credentials".
    """
    result = await auth_service.login(payload)

    if not result.is_success or not result.token:
        response.status_code = status.HTTP_401_UNAUTHORIZED
        return result

    await _start_session(request, response, storage, result.token)
    return result


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Authentication"],
    summary="Register a new account",
    responses={status.HTTP_400_BAD_REQUEST: {"model": AuthResponse}},
)
async def register(
    payload: RegisterRequest,
    request: Request,
    response: Response,
    auth_service: AuthServiceDep,
    storage: SessionStorageDep,
) -> AuthResponse:
    """Create an account with the requested role and sign the caller in."""
    result = await auth_service.register(payload)

    if not result.is_success or not result.token:
        response.status_code = status.HTTP_400_BAD_REQUEST
        return result

    await _start_session(request, response, storage, result.token)
    return result


@router.post(
    "/logout",
    response_model=AuthStateResponse,
    status_code=status.HTTP_200_OK,
    tags=["Authentication"],
    summary="Log out of the current session",
)
async def logout(
    response: Response,
    provider: AuthStateProviderDep,
) -> AuthStateResponse:
    """Clear the session's token and report the anonymous state."""
    await provider.notify_user_logout()
    response.delete_cookie(settings.session_cookie_name)

    return AuthStateResponse(is_authenticated=False)


@router.get(
    "/state",
    response_model=AuthStateResponse,
    status_code=status.HTTP_200_OK,
    tags=["Authentication"],
    summary="Authentication state of the current session",
)
async def auth_state(provider: AuthStateProviderDep) -> AuthStateResponse:
    state = await provider.get_authentication_state()
    return state.to_response()


@router.get(
    "/exists",
    response_model=UserExistsResponse,
    status_code=status.HTTP_200_OK,
    tags=["Authentication"],
    summary="Check whether an email is registered",
)
async def user_exists(
    auth_service: AuthServiceDep,
    email: str = Query(..., description="Email address to look up"),
) -> UserExistsResponse:
    return UserExistsResponse(exists=await auth_service.user_exists(email))
