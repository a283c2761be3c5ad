"""Authentication service: login, registration and token issuance."""

import structlog

from medchain.core.security import create_auth_token
from medchain.repositories.auth_repository import AuthRepository
from medchain.schemas.auth import AuthResponse, LoginRequest, RegisterRequest

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class AuthService:
    """
    Validates credentials and registers accounts.

    Every outcome, including unexpected errors, is reported through an
    ``AuthResponse``; callers never see exceptions from ``login`` or
    ``register``.
    """

    def __init__(self, repository: AuthRepository):
        if repository is None:
            raise ValueError("repository is required")
        self.repository = repository

    async def login(self, request: LoginRequest | None) -> AuthResponse:
        """
        Verify an email/password pair and issue a token.

        Unknown emails and wrong passwords produce the same response.

        Args:
            request: Login credentials

        Returns:
            Success with token, user id and primary role, or a generic failure
        """
        if request is None or _is_blank(request.email) or _is_blank(request.password):
            logger.warning("login_invalid_request")
            return AuthResponse(is_success=False, message=INVALID_CREDENTIALS)

        try:
            user = await self.repository.get_user_by_email(request.email)
            if user is None:
                logger.warning("login_failed_user_not_found", email=request.email)
                return AuthResponse(is_success=False, message=INVALID_CREDENTIALS)

            if not await self.repository.check_password(user, request.password):
                logger.warning("login_failed_invalid_password", email=request.email)
                return AuthResponse(is_success=False, message=INVALID_CREDENTIALS)

            roles = await self.repository.get_user_roles(user)
            token = create_auth_token(user, roles)

            logger.info("login_succeeded", email=request.email, user_id=str(user["id"]))
            return AuthResponse(
                is_success=True,
                message="Login successful",
                token=token,
                user_id=str(user["id"]),
                role=roles[0] if roles else "",
            )
        except Exception:
            logger.exception("login_error", email=request.email)
            return AuthResponse(is_success=False, message="An error occurred during login")

    async def register(self, request: RegisterRequest | None) -> AuthResponse:
        """
        Create an account and assign the requested role atomically.

        User creation and role assignment share one transaction: if the role
        cannot be assigned the new user row is rolled back too.

        Args:
            request: Registration details

        Returns:
            Success with token, user id and role, or a failure message
        """
        if (
            request is None
            or _is_blank(request.email)
            or _is_blank(request.password)
            or _is_blank(request.full_name)
        ):
            logger.warning("registration_invalid_request")
            return AuthResponse(is_success=False, message="Invalid registration data")

        try:
            if await self.repository.get_user_by_email(request.email) is not None:
                logger.warning("registration_failed_user_exists", email=request.email)
                return AuthResponse(is_success=False, message="User already exists")

            new_user = {
                "user_name": request.email,
                "email": request.email,
                "full_name": request.full_name,
            }
            role_name = request.role.value

            async with self.repository.begin_transaction() as transaction:
                try:
                    user, create_result = await self.repository.create_user(
                        new_user, request.password
                    )
                    if not create_result.succeeded or user is None:
                        await transaction.rollback()
                        logger.warning(
                            "user_creation_failed",
                            email=request.email,
                            errors=create_result.errors,
                        )
                        return AuthResponse(is_success=False, message=create_result.message)

                    if not await self.repository.role_exists(role_name):
                        await self.repository.create_role(role_name)

                    role_result = await self.repository.add_user_to_role(user, request.role)
                    if not role_result.succeeded:
                        await transaction.rollback()
                        logger.warning(
                            "role_assignment_failed",
                            email=request.email,
                            role=role_name,
                            errors=role_result.errors,
                        )
                        return AuthResponse(is_success=False, message=role_result.message)

                    await transaction.commit()
                except Exception:
                    await transaction.rollback()
                    logger.exception("registration_transaction_error", email=request.email)
                    raise

            roles = await self.repository.get_user_roles(user)
            token = create_auth_token(user, roles)

            logger.info("registration_succeeded", email=request.email, user_id=str(user["id"]))
            return AuthResponse(
                is_success=True,
                message="Registration successful",
                token=token,
                user_id=str(user["id"]),
                role=roles[0] if roles else "",
            )
        except Exception:
            logger.exception("registration_error")
            return AuthResponse(
                is_success=False,
                message="An error occurred during registration",
            )

    async def user_exists(self, email: str | None) -> bool:
        """Check whether an account is registered for an email."""
        if _is_blank(email):
            return False

        try:
            return await self.repository.get_user_by_email(email) is not None
        except Exception:
            logger.exception("user_exists_check_failed", email=email)
            raise
