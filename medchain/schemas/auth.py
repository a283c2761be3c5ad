"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field

from medchain.models.roles import UserRole


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr | None = None
    password: str | None = None


class RegisterRequest(BaseModel):
    """Registration request schema."""

    full_name: str | None = None
    email: EmailStr | None = None
    password: str | None = None
    role: UserRole = Field(..., description="Role to assign to the new account")


class AuthResponse(BaseModel):
    """Outcome of a login or registration attempt."""

    is_success: bool
    message: str | None = None
    token: str | None = None
    user_id: str | None = None
    role: str | None = None


class AuthStateResponse(BaseModel):
    """Authentication state of the current session."""

    is_authenticated: bool
    user_id: str | None = None
    name: str | None = None
    email: str | None = None
    full_name: str | None = None
    roles: list[str] = Field(default_factory=list)


class UserExistsResponse(BaseModel):
    """Whether an account is registered for an email."""

    exists: bool
