"""User schemas for request/response validation."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr


class UserResponse(BaseModel):
    """User profile as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_name: str
    email: EmailStr
    email_confirmed: bool
    full_name: str
    phone_number: str | None = None
    date_of_birth: date | None = None
    address: str | None = None
    profile_picture_url: str | None = None
    bio: str | None = None
    specialization: str | None = None
    license_number: str | None = None
    insurance_provider: str | None = None
    wallet_address: str | None = None
    created_at: datetime
    updated_at: datetime
    roles: list[str] = []


class UserListResponse(BaseModel):
    """Paginated list of users."""

    users: list[UserResponse]
    total: int
    page: int
    page_size: int
