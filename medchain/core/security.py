"""Security utilities for JWT and password handling."""

import string
import uuid
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from medchain.config import settings

# Tokens are never refreshed; clients log in again after a day.
TOKEN_LIFETIME = timedelta(days=1)

# Custom claim carrying the display name
FULL_NAME_CLAIM = "FullName"
ROLE_CLAIM = "role"

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

PASSWORD_MIN_LENGTH = 8

# Only ASCII letters and digits count as alphanumeric
ALPHANUMERIC = frozenset(string.ascii_letters + string.digits)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def validate_password(password: str) -> list[str]:
    """
    Check a password against the account password policy.

    Args:
        password: Candidate password

    Returns:
        One error description per failed rule, empty when the password is acceptable
    """
    errors: list[str] = []

    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Passwords must be at least {PASSWORD_MIN_LENGTH} characters.")
    if all(ch in ALPHANUMERIC for ch in password):
        errors.append("Passwords must have at least one non alphanumeric character.")
    if not any(ch in string.digits for ch in password):
        errors.append("Passwords must have at least one digit ('0'-'9').")
    if not any(ch in string.ascii_lowercase for ch in password):
        errors.append("Passwords must have at least one lowercase ('a'-'z').")
    if not any(ch in string.ascii_uppercase for ch in password):
        errors.append("Passwords must have at least one uppercase ('A'-'Z').")

    return errors


def build_claims(user: Mapping[str, Any], roles: Iterable[str]) -> dict[str, Any]:
    """
    Build the identity claims for a user.

    A single role is emitted as a string and several roles as a list, which is
    how a repeated ``role`` claim serializes in a JWT payload.
    """
    claims: dict[str, Any] = {
        "sub": str(user["id"]),
        "name": user.get("user_name") or "",
        "email": user.get("email") or "",
        FULL_NAME_CLAIM: user.get("full_name") or "",
        "jti": str(uuid.uuid4()),
    }

    role_list = [role or "" for role in roles]
    if len(role_list) == 1:
        claims[ROLE_CLAIM] = role_list[0]
    elif role_list:
        claims[ROLE_CLAIM] = role_list

    return claims


def create_auth_token(
    user: Mapping[str, Any],
    roles: Iterable[str],
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed JWT for a user and the roles assigned to them.

    Args:
        user: User row
        roles: Role names assigned to the user
        expires_delta: Override for the token lifetime (tests only)

    Returns:
        Encoded JWT token
    """
    if user is None:
        raise ValueError("user is required")
    if roles is None:
        raise ValueError("roles is required")

    to_encode = build_claims(user, roles)

    now = datetime.now(UTC)
    to_encode.update(
        {
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
            "nbf": now,
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else TOKEN_LIFETIME),
        }
    )

    return jwt.encode(
        to_encode,
        settings.jwt_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_auth_token(token: str) -> dict[str, Any] | None:
    """
    Decode and fully validate a JWT (signature, issuer, audience, expiry).

    Args:
        token: JWT token to decode

    Returns:
        Decoded payload or None if invalid
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except JWTError:
        return None


def read_unverified_claims(token: str) -> dict[str, Any] | None:
    """
    Read a JWT's claims without checking its signature.

    Args:
        token: JWT token to read

    Returns:
        Claims or None if the token is not a readable JWT
    """
    if not token or not token.strip():
        return None

    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None

    if not isinstance(claims, dict):
        return None

    return claims


def token_expiry(claims: Mapping[str, Any]) -> datetime | None:
    """Return the ``exp`` claim as an aware datetime, or None if absent or malformed."""
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, int | float):
        return None
    try:
        return datetime.fromtimestamp(exp, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None
