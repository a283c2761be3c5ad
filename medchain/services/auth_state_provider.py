"""Session-scoped authentication state.

The token issued at login is kept in server-side session storage. On each
request the state provider reads it back, checks that it is a readable JWT
that has not expired, and rebuilds a principal from its claims. The signature
is not re-verified here; bearer tokens go through ``decode_auth_token`` instead.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import structlog

from medchain.core.security import (
    FULL_NAME_CLAIM,
    ROLE_CLAIM,
    read_unverified_claims,
    token_expiry,
)
from medchain.core.session import AUTH_TOKEN_KEY, SessionStorage
from medchain.schemas.auth import AuthStateResponse

logger = structlog.get_logger(__name__)

JWT_AUTHENTICATION_TYPE = "jwt"


@dataclass(frozen=True)
class Principal:
    """Identity rebuilt from token claims; anonymous when it has no authentication type."""

    claims: dict[str, Any] = field(default_factory=dict)
    authentication_type: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.authentication_type is not None

    @property
    def name(self) -> str | None:
        return self.claims.get("name")

    @property
    def user_id(self) -> str | None:
        return self.claims.get("sub")

    @property
    def email(self) -> str | None:
        return self.claims.get("email")

    @property
    def full_name(self) -> str | None:
        return self.claims.get(FULL_NAME_CLAIM)

    @property
    def roles(self) -> list[str]:
        value = self.claims.get(ROLE_CLAIM)
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return [str(role) for role in value]

    def is_in_role(self, role: str) -> bool:
        return role in self.roles


@dataclass(frozen=True)
class AuthenticationState:
    principal: Principal

    @property
    def is_authenticated(self) -> bool:
        return self.principal.is_authenticated

    def to_response(self) -> AuthStateResponse:
        principal = self.principal
        if not principal.is_authenticated:
            return AuthStateResponse(is_authenticated=False)
        return AuthStateResponse(
            is_authenticated=True,
            user_id=principal.user_id,
            name=principal.name,
            email=principal.email,
            full_name=principal.full_name,
            roles=principal.roles,
        )


def anonymous_state() -> AuthenticationState:
    return AuthenticationState(principal=Principal())


def create_principal(claims: dict[str, Any]) -> Principal:
    return Principal(claims=dict(claims), authentication_type=JWT_AUTHENTICATION_TYPE)


StateListener = Callable[[AuthenticationState], None]


class AuthStateProvider:
    """Tracks the authenticated identity of one browser session."""

    def __init__(self, storage: SessionStorage, session_id: str | None):
        if storage is None:
            raise ValueError("storage is required")
        self.storage = storage
        self.session_id = session_id
        self._listeners: list[StateListener] = []

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a callback for authentication state changes.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify_state_changed(self, state: AuthenticationState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("auth_state_listener_failed")

    def _validate_and_parse_token(self, token: str | None) -> dict[str, Any] | None:
        if not token or not token.strip():
            logger.debug("auth_token_empty")
            return None

        claims = read_unverified_claims(token)
        if claims is None:
            logger.warning("auth_token_unreadable")
            return None

        expires_at = token_expiry(claims)
        if expires_at is None or expires_at < datetime.now(UTC):
            logger.warning(
                "auth_token_expired",
                expires_at=expires_at.isoformat() if expires_at else None,
            )
            return None

        return claims

    async def get_authentication_state(self) -> AuthenticationState:
        """Current state of the session; anonymous on any problem."""
        try:
            if not self.session_id:
                return anonymous_state()

            token = self.storage.get(self.session_id, AUTH_TOKEN_KEY)
            if not token:
                logger.debug("auth_token_not_found")
                return anonymous_state()

            claims = self._validate_and_parse_token(token)
            if claims is None:
                logger.warning("auth_token_invalid_clearing_session")
                self.storage.delete(self.session_id, AUTH_TOKEN_KEY)
                return anonymous_state()

            principal = create_principal(claims)
            logger.info("session_authenticated", name=principal.name)
            return AuthenticationState(principal=principal)
        except Exception:
            logger.exception("auth_state_lookup_failed")
            return anonymous_state()

    async def notify_user_authentication(self, token: str | None) -> bool:
        """
        Store a freshly issued token in the session and broadcast the new identity.

        Returns:
            True if the token was accepted and stored
        """
        if not token or not token.strip():
            logger.warning("auth_notify_empty_token")
            return False

        try:
            claims = self._validate_and_parse_token(token)
            if claims is None:
                logger.warning("auth_notify_invalid_token")
                return False

            if not self.storage.set(self.session_id or "", AUTH_TOKEN_KEY, token):
                logger.warning("auth_notify_store_failed")
                return False

            self._notify_state_changed(AuthenticationState(principal=create_principal(claims)))
            logger.info("auth_notify_succeeded")
            return True
        except Exception:
            logger.exception("auth_notify_failed")
            return False

    async def notify_user_logout(self) -> None:
        """Drop the session's token and broadcast the anonymous state."""
        try:
            if self.session_id:
                self.storage.delete(self.session_id, AUTH_TOKEN_KEY)
            self._notify_state_changed(anonymous_state())
            logger.info("auth_logout_succeeded")
        except Exception:
            logger.exception("auth_logout_failed")
