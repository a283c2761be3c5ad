"""Server-side session storage.

The browser only ever holds an opaque session id (in an HttpOnly cookie);
values are kept in Redis under ``session:{session_id}:{key}``.
"""

import secrets

from medchain.config import settings
from medchain.core.redis_client import CacheManager

AUTH_TOKEN_KEY = "authToken"


def new_session_id() -> str:
    """Generate a fresh, unguessable session id."""
    return secrets.token_urlsafe(32)


class SessionStorage:
    """Per-session key/value store with a sliding expiry."""

    def __init__(self, cache: CacheManager, ttl: int | None = None):
        self.cache = cache
        self.ttl = ttl if ttl is not None else settings.session_ttl_seconds

    @staticmethod
    def _key(session_id: str, key: str) -> str:
        return f"session:{session_id}:{key}"

    def get(self, session_id: str, key: str) -> str | None:
        """Return the stored value, or None when the session or key is absent."""
        if not session_id:
            return None
        value = self.cache.get(self._key(session_id, key))
        if value is not None:
            self.cache.touch(self._key(session_id, key), self.ttl)
        return value

    def set(self, session_id: str, key: str, value: str) -> bool:
        if not session_id:
            return False
        return self.cache.set(self._key(session_id, key), value, ttl=self.ttl)

    def delete(self, session_id: str, key: str) -> bool:
        if not session_id:
            return False
        return self.cache.delete(self._key(session_id, key))
