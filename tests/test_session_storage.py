"""Tests for server-side session storage."""

from unittest.mock import MagicMock

import redis

from medchain.core.redis_client import CacheManager
from medchain.core.session import SessionStorage, new_session_id


def test_values_are_namespaced_per_session(session_storage, redis_store):
    session_storage.set("abc", "authToken", "token-1")
    session_storage.set("xyz", "authToken", "token-2")

    assert redis_store.data["session:abc:authToken"] == "token-1"
    assert session_storage.get("abc", "authToken") == "token-1"
    assert session_storage.get("xyz", "authToken") == "token-2"


def test_writes_carry_session_ttl(session_storage, redis_store):
    session_storage.set("abc", "authToken", "token")

    assert redis_store.ttls["session:abc:authToken"] == 600


def test_reads_refresh_ttl(session_storage, redis_store):
    session_storage.set("abc", "authToken", "token")
    redis_store.ttls["session:abc:authToken"] = 5

    session_storage.get("abc", "authToken")

    assert redis_store.ttls["session:abc:authToken"] == 600


def test_delete(session_storage):
    session_storage.set("abc", "authToken", "token")

    assert session_storage.delete("abc", "authToken") is True
    assert session_storage.get("abc", "authToken") is None


def test_missing_session_id_is_a_no_op(session_storage, redis_store):
    assert session_storage.get("", "authToken") is None
    assert session_storage.set("", "authToken", "token") is False
    assert session_storage.delete("", "authToken") is False
    assert redis_store.data == {}


def test_redis_errors_read_as_missing():
    """Test that an unreachable Redis degrades to an empty session."""
    mock_redis = MagicMock()
    mock_redis.get.side_effect = redis.ConnectionError("refused")
    mock_redis.setex.side_effect = redis.ConnectionError("refused")
    storage = SessionStorage(CacheManager(mock_redis), ttl=60)

    assert storage.get("abc", "authToken") is None
    assert storage.set("abc", "authToken", "token") is False


def test_session_ids_are_unique():
    ids = {new_session_id() for _ in range(100)}

    assert len(ids) == 100
    assert all(len(session_id) >= 32 for session_id in ids)
