"""Tests for structured logging and the access-log middleware."""

import pytest
from httpx import AsyncClient

from medchain.middleware.logging import REDACTED, REQUEST_ID_HEADER, redact_sensitive


def test_credentials_are_redacted():
    event = redact_sensitive(
        None,
        "info",
        {
            "event": "login_attempt",
            "email": "jane@example.com",
            "password": "Secret1!",
            "Token": "eyJ",
        },
    )

    assert event["password"] == REDACTED
    assert event["Token"] == REDACTED
    assert event["email"] == "jane@example.com"


def test_missing_values_are_left_alone():
    event = redact_sensitive(None, "info", {"event": "x", "token": None})

    assert event["token"] is None


@pytest.mark.asyncio
class TestLoggingMiddleware:
    """Tests for request ids and timing headers."""

    async def test_request_id_is_generated(self, client: AsyncClient):
        response = await client.get("/api/v1/ping")

        assert len(response.headers[REQUEST_ID_HEADER]) == 32
        assert float(response.headers["X-Process-Time"]) >= 0

    async def test_caller_request_id_is_echoed(self, client: AsyncClient):
        response = await client.get("/api/v1/health", headers={REQUEST_ID_HEADER: "trace-42"})

        assert response.headers[REQUEST_ID_HEADER] == "trace-42"
