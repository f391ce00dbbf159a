"""Tests for the API HTTP client."""

from __future__ import annotations

import httpx
import pytest

from aihub.client import SessionExpired, create_client


def _transport(status: int, seen: list):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status, json={"ok": status < 400})

    return httpx.MockTransport(handler)


class TestCreateClient:
    async def test_sends_session_and_org(self):
        seen = []
        async with create_client(
            "http://hub.local/",
            session_token="tok",
            org_id="org-1",
            transport=_transport(200, seen),
        ) as client:
            resp = await client.get("/api/v1/assistants")

        assert resp.status_code == 200
        request = seen[0]
        assert str(request.url) == "http://hub.local/api/v1/assistants"
        assert request.headers["x-org-id"] == "org-1"
        assert "aihub.session_token=tok" in request.headers["cookie"]

    async def test_401_raises_session_expired(self):
        async with create_client(transport=_transport(401, [])) as client:
            with pytest.raises(SessionExpired) as exc:
                await client.get("/api/v1/me")
        assert exc.value.url.endswith("/api/v1/me")
        assert exc.value.login_path == "/login"
        assert exc.value.login_url == "/login?callbackUrl=%2Fapi%2Fv1%2Fme"

    async def test_custom_login_path(self):
        async with create_client(login_path="/signin", transport=_transport(401, [])) as client:
            with pytest.raises(SessionExpired) as exc:
                await client.get("/api/v1/assistants")
        assert exc.value.login_path == "/signin"
        assert exc.value.login_url == "/signin?callbackUrl=%2Fapi%2Fv1%2Fassistants"

    async def test_403_is_returned(self):
        async with create_client(transport=_transport(403, [])) as client:
            resp = await client.get("/api/v1/orgs/current")
        assert resp.status_code == 403

    async def test_anonymous_client_has_no_cookie(self):
        seen = []
        async with create_client(transport=_transport(200, seen)) as client:
            await client.get("/health")
        assert "cookie" not in seen[0].headers
