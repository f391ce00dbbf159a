"""Tests for health and readiness endpoints."""

from __future__ import annotations

from aihub.core.middleware import SECURITY_HEADERS


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


async def test_ready(client):
    resp = await client.get("/ready")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ready"}


async def test_security_headers_on_api(client):
    resp = await client.get("/health")
    for header, value in SECURITY_HEADERS.items():
        assert resp.headers.get(header) == value


async def test_protected_page_redirects_to_login(client):
    resp = await client.get("/dashboard")
    assert resp.status_code == 307
    assert resp.headers["location"].endswith("/login?callbackUrl=%2Fdashboard")


async def test_security_headers_on_redirect(client):
    resp = await client.get("/settings/billing")
    assert resp.status_code == 307
    for header, value in SECURITY_HEADERS.items():
        assert resp.headers.get(header) == value
