"""
Shared fixtures: in-memory SQLite database, the application and HTTP clients.
"""

from __future__ import annotations

from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from aihub.core.config import Settings
from aihub.core.database import Database
from aihub.main import create_app

COOKIE_NAME = "aihub.session_token"
PASSWORD = "correct-horse-battery"


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="test", debug=True, session_backend="database")


@pytest.fixture
async def database():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    db = Database(engine)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def app(settings, database):
    return create_app(settings=settings, database=database)


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class FakeRedis:
    """In-memory stand-in for the handful of ``redis.asyncio`` calls the session store makes."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, *keys):
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    async def aclose(self):
        self.closed = True


def session_token(response) -> str:
    """The session token from a sign-in/sign-up ``Set-Cookie`` header."""
    header = response.headers["set-cookie"]
    name, _, value = header.split(";", 1)[0].partition("=")
    assert name == COOKIE_NAME
    return value


def bearer(token: str, org_id: Optional[str] = None) -> dict:
    headers = {"Authorization": f"Bearer {token}"}
    if org_id:
        headers["x-org-id"] = org_id
    return headers


async def sign_up(client: AsyncClient, email: str, name: str = "Test User") -> tuple[str, str]:
    """Register a user; returns (user_id, token). The client's cookie jar is left empty."""
    resp = await client.post(
        "/api/auth/sign-up/email",
        json={"email": email, "password": PASSWORD, "name": name},
    )
    assert resp.status_code == 201, resp.text
    token = session_token(resp)
    client.cookies.clear()
    return resp.json()["user"]["id"], token


async def create_org(client: AsyncClient, token: str, slug: str) -> str:
    resp = await client.post(
        "/api/v1/orgs",
        json={"name": slug.title(), "slug": slug},
        headers=bearer(token),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


async def add_member(client: AsyncClient, token: str, org_id: str, email: str, role: str) -> None:
    resp = await client.post(
        "/api/v1/members",
        json={"email": email, "role": role},
        headers=bearer(token, org_id),
    )
    assert resp.status_code == 201, resp.text
