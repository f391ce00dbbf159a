"""Tests for the application running on the Redis session backend."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete

from aihub.core.config import Settings
from aihub.core.redis import close_redis
from aihub.main import create_app
from aihub.models.user import User

from .conftest import FakeRedis, bearer, create_org, sign_up


@pytest.fixture
def redis_client() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
async def redis_app_client(database, redis_client):
    settings = Settings(environment="test", debug=True, session_backend="redis")
    app = create_app(settings=settings, database=database, redis_client=redis_client)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


class TestRedisBackend:
    async def test_sign_up_stores_session_in_redis(self, redis_app_client, redis_client):
        _, token = await sign_up(redis_app_client, "ada@acme.com")
        assert f"session:{token}" in redis_client.data

        resp = await redis_app_client.get("/api/v1/me", headers=bearer(token))
        assert resp.status_code == 200

    async def test_sign_out_removes_key(self, redis_app_client, redis_client):
        _, token = await sign_up(redis_app_client, "ada@acme.com")
        resp = await redis_app_client.post("/api/auth/sign-out", headers=bearer(token))
        assert resp.status_code == 200
        assert f"session:{token}" not in redis_client.data

    async def test_deleted_user_is_signed_out(self, redis_app_client, database):
        user_id, token = await sign_up(redis_app_client, "ada@acme.com")
        org_id = await create_org(redis_app_client, token, "acme")

        async with database.session() as session:
            await session.execute(delete(User).where(User.id == user_id))

        resp = await redis_app_client.get("/api/v1/me", headers=bearer(token))
        assert resp.status_code == 401
        assert resp.json() == {"error": "Unauthorized"}

        resp = await redis_app_client.post(
            "/api/v1/orgs", json={"name": "Again", "slug": "again"}, headers=bearer(token)
        )
        assert resp.status_code == 401

        resp = await redis_app_client.get("/api/v1/assistants", headers=bearer(token, org_id))
        assert resp.status_code == 401


class TestRedisClientWiring:
    def test_client_built_from_app_settings(self, database):
        settings = Settings(redis_url="redis://sessions.internal:6380/3", session_backend="redis")
        app = create_app(settings=settings, database=database)

        kwargs = app.state.redis.connection_pool.connection_kwargs
        assert kwargs["host"] == "sessions.internal"
        assert kwargs["port"] == 6380
        assert kwargs["db"] == 3

    def test_no_client_for_database_backend(self, database):
        app = create_app(settings=Settings(session_backend="database"), database=database)
        assert app.state.redis is None

    async def test_close_redis(self, redis_client):
        await close_redis(redis_client)
        assert redis_client.closed
        await close_redis(None)
