"""
Session storage and resolution.

Sessions are opaque random tokens. The token travels in the session cookie
(or an ``Authorization: Bearer`` header for non-browser clients) and is looked
up in a session store on every request; nothing is cached in-process.

Two stores are available:
- ``DatabaseSessionStore``: the ``sessions`` table (default)
- ``RedisSessionStore``: one key per token with a TTL matching the expiry

Both stores resolve the identity from the ``users`` table on every lookup, so
deleting a user ends all of their sessions at once.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional, Protocol

import redis.asyncio as redis
import structlog
from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aihub.core.config import Settings, get_settings
from aihub.core.database import get_session
from aihub.core.redis import get_redis
from aihub.models.session import Session
from aihub.models.user import User
from aihub.schemas.auth import Identity, SessionRecord

log = structlog.get_logger()

REDIS_KEY_PREFIX = "session:"


class RedisSessionPayload(BaseModel):
    """What is stored under a session key; the identity itself is not cached."""

    user_id: str
    expires_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


def generate_session_token() -> str:
    """Generate an unguessable session token."""
    return secrets.token_urlsafe(32)


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps (as returned by some drivers) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SessionStore(Protocol):
    async def get_session(self, token: str) -> Optional[SessionRecord]: ...

    async def create_session(
        self,
        identity: Identity,
        expires_in: timedelta,
        *,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> SessionRecord: ...

    async def delete_session(self, token: str) -> None: ...

    async def purge_expired(self) -> int: ...


# ---------------------------------------------------------------------------
# Database-backed store
# ---------------------------------------------------------------------------

class DatabaseSessionStore:
    """Sessions persisted in the ``sessions`` table, joined to ``users``."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_session(self, token: str) -> Optional[SessionRecord]:
        result = await self._session.execute(
            select(Session, User)
            .join(User, User.id == Session.user_id)
            .where(Session.token == token)
        )
        row = result.one_or_none()
        if not row:
            return None
        sess, user = row
        return SessionRecord(
            token=sess.token,
            identity=Identity.model_validate(user),
            expires_at=as_utc(sess.expires_at),
            ip_address=sess.ip_address,
            user_agent=sess.user_agent,
        )

    async def create_session(
        self,
        identity: Identity,
        expires_in: timedelta,
        *,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> SessionRecord:
        sess = Session(
            token=generate_session_token(),
            user_id=identity.id,
            expires_at=datetime.now(timezone.utc) + expires_in,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self._session.add(sess)
        await self._session.flush()
        return SessionRecord(
            token=sess.token,
            identity=identity,
            expires_at=as_utc(sess.expires_at),
            ip_address=ip_address,
            user_agent=user_agent,
        )

    async def delete_session(self, token: str) -> None:
        await self._session.execute(delete(Session).where(Session.token == token))
        await self._session.flush()

    async def purge_expired(self) -> int:
        """Delete every session whose expiry has passed. Returns the count."""
        result = await self._session.execute(
            delete(Session).where(Session.expires_at <= datetime.now(timezone.utc))
        )
        await self._session.flush()
        if result.rowcount:
            log.info("session.purged", count=result.rowcount)
        return result.rowcount or 0


# ---------------------------------------------------------------------------
# Redis-backed store
# ---------------------------------------------------------------------------

class RedisSessionStore:
    """Sessions kept in Redis; expired keys are evicted by their TTL.

    Redis holds the token's owner and expiry only. The user is loaded from
    the database on each lookup.
    """

    def __init__(self, client: redis.Redis, session: AsyncSession):
        self._redis = client
        self._session = session

    async def get_session(self, token: str) -> Optional[SessionRecord]:
        raw = await self._redis.get(f"{REDIS_KEY_PREFIX}{token}")
        if raw is None:
            return None
        try:
            payload = RedisSessionPayload.model_validate_json(raw)
        except ValidationError:
            log.warning("session.corrupt_record", backend="redis")
            return None

        user = await self._session.get(User, payload.user_id)
        if user is None:
            log.info("session.orphaned", user_id=payload.user_id)
            return None

        return SessionRecord(
            token=token,
            identity=Identity.model_validate(user),
            expires_at=as_utc(payload.expires_at),
            ip_address=payload.ip_address,
            user_agent=payload.user_agent,
        )

    async def create_session(
        self,
        identity: Identity,
        expires_in: timedelta,
        *,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> SessionRecord:
        record = SessionRecord(
            token=generate_session_token(),
            identity=identity,
            expires_at=datetime.now(timezone.utc) + expires_in,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        payload = RedisSessionPayload(
            user_id=identity.id,
            expires_at=record.expires_at,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        await self._redis.setex(
            f"{REDIS_KEY_PREFIX}{record.token}",
            max(int(expires_in.total_seconds()), 1),
            payload.model_dump_json(),
        )
        return record

    async def delete_session(self, token: str) -> None:
        await self._redis.delete(f"{REDIS_KEY_PREFIX}{token}")

    async def purge_expired(self) -> int:
        """Nothing to do: Redis evicts expired keys itself."""
        return 0


async def get_session_store(
    request: Request,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> SessionStore:
    """FastAPI dependency selecting the configured session store."""
    if settings.session_backend == "redis":
        client = get_redis(request)
        if client is None:
            raise RuntimeError("Redis session backend selected but no Redis client configured")
        return RedisSessionStore(client, session)
    return DatabaseSessionStore(session)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def extract_token(
    cookies: Mapping[str, str],
    headers: Mapping[str, str],
    cookie_name: str,
) -> Optional[str]:
    """Pull the session token from the cookie, then a Bearer header."""
    token = cookies.get(cookie_name)
    if token:
        return token.strip() or None

    authorization = headers.get("authorization", "")
    if authorization.startswith("Bearer "):
        return authorization[7:].strip() or None
    return None


async def resolve_session_record(
    request: Request,
    store: SessionStore,
    *,
    cookie_name: Optional[str] = None,
) -> Optional[SessionRecord]:
    """Return the request's live session record, or None.

    A missing, unknown or expired token is an ordinary anonymous request.
    Only store failures raise.
    """
    name = cookie_name or get_settings().session_cookie_name
    token = extract_token(request.cookies, request.headers, name)
    if not token:
        return None

    record = await store.get_session(token)
    if record is None:
        return None

    if as_utc(record.expires_at) <= datetime.now(timezone.utc):
        log.debug("session.expired", user_id=record.identity.id)
        return None
    return record


async def resolve_session(
    request: Request,
    store: SessionStore,
    *,
    cookie_name: Optional[str] = None,
) -> Optional[Identity]:
    """Return the identity behind the request's session, or None."""
    record = await resolve_session_record(request, store, cookie_name=cookie_name)
    return record.identity if record else None
