"""
Authentication endpoints (mounted at /api/auth, public).

- Email/Password sign-up & sign-in, issuing an opaque session token cookie
- Sign-out (destroys the session)
- Current session lookup
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from aihub.core.config import Settings, get_settings
from aihub.core.database import get_session
from aihub.core.security import hash_password, verify_password
from aihub.core.sessions import (
    SessionStore,
    extract_token,
    get_session_store,
    resolve_session_record,
)
from aihub.models.user import User
from aihub.schemas.auth import (
    AuthResponse,
    Identity,
    SessionInfo,
    SessionRecord,
    SignInRequest,
    SignUpRequest,
)

log = structlog.get_logger()
router = APIRouter()


def _client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def _set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        secure=not settings.debug,  # allow non-HTTPS in dev
        samesite="lax",
        path="/",
        max_age=settings.session_expire_seconds,
    )


def _auth_response(record: SessionRecord) -> AuthResponse:
    return AuthResponse(
        user=record.identity,
        session=SessionInfo(
            expires_at=record.expires_at,
            ip_address=record.ip_address,
            user_agent=record.user_agent,
        ),
    )


async def _start_session(
    user: User,
    request: Request,
    response: Response,
    store: SessionStore,
    settings: Settings,
) -> SessionRecord:
    await store.purge_expired()
    record = await store.create_session(
        Identity.model_validate(user),
        timedelta(seconds=settings.session_expire_seconds),
        ip_address=_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    _set_session_cookie(response, record.token, settings)
    return record


@router.post("/sign-up/email", response_model=AuthResponse, status_code=201)
async def sign_up(
    body: SignUpRequest,
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
):
    """Register with email/password and start a session."""
    email = body.email.lower()
    result = await session.execute(select(User.id).where(User.email == email))
    if result.first() is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(
        email=email,
        name=body.name,
        password_hash=hash_password(body.password),
    )
    session.add(user)
    await session.flush()

    record = await _start_session(user, request, response, store, settings)
    log.info("user.registered", user_id=user.id)
    return _auth_response(record)


@router.post("/sign-in/email", response_model=AuthResponse)
async def sign_in(
    body: SignInRequest,
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
):
    """Authenticate with email/password and receive a session cookie."""
    email = body.email.lower()
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if not user or not user.password_hash:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not verify_password(body.password, user.password_hash):
        log.warning("auth.login_failure", user_id=user.id, reason="bad_password")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    record = await _start_session(user, request, response, store, settings)
    log.info("auth.login_success", user_id=user.id)
    return _auth_response(record)


@router.post("/sign-out")
async def sign_out(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
):
    """Destroy the current session and clear its cookie."""
    token = extract_token(request.cookies, request.headers, settings.session_cookie_name)
    if token:
        await store.delete_session(token)

    response.delete_cookie(settings.session_cookie_name, path="/")
    return {"message": "Signed out"}


@router.get("/get-session", response_model=Optional[AuthResponse])
async def get_current_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
):
    """The current session and user, or null when anonymous."""
    record = await resolve_session_record(
        request, store, cookie_name=settings.session_cookie_name
    )
    if record is None:
        return None
    return _auth_response(record)
