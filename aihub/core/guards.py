"""
Request guards: authentication and organization-role authorization.

A guard is a ``GuardPipeline``: an ordered list of stages that all share one
signature, ``async stage(request, context) -> context``. Each stage either
enriches the context or raises an ``AuthError``; the first failure stops the
pipeline and the route handler is never called.

    identity_guard()   authenticate
    org_guard(role)    resolve_org_id -> authenticate -> load_membership -> require_role(role)

Pipelines plug into routes as FastAPI dependencies:

    @router.get("/assistants")
    async def list_assistants(ctx: GuardContext = Depends(org_guard(Role.MEMBER))):
        ...

The organization id comes from the first non-empty source in
``ORG_ID_SOURCES`` order: query parameter, then header, then JSON body.
Sources are never merged or compared against each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from aihub.core.config import Settings, get_settings
from aihub.core.database import get_session
from aihub.core.errors import BadRequest, Forbidden, Unauthenticated
from aihub.core.membership import lookup_membership
from aihub.core.roles import Role, satisfies
from aihub.core.sessions import SessionStore, get_session_store, resolve_session
from aihub.models.membership import Membership
from aihub.schemas.auth import Identity

ORG_ID_QUERY_PARAM = "orgId"
ORG_ID_HEADER = "x-org-id"
ORG_ID_BODY_FIELD = "orgId"
ORG_ID_SOURCES = ("query", "header", "body")


@dataclass
class GuardContext:
    """State accumulated by guard stages for one request."""

    store: SessionStore
    session: AsyncSession
    cookie_name: str
    identity: Optional[Identity] = None
    org_id: Optional[str] = None
    membership: Optional[Membership] = None

    @property
    def user_id(self) -> str:
        if self.identity is None:
            raise Unauthenticated("guard context has no identity")
        return self.identity.id


GuardStage = Callable[[Request, GuardContext], Awaitable[GuardContext]]


# ---------------------------------------------------------------------------
# Org id extraction
# ---------------------------------------------------------------------------

def _non_empty(value: object) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


async def _org_id_from_body(request: Request) -> Optional[str]:
    try:
        body = await request.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    return _non_empty(body.get(ORG_ID_BODY_FIELD))


async def extract_org_id(request: Request) -> Optional[str]:
    """First non-empty org id from query, header, then body."""
    for source in ORG_ID_SOURCES:
        if source == "query":
            value = _non_empty(request.query_params.get(ORG_ID_QUERY_PARAM))
        elif source == "header":
            value = _non_empty(request.headers.get(ORG_ID_HEADER))
        else:
            value = await _org_id_from_body(request)
        if value:
            return value
    return None


# ---------------------------------------------------------------------------
# Gates
# ---------------------------------------------------------------------------

async def require_identity(
    request: Request,
    store: SessionStore,
    *,
    cookie_name: Optional[str] = None,
) -> Identity:
    """The request's identity; raises Unauthenticated without a valid session."""
    identity = await resolve_session(request, store, cookie_name=cookie_name)
    if identity is None:
        raise Unauthenticated("no valid session")
    return identity


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

async def resolve_org_id(request: Request, ctx: GuardContext) -> GuardContext:
    if not ctx.org_id:
        ctx.org_id = await extract_org_id(request)
    if not ctx.org_id:
        raise BadRequest("organization id missing")
    return ctx


async def authenticate(request: Request, ctx: GuardContext) -> GuardContext:
    ctx.identity = await require_identity(request, ctx.store, cookie_name=ctx.cookie_name)
    return ctx


async def load_membership(request: Request, ctx: GuardContext) -> GuardContext:
    membership = await lookup_membership(ctx.session, ctx.user_id, ctx.org_id)
    if membership is None:
        raise Forbidden(f"user {ctx.user_id} is not a member of org {ctx.org_id}")
    ctx.membership = membership
    return ctx


def require_role(required: Union[Role, str]) -> GuardStage:
    """Stage factory: the loaded membership must satisfy ``required``."""
    required = Role(required)

    async def stage(request: Request, ctx: GuardContext) -> GuardContext:
        if ctx.membership is None:
            raise Forbidden("no membership loaded")
        if not satisfies(ctx.membership.role, required):
            raise Forbidden(
                f"role {Role(ctx.membership.role).value} does not satisfy {required.value}"
            )
        return ctx

    stage.__name__ = f"require_role_{required.value}"
    return stage


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------

class GuardPipeline:
    """An ordered, immutable chain of guard stages."""

    def __init__(self, *stages: GuardStage):
        self.stages: tuple[GuardStage, ...] = stages

    def then(self, *stages: GuardStage) -> "GuardPipeline":
        return GuardPipeline(*self.stages, *stages)

    async def run(self, request: Request, ctx: GuardContext) -> GuardContext:
        for stage in self.stages:
            ctx = await stage(request, ctx)
        return ctx

    def as_dependency(self) -> Callable[..., Awaitable[GuardContext]]:
        """Adapt the pipeline to a FastAPI dependency yielding the context."""
        pipeline = self

        async def guard_dependency(
            request: Request,
            store: SessionStore = Depends(get_session_store),
            session: AsyncSession = Depends(get_session),
            settings: Settings = Depends(get_settings),
        ) -> GuardContext:
            ctx = GuardContext(
                store=store,
                session=session,
                cookie_name=settings.session_cookie_name,
            )
            return await pipeline.run(request, ctx)

        return guard_dependency

    def __repr__(self) -> str:
        names = " -> ".join(getattr(s, "__name__", repr(s)) for s in self.stages)
        return f"GuardPipeline({names})"


IDENTITY_PIPELINE = GuardPipeline(authenticate)


def org_pipeline(required: Union[Role, str] = Role.MEMBER) -> GuardPipeline:
    return GuardPipeline(resolve_org_id, authenticate, load_membership, require_role(required))


def identity_guard() -> Callable[..., Awaitable[GuardContext]]:
    """Dependency for routes that need any signed-in user."""
    return IDENTITY_PIPELINE.as_dependency()


def org_guard(required: Union[Role, str] = Role.MEMBER) -> Callable[..., Awaitable[GuardContext]]:
    """Dependency for routes that need ``required`` (or better) in the request's org."""
    return org_pipeline(required).as_dependency()


async def require_org_role(
    request: Request,
    org_id: Optional[str],
    required: Union[Role, str],
    *,
    store: SessionStore,
    session: AsyncSession,
    cookie_name: Optional[str] = None,
) -> tuple[Identity, Membership]:
    """Check ``required`` in ``org_id`` for the request's user.

    When ``org_id`` is empty it is extracted from the request. Returns the
    identity and membership together.
    """
    ctx = GuardContext(
        store=store,
        session=session,
        cookie_name=cookie_name or get_settings().session_cookie_name,
        org_id=org_id,
    )
    ctx = await org_pipeline(required).run(request, ctx)
    return ctx.identity, ctx.membership
