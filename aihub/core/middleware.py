"""
HTTP middleware: security headers and the session-cookie pre-filter.

The pre-filter only looks at whether a session cookie is *present*. It keeps
obviously anonymous browsers away from protected pages; it does not verify
anything. Every route still has to run a guard from ``aihub.core.guards``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Union
from urllib.parse import urlencode

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from aihub.core.config import Settings

log = structlog.get_logger()

STATIC_EXTENSIONS = (".svg", ".png", ".jpg", ".jpeg", ".gif", ".webp", ".ico")

# ---------------------------------------------------------------------------
# Security Headers
# ---------------------------------------------------------------------------

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Attach security headers to every response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        return response


# ---------------------------------------------------------------------------
# Session cookie pre-filter
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Allow:
    pass


@dataclass(frozen=True)
class RedirectTo:
    path: str
    query: dict[str, str] = field(default_factory=dict)

    @property
    def target(self) -> str:
        if not self.query:
            return self.path
        return f"{self.path}?{urlencode(self.query)}"


FilterDecision = Union[Allow, RedirectTo]


@dataclass(frozen=True)
class RouteFilterPolicy:
    cookie_name: str
    login_path: str = "/login"
    signup_path: str = "/signup"
    landing_path: str = "/dashboard"
    public_prefixes: tuple[str, ...] = ()
    unfiltered_prefixes: tuple[str, ...] = ()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RouteFilterPolicy":
        return cls(
            cookie_name=settings.session_cookie_name,
            login_path=settings.login_path,
            signup_path=settings.signup_path,
            landing_path=settings.landing_path,
            public_prefixes=tuple(settings.public_routes),
            unfiltered_prefixes=tuple(settings.unfiltered_routes),
        )

    def applies_to(self, path: str) -> bool:
        """False for static assets and routes answered by guards instead."""
        if path.lower().endswith(STATIC_EXTENSIONS):
            return False
        return not any(path.startswith(prefix) for prefix in self.unfiltered_prefixes)

    def is_public(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.public_prefixes)


def filter_request(
    path: str,
    cookies: Mapping[str, str],
    policy: RouteFilterPolicy,
) -> FilterDecision:
    """Decide whether a navigation proceeds, based on cookie presence only."""
    has_cookie = policy.cookie_name in cookies

    if not policy.is_public(path) and not has_cookie:
        return RedirectTo(policy.login_path, {"callbackUrl": path})

    if path in (policy.login_path, policy.signup_path) and has_cookie:
        return RedirectTo(policy.landing_path)

    return Allow()


class SessionCookieGateMiddleware(BaseHTTPMiddleware):
    """Redirect anonymous navigations to the login page and signed-in ones away from it."""

    def __init__(self, app: ASGIApp, policy: Optional[RouteFilterPolicy] = None, settings: Optional[Settings] = None):
        super().__init__(app)
        if policy is None:
            if settings is None:
                raise ValueError("SessionCookieGateMiddleware needs a policy or settings")
            policy = RouteFilterPolicy.from_settings(settings)
        self.policy = policy

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if not self.policy.applies_to(path):
            return await call_next(request)

        decision = filter_request(path, request.cookies, self.policy)
        if isinstance(decision, RedirectTo):
            log.debug("route_filter.redirect", path=path, target=decision.path)
            url = request.url.replace(path=decision.path, query=urlencode(decision.query))
            return RedirectResponse(str(url), status_code=307)
        return await call_next(request)
