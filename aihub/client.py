"""
HTTP client for the AI Hub API.

Carries the session cookie and the org header on every request. A 401 from
the server means the session is gone and is raised as ``SessionExpired`` so
callers can send the user back to sign in.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

import httpx
import structlog

from aihub.core.guards import ORG_ID_HEADER

log = structlog.get_logger()

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 30
DEFAULT_COOKIE_NAME = "aihub.session_token"
DEFAULT_LOGIN_PATH = "/login"


class SessionExpired(Exception):
    """The server rejected the session; sign in again."""

    def __init__(self, url: str, login_path: str = DEFAULT_LOGIN_PATH):
        super().__init__(f"Session rejected for {url}")
        self.url = url
        self.login_path = login_path

    @property
    def login_url(self) -> str:
        """Where to send the user: the login page, returning to the rejected path."""
        query = urlencode({"callbackUrl": httpx.URL(self.url).path})
        return f"{self.login_path}?{query}"


def _unauthorized_hook(login_path: str):
    async def raise_on_unauthorized(response: httpx.Response) -> None:
        if response.status_code == 401:
            log.info("client.session_expired", url=str(response.request.url))
            raise SessionExpired(str(response.request.url), login_path)

    return raise_on_unauthorized


def create_client(
    base_url: str = DEFAULT_BASE_URL,
    *,
    session_token: Optional[str] = None,
    org_id: Optional[str] = None,
    cookie_name: str = DEFAULT_COOKIE_NAME,
    login_path: str = DEFAULT_LOGIN_PATH,
    timeout: int = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build an ``httpx.AsyncClient`` bound to one session and (optionally) one org."""
    headers = {"Content-Type": "application/json"}
    if org_id:
        headers[ORG_ID_HEADER] = org_id

    cookies = {cookie_name: session_token} if session_token else None

    return httpx.AsyncClient(
        base_url=base_url.rstrip("/"),
        headers=headers,
        cookies=cookies,
        timeout=httpx.Timeout(timeout),
        transport=transport,
        event_hooks={"response": [_unauthorized_hook(login_path)]},
    )
