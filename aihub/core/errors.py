"""
Authorization failures and their HTTP translation.

Only these are handled by the guard layer. Store failures (SQLAlchemy, Redis)
are not subclasses and propagate as server errors.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

log = structlog.get_logger()


class AuthError(Exception):
    status_code: int = 403
    error: str = "Forbidden"

    def __init__(self, reason: str = ""):
        super().__init__(reason or self.error)
        self.reason = reason


class Unauthenticated(AuthError):
    status_code = 401
    error = "Unauthorized"


class BadRequest(AuthError):
    status_code = 400
    error = "Organization ID is required"


class Forbidden(AuthError):
    status_code = 403
    error = "Forbidden"


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    log.info(
        "guard.rejected",
        path=request.url.path,
        status=exc.status_code,
        reason=exc.reason or exc.error,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.error})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthError, auth_error_handler)
