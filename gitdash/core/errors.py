"""
Error taxonomy shared by every router.

Each error carries the HTTP status it maps to and a short message that is
safe to show to clients. Handlers registered in ``main.py`` render them as
``{"error": message}``.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class GitdashError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(GitdashError):
    status_code = 404
    default_message = "Not found"


class ExpiredError(GitdashError):
    status_code = 410
    default_message = "Share has expired"


class ForbiddenError(GitdashError):
    status_code = 403
    default_message = "Forbidden"


class UnauthenticatedError(GitdashError):
    status_code = 401
    default_message = "Unauthorized"


class UpstreamError(GitdashError):
    status_code = 500
    default_message = "Upstream request failed"


class ValidationError(GitdashError):
    status_code = 400
    default_message = "Invalid request"


async def gitdash_error_handler(request: Request, exc: GitdashError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies/params become 400 with the first offending field."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message})
