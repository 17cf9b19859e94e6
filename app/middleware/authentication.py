"""Bearer-token authentication middleware.

Runs the authentication pipeline for every request under a protected
prefix. On success the resulting :class:`RequestContext` (carrying the
identity claim) is stored on ``request.state.auth_context`` for route
dependencies such as role gates. On failure the pipeline's response is
returned directly with ``WWW-Authenticate: Bearer`` on 401s.
"""

import logging

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from app.services.pipeline import Pipeline, RequestContext, Terminate

logger = logging.getLogger(__name__)

# Only these prefixes require a bearer token (segment-boundary match)
PROTECTED_PREFIXES = ["/api"]


def is_protected_path(path: str) -> bool:
    """True if ``path`` is a protected prefix or lies beneath one."""
    return any(path == prefix or path.startswith(prefix + "/") for prefix in PROTECTED_PREFIXES)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Authenticate protected requests through an auth pipeline."""

    def __init__(self, app: ASGIApp, pipeline: Pipeline):
        super().__init__(app)
        self.pipeline = pipeline

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        # CORS preflight never carries credentials
        if request.method == "OPTIONS" or not is_protected_path(request.url.path):
            return await call_next(request)

        context = RequestContext(headers=dict(request.headers))
        result = await self.pipeline.run(context)

        if isinstance(result, Terminate):
            logger.info(
                f"Rejected {request.method} {request.url.path}: "
                f"{result.response.status_code} {result.response.message}"
            )
            return result.response.to_json_response()

        request.state.auth_context = result.context
        return await call_next(request)
