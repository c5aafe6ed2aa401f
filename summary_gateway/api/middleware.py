"""
Custom middleware for the FastAPI application
"""
import secrets
import time
import logging
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable, FrozenSet, Optional

from summary_gateway.core.exceptions import AuthenticationException, InvalidAPIKeyException
from summary_gateway.models.internal import AuthContext
from summary_gateway.models.responses import ErrorResponse

logger = logging.getLogger(__name__)

# Paths reachable without an Authorization header
EXEMPT_PATHS: FrozenSet[str] = frozenset({"/", "/api-docs", "/api-docs/openapi.json"})

BEARER_PREFIX = "Bearer "


def authenticate(
    path: str,
    authorization: Optional[str],
    secret: str,
    exempt_paths: FrozenSet[str] = EXEMPT_PATHS
) -> AuthContext:
    """Classify a request from its path and Authorization header"""
    if path in exempt_paths:
        return AuthContext.EXEMPT

    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return AuthContext.REJECTED_MISSING

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        return AuthContext.REJECTED_MISSING

    if not secrets.compare_digest(token.encode("utf-8"), secret.encode("utf-8")):
        return AuthContext.REJECTED_INVALID

    return AuthContext.VERIFIED


class APIKeyAuthMiddleware(BaseHTTPMiddleware):
    """
    Middleware enforcing the shared Bearer secret on every non-exempt path
    """

    def __init__(self, app, api_key: str, exempt_paths: FrozenSet[str] = EXEMPT_PATHS):
        super().__init__(app)
        self.api_key = api_key
        self.exempt_paths = exempt_paths

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        auth = authenticate(
            request.url.path,
            request.headers.get("authorization"),
            self.api_key,
            self.exempt_paths
        )
        request.state.auth = auth

        if not auth.allowed:
            if auth is AuthContext.REJECTED_MISSING:
                return self._reject(request, AuthenticationException())
            return self._reject(request, InvalidAPIKeyException())

        return await call_next(request)

    def _reject(self, request: Request, exc) -> JSONResponse:
        client_ip = request.client.host if request.client else "unknown"
        logger.warning(f"Rejected {request.method} {request.url.path} ({exc.status_code}) - IP: {client_ip}")
        body = ErrorResponse(error=exc.detail, error_code=exc.error_code)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log each request with its auth outcome, response mode and timing
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        method = request.method
        path = request.url.path
        mode = "stream" if request.query_params.get("stream") == "true" else "buffered"
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)

            # For streamed responses this measures time to first byte
            process_time = time.time() - start_time
            auth = getattr(request.state, "auth", None)

            logger.info(
                f"{method} {path} - {response.status_code} - auth: {auth.value if auth else 'none'} - "
                f"mode: {mode} - {process_time:.3f}s - IP: {client_ip}"
            )

            response.headers["X-Process-Time"] = f"{process_time:.3f}"

            return response

        except Exception as e:
            process_time = time.time() - start_time

            logger.error(
                f"{method} {path} - ERROR: {str(e)} - mode: {mode} - "
                f"{process_time:.3f}s - IP: {client_ip}"
            )

            raise

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add security headers
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response
