# summary_gateway/main.py
"""
FastAPI application factory and server entry point.

Run with:
    summary-gateway
or:
    uvicorn summary_gateway.main:create_app --factory
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from summary_gateway.api.dependencies import shutdown_handler, startup_handler
from summary_gateway.api.endpoints import health, search
from summary_gateway.api.middleware import (
    EXEMPT_PATHS,
    APIKeyAuthMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware
)
from summary_gateway.config.settings import Settings, get_settings
from summary_gateway.core.exceptions import LLMAnalysisException
from summary_gateway.core.summary_tool import SummaryTool
from summary_gateway.models.responses import ErrorResponse
from summary_gateway.services.llm_backends import SummaryBackend, create_backend
from summary_gateway.services.search_engine import BraveSearchClient

logger = logging.getLogger(__name__)


async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    body = ErrorResponse(error=str(exc.detail), error_code=getattr(exc, "error_code", None))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(), headers=exc.headers)


async def handle_llm_exception(request: Request, exc: LLMAnalysisException):
    logger.error(f"Upstream generation error on {request.url.path}: {exc}")
    body = ErrorResponse(error=f"Summary generation failed: {exc}", error_code="UPSTREAM_GENERATION_ERROR")
    return JSONResponse(status_code=502, content=body.model_dump())


def create_app(
    settings: Optional[Settings] = None,
    search_client: Optional[BraveSearchClient] = None,
    backend: Optional[SummaryBackend] = None
) -> FastAPI:
    settings = settings or get_settings()

    summary_tool = SummaryTool(
        search_client=search_client or BraveSearchClient(settings.BRAVE_API_KEY, settings.BRAVE_SEARCH_URL),
        backend=backend or create_backend(settings)
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await startup_handler(app)
        yield
        await shutdown_handler(app)

    app = FastAPI(
        title="Search Summary Gateway",
        version="0.1.0",
        description="Summarizes web search results with a language model.",
        docs_url="/api-docs",
        openapi_url="/api-docs/openapi.json",
        redoc_url=None,
        swagger_ui_oauth2_redirect_url=None,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.summary_tool = summary_tool

    # Added innermost first: CORS -> logging -> security headers -> auth
    app.add_middleware(APIKeyAuthMiddleware, api_key=settings.API_KEY, exempt_paths=EXEMPT_PATHS)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(LLMAnalysisException, handle_llm_exception)

    app.include_router(health.router, tags=["health"])
    app.include_router(search.router, tags=["search"])

    return app


def run():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    settings = get_settings()
    logging.getLogger().setLevel(settings.LOG_LEVEL)
    uvicorn.run(create_app(settings), host=settings.API_HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
