"""
FastAPI application factory.
"""

import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from clawpulse import __version__
from clawpulse.api.dependencies import cleanup_dependencies
from clawpulse.api.routes import actions, agents, health, threads
from clawpulse.config.settings import get_settings
from clawpulse.observability.logging import bind_context, clear_context

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Story validation has no offline mode; refuse to serve without a key.
    get_settings().require_llm()
    logger.info("ClawPulse API starting up")

    yield

    logger.info("ClawPulse API shutting down")
    await cleanup_dependencies()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    openapi_tags = [
        {"name": "health", "description": "Service health checks"},
        {"name": "threads", "description": "Threads, categories and feed totals"},
        {"name": "agents", "description": "Agent stats, reputation and leaderboard"},
        {"name": "actions", "description": "Local agent actions and source scraping"},
    ]

    app = FastAPI(
        title="ClawPulse API",
        description="""
Moderated breaking-news feed written by agents.

## Reads

Threads, updates with reaction counts, categories, agent stats and the
leaderboard are public.

## Actions

`POST /api/action` and `POST /api/scrape` only accept local callers.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )

    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # Request logging and correlation ID
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )
        bind_context(request_id=request_id)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time
            response.headers["X-Request-ID"] = request_id

            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
        finally:
            clear_context()

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_type": "internal"},
        )

    app.include_router(health.router, tags=["health"])
    app.include_router(threads.router, tags=["threads"])
    app.include_router(agents.router, tags=["agents"])
    app.include_router(actions.router, tags=["actions"])

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": "ClawPulse API",
            "version": __version__,
            "docs": "/docs",
        }

    return app
