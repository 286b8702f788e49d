"""
Team Cook API: FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance;
       the lifespan builds the services and the handler chain.
Who:   Called by uvicorn to start the server (uvicorn teamcook_api.main:app,
       or the `teamcook-api` console script).

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:   [Request ID] → [Logging]              │
    │                                                      │
    │  Routes:       GET /api/status   GET /{path} → chain │
    │                                                      │
    │  Chain:        [Love?] → Cache → Ingredients → Proxy │
    │                                                      │
    │  Exceptions:   Upstream unreachable → 502            │
    │                anything else        → 500            │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate configuration (missing API key aborts startup)
    3. Seed the ingredient registry from the reference dataset
    4. Open the cache database and create the cache table if needed
    5. Open the upstream HTTP client and build the handler chain

    Shutdown:
    1. Close the upstream HTTP client
    2. Dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from teamcook_api import __version__
from teamcook_api.config import Settings, settings
from teamcook_api.database import (
    create_engine_from_url,
    create_schema,
    create_session_factory,
    dispose_engine,
)
from teamcook_api.exceptions import (
    ConfigurationError,
    TeamCookError,
    UpstreamUnavailableError,
)
from teamcook_api.handlers import build_handler_chain
from teamcook_api.middleware.logging import RequestLoggingMiddleware
from teamcook_api.middleware.request_id import RequestIDMiddleware, request_id_var
from teamcook_api.routes import proxy, status
from teamcook_api.services.cache_service import CacheService
from teamcook_api.services.ingredient_registry import IngredientRegistry

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure logging for the entire application.

    When:    Called once at the start of the lifespan, before anything logs.
    Format:  %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries that log every connection and query
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build the process-wide services on startup and release them on shutdown.

    Any ConfigurationError raised here propagates, so uvicorn reports the
    failure and exits instead of serving requests it cannot fulfil.
    """
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("Team Cook API %s starting up...", __version__)

    try:
        app_settings.validate_required_for_production()
        registry = await IngredientRegistry.from_reference_dataset(
            app_settings.ingredient_reference_path
        )
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e.message)
        logger.error("Fix the configuration and restart the server.")
        raise

    engine = create_engine_from_url(
        app_settings.cache_database_url,
        echo=app_settings.log_level == "DEBUG",
    )
    await create_schema(engine)
    cache = CacheService(
        create_session_factory(engine),
        default_ttl=app_settings.cache_ttl_seconds,
    )

    http_client = httpx.AsyncClient(timeout=app_settings.upstream_timeout_seconds)

    app.state.chain = build_handler_chain(
        cache=cache,
        registry=registry,
        http_client=http_client,
        upstream_base_url=app_settings.upstream_base_url,
        api_key=app_settings.spoonacular_api_key,
        enable_love_ingredient=app_settings.enable_love_ingredient,
    )
    logger.info("Handler chain: %s", " → ".join(app.state.chain.names))
    logger.info(
        "Server ready at http://%s:%d",
        app_settings.backend_host,
        app_settings.backend_port,
    )

    try:
        yield
    finally:
        # ── Shutdown ──────────────────────────────────────────────────────
        logger.info("Team Cook API shutting down...")
        await http_client.aclose()
        await dispose_engine(engine)
        logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions escaping the handler chain to HTTP responses.

    Handler hierarchy:
        UpstreamUnavailableError → 502 Bad Gateway
        TeamCookError (base)     → 500 Internal Server Error
        Exception (fallback)     → 500 Internal Server Error

    Responses never include stack traces or exception text; those are
    logged server-side with the request ID.
    """

    @app.exception_handler(UpstreamUnavailableError)
    async def handle_upstream_unavailable(request: Request, exc: UpstreamUnavailableError):
        rid = request_id_var.get("")
        logger.error("[%s] Upstream unavailable: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=502,
            content={
                "error": "upstream_unavailable",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(TeamCookError)
    async def handle_app_error(request: Request, exc: TeamCookError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: settings to run with; defaults to the environment-loaded
                      singleton. Stored on app.state for the lifespan.
    """
    app = FastAPI(
        title="Team Cook API",
        description=(
            "Caching proxy in front of the Spoonacular recipe API. Assigns stable "
            "IDs to ingredients the upstream catalog does not know."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings or settings

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    # proxy matches every path, so it goes last
    app.include_router(status.router)
    app.include_router(proxy.router)

    return app


app = create_app()


def run() -> None:
    """Console-script entry point: serve `app` with uvicorn."""
    import uvicorn

    uvicorn.run(
        "teamcook_api.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
