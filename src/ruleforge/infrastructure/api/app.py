"""FastAPI application for the rule engine service.

``create_app`` wires settings, CORS, request logging, health checks and the
rule routes; ``app`` is the instance uvicorn serves.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ruleforge.core.config import Settings, get_settings
from ruleforge.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)
from ruleforge.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database on startup and release it on shutdown."""
    settings = get_settings()
    configure_logging(settings)
    logger.info(
        "Starting RuleForge",
        version=settings.app_version,
        environment=settings.environment,
    )

    try:
        await init_database()
    except Exception as e:
        logger.error("Database initialization failed", error=str(e))
        raise

    yield

    await close_database()
    logger.info("RuleForge stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to build from; defaults to the cached settings.
    """
    settings = settings or get_settings()
    docs_enabled = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Create, combine and evaluate business rules",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    _add_health_routes(app, settings)
    _add_routes(app, settings)
    _add_error_handler(app, settings)
    _add_request_logging(app)

    return app


def _add_health_routes(app: FastAPI, settings: Settings) -> None:
    """Liveness, readiness and health endpoints at the root path."""
    service = {"service": settings.app_name, "version": settings.app_version}

    @app.get("/health", tags=["health"])
    async def health():
        """Process is up; the database is not checked."""
        return {"status": "healthy", **service}

    @app.get("/live", tags=["health"])
    async def live():
        return {"status": "alive", **service}

    @app.get("/ready", tags=["health"])
    async def ready():
        """Process is up and the database answers."""
        if await get_db_manager().check_connection():
            return {"status": "ready", "database": "connected", **service}
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "database": "disconnected", **service},
        )


def _add_routes(app: FastAPI, settings: Settings) -> None:
    from ruleforge.infrastructure.api.routes import engine_router, rules_router

    prefix = settings.api_prefix
    app.include_router(rules_router, prefix=f"{prefix}/rules", tags=["rules"])
    app.include_router(engine_router, prefix=prefix, tags=["engine"])

    @app.get(prefix, tags=["root"])
    async def api_root():
        return {"name": settings.app_name, "version": settings.app_version}


def _add_error_handler(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled exception",
            method=request.method,
            path=request.url.path,
            exc_type=type(exc).__name__,
            error=str(exc),
        )
        detail = str(exc) if settings.debug else "An unexpected error occurred"
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": detail},
        )


def _add_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Bind a correlation ID for the request and echo it in the response."""
        correlation_id = request.headers.get(CORRELATION_HEADER) or f"cid_{uuid.uuid4().hex[:12]}"
        bind_correlation_id(correlation_id)
        try:
            response = await call_next(request)
            logger.info(
                "Request handled",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
            )
            response.headers[CORRELATION_HEADER] = correlation_id
            return response
        finally:
            clear_context()


app = create_app()
