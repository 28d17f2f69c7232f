"""FastAPI application entry point.

This module sets up the FastAPI application with all necessary middleware,
routers, and configuration.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
import structlog

from gorilla_archive.catalog import CatalogService, load_updates
from gorilla_archive.catalog.router import router as catalog_router
from gorilla_archive.core.config import Settings, get_settings
from gorilla_archive.core.exceptions import (
    BackendUnavailableError,
    ConfigurationError,
    NotFoundError,
    ValidationError,
)
from gorilla_archive.core.logging import setup_logging
from gorilla_archive.core.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    ScopedCORSMiddleware,
)
from gorilla_archive.core.monitoring import setup_monitoring, track_error
from gorilla_archive.models.common import ErrorResponse, HealthResponse, ProxyErrorResponse
from gorilla_archive.preferences import JsonFileStore, PreferencesService
from gorilla_archive.preferences.router import router as preferences_router
from gorilla_archive.proxy import ForwarderService
from gorilla_archive.proxy.router import PROXY_PREFIX, router as proxy_router

logger = structlog.get_logger(__name__)

BACKEND_UNAVAILABLE_MESSAGE = "Backend unavailable"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Configuration is read once here and handed to the services; nothing
    downstream looks it up again.

    Args:
        settings: Application settings, the cached environment settings when None.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "Starting Gorilla Tag Version Archive",
            version=settings.app_version,
            backend_configured=app.state.forwarder.is_configured,
        )
        setup_monitoring(settings)

        services = (app.state.forwarder, app.state.catalog, app.state.preferences)
        for service in services:
            await service.startup()

        yield

        for service in reversed(services):
            await service.shutdown()
        logger.info("Shutting down Gorilla Tag Version Archive")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Catalog of historical game builds with a passthrough /api forwarder",
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    app.state.settings = settings
    app.state.forwarder = ForwarderService(settings.backend_base_url)
    app.state.catalog = CatalogService(
        load_updates(settings.catalog_data_file),
        steam_app_id=settings.steam_app_id,
        steam_depot_id=settings.steam_depot_id,
    )
    app.state.preferences = PreferencesService(
        JsonFileStore(settings.preferences_dir),
        key=settings.preferences_key,
    )

    # Add security middleware
    if settings.is_production:
        app.add_middleware(
            TrustedHostMiddleware,
            allowed_hosts=["*"]  # Configure appropriately for production
        )

    passthrough = (PROXY_PREFIX,)

    app.add_middleware(
        ScopedCORSMiddleware,
        passthrough_prefixes=passthrough,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Last added runs first, so the correlation ID is bound before logging.
    app.add_middleware(LoggingMiddleware, passthrough_prefixes=passthrough)
    app.add_middleware(CorrelationIDMiddleware, passthrough_prefixes=passthrough)

    app.include_router(proxy_router, prefix=PROXY_PREFIX, tags=["proxy"])
    app.include_router(catalog_router, prefix="/catalog", tags=["catalog"])
    app.include_router(preferences_router, prefix="/preferences", tags=["preferences"])

    add_exception_handlers(app)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check(request: Request) -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            version=settings.app_version,
            backend_configured=request.app.state.forwarder.is_configured,
        )

    if settings.metrics_enabled:
        app.mount("/metrics", make_asgi_app())

    return app


def _error_body(request: Request, detail: str, error_type: str, details=None) -> dict:
    body = ErrorResponse(
        detail=detail,
        type=error_type,
        correlation_id=getattr(request.state, "correlation_id", None),
        details=details or None,
    )
    return body.model_dump(exclude_none=True)


def add_exception_handlers(app: FastAPI) -> None:
    """Add global exception handlers to the FastAPI app.

    Forwarder errors use the ``{"error": ...}`` body; everything else uses
    ``{"detail": ..., "type": ...}``.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        """Handle missing configuration."""
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ProxyErrorResponse(error=str(exc)).model_dump(),
        )

    @app.exception_handler(BackendUnavailableError)
    async def backend_unavailable_handler(
        request: Request, exc: BackendUnavailableError
    ) -> JSONResponse:
        """Handle backend failures without leaking the cause."""
        logger.error(
            "API proxy error",
            error=str(exc),
            cause=repr(exc.cause),
            method=exc.method,
            target_url=exc.target_url,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=ProxyErrorResponse(error=BACKEND_UNAVAILABLE_MESSAGE).model_dump(),
        )

    @app.exception_handler(NotFoundError)
    async def not_found_error_handler(
        request: Request, exc: NotFoundError
    ) -> JSONResponse:
        """Handle missing entities."""
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=_error_body(request, str(exc), "not_found"),
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle validation errors."""
        logger.warning(
            "Validation error",
            error=str(exc),
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body(request, str(exc), "validation_error", exc.details),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected errors."""
        track_error(type(exc).__name__, "app")
        logger.exception(
            "Unhandled exception",
            error=str(exc),
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(request, "Internal server error", "internal_error"),
        )


# Create the app instance
app = create_app()


def run() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "gorilla_archive.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=1 if settings.reload else settings.workers,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
