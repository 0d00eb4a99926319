"""PropertyPulse Property Management Backend - Main Application Entry Point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .core.exceptions import PropertyPulseException, RateLimited
from .core.logging import LoggingMiddleware, get_logger, setup_logging, shutdown_logging
from .core.rate_limit import RateLimitMiddleware
from .core.repository_factory import RepositoryFactory

# Import routers
from .modules.admin import router as admin_router
from .modules.applications.routers import router as applications_router
from .modules.auth import router as auth_router
from .modules.feedback.routers import router as feedback_router
from .modules.leases.routers import router as leases_router
from .modules.maintenance.routers import router as maintenance_router
from .modules.payments.routers import router as payments_router
from .modules.profiles.routers import matching_router
from .modules.profiles.routers import router as profiles_router
from .modules.properties.routers import router as properties_router
from .modules.users.routers import router as users_router

logger = get_logger(__name__)

ROUTERS = (
    auth_router,
    users_router,
    properties_router,
    leases_router,
    payments_router,
    maintenance_router,
    applications_router,
    profiles_router,
    matching_router,
    feedback_router,
    admin_router,
)


def _failure(status_code: int, message: str, data=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": message, "data": data},
        headers=headers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    # Startup
    setup_logging(settings)
    logger.info("Starting PropertyPulse application...")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Database target: {settings.database_target}")

    factory = RepositoryFactory(settings)
    await factory.start()
    app.state.factory = factory
    try:
        yield
    finally:
        # Shutdown
        logger.info("Shutting down PropertyPulse application...")
        await factory.close()
        shutdown_logging()


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(PropertyPulseException)
    async def propertypulse_exception_handler(
        request: Request, exc: PropertyPulseException
    ):
        """Render domain exceptions as the failure envelope."""
        headers = None
        if isinstance(exc, RateLimited) and exc.retry_after is not None:
            headers = {"Retry-After": str(int(exc.retry_after))}
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__}: {exc.message}")
        data = jsonable_encoder(exc.details, custom_encoder={BaseException: str}) or None
        return _failure(exc.status_code, exc.message, data, headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        if field:
            message = f"Validation error for field '{field}': {message}"
        return _failure(400, message, {"errors": jsonable_errors(errors)})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _failure(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unhandled exceptions."""
        logger.exception(f"Unhandled exception: {exc}")
        message = str(exc) if settings.app_debug else "Internal server error"
        return _failure(500, message)


def jsonable_errors(errors) -> list[dict]:
    """Pydantic error entries without the non-serialisable ``ctx``/``input`` values."""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in errors
    ]


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application for ``settings``."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        description="Property management backend with switchable storage",
        version=settings.api_version,
        docs_url=f"{settings.api_prefix}/docs" if settings.app_debug else None,
        redoc_url=f"{settings.api_prefix}/redoc" if settings.app_debug else None,
        openapi_url=f"{settings.api_prefix}/openapi.json" if settings.app_debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Added innermost first: CORS wraps logging, which wraps rate limiting.
    if settings.rate_limit_enabled:
        app.add_middleware(RateLimitMiddleware, settings=settings)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings)

    # Health check endpoint
    @app.get(f"{settings.api_prefix}/health", tags=["Health"])
    async def health_check(request: Request):
        """Storage health for every configured target."""
        report = await request.app.state.factory.health_check()
        healthy = report["status"] == "healthy"
        return JSONResponse(
            status_code=200 if healthy else 503,
            content={
                "success": healthy,
                "message": "Service is healthy" if healthy else "Service is degraded",
                "data": {**report, "version": settings.api_version, "env": settings.app_env},
                "error": None if healthy else "Active database is unreachable",
            },
        )

    for router in ROUTERS:
        app.include_router(router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "propertypulse_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().app_debug,
    )
