# main.py
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config.database import get_database_manager, lifespan
from .config.settings import Settings, get_settings
from .routes.products import router as products_router
from .schemas.common import HealthCheckResponse, RootResponse
from .utils.exceptions import CatalogError, StoreError

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _error_body(message: str, errors=None, detail: Optional[str] = None) -> dict:
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    if detail:
        body["detail"] = detail
    return body


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        detail = None
        if isinstance(exc, StoreError) and not settings.is_production:
            detail = exc.detail
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.errors, detail),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            location = [str(part) for part in error.get("loc", ())]
            field = ".".join(location[1:]) or (location[0] if location else "request")
            errors.append({"field": field, "message": error.get("msg", "Invalid value")})
        return JSONResponse(
            status_code=400,
            content=_error_body("Invalid request parameters", errors),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        detail = None if settings.is_production else str(exc)
        return JSONResponse(status_code=500, content=_error_body("Internal server error", detail=detail))


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description=settings.app_description,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, settings)
    app.include_router(products_router, prefix=settings.api_prefix)

    @app.get("/", response_model=RootResponse, tags=["Root"])
    async def root():
        """Root endpoint - Always accessible"""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health",
            "status": "running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health", response_model=HealthCheckResponse, tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint - Always accessible"""
        manager = getattr(request.app.state, "db_manager", None) or get_database_manager()
        db_status = "connected" if await manager.ping() else "disconnected"
        return {
            "status": "healthy",
            "database": db_status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.app_version,
        }

    return app


app = create_app()
