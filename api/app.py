# api/app.py
"""
FastAPI application factory
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.v1.router import api_router
from core.config import get_settings
from core.exceptions import AgentConfigError, AgentError, Campo360Error, ExternalAPIError

logger = logging.getLogger("api")


def _error_status(exc: Campo360Error) -> int:
    if isinstance(exc, (ExternalAPIError, AgentConfigError)):
        return 502
    return 500


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors and request validation errors to JSON responses"""

    @app.exception_handler(Campo360Error)
    async def campo360_error_handler(request: Request, exc: Campo360Error):
        status_code = _error_status(exc)
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # Rejected inputs may hold inf/NaN, which strict JSON cannot carry
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
            for error in exc.errors()
        ]
        return JSONResponse(status_code=422, content={"detail": errors})


def create_app(lifespan=None) -> FastAPI:
    """Create FastAPI application"""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(api_router, prefix="/api")

    @app.get("/")
    async def root():
        return {
            "service": settings.api_title,
            "version": settings.api_version,
            "agents": ["crops", "weather"],
            "status": "healthy"
        }

    return app
