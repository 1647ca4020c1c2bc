"""
FastAPI application for the Jupiter HR API.

Student records, HR review of skills, performance and documents, and the
auth endpoints that guard them.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from jupiter.api.responses import Messages, error_response, success
from jupiter.auth.routes import router as auth_router
from jupiter.config import Settings, get_settings
from jupiter.core.errors import AppError
from jupiter.review.routes import document_router, performance_router, skill_router
from jupiter.storage import StorageProvider, create_local_storage
from jupiter.students.routes import router as student_router

logger = logging.getLogger(__name__)


# =============================================================================
# Exception Handlers
# =============================================================================


async def handle_app_error(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return error_response(exc.status_code, exc.message, exc.detail)


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(p) for p in err["loc"] if p != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return error_response(422, Messages.VALIDATION_ERROR, errors)


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    message = Messages.NOT_FOUND if exc.status_code == 404 else str(exc.detail)
    return error_response(exc.status_code, message)


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, Messages.SERVER_ERROR)


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    storage: StorageProvider | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the application.

    Tests pass their own storage and settings; otherwise the in-memory store
    and environment settings are used.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=settings.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        settings.validate_secrets()

        logger.info(f"Jupiter API starting in {settings.environment} mode")
        yield
        logger.info("Jupiter API shutting down")

    app = FastAPI(
        title="Jupiter HR API",
        description="Student records and HR review of skills, performance and documents",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.storage = storage or create_local_storage()
    app.dependency_overrides[get_settings] = lambda: settings

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # Include routers
    app.include_router(auth_router)
    app.include_router(student_router)
    app.include_router(skill_router)
    app.include_router(performance_router)
    app.include_router(document_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return success(Messages.HEALTHY, {"status": "healthy", "service": "jupiter-api"})

    return app


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "jupiter.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
