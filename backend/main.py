"""
FastAPI application entry point for the keyword suggestion backend.

This module creates the FastAPI app instance, registers all routers under
/api and maps errors to the {success: false, error, message} envelope.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.config import settings
from backend.routes.auth import router as auth_router
from backend.routes.export import router as export_router
from backend.routes.facilities import router as facilities_router
from backend.routes.health import router as health_router
from backend.routes.keywords import router as keywords_router
from backend.services.keyword_generation_service import build_keyword_generator
from backend.utils.errors import ServiceError
from backend.utils.logging import configure_logging, log_requests

configure_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: only CORS_ALLOWED_ORIGINS
    - otherwise: CORS_ALLOWED_ORIGINS (defaults to the local Vite dev server)
    """
    origins = settings.CORS_ALLOWED_ORIGINS

    if settings.is_production() and not origins:
        logger.warning(
            "CORS_ALLOWED_ORIGINS not set in production. "
            "No web origins allowed."
        )
        return []

    logger.info(f"CORS configured for {settings.ENVIRONMENT} with {len(origins)} allowed origins")
    return origins


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.keyword_generator = build_keyword_generator(settings)
    logger.info("Keyword generator initialized")
    yield


app = FastAPI(
    title="Keyword Suggestion API",
    description="Facility registry and SEO/MEO keyword suggestion backend",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


def _error_response(status_code: int, error: str, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, "message": message, **extra},
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Map service errors to HTTP status by kind."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Request schema failures are reported as 400 with the field errors.
    """
    logger.warning(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "Invalid request"))

    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "validation_error",
        message,
        details=[
            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
            for error in errors
        ],
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        error = str(exc.detail.get("error", "http_error"))
        message = str(exc.detail.get("message", ""))
    else:
        error = "not_found" if exc.status_code == 404 else "http_error"
        message = str(exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": error, "message": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
    )


app.middleware("http")(log_requests)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router, prefix=API_PREFIX)
app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(facilities_router, prefix=API_PREFIX)
app.include_router(keywords_router, prefix=API_PREFIX)
app.include_router(export_router, prefix=API_PREFIX)

logger.info("FastAPI app initialized successfully")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.is_development(),
        log_level=settings.LOG_LEVEL.lower(),
    )
