"""FastAPI application entry point."""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from recipe_clipper import __version__
from recipe_clipper.api.routes import health, scrape
from recipe_clipper.config import settings
from recipe_clipper.core.request_id import get_request_id
from recipe_clipper.middleware.logging import RequestLoggingMiddleware
from recipe_clipper.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from recipe_clipper.middleware.security import SecurityHeadersMiddleware, setup_compression, setup_cors
from recipe_clipper.utils.exceptions import RecipeClipperException
from recipe_clipper.utils.logging_config import setup_logging

# Setup logging
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Recipe Clipper API",
    description="Scrape recipe pages into structured recipes using Gemini",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None) or get_request_id() or None


def _error_response(request: Request, status_code: int, message: str, kind: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "statusMessage": message,
            "error": kind,
            "request_id": _request_id(request),
        },
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors."""
    logger.warning(
        f"Validation error: {str(exc)}",
        extra={"path": request.url.path, "method": request.method, "errors": exc.errors()},
    )
    return _error_response(request, status.HTTP_400_BAD_REQUEST, "Invalid request", "ValidationError")


@app.exception_handler(RecipeClipperException)
async def recipe_clipper_exception_handler(request: Request, exc: RecipeClipperException) -> JSONResponse:
    """Render classified pipeline errors as ``{"statusMessage": ...}``."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "--- SCRAPE ERROR ---",
        extra={
            "error_kind": exc.kind,
            "error_message": exc.message,
            "status_code": exc.status_code,
            "path": request.url.path,
        },
        exc_info=exc.status_code >= 500,
    )
    return _error_response(request, exc.status_code, exc.message, exc.kind)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unexpected exception: {str(exc)}", exc_info=True)
    return _error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", "InternalError"
    )


# Add middleware (last added runs first)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)
setup_compression(app)
setup_cors(app, settings)

# Include routers
app.include_router(health.router)
app.include_router(scrape.router)


@app.on_event("startup")
async def startup_event():
    """Application startup event."""
    logger.info("Recipe Clipper API starting up...")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Gemini model: {settings.gemini_model} (fallback: {settings.gemini_fallback_model})")
    if not settings.has_gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; /api/scrape will answer 500 until it is")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Recipe Clipper API",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
