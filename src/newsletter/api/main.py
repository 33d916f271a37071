"""Main FastAPI application for the newsletter HTML processing API."""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from .. import __version__
from ..utils.log import configure_logging
from .middleware import cors_headers, register_middleware
from .models.config import APIConfig
from .models.responses import ErrorResponse
from .routes import health, process, template


# Global config instance
config = APIConfig.from_env()
configure_logging(config.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Newsletter HTML Processor v%s", app.version)
    logger.info("Configuration: %s", config.model_dump())

    yield

    logger.info("API shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Newsletter HTML Processor",
    description="HTTP API that inlines CSS and remaps generated ids in builder-exported HTML",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

register_middleware(app, config)


# Global exception handler
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with structured error responses."""

    # If detail is already a dict (from our endpoints), use it directly
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = ErrorResponse(error=str(exc.detail)).model_dump()

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=exc.headers
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)

    # Runs outside the middleware stack, so CORS headers are added here
    return PlainTextResponse(
        "Internal Server Error",
        status_code=500,
        headers=cors_headers(config, request.headers.get("origin"))
    )


# Include routers
app.include_router(health.router)
app.include_router(template.router)
app.include_router(process.router)


def run() -> None:
    """Start the API server."""
    uvicorn.run(
        "newsletter.api.main:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower()
    )


if __name__ == "__main__":
    run()
