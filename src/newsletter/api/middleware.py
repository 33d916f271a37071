"""CORS and request logging middleware."""

import logging
import time
from typing import Dict, Optional

from fastapi import FastAPI, Request, Response

from .models.config import APIConfig


logger = logging.getLogger(__name__)

ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
ALLOW_HEADERS = "Origin, X-Requested-With, Content-Type, Accept, Authorization, X-Filename"


def cors_headers(config: APIConfig, origin: Optional[str] = None) -> Dict[str, str]:
    """Build the CORS headers attached to every response."""
    if "*" in config.cors_origins:
        allow_origin = "*"
    elif origin and origin in config.cors_origins:
        allow_origin = origin
    else:
        allow_origin = config.cors_origins[0] if config.cors_origins else "*"

    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Methods": ALLOW_METHODS,
        "Access-Control-Allow-Headers": ALLOW_HEADERS,
    }


def register_middleware(app: FastAPI, config: APIConfig) -> None:
    """Add CORS and request logging middleware to the application."""

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        # Preflight requests never reach the routers
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        response.headers.update(cors_headers(config, request.headers.get("origin")))
        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "%s %s %d %.3f ms - %s",
            request.method, request.url.path, response.status_code, elapsed_ms,
            response.headers.get("content-length", "-")
        )
        return response
