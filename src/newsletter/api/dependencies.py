"""Shared FastAPI dependencies."""

import json
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from ..utils.http_utils import sanitize_filename
from .models.config import APIConfig
from .models.responses import ErrorResponse
from .services.template_loader import TemplateLoader
from .services.transform import TransformService


JSON_CONTENT_TYPES = ("application/json",)
DEFAULT_CHARSET = "utf-8"


def get_config() -> APIConfig:
    """Get API configuration."""
    return APIConfig.from_env()


def get_transform_service(config: APIConfig = Depends(get_config)) -> TransformService:
    """Get transform service instance."""
    return TransformService(config)


def get_template_loader(config: APIConfig = Depends(get_config)) -> TemplateLoader:
    """Get template loader instance."""
    return TemplateLoader(config)


def get_filename(
    x_filename: Optional[str] = Header(None, description="Attachment filename"),
    config: APIConfig = Depends(get_config)
) -> str:
    """Resolve the download filename from the X-Filename header."""
    return sanitize_filename(x_filename, config.download_filename)


def _charset(content_type: str) -> Optional[str]:
    """Extract the charset parameter of a Content-Type header."""
    for parameter in content_type.split(";")[1:]:
        name, _, value = parameter.partition("=")
        if name.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return None


def _payload_too_large(limit_mb: int) -> HTTPException:
    return HTTPException(
        status_code=413,
        detail=ErrorResponse(
            error="Payload too large",
            message=f"Request body exceeds limit of {limit_mb}MB"
        ).model_dump()
    )


async def read_html_body(request: Request, config: APIConfig = Depends(get_config)) -> Optional[str]:
    """
    Read the request body as HTML text.

    Accepts a raw HTML body, or a JSON body that is either a string or an
    object with an ``html`` field. Returns None when no HTML was sent.
    """
    limit = config.max_body_size_bytes

    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > limit:
        raise _payload_too_large(config.max_body_size_mb)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise _payload_too_large(config.max_body_size_mb)

    if not body:
        return None

    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type in JSON_CONTENT_TYPES or content_type.endswith("+json"):
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise HTTPException(
                status_code=400,
                detail=ErrorResponse(
                    error="Invalid JSON body",
                    message="JSON bodies must be a string or an object with an 'html' field"
                ).model_dump()
            )

        if isinstance(payload, str):
            return payload
        if isinstance(payload, dict) and isinstance(payload.get("html"), str):
            return payload["html"]
        return None

    charset = _charset(request.headers.get("content-type", "")) or DEFAULT_CHARSET
    try:
        return body.decode(charset)
    except (LookupError, UnicodeDecodeError) as e:
        raise HTTPException(
            status_code=400,
            detail=ErrorResponse(
                error="Invalid text encoding",
                message=f"Body could not be decoded as {charset}: {e}"
            ).model_dump()
        )
