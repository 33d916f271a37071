"""Processing endpoints for HTML sent in the request body."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from ...core.errors import InvalidInputError, TransformError
from ...utils.http_utils import content_disposition
from ..dependencies import get_filename, get_transform_service, read_html_body
from ..models.responses import ErrorResponse, ProcessResponse
from ..services.transform import TransformService


logger = logging.getLogger(__name__)

router = APIRouter()


def _process(transform_service: TransformService, html_content: Optional[str]) -> str:
    """Run the transform, translating pipeline errors into HTTP errors."""
    if not html_content:
        raise HTTPException(
            status_code=400,
            detail=ErrorResponse(
                error="No HTML content provided",
                message="Send the HTML document as the request body"
            ).model_dump()
        )

    try:
        return transform_service.process_html(html_content)
    except InvalidInputError as e:
        raise HTTPException(
            status_code=400,
            detail=ErrorResponse(error="No HTML content provided", message=str(e)).model_dump()
        )
    except TransformError as e:
        logger.error("Processing error: %s", e)
        raise HTTPException(
            status_code=500,
            detail=ErrorResponse(error="Failed to process HTML", message=str(e)).model_dump()
        )


@router.post("/process", response_model=ProcessResponse)
async def process_html(
    html_content: Optional[str] = Depends(read_html_body),
    filename: str = Depends(get_filename),
    transform_service: TransformService = Depends(get_transform_service)
):
    """
    Process an HTML document and return it inside a JSON envelope.

    The body is either raw HTML (``text/html``) or JSON. The optional
    ``X-Filename`` header is echoed back as ``filename``.
    """
    processed_html = _process(transform_service, html_content)

    return ProcessResponse(html=processed_html, filename=filename)


@router.post("/process-download")
async def process_download(
    html_content: Optional[str] = Depends(read_html_body),
    filename: str = Depends(get_filename),
    transform_service: TransformService = Depends(get_transform_service)
):
    """Process an HTML document and return it as a file download."""
    processed_html = _process(transform_service, html_content)

    return Response(
        content=processed_html,
        media_type="text/html; charset=UTF-8",
        headers={"Content-Disposition": content_disposition(filename)}
    )
